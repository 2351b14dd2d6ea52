"""
Safety Models - Alerts produced by the classifiers and the vitals they read.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


SafetyLevel = Literal["normal", "concern", "urgent", "emergency"]

# Total order of severity, lowest first
SEVERITY_RANK = {
    "normal": 0,
    "concern": 1,
    "urgent": 2,
    "emergency": 3,
}


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the frontend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(BaseModel):
    """Geographic position shared with the care circle."""
    lat: float
    lng: float


class VitalsSnapshot(CamelModel):
    """Vitals reported by the user's watch or phone."""
    heart_rate: Optional[float] = None  # bpm
    fall_detected: Optional[bool] = None
    location: Optional[Location] = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class SafetyAlert(CamelModel):
    """Result of a safety classification. Never mutated after creation."""
    level: SafetyLevel
    detected: List[str] = Field(default_factory=list)
    message: str = ""
    actions: List[str] = Field(default_factory=list)
    caregiver_alert: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @property
    def is_high_severity(self) -> bool:
        """True for alerts that must reach the care circle right away."""
        return SEVERITY_RANK[self.level] >= SEVERITY_RANK["urgent"]
