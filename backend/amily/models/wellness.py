"""
Wellness Models - Inputs and outputs of the wellness coaching nudges.
"""

from typing import List, Literal, Optional
from pydantic import Field

from .safety import CamelModel


TimeOfDay = Literal["morning", "afternoon", "evening"]
Mood = Literal["low", "ok", "good"]
NudgeType = Literal["medication", "hydration", "activity", "rest", "weather"]
NudgePriority = Literal["high", "medium", "low"]

PRIORITY_RANK = {
    "high": 0,
    "medium": 1,
    "low": 2,
}


class MedicationSchedule(CamelModel):
    """A medication and the times of day it is due."""
    id: str
    name: str
    dosage: str
    times: List[str] = Field(default_factory=list)  # e.g. ["08:00", "20:00"]
    with_food: bool = False
    notes: Optional[str] = None


class HydrationGoal(CamelModel):
    """Daily water goal and progress so far."""
    daily_glasses: int = 8
    current_glasses: int = 0
    last_drink: Optional[str] = None


class WeatherData(CamelModel):
    """Current local weather. Temperatures are in Fahrenheit."""
    temp: float
    condition: str  # sunny, rainy, cloudy, ...
    humidity: float = 0
    alerts: Optional[List[str]] = None


class WellnessNudge(CamelModel):
    """A single advisory message, surfaced to the user once."""
    type: NudgeType
    priority: NudgePriority
    message: str
    speech_message: str
    action: Optional[str] = None
