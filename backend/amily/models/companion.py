"""
Companion Models - Structured payloads and request bodies of the companion API.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from .safety import CamelModel, Location
from .wellness import HydrationGoal, MedicationSchedule, Mood, TimeOfDay, WeatherData


# Structured payloads

class PlanJSON(BaseModel):
    """Daily check-in plan."""
    summary: str = Field(description="Simple, warm summary of the day plan")
    next_step: str = Field(description="Clear actionable next step for the user")
    mood: Mood = Field(description="User mood assessment")
    tags: List[str] = Field(default_factory=list, description="Activity tags like routine, social, mobility")


class MemoryJSON(BaseModel):
    """A captured life story for MemoryLane."""
    title: str
    era: str
    story_3_sentences: str
    tags: List[str] = Field(default_factory=list)
    quote: Optional[str] = None


class SummaryJSON(BaseModel):
    """Summary of a buddy message."""
    summary: str
    tone: Literal["warm", "neutral"]
    suggestion: Optional[str] = None


# Request bodies
#
# Text fields are optional so handlers can answer missing input with a
# warm message instead of a schema error.

class CheckInRequest(CamelModel):
    user_id: Optional[str] = None
    user_input: Optional[str] = None
    mood: Optional[Mood] = None


class ChatboxRequest(CamelModel):
    user_id: Optional[str] = "anonymous"
    input: Optional[str] = None


class MemoryRequest(CamelModel):
    user_id: Optional[str] = None
    story_input: Optional[str] = None


class BuddyRequest(CamelModel):
    user_id: Optional[str] = None
    message_from: Optional[str] = None
    message_text: Optional[str] = None


class EmpathyRequest(CamelModel):
    user_id: Optional[str] = None
    user_input: Optional[Any] = None


class VitalsRequest(CamelModel):
    user_id: Optional[str] = None
    # Raw readings; each signal is parsed on its own by the vitals analyzer
    vitals: Optional[Dict[str, Any]] = None


class EmergencyRequest(CamelModel):
    user_id: Optional[str] = None
    type: Optional[str] = None
    location: Optional[Location] = None


class NudgeRequest(CamelModel):
    user_id: Optional[str] = None
    time_of_day: TimeOfDay = "morning"
    mood: Mood = "ok"
    medications: List[MedicationSchedule] = Field(default_factory=list)
    hydration: HydrationGoal = Field(default_factory=HydrationGoal)
    weather: Optional[WeatherData] = None


class WellnessLogRequest(CamelModel):
    user_id: Optional[str] = None
    type: Optional[str] = None  # water, medication, activity
    value: Optional[Any] = None
