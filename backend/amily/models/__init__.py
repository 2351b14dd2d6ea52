"""Models module."""

from .safety import SafetyAlert, SafetyLevel, VitalsSnapshot, Location, SEVERITY_RANK
from .wellness import (
    MedicationSchedule, HydrationGoal, WeatherData, WellnessNudge,
    TimeOfDay, Mood, PRIORITY_RANK,
)
from .companion import (
    PlanJSON, MemoryJSON, SummaryJSON,
    CheckInRequest, ChatboxRequest, MemoryRequest, BuddyRequest, EmpathyRequest,
    VitalsRequest, EmergencyRequest, NudgeRequest, WellnessLogRequest,
)

__all__ = [
    'SafetyAlert', 'SafetyLevel', 'VitalsSnapshot', 'Location', 'SEVERITY_RANK',
    'MedicationSchedule', 'HydrationGoal', 'WeatherData', 'WellnessNudge',
    'TimeOfDay', 'Mood', 'PRIORITY_RANK',
    'PlanJSON', 'MemoryJSON', 'SummaryJSON',
    'CheckInRequest', 'ChatboxRequest', 'MemoryRequest', 'BuddyRequest', 'EmpathyRequest',
    'VitalsRequest', 'EmergencyRequest', 'NudgeRequest', 'WellnessLogRequest',
]
