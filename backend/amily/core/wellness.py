"""
Wellness Coaching - Medication reminders, hydration nudges, weather-aware
prompts, activity guidance and stress reduction.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models.wellness import (
    HydrationGoal,
    MedicationSchedule,
    Mood,
    PRIORITY_RANK,
    TimeOfDay,
    WeatherData,
    WellnessNudge,
)


# Temperatures in Fahrenheit
WARM_TEMP = 75  # hydration urgency clause above this
HEAT_ADVISORY_TEMP = 85
COLD_ADVISORY_TEMP = 35
PLEASANT_TEMP_RANGE = (65, 75)  # inclusive

HYDRATION_HIGH_REMAINING = 6
HYDRATION_MEDIUM_REMAINING = 3

ACTIVITY_GUIDANCE: Dict[str, Dict[str, Dict[str, str]]] = {
    "morning": {
        "low": {
            "message": "Let's start gentle today. Maybe some stretches in your chair?",
            "speech_message": "Let's take it easy this morning... how about some gentle stretches? "
                              "Just what feels comfortable.",
            "action": "chair_stretches",
        },
        "ok": {
            "message": "A short morning walk might feel good. Just around the block?",
            "speech_message": "How about a short walk this morning? Just around the block... "
                              "fresh air can feel so nice.",
            "action": "short_walk",
        },
        "good": {
            "message": "You're feeling good! How about a morning walk or some light exercise?",
            "speech_message": "You seem to be feeling well today... maybe a nice walk or some light exercise?",
            "action": "morning_activity",
        },
    },
    "afternoon": {
        "low": {
            "message": "Rest is important. Maybe sit by a window and enjoy the view?",
            "speech_message": "It's okay to rest... how about sitting by a window? "
                              "The light and view can be calming.",
            "action": "rest_time",
        },
        "ok": {
            "message": "A little movement can boost your energy. Short walk or gentle stretches?",
            "speech_message": "A bit of movement might help your energy... nothing too much, "
                              "just what feels right.",
            "action": "light_movement",
        },
        "good": {
            "message": "Great energy! Maybe some gardening or a hobby you enjoy?",
            "speech_message": "You have good energy today... how about spending time on something you love? "
                              "Gardening, crafts, whatever brings you joy.",
            "action": "hobby_time",
        },
    },
    "evening": {
        "low": {
            "message": "Wind down gently. Some calm music or a favorite show?",
            "speech_message": "Let's wind down peacefully... maybe some calm music or a show you like?",
            "action": "calm_evening",
        },
        "ok": {
            "message": "Evening is for relaxing. Light reading or gentle music?",
            "speech_message": "Time to relax... maybe some light reading or peaceful music before bed?",
            "action": "relaxation",
        },
        "good": {
            "message": "Nice evening! Maybe a phone call with family or friends?",
            "speech_message": "It's a nice evening... would you like to call someone? Family or friends?",
            "action": "social_connection",
        },
    },
}

STRESS_TECHNIQUES: Dict[str, Dict[str, str]] = {
    "high": {
        "message": "Let's take some deep breaths together. In slowly... and out slowly...",
        "speech_message": "I can tell you might be feeling stressed... let's breathe together. "
                          "Breathe in slowly... two, three, four... and out... two, three, four. "
                          "You're doing great.",
        "action": "breathing_exercise",
    },
    "medium": {
        "message": "Feeling a bit tense? Try relaxing your shoulders and taking a few deep breaths.",
        "speech_message": "Let's relax those shoulders... drop them down... and take a few slow, "
                          "deep breaths. That's it... you're doing well.",
        "action": "shoulder_relaxation",
    },
    "low": {
        "message": "You're doing well. Remember to pause and breathe when you need to.",
        "speech_message": "You're doing just fine... remember, you can always pause and take a breath "
                          "whenever you need to.",
        "action": "reminder",
    },
}


def _glasses(count: int, more: bool = False) -> str:
    return f"{count}{' more' if more else ''} glass{'es' if count != 1 else ''}"


def _degrees(temp: float) -> str:
    return f"{temp:g}"


def current_time_bucket(now: Optional[datetime] = None) -> str:
    """Current hour formatted as HH:00."""
    now = now or datetime.now()
    return f"{now.hour:02d}:00"


def medication_reminder(med: MedicationSchedule) -> WellnessNudge:
    with_food_note = " Remember to take it with some food." if med.with_food else ""

    return WellnessNudge(
        type="medication",
        priority="high",
        message=f"Time for your {med.name} ({med.dosage}).{with_food_note}",
        speech_message=f"Hi... it's time for your {med.name}. {med.dosage}.{with_food_note} "
                       f"I'll wait while you take it... no rush.",
        action="confirm_taken",
    )


def hydration_nudge(goal: HydrationGoal, temp: Optional[float] = None) -> Optional[WellnessNudge]:
    """Nudge toward the daily water goal; None once the goal is met."""
    remaining = goal.daily_glasses - goal.current_glasses
    if remaining <= 0:
        return None

    warm_clause = ""
    if temp is not None and temp > WARM_TEMP:
        warm_clause = " It is warm today, so staying hydrated is extra important."

    if remaining >= HYDRATION_HIGH_REMAINING:
        priority = "high"
        message = (
            f"You've had {_glasses(goal.current_glasses)} of water today. "
            f"Let's have another one.{warm_clause}"
        )
        speech_message = f"How about a glass of water?{warm_clause} Take your time... I'll wait."
    elif remaining >= HYDRATION_MEDIUM_REMAINING:
        priority = "medium"
        message = f"{_glasses(remaining, more=True)} of water to reach your goal today.{warm_clause}"
        speech_message = f"You're doing well... just {_glasses(remaining, more=True)} of water to go.{warm_clause}"
    else:
        priority = "low"
        message = f"Almost there! Just {_glasses(remaining, more=True)} of water.{warm_clause}"
        speech_message = (
            f"You're almost at your water goal... just {remaining} more to go.{warm_clause} "
            f"You're doing great!"
        )

    return WellnessNudge(
        type="hydration",
        priority=priority,
        message=message,
        speech_message=speech_message,
        action="log_water",
    )


def weather_nudge(weather: Optional[WeatherData]) -> Optional[WellnessNudge]:
    """Weather-aware prompt; only the first matching band fires."""
    if weather is None:
        return None

    temp = _degrees(weather.temp)
    condition = weather.condition.lower()

    if weather.temp > HEAT_ADVISORY_TEMP:
        return WellnessNudge(
            type="weather",
            priority="high",
            message=f"It's {temp}°F outside. Stay indoors and drink plenty of water.",
            speech_message=f"It's quite warm today... {temp} degrees. Let's stay inside where it's cool... "
                           f"and make sure to drink extra water.",
        )

    if weather.temp < COLD_ADVISORY_TEMP:
        return WellnessNudge(
            type="weather",
            priority="medium",
            message=f"It's {temp}°F outside. Dress warmly if you go out.",
            speech_message=f"It's cold today... {temp} degrees. If you go outside, "
                           f"make sure to bundle up nice and warm.",
        )

    if condition == "rainy":
        return WellnessNudge(
            type="weather",
            priority="low",
            message="It's raining today. Perfect day to stay cozy inside.",
            speech_message="It's a rainy day... perfect for staying cozy inside. "
                           "Maybe a good book or some music?",
        )

    low, high = PLEASANT_TEMP_RANGE
    if low <= weather.temp <= high and condition == "sunny":
        return WellnessNudge(
            type="weather",
            priority="low",
            message=f"Beautiful day! {temp}°F and sunny. Great for a short walk.",
            speech_message=f"It's a beautiful day outside... {temp} degrees and sunny. "
                           f"If you feel up to it, a short walk might feel nice.",
        )

    return None


def activity_guidance(time_of_day: TimeOfDay, mood: Mood) -> WellnessNudge:
    selected = ACTIVITY_GUIDANCE[time_of_day][mood]
    return WellnessNudge(type="activity", priority="medium", **selected)


def stress_reduction(stress_level: str) -> WellnessNudge:
    """Breathing or relaxation guidance for the given stress level."""
    return WellnessNudge(
        type="rest",
        priority="high" if stress_level == "high" else "medium",
        **STRESS_TECHNIQUES[stress_level],
    )


def sort_nudges(nudges: Iterable[WellnessNudge]) -> List[WellnessNudge]:
    """Stable sort by priority; equal priorities keep generation order."""
    return sorted(nudges, key=lambda nudge: PRIORITY_RANK[nudge.priority])


def select_nudges(
    time_of_day: TimeOfDay,
    medications: Iterable[MedicationSchedule],
    hydration: Optional[HydrationGoal],
    weather: Optional[WeatherData],
    mood: Mood,
    now: Optional[datetime] = None,
) -> List[WellnessNudge]:
    """
    Collect all wellness nudges for the current moment, most urgent first.

    Args:
        time_of_day: Part of the day for activity guidance
        medications: Medication schedules; due when a time equals the current HH:00
        hydration: Daily water goal and progress
        weather: Current weather, or None when unknown
        mood: Current mood for activity guidance
        now: Clock override

    Returns:
        Nudges sorted by priority (medication, hydration, weather, activity on ties)
    """
    nudges: List[WellnessNudge] = []
    current_time = current_time_bucket(now)

    for med in medications:
        if current_time in med.times:
            nudges.append(medication_reminder(med))

    if hydration is not None:
        nudge = hydration_nudge(hydration, weather.temp if weather else None)
        if nudge:
            nudges.append(nudge)

    nudge = weather_nudge(weather)
    if nudge:
        nudges.append(nudge)

    nudges.append(activity_guidance(time_of_day, mood))

    return sort_nudges(nudges)
