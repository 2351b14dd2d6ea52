"""Core module - classification, persona and wellness logic."""

from .safety import classify_safety, classify_vitals
from .persona import ComposeOptions, compose_message, detect_emotion
from .wellness import select_nudges
from .reminder_store import ReminderFlagStore

__all__ = [
    'classify_safety', 'classify_vitals',
    'ComposeOptions', 'compose_message', 'detect_emotion',
    'select_nudges',
    'ReminderFlagStore',
]
