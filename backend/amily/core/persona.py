"""
Amily Persona Engine - Warm, patient, elderly-friendly responses.

Every spoken message goes through the same pipeline:
1. pick one phrasing for the label (injectable selector)
2. simplify vocabulary (whole words, case-insensitive)
3. normalize pauses for speech synthesis
4. optionally prepend a reassurance phrase

Steps 2 and 3 are idempotent.
"""

import random
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..models.wellness import Mood, TimeOfDay

Selector = Callable[[Sequence[str]], str]


REASSURANCE_PHRASES: Tuple[str, ...] = (
    "It's okay… take your time.",
    "I'm here with you.",
    "You're doing fine.",
    "Let's go slowly.",
    "No need to rush.",
)

# Complex word -> simple replacement. No replacement may contain a key.
SIMPLE_WORDS: Dict[str, str] = {
    "utilize": "use",
    "implement": "do",
    "configure": "set up",
    "optimize": "make better",
    "initialize": "start",
    "authenticate": "check",
    "synchronize": "match up",
    "execute": "carry out",
    "validate": "check",
    "assistance": "help",
    "approximately": "about",
    "commence": "begin",
    "terminate": "end",
}

_SIMPLE_WORD_PATTERNS = [
    (re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE), simple)
    for word, simple in SIMPLE_WORDS.items()
]

# Checked in order; the first label with a keyword hit wins.
EMOTION_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("stressed", ("stress", "worried", "anxious")),
    ("confused", ("confused", "don't understand", "lost")),
    ("lonely", ("lonely", "alone", "miss")),
)

EMOTION_TO_MOOD: Dict[str, Mood] = {
    "stressed": "low",
    "lonely": "low",
    "confused": "ok",
    "calm": "good",
}

GREETINGS: Dict[str, str] = {
    "morning": "Good morning… how are you feeling today?",
    "afternoon": "Good afternoon… I hope you're doing well.",
    "evening": "Good evening… let's take a moment together.",
}

MESSAGE_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    # Emotion labels
    "stressed": (
        "It's okay to feel this way… let's breathe together and go slowly.",
        "That sounds like a lot… let's take one slow breath together.",
        "You don't have to carry this all at once… we'll go one step at a time.",
    ),
    "confused": (
        "That's alright… let's look at this step by step, nice and easy.",
        "No worries at all… we can go through it together, slowly.",
        "It's okay to be unsure… let's take it one small piece at a time.",
    ),
    "lonely": (
        "I'm here with you… you're not alone. Let's talk for a while.",
        "I'm so glad you told me… I'm right here, and I'd love to keep you company.",
        "You matter very much… would you like to tell me about your day?",
    ),
    "calm": (
        "I'm glad you're here… let's enjoy this moment together.",
        "It's lovely to talk with you… how can I make your day a little nicer?",
        "What a nice moment… I'm happy to spend it with you.",
    ),
    # Safety levels
    "emergency": (
        "I'm here with you… help is on the way. You're not alone. "
        "Just breathe slowly with me… in and out… you're doing great.",
        "Help is coming right now… I'm staying right here with you. "
        "Breathe in slowly… and out… you're doing so well.",
    ),
    "urgent": (
        "It's okay… let's take this slowly. I've let your care circle know. "
        "Just focus on resting for now… everything will be alright.",
        "Let's sit and rest for a moment… your care circle knows. "
        "I'm right here with you… nice and slow.",
    ),
    "concern": (
        "I hear you… it's okay to not feel your best. I'm here with you. "
        "Would talking help right now?",
        "Thank you for telling me… some days are harder than others. "
        "Would you like to talk about it?",
    ),
    "normal": (
        "I'm here with you… everything is okay.",
        "All is well… I'm right here if you need me.",
    ),
    # Check-in moods
    "low": (
        "I'm here with you… let's take things one step at a time today.",
        "We'll go gently today… one small thing at a time.",
    ),
    "ok": (
        "You're doing just fine… let's see what today brings.",
        "It's good to hear from you… let's take the day as it comes.",
    ),
    "good": (
        "It's wonderful to see you… let's make today a good one.",
        "You sound bright today… let's enjoy it together.",
    ),
    # Prompt families
    "social": (
        "It's nice to connect with others… when you're ready.",
        "Sharing a moment can brighten the day… yours and theirs.",
        "A simple hello can mean so much… take your time.",
    ),
    "memory": (
        "I'd love to hear about that… tell me more when you're ready.",
        "That sounds like a special memory… let's save it together.",
        "What a wonderful story… I'm listening.",
    ),
}


@dataclass
class ComposeOptions:
    """Options of the speech formatting pipeline."""
    include_reassurance: bool = False
    use_simple_words: bool = True
    add_pauses: bool = True
    selector: Optional[Selector] = None

    def choose(self, candidates: Sequence[str]) -> str:
        return (self.selector or random.choice)(candidates)


def _keep_case(original: str, replacement: str) -> str:
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def simplify_language(text: str) -> str:
    """Replace complex words with elderly-friendly alternatives."""
    simplified = text
    for pattern, simple in _SIMPLE_WORD_PATTERNS:
        simplified = pattern.sub(lambda m, s=simple: _keep_case(m.group(0), s), simplified)
    return simplified


def add_speech_pauses(text: str) -> str:
    """Normalize ellipses and spacing so synthesized speech pauses naturally."""
    text = re.sub(r"(?:…|\.{3,})+", "…", text)
    text = re.sub(r"([.!?…])\s+", r"\1 ", text)
    text = re.sub(r"…(?=\w)", "… ", text)
    text = re.sub(r",[ \t]*(?=[^\s\d])", ", ", text)
    text = re.sub(r",[ \t]+(?=\d)", ", ", text)
    return text


def format_for_speech(text: str, options: Optional[ComposeOptions] = None) -> str:
    """Run text through Amily's formatting pipeline."""
    options = options or ComposeOptions()
    formatted = text

    if options.use_simple_words:
        formatted = simplify_language(formatted)

    if options.add_pauses:
        formatted = add_speech_pauses(formatted)

    if options.include_reassurance:
        formatted = f"{options.choose(REASSURANCE_PHRASES)} {formatted}"

    return formatted


def compose_message(label: str, options: Optional[ComposeOptions] = None) -> str:
    """
    Compose a warm spoken message for an emotion, safety level, mood or
    prompt family.

    Args:
        label: Key of MESSAGE_CANDIDATES
        options: Formatting options; options.selector pins the choice in tests

    Returns:
        Formatted message

    Raises:
        KeyError: If label is not a known label
    """
    options = options or ComposeOptions()
    candidates = MESSAGE_CANDIDATES[label]
    return format_for_speech(options.choose(candidates), options)


def detect_emotion(user_input: Any) -> str:
    """Detect the emotional state of an utterance; defaults to calm."""
    if not isinstance(user_input, str):
        return "calm"

    text = user_input.lower()
    for emotion, keywords in EMOTION_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return emotion
    return "calm"


def emotion_to_mood(emotion: str) -> Mood:
    return EMOTION_TO_MOOD.get(emotion, "ok")


def generate_greeting(time_of_day: Optional[TimeOfDay] = None) -> str:
    return GREETINGS[time_of_day or "morning"]


def generate_check_in_message(mood: Mood, options: Optional[ComposeOptions] = None) -> str:
    return compose_message(mood, options)


def generate_social_encouragement(options: Optional[ComposeOptions] = None) -> str:
    return compose_message("social", options)


def generate_memory_prompt(options: Optional[ComposeOptions] = None) -> str:
    return compose_message("memory", options)


def generate_empathetic_response(emotion: str, options: Optional[ComposeOptions] = None) -> str:
    return compose_message(emotion, options)
