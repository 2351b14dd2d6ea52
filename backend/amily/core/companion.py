"""
Companion Payloads - Builds the structured data returned by the daily
check-in, MemoryLane, buddy and wellness-log endpoints.

All rule-based; nothing here calls an external service.
"""

import re
from typing import Any, Dict, Optional, Tuple

from ..models.companion import MemoryJSON, PlanJSON, SummaryJSON
from ..models.wellness import Mood


CHECKIN_PLANS: Dict[str, Dict[str, Any]] = {
    "low": {
        "summary": "Let's keep today gentle… some rest, a warm drink, and maybe a call with someone you love.",
        "next_step": "How about sitting somewhere comfy with a cup of tea?",
        "tags": ["rest", "social"],
    },
    "ok": {
        "summary": "Let's take the day slowly… a little movement, some rest, and maybe a chat.",
        "next_step": "How about a short walk after breakfast?",
        "tags": ["routine", "mobility"],
    },
    "good": {
        "summary": "What a nice start… let's enjoy some activity, a favorite hobby, and good company.",
        "next_step": "Maybe a walk outside or some time in the garden?",
        "tags": ["routine", "mobility", "social"],
    },
}

MEMORY_TAG_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("family", ("mother", "father", "mom", "dad", "brother", "sister", "son", "daughter",
                "grandchild", "grandson", "granddaughter", "husband", "wife", "family")),
    ("childhood", ("childhood", "when i was young", "when i was a kid", "as a child", "school")),
    ("travel", ("trip", "travel", "vacation", "holiday", "journey", "visited", "abroad")),
    ("work", ("work", "job", "office", "factory", "career", "boss", "retired")),
    ("love", ("wedding", "married", "sweetheart", "first date", "fell in love")),
    ("home", ("house", "home", "garden", "kitchen", "farm")),
    ("music", ("song", "music", "dance", "dancing", "piano", "sing")),
)

WARM_BUDDY_WORDS: Tuple[str, ...] = (
    "love", "miss", "thinking of you", "hug", "hello", "hi ", "care", "hope",
    "proud", "smile", "happy", "glad", "dear", "xo",
)

WELLNESS_LOG_RESPONSES: Dict[str, str] = {
    "water": "Good job staying hydrated! You're doing great.",
    "medication": "Thank you for taking your medication. Well done.",
    "activity": "Wonderful! Movement is so good for you.",
}
DEFAULT_LOG_RESPONSE = "Thank you… I've made a note of that."

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "preferredPace": "slow",
    "favoriteTime": "morning",
    "interests": [],
    "routineNotes": "",
}

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_DECADE = re.compile(r"\b(1[89]\d0|20[0-2]0)'?s\b")
_YEAR = re.compile(r"\b(1[89]\d\d|20[0-2]\d)\b")
_QUOTE = re.compile(r"[\"“]([^\"”]{3,200})[\"”]")


def plan_for_mood(mood: Mood) -> PlanJSON:
    plan = CHECKIN_PLANS[mood]
    return PlanJSON(
        summary=plan["summary"],
        next_step=plan["next_step"],
        mood=mood,
        tags=list(plan["tags"]),
    )


def _detect_era(story: str) -> str:
    decade = _DECADE.search(story)
    if decade:
        return f"{decade.group(1)}s"
    year = _YEAR.search(story)
    if year:
        return f"{year.group(1)[:3]}0s"
    return "Recent years"


def _detect_memory_tags(story: str) -> list:
    lower = story.lower()
    tags = [tag for tag, keywords in MEMORY_TAG_KEYWORDS if any(k in lower for k in keywords)]
    return tags or ["personal"]


def extract_memory(story: str) -> MemoryJSON:
    """
    Turn a spoken story into a MemoryLane entry.

    The story is kept to its first three sentences; the title is the
    opening of the story.
    """
    story = story.strip()
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(story) if s.strip()][:3]
    story_3_sentences = ". ".join(sentences) + "." if sentences else story[:200]

    quote = _QUOTE.search(story)

    return MemoryJSON(
        title=story[:50].strip() or "A Special Memory",
        era=_detect_era(story),
        story_3_sentences=story_3_sentences,
        tags=_detect_memory_tags(story),
        quote=quote.group(1).strip() if quote else None,
    )


def summarize_buddy_message(message_from: Optional[str], message_text: Optional[str]) -> SummaryJSON:
    """Warm summary of a message a friend sent."""
    sender = (message_from or "").strip() or "someone"
    text = (message_text or "").lower()
    warm = not text or any(word in f"{text} " for word in WARM_BUDDY_WORDS)

    if warm:
        summary = f"Your friend {sender} sent a warm hello… they're thinking of you today."
    else:
        summary = f"Your friend {sender} sent you a message… they wanted to share something with you."

    return SummaryJSON(
        summary=summary,
        tone="warm" if warm else "neutral",
        suggestion="Maybe send a little message back when you're ready?",
    )


def wellness_log_acknowledgement(log_type: str) -> str:
    return WELLNESS_LOG_RESPONSES.get(log_type, DEFAULT_LOG_RESPONSE)
