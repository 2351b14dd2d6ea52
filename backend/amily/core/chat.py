"""
Chat Replies - Amily's conversational answers for the ChatBox.

Uses the LLM when one is configured and falls back to the persona
templates otherwise, or when the LLM call fails.
"""

import logging
from typing import Any, Dict, List, Optional

from ..llm.base import LLMMessage, LLMProvider
from .persona import ComposeOptions, detect_emotion, generate_empathetic_response

logger = logging.getLogger(__name__)


CHAT_SYSTEM_PROMPT = """You are Amily, a warm, patient companion for an elderly person.

Style rules:
- Short sentences and simple, everyday words. Never use technical language.
- Two to four sentences per reply.
- Use gentle pauses ("…") where a caring person would pause.
- Be encouraging, never rushed. Acknowledge feelings before giving suggestions.
- Do not give medical diagnoses. For anything serious, suggest contacting their care circle.
"""

FIRST_TURN_INSTRUCTION = (
    "This is the first message of the day. After answering, gently ask whether "
    "they have taken their medication and had some water today."
)

DAILY_REMINDER_QUESTION = "Have you taken your medication and had some water today?"


def history_to_messages(history: List[Dict[str, Any]]) -> List[LLMMessage]:
    """Convert stored chat rows (newest first) into LLM turns (oldest first)."""
    messages = []
    for row in reversed(history):
        text = row.get("text")
        if not text:
            continue
        role = "user" if row.get("role") == "user" else "assistant"
        messages.append(LLMMessage.text(role, text))
    return messages


def fallback_reply(user_input: str, first_turn: bool, options: Optional[ComposeOptions] = None) -> str:
    """Template reply based on the detected emotion."""
    reply = generate_empathetic_response(detect_emotion(user_input), options)
    if first_turn:
        reply = f"{reply} {DAILY_REMINDER_QUESTION}"
    return reply


async def generate_chat_reply(
    user_input: str,
    history: List[Dict[str, Any]],
    first_turn: bool,
    llm_provider: Optional[LLMProvider] = None,
    options: Optional[ComposeOptions] = None,
) -> str:
    """
    Generate Amily's reply to a ChatBox message.

    Args:
        user_input: The user's message
        history: Recent stored chat rows, newest first
        first_turn: True when the daily reminder has not been asked yet
        llm_provider: Optional LLM provider
        options: Options for the template fallback

    Returns:
        Reply text (not yet formatted for speech)
    """
    if llm_provider is None:
        return fallback_reply(user_input, first_turn, options)

    system_prompt = CHAT_SYSTEM_PROMPT
    if first_turn:
        system_prompt = f"{system_prompt}\n{FIRST_TURN_INSTRUCTION}"

    messages = [
        LLMMessage.text("system", system_prompt),
        *history_to_messages(history),
        LLMMessage.text("user", user_input),
    ]

    try:
        response = await llm_provider.chat_completion(messages, temperature=0.7)
    except Exception as e:
        logger.warning(f"Chat reply generation failed, using template reply: {e}")
        return fallback_reply(user_input, first_turn, options)

    reply = response.content.strip()
    if not reply:
        logger.warning("LLM returned an empty chat reply, using template reply")
        return fallback_reply(user_input, first_turn, options)
    return reply
