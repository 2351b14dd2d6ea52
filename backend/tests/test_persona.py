"""
Unit tests for the persona engine.
Tests vocabulary simplification, speech pauses, message composition and
emotion detection.
"""

import random

import pytest

from amily.core.persona import (
    MESSAGE_CANDIDATES,
    REASSURANCE_PHRASES,
    SIMPLE_WORDS,
    ComposeOptions,
    add_speech_pauses,
    compose_message,
    detect_emotion,
    emotion_to_mood,
    format_for_speech,
    generate_greeting,
    simplify_language,
)

from conftest import first_choice


class TestSimplifyLanguage:
    """Tests for simplify_language."""

    def test_replaces_complex_words(self):
        assert simplify_language("We will utilize the app") == "We will use the app"

    def test_case_insensitive_keeps_capital(self):
        assert simplify_language("Commence the walk") == "Begin the walk"
        assert simplify_language("please terminate it") == "please end it"

    def test_whole_words_only(self):
        assert simplify_language("implementation") == "implementation"
        assert simplify_language("reconfigured") == "reconfigured"

    def test_no_complex_word_survives(self):
        text = " ".join(SIMPLE_WORDS)
        simplified = simplify_language(text).lower().split()
        for word in SIMPLE_WORDS:
            assert word not in simplified

    def test_idempotent(self):
        text = "Let me utilize this to configure and validate approximately everything."
        once = simplify_language(text)
        assert simplify_language(once) == once


class TestSpeechPauses:
    """Tests for add_speech_pauses."""

    def test_three_dots_become_ellipsis(self):
        assert add_speech_pauses("Hello... there") == "Hello… there"

    def test_runs_collapse(self):
        assert add_speech_pauses("Wait.....…now") == "Wait… now"

    def test_space_after_punctuation(self):
        assert add_speech_pauses("Hi.   How are you?  Good") == "Hi. How are you? Good"

    def test_space_after_comma(self):
        assert add_speech_pauses("one,two") == "one, two"

    def test_numbers_keep_comma(self):
        assert add_speech_pauses("1,000 steps") == "1,000 steps"

    @pytest.mark.parametrize("text", [
        "Hello...there,friend.   Take your time…ok",
        "It's 1,000 steps... well done!",
        "Breathe in... two, three, four...and out",
    ])
    def test_idempotent(self, text):
        once = add_speech_pauses(text)
        assert add_speech_pauses(once) == once

    def test_format_for_speech_idempotent_without_reassurance(self):
        text = "Let's utilize this moment...together,slowly."
        options = ComposeOptions(include_reassurance=False)
        once = format_for_speech(text, options)
        assert format_for_speech(once, options) == once


FILLER_WORDS = ("walk", "tea", "Garden", "slowly", "42", "1,000")
SEPARATORS = (" ", "  ", "...", "…", ".....…", ", ", ",", ",\t", ". ", "!   ", "?\n", "... ", "… ")


def _random_utterance(rng):
    """Mix complex words in random case with filler words, ellipses, commas and numbers."""
    words = list(SIMPLE_WORDS) + list(FILLER_WORDS)
    parts = []
    for _ in range(rng.randint(3, 12)):
        word = rng.choice(words)
        word = "".join(c.upper() if rng.random() < 0.3 else c for c in word)
        parts.append(word)
        parts.append(rng.choice(SEPARATORS))
    return "".join(parts)


class TestRandomizedIdempotence:
    """Formatting twice gives the same text as formatting once, for generated input."""

    @pytest.mark.parametrize("seed", range(25))
    def test_simplify_language(self, seed):
        text = _random_utterance(random.Random(seed))
        once = simplify_language(text)
        assert simplify_language(once) == once

    @pytest.mark.parametrize("seed", range(25))
    def test_add_speech_pauses(self, seed):
        text = _random_utterance(random.Random(seed))
        once = add_speech_pauses(text)
        assert add_speech_pauses(once) == once
        assert "..." not in once

    @pytest.mark.parametrize("seed", range(25))
    def test_format_for_speech_without_reassurance(self, seed):
        text = _random_utterance(random.Random(seed))
        options = ComposeOptions(include_reassurance=False)
        once = format_for_speech(text, options)
        assert format_for_speech(once, options) == once
        for word in SIMPLE_WORDS:
            assert word not in once.lower().replace("…", " ").replace(",", " ").split()


class TestComposeMessage:
    """Tests for compose_message."""

    def test_selector_pins_choice(self):
        options = ComposeOptions(selector=first_choice)
        message = compose_message("stressed", options)
        assert message == format_for_speech(MESSAGE_CANDIDATES["stressed"][0])

    def test_message_is_a_formatted_candidate(self):
        for label, candidates in MESSAGE_CANDIDATES.items():
            message = compose_message(label)
            assert message in [format_for_speech(c) for c in candidates], label

    def test_reassurance_prefix(self):
        options = ComposeOptions(include_reassurance=True, selector=first_choice)
        message = compose_message("calm", options)
        assert message.startswith(REASSURANCE_PHRASES[0])

    def test_unknown_label_raises(self):
        with pytest.raises(KeyError):
            compose_message("ecstatic")

    def test_every_label_has_alternatives(self):
        assert all(len(c) >= 2 for c in MESSAGE_CANDIDATES.values())


class TestEmotion:
    """Tests for emotion detection."""

    @pytest.mark.parametrize("text,emotion", [
        ("I'm so worried about tomorrow", "stressed"),
        ("I don't understand this phone", "confused"),
        ("I feel so alone today", "lonely"),
        ("The sun is out", "calm"),
        # stressed is checked before lonely
        ("I miss her and I'm anxious", "stressed"),
    ])
    def test_detect_emotion(self, text, emotion):
        assert detect_emotion(text) == emotion

    def test_non_string_is_calm(self):
        assert detect_emotion(None) == "calm"
        assert detect_emotion(123) == "calm"

    def test_emotion_to_mood(self):
        assert emotion_to_mood("stressed") == "low"
        assert emotion_to_mood("lonely") == "low"
        assert emotion_to_mood("confused") == "ok"
        assert emotion_to_mood("calm") == "good"


def test_generate_greeting():
    assert generate_greeting("evening").startswith("Good evening")
    assert generate_greeting().startswith("Good morning")
