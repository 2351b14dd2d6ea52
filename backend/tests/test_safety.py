"""
Unit tests for safety classification.
Tests classify_safety, classify_vitals and the manual emergency alert.
"""

import pytest
from pydantic import ValidationError

from amily.core.safety import (
    CONCERN_PHRASES,
    EMERGENCY_PHRASES,
    HIGH_HEART_RATE,
    LOW_HEART_RATE,
    classify_safety,
    classify_vitals,
    manual_emergency_alert,
    parse_vitals,
    safety_check_in_questions,
)
from amily.models import SafetyAlert, VitalsSnapshot


class TestClassifySafety:
    """Tests for free-text safety classification."""

    @pytest.mark.parametrize("text", [None, "", "   ", 42, ["help me"], {"text": "help"}])
    def test_empty_or_non_string_is_normal(self, text):
        alert = classify_safety(text)
        assert alert.level == "normal"
        assert alert.detected == []
        assert alert.caregiver_alert is False

    def test_help_request_is_emergency(self):
        alert = classify_safety("I fell and I need help")
        assert alert.level == "emergency"
        assert "i need help" in alert.detected
        assert "i fell" in alert.detected
        assert alert.caregiver_alert is True
        assert "alert_caregiver" in alert.actions

    def test_case_insensitive(self):
        assert classify_safety("CHEST PAIN").level == "emergency"

    def test_every_emergency_phrase_is_detected(self):
        for phrase in EMERGENCY_PHRASES:
            alert = classify_safety(f"well... {phrase.upper()} right now")
            assert alert.level == "emergency", phrase
            assert phrase in alert.detected

    def test_every_concern_phrase_is_detected(self):
        for phrase in CONCERN_PHRASES:
            alert = classify_safety(f"Today I am {phrase}")
            assert alert.level == "concern", phrase
            assert alert.caregiver_alert is False

    def test_emergency_wins_and_concerns_are_not_merged(self):
        alert = classify_safety("I'm not feeling well and I can't breathe")
        assert alert.level == "emergency"
        assert "not feeling well" not in alert.detected
        assert "can't breathe" in alert.detected

    def test_detected_keeps_table_order(self):
        alert = classify_safety("ambulance! help me")
        assert alert.detected == ["help me", "ambulance"]

    def test_concern_message_and_actions(self):
        alert = classify_safety("I missed my medication this morning")
        assert alert.level == "concern"
        assert alert.detected == ["missed my medication"]
        assert alert.actions == ["offer_support", "suggest_contact"]

    def test_calm_text_is_normal(self):
        alert = classify_safety("The garden looks lovely today")
        assert alert.level == "normal"

    def test_same_input_same_alert(self):
        assert classify_safety("help me please") == classify_safety("help me please")

    def test_alert_is_frozen(self):
        alert = classify_safety("help me")
        with pytest.raises(ValidationError):
            alert.level = "normal"

    def test_model_config(self):
        assert SafetyAlert.model_config["frozen"] is True
        assert SafetyAlert.model_config["populate_by_name"] is True
        assert VitalsSnapshot(heartRate=80).heart_rate == 80

    def test_camel_case_serialization(self):
        data = classify_safety("help me").model_dump(by_alias=True)
        assert data["caregiverAlert"] is True
        assert "caregiver_alert" not in data


class TestClassifyVitals:
    """Tests for vitals analysis."""

    def test_none_is_normal(self):
        assert classify_vitals(None).level == "normal"

    def test_empty_snapshot_is_normal(self):
        assert classify_vitals({}).level == "normal"

    def test_fall_is_emergency(self):
        alert = classify_vitals(VitalsSnapshot(fall_detected=True))
        assert alert.level == "emergency"
        assert alert.detected == ["fall_detected"]
        assert "check_responsive" in alert.actions

    def test_fall_dominates_heart_rate(self):
        alert = classify_vitals({"heartRate": 150, "fallDetected": True})
        assert alert.level == "emergency"
        assert alert.detected == ["fall_detected"]

    def test_high_heart_rate_is_urgent(self):
        alert = classify_vitals({"heartRate": HIGH_HEART_RATE + 1})
        assert alert.level == "urgent"
        assert alert.detected == ["elevated_heart_rate"]
        assert alert.caregiver_alert is True

    def test_low_heart_rate_is_urgent(self):
        alert = classify_vitals({"heart_rate": LOW_HEART_RATE - 1})
        assert alert.level == "urgent"
        assert alert.detected == ["low_heart_rate"]

    @pytest.mark.parametrize("heart_rate", [LOW_HEART_RATE, 72, HIGH_HEART_RATE])
    def test_thresholds_are_exclusive(self, heart_rate):
        assert classify_vitals({"heartRate": heart_rate}).level == "normal"

    def test_zero_heart_rate_is_low(self):
        assert classify_vitals({"heartRate": 0}).detected == ["low_heart_rate"]

    def test_fall_false_is_ignored(self):
        assert classify_vitals({"fallDetected": False, "heartRate": 80}).level == "normal"

    def test_unreadable_heart_rate_is_normal(self):
        assert classify_vitals({"heartRate": "fast"}).level == "normal"
        assert classify_vitals({"heartRate": None, "fallDetected": None}).level == "normal"

    @pytest.mark.parametrize("vitals", [
        {"fallDetected": True, "heartRate": "fast"},
        {"fallDetected": True, "location": {"lat": 40.7}},
        {"fallDetected": True, "timestamp": 1760000000},
        {"fallDetected": "true", "heartRate": [72]},
    ])
    def test_fall_survives_malformed_siblings(self, vitals):
        alert = classify_vitals(vitals)
        assert alert.level == "emergency"
        assert alert.detected == ["fall_detected"]

    @pytest.mark.parametrize("vitals", [
        {"heartRate": 130, "location": {"lat": 1}},
        {"heartRate": "130", "timestamp": 1760000000},
        {"heartRate": 130, "fallDetected": "maybe"},
    ])
    def test_heart_rate_survives_malformed_siblings(self, vitals):
        alert = classify_vitals(vitals)
        assert alert.level == "urgent"
        assert alert.detected == ["elevated_heart_rate"]


class TestParseVitals:
    """Tests for building a snapshot from raw readings."""

    def test_none_and_snapshot_pass_through(self):
        snapshot = VitalsSnapshot(heart_rate=80)
        assert parse_vitals(None) is None
        assert parse_vitals(snapshot) is snapshot

    def test_keeps_readable_fields(self):
        snapshot = parse_vitals({
            "heartRate": 95,
            "fallDetected": True,
            "location": {"lat": 40.7, "lng": -74.0},
            "timestamp": "2026-10-16T08:00:00+00:00",
        })
        assert snapshot.heart_rate == 95
        assert snapshot.fall_detected is True
        assert snapshot.location.lat == 40.7
        assert snapshot.timestamp == "2026-10-16T08:00:00+00:00"

    def test_drops_malformed_fields(self):
        snapshot = parse_vitals({
            "heartRate": "fast",
            "fallDetected": True,
            "location": {"lat": 40.7},
            "timestamp": 1760000000,
        })
        assert snapshot.fall_detected is True
        assert snapshot.heart_rate is None
        assert snapshot.location is None
        assert snapshot.timestamp


class TestManualEmergency:
    """Tests for user-triggered emergencies."""

    def test_default_trigger(self):
        alert = manual_emergency_alert()
        assert alert.level == "emergency"
        assert alert.detected == ["manual_trigger"]
        assert alert.message == "Help is on the way... stay calm."

    def test_trigger_type(self):
        assert manual_emergency_alert("panic_button").detected == ["panic_button"]


class TestSeverity:
    """Tests for severity ordering."""

    def test_high_severity(self):
        assert SafetyAlert(level="urgent").is_high_severity
        assert SafetyAlert(level="emergency").is_high_severity
        assert not SafetyAlert(level="concern").is_high_severity


def test_safety_check_in_questions():
    for time_of_day in ("morning", "afternoon", "evening"):
        questions = safety_check_in_questions(time_of_day)
        assert len(questions) == 3
        assert all(q.endswith("?") for q in questions)
