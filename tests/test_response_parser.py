"""Tests for the free-text diagnosis response parser."""

import dataclasses
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from src.parser import (
    Condition,
    Confidence,
    DiagnosisResult,
    Test,
    Treatment,
    coerce_level,
    parse_conditions,
    parse_diagnosis,
    parse_reasoning,
    parse_tests,
    parse_treatments_and_warnings,
)
from src.parser import response_parser


FULL_RESPONSE = """1. ✅ **Possible Condition(s):**
   • Viral Upper Respiratory Infection - Confidence: High (80%)
   • Seasonal Allergies - Confidence: Low (15%)

2. 🧪 **Recommended Tests:**
   • CBC - Purpose: rule out bacterial infection - Urgency: Low
   • Rapid Strep Test - Purpose: exclude strep throat - Urgency: Medium

3. 💊 **Treatment Recommendations:**
   • Rest - Avoid strenuous activity for a few days
   • Over-the-counter acetaminophen - Reduces fever and aches
   • Hydration

🚨 **When to See a Doctor:**
   • Fever above 39°C lasting more than 3 days
   • Difficulty breathing

4. 🧠 **Medical Reasoning:**
   • Sore throat + runny nose → upper airway involvement → typical viral pattern
   • No high fever reported → bacterial cause less likely
"""

CONDITIONS_FALLBACK = Condition(
    name="Further evaluation needed",
    confidence=Confidence(level="Low"),
    reasoning="Unable to determine specific condition from provided symptoms",
)


class TestParseConditions:
    def test_full_response(self):
        conditions = parse_conditions(FULL_RESPONSE)

        assert [c.name for c in conditions] == [
            "Viral Upper Respiratory Infection",
            "Seasonal Allergies",
        ]
        assert conditions[0].confidence == Confidence(level="High", percentage=80)
        assert conditions[1].confidence == Confidence(level="Low", percentage=15)
        assert all(c.reasoning == "Based on symptom analysis" for c in conditions)

    def test_confidence_line(self):
        text = "✅ Possible Conditions:\n• Hypertension - Confidence: High (85%)\n"

        conditions = parse_conditions(text)

        assert len(conditions) == 1
        assert conditions[0].name == "Hypertension"
        assert conditions[0].confidence.level == "High"
        assert conditions[0].confidence.percentage == 85

    def test_confidence_without_percentage(self):
        conditions = parse_conditions("✅ Condition(s):\n- Migraine - confidence: medium\n")

        assert conditions[0].name == "Migraine"
        assert conditions[0].confidence == Confidence(level="Medium", percentage=None)

    def test_plain_bullet_defaults_to_medium(self):
        conditions = parse_conditions("Condition:\n* Tension headache\n")

        assert conditions == (
            Condition(
                name="Tension headache",
                confidence=Confidence(level="Medium"),
                reasoning="Based on symptom analysis",
            ),
        )

    def test_non_bullet_lines_are_ignored(self):
        text = "✅ Possible Condition(s):\nThe most likely options are:\n• Gastritis\n"

        assert [c.name for c in parse_conditions(text)] == ["Gastritis"]

    def test_emoji_heading_wins_over_plain_heading(self):
        text = (
            "Conditions: \n• From plain heading\n"
            "✅ Possible Conditions:\n• From emoji heading\n"
            "🧪 Tests:\n• CBC\n"
        )

        assert [c.name for c in parse_conditions(text)] == ["From emoji heading"]

    def test_emoji_section_without_bullets_does_not_try_plain_heading(self):
        text = "✅ Possible Conditions: unclear\n🧪 Tests:\n• CBC\nConditions:\n• Never used\n"

        assert parse_conditions(text) == (CONDITIONS_FALLBACK,)

    def test_out_of_vocabulary_level_is_mapped(self):
        conditions = parse_conditions("✅ Conditions:\n• Sinusitis - Confidence: Moderate (60%)\n")

        assert conditions[0].confidence == Confidence(level="Medium", percentage=60)

    def test_out_of_range_percentage_is_dropped(self):
        conditions = parse_conditions("✅ Conditions:\n• Flu - Confidence: High (150%)\n")

        assert conditions[0].confidence == Confidence(level="High", percentage=None)

    def test_empty_text_returns_fallback(self):
        assert parse_conditions("") == (CONDITIONS_FALLBACK,)

    def test_exception_returns_error_value(self):
        conditions = parse_conditions(None)

        assert conditions == (
            Condition(
                name="Analysis error - please try again",
                confidence=Confidence(level="Low"),
                reasoning="Error in processing response",
            ),
        )


class TestParseTests:
    def test_full_response(self):
        tests = parse_tests(FULL_RESPONSE)

        assert tests == (
            Test(name="CBC", purpose="rule out bacterial infection", urgency="Low"),
            Test(name="Rapid Strep Test", purpose="exclude strep throat", urgency="Medium"),
        )

    def test_detailed_line(self):
        tests = parse_tests("🧪 Recommended Tests:\n• CBC - Purpose: rule out infection - Urgency: Low\n")

        assert tests == (Test(name="CBC", purpose="rule out infection", urgency="Low"),)

    def test_plain_line_defaults_to_medium_urgency(self):
        tests = parse_tests("Tests:\n- Chest X-ray\n")

        assert tests == (Test(name="Chest X-ray", purpose=None, urgency="Medium"),)

    def test_urgency_case_is_normalized(self):
        tests = parse_tests("🧪 Tests:\n• ECG - Purpose: check rhythm - Urgency: HIGH\n")

        assert tests[0].urgency == "High"

    def test_empty_text_returns_fallback(self):
        assert parse_tests("") == (
            Test(name="Consult healthcare provider for appropriate testing", urgency="Medium"),
        )

    def test_exception_returns_error_value(self):
        assert parse_tests(42) == (Test(name="Consult healthcare provider", urgency="Medium"),)


class TestParseTreatmentsAndWarnings:
    def test_full_response(self):
        treatments, warnings = parse_treatments_and_warnings(FULL_RESPONSE)

        assert treatments == (
            Treatment(action="Rest", explanation="Avoid strenuous activity for a few days"),
            Treatment(action="Over-the-counter acetaminophen", explanation="Reduces fever and aches"),
            Treatment(action="Hydration"),
        )
        assert warnings == (
            "Fever above 39°C lasting more than 3 days",
            "Difficulty breathing",
        )

    def test_treatment_without_warnings(self):
        treatments, warnings = parse_treatments_and_warnings(
            "💊 Treatment Recommendations:\n• Rest - Avoid strenuous activity\n"
        )

        assert treatments == (Treatment(action="Rest", explanation="Avoid strenuous activity"),)
        assert warnings == ()

    def test_explanation_keeps_later_hyphens(self):
        treatments, _ = parse_treatments_and_warnings(
            "Treatment:\n• Ibuprofen - take with food - max 3 doses a day\n"
        )

        assert treatments == (
            Treatment(action="Ibuprofen", explanation="take with food - max 3 doses a day"),
        )

    def test_warnings_stop_at_blank_line(self):
        text = (
            "💊 Treatment:\n• Rest\n"
            "When to See a Doctor:\n• Chest pain\n\n• Not a warning\n"
        )

        _, warnings = parse_treatments_and_warnings(text)

        assert warnings == ("Chest pain",)

    def test_empty_text_returns_fallback_and_no_warnings(self):
        treatments, warnings = parse_treatments_and_warnings("")

        assert treatments == (Treatment(action="Consult healthcare provider for appropriate treatment"),)
        assert warnings == ()

    def test_exception_returns_error_pair(self):
        treatments, warnings = parse_treatments_and_warnings(None)

        assert treatments == (Treatment(action="Consult healthcare provider"),)
        assert warnings == ("Seek immediate medical attention if symptoms worsen",)


class TestParseReasoning:
    def test_full_response(self):
        reasoning = parse_reasoning(FULL_RESPONSE)

        assert reasoning == (
            "Sore throat + runny nose → upper airway involvement → typical viral pattern",
            "No high fever reported → bacterial cause less likely",
        )

    def test_line_length_rules(self):
        text = "🧠 Medical Reasoning:\n• abcd\nHeadache now\nshort\n"

        assert parse_reasoning(text) == ("Headache now",)

    def test_prose_reasoning_without_bullets(self):
        text = "Reasoning: \nFever and cough together point to a respiratory infection.\n"

        assert parse_reasoning(text) == (
            "Fever and cough together point to a respiratory infection.",
        )

    def test_empty_text_returns_fallback(self):
        assert parse_reasoning("") == (
            "Medical reasoning based on symptom presentation and clinical knowledge",
        )

    def test_exception_returns_error_value(self):
        assert parse_reasoning(None) == ("Analysis based on reported symptoms",)


class TestParseDiagnosis:
    def test_every_section_is_populated(self):
        result = parse_diagnosis(FULL_RESPONSE)

        assert isinstance(result, DiagnosisResult)
        assert len(result.conditions) == 2
        assert len(result.tests) == 2
        assert len(result.treatments) == 3
        assert len(result.warning_signs) == 2
        assert len(result.reasoning_tree) == 2

    @pytest.mark.parametrize("text", ["", "no structure at all", "Tests: none", None])
    def test_lists_are_never_empty(self, text):
        result = parse_diagnosis(text)

        assert result.conditions
        assert result.tests
        assert result.treatments
        assert result.reasoning_tree

    def test_parsing_is_deterministic(self):
        assert parse_diagnosis(FULL_RESPONSE) == parse_diagnosis(FULL_RESPONSE)

    def test_result_is_immutable(self):
        result = parse_diagnosis(FULL_RESPONSE)

        with pytest.raises(Exception):
            result.conditions = ()

    def test_serializes_with_client_keys(self):
        payload = parse_diagnosis(FULL_RESPONSE).model_dump(by_alias=True)

        assert set(payload) == {"conditions", "tests", "treatments", "warningSigns", "reasoningTree"}
        assert payload["conditions"][0]["confidence"] == {"level": "High", "percentage": 80}

    def test_failure_in_one_section_leaves_others_intact(self, monkeypatch):
        def _boom(_line):
            raise RuntimeError("decomposer failed")

        broken = dataclasses.replace(response_parser.TESTS, line_decomposer=_boom)
        monkeypatch.setattr(response_parser, "TESTS", broken)

        result = parse_diagnosis(FULL_RESPONSE)

        assert result.tests == (Test(name="Consult healthcare provider", urgency="Medium"),)
        assert len(result.conditions) == 2
        assert len(result.treatments) == 3


@pytest.mark.parametrize(
    "token, expected",
    [
        ("High", "High"),
        ("low", "Low"),
        ("MEDIUM", "Medium"),
        ("Moderate", "Medium"),
        ("severe", "High"),
        ("mild", "Low"),
        ("unknown", "Medium"),
        ("", "Medium"),
    ],
)
def test_coerce_level(token, expected):
    assert coerce_level(token) == expected
