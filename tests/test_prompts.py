"""Tests for prompt templates."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.prompts import prompts


PROMPT_CONSTANTS = [
    "SYMPTOM_ANALYZER_PROMPT",
    "TEST_RECOMMENDER_PROMPT",
    "TREATMENT_SUGGESTER_PROMPT",
    "REASONING_TREE_PROMPT",
    "MEDICAL_ADVICE_PROMPT",
    "RADIOLOGY_PROMPT",
    "PRESCRIPTION_PROMPT",
]


def test_all_prompt_constants_loaded() -> None:
    for name in PROMPT_CONSTANTS:
        value = getattr(prompts, name)
        assert isinstance(value, str)
        assert value


def test_symptom_prompt_requests_parser_headings() -> None:
    prompt = prompts.build_symptom_prompt("sore throat and fever for two days")

    assert "Symptoms: sore throat and fever for two days" in prompt
    for heading in ("✅", "🧪", "💊", "🚨", "🧠"):
        assert heading in prompt


@pytest.mark.parametrize(
    "prompt_type, marker",
    [
        ("tests", "🧪 Recommended Tests:"),
        ("treatments", "💊 Treatment Recommendations:"),
        ("reasoning", "🧠 Medical Reasoning:"),
    ],
)
def test_prompt_type_selects_template(prompt_type, marker) -> None:
    prompt = prompts.build_symptom_prompt("persistent cough", prompt_type)

    assert marker in prompt
    assert "persistent cough" in prompt


def test_unknown_prompt_type_raises() -> None:
    with pytest.raises(ValueError) as exc:
        prompts.build_symptom_prompt("cough", "horoscope")
    assert "Invalid prompt type" in str(exc.value)


def test_radiology_prompt_patient_context() -> None:
    assert "Patient context" not in prompts.build_radiology_prompt("")
    assert "Patient context: smoker, 54" in prompts.build_radiology_prompt("smoker, 54")


def test_advice_prompt_embeds_question() -> None:
    assert 'User question: "Is ginger tea good for nausea?"' in prompts.build_advice_prompt(
        "Is ginger tea good for nausea?"
    )
