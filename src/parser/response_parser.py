"""Parse the symptom-analyzer LLM answer into a DiagnosisResult.

The model is asked to answer with emoji headed sections (see
``src.prompts.prompts.SYMPTOM_ANALYZER_PROMPT``) but it does not always
comply, so every section has an emoji heading matcher followed by a plain
word matcher, and its own fallback.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from src.config.logger import get_logger
from src.parser.models import Condition, Confidence, DiagnosisResult, Level, Test, Treatment
from src.parser.sections import SectionMatcher, SectionParser, is_bullet, is_bullet_or_prose

logger = get_logger(__name__)

_LEVELS: dict[str, Level] = {"high": "High", "medium": "Medium", "low": "Low"}
_LEVEL_SYNONYMS: dict[str, Level] = {
    "moderate": "Medium",
    "mid": "Medium",
    "severe": "High",
    "urgent": "High",
    "mild": "Low",
    "minimal": "Low",
}

# Optional markdown bold around the heading words, e.g. "✅ **Possible Condition(s):**".
_B = r"\**"
_END = r"\Z"
_BLANK_LINE = r"\n\s*\n"

_CONFIDENCE_LINE = re.compile(
    r"(.*?)\s*-\s*Confidence:\s*(\w+)\s*(?:\(?\s*(\d+)\s*%?\s*\)?)?",
    re.IGNORECASE,
)
_TEST_LINE = re.compile(
    r"(.*?)\s*-\s*Purpose:\s*(.*?)\s*-\s*Urgency:\s*(\w+)",
    re.IGNORECASE,
)
_TREATMENT_LINE = re.compile(r"(.*?)\s+-\s+(.*)")


def coerce_level(token: str, default: Level = "Medium") -> Level:
    """Map a captured level token onto High/Medium/Low."""
    key = (token or "").strip().lower()
    if key in _LEVELS:
        return _LEVELS[key]
    if key in _LEVEL_SYNONYMS:
        return _LEVEL_SYNONYMS[key]
    logger.debug("[parser] unknown level token %r, defaulting to %s", token, default)
    return default


def _percentage(token: Optional[str]) -> Optional[int]:
    if not token:
        return None
    value = int(token)
    if 0 <= value <= 100:
        return value
    return None


def _condition_from_line(line: str) -> Optional[Condition]:
    if not line:
        return None
    match = _CONFIDENCE_LINE.match(line)
    if match:
        return Condition(
            name=match.group(1).strip(),
            confidence=Confidence(
                level=coerce_level(match.group(2)),
                percentage=_percentage(match.group(3)),
            ),
            reasoning="Based on symptom analysis",
        )
    return Condition(
        name=line,
        confidence=Confidence(level="Medium"),
        reasoning="Based on symptom analysis",
    )


def _test_from_line(line: str) -> Optional[Test]:
    if not line:
        return None
    match = _TEST_LINE.match(line)
    if match:
        return Test(
            name=match.group(1).strip(),
            purpose=match.group(2).strip(),
            urgency=coerce_level(match.group(3)),
        )
    return Test(name=line, urgency="Medium")


def _treatment_from_line(line: str) -> Optional[Treatment]:
    if not line:
        return None
    match = _TREATMENT_LINE.match(line)
    if match:
        return Treatment(action=match.group(1).strip(), explanation=match.group(2).strip())
    return Treatment(action=line)


def _warning_from_line(line: str) -> Optional[str]:
    return line or None


def _reasoning_from_line(line: str) -> Optional[str]:
    if len(line) > 5:
        return line
    return None


CONDITIONS = SectionParser(
    section_name="conditions",
    heading_matchers=(
        SectionMatcher.compile(
            rf"✅\s*{_B}\s*(?:Possible\s*)?Condition(?:\(s\)|s)?\s*:?{_B}\s*([\s\S]*?)(?=🧪|🩺|💊|🧠|{_END})"
        ),
        SectionMatcher.compile(
            rf"Condition(?:\(s\)|s)?\s*:?{_B}\s*([\s\S]*?)(?=Test|Treatment|Reasoning|{_END})"
        ),
    ),
    line_admission_rule=is_bullet,
    line_decomposer=_condition_from_line,
    fallback_value=lambda: [
        Condition(
            name="Further evaluation needed",
            confidence=Confidence(level="Low"),
            reasoning="Unable to determine specific condition from provided symptoms",
        )
    ],
    error_value=lambda: [
        Condition(
            name="Analysis error - please try again",
            confidence=Confidence(level="Low"),
            reasoning="Error in processing response",
        )
    ],
)

TESTS = SectionParser(
    section_name="tests",
    heading_matchers=(
        SectionMatcher.compile(
            rf"🧪\s*{_B}\s*(?:Recommended\s*)?Tests?\s*:?{_B}\s*([\s\S]*?)(?=💊|🧠|🚨|{_END})"
        ),
        SectionMatcher.compile(
            rf"Tests?\s*:?{_B}\s*([\s\S]*?)(?=Treatment|Reasoning|Warning|{_END})"
        ),
    ),
    line_admission_rule=is_bullet,
    line_decomposer=_test_from_line,
    fallback_value=lambda: [
        Test(name="Consult healthcare provider for appropriate testing", urgency="Medium")
    ],
    error_value=lambda: [Test(name="Consult healthcare provider", urgency="Medium")],
)

TREATMENTS = SectionParser(
    section_name="treatments",
    heading_matchers=(
        SectionMatcher.compile(
            rf"💊\s*{_B}\s*Treatment\s*(?:Recommendations?)?\s*:?{_B}\s*([\s\S]*?)(?=🚨|🧠|When\s*to\s*See|{_END})"
        ),
        SectionMatcher.compile(
            rf"Treatment\s*:?{_B}\s*([\s\S]*?)(?=Warning|Reasoning|When\s*to\s*See|{_END})"
        ),
    ),
    line_admission_rule=is_bullet,
    line_decomposer=_treatment_from_line,
    fallback_value=lambda: [
        Treatment(action="Consult healthcare provider for appropriate treatment")
    ],
    error_value=lambda: [Treatment(action="Consult healthcare provider")],
)

WARNINGS = SectionParser(
    section_name="warnings",
    heading_matchers=(
        SectionMatcher.compile(
            rf"🚨\s*{_B}\s*When\s*to\s*See\s*(?:a\s*)?Doctor\s*:?{_B}\s*([\s\S]*?)(?={_BLANK_LINE}|{_END})"
        ),
        SectionMatcher.compile(
            rf"When\s*to\s*See\s*(?:a\s*)?Doctor\s*:?{_B}\s*([\s\S]*?)(?={_BLANK_LINE}|{_END})"
        ),
    ),
    line_admission_rule=is_bullet,
    line_decomposer=_warning_from_line,
    fallback_value=list,
    error_value=lambda: ["Seek immediate medical attention if symptoms worsen"],
)

REASONING = SectionParser(
    section_name="reasoning",
    heading_matchers=(
        SectionMatcher.compile(
            rf"🧠\s*{_B}\s*(?:Medical\s*)?Reasoning\s*:?{_B}\s*([\s\S]*?)(?={_BLANK_LINE}|{_END})"
        ),
        SectionMatcher.compile(
            rf"Reasoning\s*:?{_B}\s*([\s\S]*?)(?={_BLANK_LINE}|{_END})"
        ),
    ),
    line_admission_rule=is_bullet_or_prose,
    line_decomposer=_reasoning_from_line,
    fallback_value=lambda: [
        "Medical reasoning based on symptom presentation and clinical knowledge"
    ],
    error_value=lambda: ["Analysis based on reported symptoms"],
)


def parse_conditions(text: Any) -> tuple[Condition, ...]:
    return tuple(CONDITIONS.parse(text))


def parse_tests(text: Any) -> tuple[Test, ...]:
    return tuple(TESTS.parse(text))


def parse_treatments_and_warnings(text: Any) -> tuple[tuple[Treatment, ...], tuple[str, ...]]:
    """Treatments and "When to See a Doctor" warnings.

    Both scans share one error policy: if either raises, the pair of error
    values is returned together. Warnings have no fallback and may be empty.
    """
    try:
        treatments = TREATMENTS.extract(text)
        warnings = WARNINGS.extract(text)
    except Exception:
        logger.warning(
            "[parser.treatments] failed to parse response, using error value",
            exc_info=True,
        )
        return tuple(TREATMENTS.error_value()), tuple(WARNINGS.error_value())
    if not treatments:
        treatments = TREATMENTS.fallback_value()
    return tuple(treatments), tuple(warnings)


def parse_reasoning(text: Any) -> tuple[str, ...]:
    return tuple(REASONING.parse(text))


def parse_diagnosis(text: Any) -> DiagnosisResult:
    treatments, warnings = parse_treatments_and_warnings(text)
    result = DiagnosisResult(
        conditions=parse_conditions(text),
        tests=parse_tests(text),
        treatments=treatments,
        warning_signs=warnings,
        reasoning_tree=parse_reasoning(text),
    )
    logger.debug(
        "[parser] parsed conditions=%s tests=%s treatments=%s warnings=%s reasoning=%s",
        len(result.conditions),
        len(result.tests),
        len(result.treatments),
        len(result.warning_signs),
        len(result.reasoning_tree),
    )
    return result
