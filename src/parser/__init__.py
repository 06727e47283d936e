"""Free-text diagnosis response parsing."""

from src.parser.models import Condition, Confidence, DiagnosisResult, Test, Treatment
from src.parser.response_parser import (
    coerce_level,
    parse_conditions,
    parse_diagnosis,
    parse_reasoning,
    parse_tests,
    parse_treatments_and_warnings,
)

__all__ = [
    "Condition",
    "Confidence",
    "DiagnosisResult",
    "Test",
    "Treatment",
    "coerce_level",
    "parse_conditions",
    "parse_diagnosis",
    "parse_reasoning",
    "parse_tests",
    "parse_treatments_and_warnings",
]
