"""Section scanning building blocks for free-text LLM responses.

A response is split into sections by heading matchers tried in priority
order. Each section then filters its lines through an admission rule and
turns admitted lines into records with a decomposer. A section never raises:
it returns its fallback when nothing was extracted and its error value when
extraction blew up.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from src.config.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

BULLET_GLYPHS = ("•", "-", "*")
_BULLET_PREFIX = re.compile(r"^[•\-*]\s*")


@dataclass(frozen=True)
class SectionMatcher:
    """One heading pattern; group 1 captures the section body."""

    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, source: str) -> "SectionMatcher":
        return cls(re.compile(source, re.IGNORECASE))

    def attempt_match(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if match is None:
            return None
        return match.group(1).strip()


def is_bullet(line: str) -> bool:
    return line.strip().startswith(BULLET_GLYPHS)


def is_bullet_or_prose(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith(BULLET_GLYPHS) or len(stripped) > 10


def strip_bullet(line: str) -> str:
    return _BULLET_PREFIX.sub("", line.strip(), count=1).strip()


@dataclass(frozen=True)
class SectionParser(Generic[T]):
    section_name: str
    heading_matchers: Sequence[SectionMatcher]
    line_admission_rule: Callable[[str], bool]
    line_decomposer: Callable[[str], Optional[T]]
    fallback_value: Callable[[], list[T]]
    error_value: Callable[[], list[T]]

    def find_section(self, text: str) -> str:
        # First matcher that hits wins, even if its body turns out empty.
        for index, matcher in enumerate(self.heading_matchers):
            body = matcher.attempt_match(text)
            if body is not None:
                logger.debug(
                    "[parser.%s] heading matcher #%s hit body_len=%s",
                    self.section_name,
                    index,
                    len(body),
                )
                return body
        logger.debug("[parser.%s] no heading matched", self.section_name)
        return ""

    def extract(self, text: str) -> list[T]:
        """Items found in ``text``, without fallback handling."""
        body = self.find_section(text)
        if not body:
            return []
        items: list[T] = []
        for line in body.split("\n"):
            if not self.line_admission_rule(line):
                continue
            item = self.line_decomposer(strip_bullet(line))
            if item is not None:
                items.append(item)
        return items

    def parse(self, text: Any) -> list[T]:
        try:
            items = self.extract(text)
        except Exception:
            logger.warning(
                "[parser.%s] failed to parse response, using error value",
                self.section_name,
                exc_info=True,
            )
            return self.error_value()
        if not items:
            return self.fallback_value()
        return items
