"""Deterministic rule-based intent parser, used when the AI backend is unavailable."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, Optional

from hearth.core.extractors import (
    DateExtractor,
    Extractor,
    LocationExtractor,
    RecurrenceExtractor,
    TimeExtractor,
    default_extractors,
)
from hearth.core.models import (
    CompleteIntent,
    EventIntent,
    Intent,
    ListIntent,
    TaskIntent,
)

logger = logging.getLogger(__name__)

LIST_PATTERN = re.compile(
    r"^(what('s| is)|show|list|tell me).*(to ?do|task|schedule|event|happening|going on)",
    re.IGNORECASE,
)

COMPLETE_PATTERNS = (
    re.compile(r"^(i |i've |we |we've )?(done|finished|completed|did|checked off)\b", re.IGNORECASE),
    re.compile(r"\b(mark|check)\b.*\b(done|complete|off)\b", re.IGNORECASE),
)

COMPLETE_QUERY = re.compile(
    r"\b(?:done|finished|completed|did|(?:checked|check|mark)(?:\s+off)?)\b[^a-z]*(.+?)"
    r"(?:\s*$|\s+(?:as\s+)?(?:done|complete|completed|off)\b)",
    re.IGNORECASE,
)

QUERY_LEADING_WORDS = re.compile(r"^(?:(?:with|the|a|an|my|our)\s+)+", re.IGNORECASE)

TITLE_FILLERS = (
    re.compile(
        r"\b(add|create|schedule|set|remind (?:me|us)(?: to)?|put|make|buy)\b", re.IGNORECASE
    ),
    re.compile(r"\b(a |an |the )\b", re.IGNORECASE),
    re.compile(r"\b(to do|task|event|appointment|reminder)\b", re.IGNORECASE),
)

TITLE_EDGE_PUNCTUATION = " .,;:!?-"


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


class RuleBasedIntentParser:
    """
    Regex-cascade parser for a fixed set of intents.

    Classification order: list, complete, then event/task. For event/task
    the extractors run independently over the raw utterance; an utterance with
    a time of day is an event, anything else is a task. Recognized tokens and
    filler words are stripped to build the title.
    """

    def __init__(
        self,
        extractors: Optional[list[Extractor]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.extractors = extractors if extractors is not None else default_extractors()
        self.clock = clock

    def parse(self, text: str, now: Optional[datetime] = None) -> Intent:
        now = now or self.clock()
        raw = text or ""
        lowered = raw.lower().strip()

        if LIST_PATTERN.search(lowered):
            return ListIntent(raw_text=raw)

        if any(p.search(lowered) for p in COMPLETE_PATTERNS):
            return CompleteIntent(query=self._completion_query(raw), raw_text=raw)

        found = {ex.name: ex.extract(raw, now) for ex in self.extractors}
        clock_time = found.get(TimeExtractor.name)
        day = found.get(DateExtractor.name)
        location = found.get(LocationExtractor.name)
        frequency = found.get(RecurrenceExtractor.name)
        title = self._title(raw)

        if clock_time is not None:
            start = datetime.combine(day or now.date(), clock_time)
            return EventIntent(
                title=title,
                raw_text=raw,
                date=start,
                location=location,
                all_day=False,
                recurring=frequency is not None,
                frequency=frequency,
            )

        return TaskIntent(
            title=title,
            raw_text=raw,
            due_date=day,
            recurring=frequency is not None,
            frequency=frequency,
        )

    def _completion_query(self, text: str) -> Optional[str]:
        match = COMPLETE_QUERY.search(text)
        if not match:
            return None
        query = QUERY_LEADING_WORDS.sub("", match.group(1).strip()).strip()
        return query or None

    def _title(self, text: str) -> Optional[str]:
        title = text
        for extractor in self.extractors:
            title = extractor.strip(title)
        for pattern in TITLE_FILLERS:
            title = pattern.sub("", title)
        title = " ".join(title.split()).strip(TITLE_EDGE_PUNCTUATION)
        if not title:
            logger.debug(f"No title left after stripping: {text!r}")
            return None
        return capitalize_first(title)
