"""
Two-tier intent parser.

The AI backend is tried first; its payload is normalized into typed intents.
When the backend is missing or fails, the deterministic rule parser takes over.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Optional

from dateutil.parser import isoparse

from hearth.core.errors import AIBackendError
from hearth.core.interfaces import IntentBackend
from hearth.core.models import (
    CompleteIntent,
    EventIntent,
    Frequency,
    Intent,
    IntentType,
    ListIntent,
    ParseResult,
    ShoppingIntent,
    TaskIntent,
    UnknownIntent,
)
from hearth.core.parse_rules import RuleBasedIntentParser

logger = logging.getLogger(__name__)


def _parse_day(value: Any) -> tuple[Optional[date], Optional[time]]:
    """ISO date (or datetime) string to a calendar day plus any embedded time."""
    if isinstance(value, datetime):
        return value.date(), value.time()
    if isinstance(value, date):
        return value, None
    if not isinstance(value, str) or not value.strip():
        return None, None
    try:
        parsed = isoparse(value.strip())
    except (ValueError, TypeError):
        return None, None
    embedded = parsed.time() if "T" in value else None
    return parsed.date(), embedded


def _parse_clock(value: Any) -> Optional[time]:
    """``{"hours": 15, "minutes": 30}`` or ``"15:30"`` to a time of day."""
    if isinstance(value, dict):
        if value.get("hours") is None:
            return None
        try:
            return time(int(value["hours"]), int(value.get("minutes") or 0))
        except (ValueError, TypeError):
            return None
    if isinstance(value, str) and ":" in value:
        hours, _, minutes = value.strip().partition(":")
        try:
            return time(int(hours), int(minutes[:2] or 0))
        except ValueError:
            return None
    return None


def _parse_frequency(value: Any) -> Optional[Frequency]:
    if not value:
        return None
    try:
        return Frequency(str(value).lower())
    except ValueError:
        logger.debug(f"Ignoring unknown frequency: {value!r}")
        return None


def _parse_quantity(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def item_to_intent(item: dict[str, Any], raw_text: str = "") -> Intent:
    """
    Convert one backend item dictionary into a typed intent.

    Args:
        item: Decoded item from the backend payload
        raw_text: The utterance or document the item came from

    Returns:
        A typed intent. Unrecognized types become ``UnknownIntent``.
    """
    kind = str(item.get("type") or "").lower()
    needs_notification = bool(item.get("needs_notification") or item.get("needsNotification"))
    if kind == "reminder":
        kind = IntentType.TODO.value
        needs_notification = True

    title = _text(item.get("title"))
    day, embedded_time = _parse_day(item.get("date"))
    explicit_time = _parse_clock(item.get("time")) or embedded_time
    default_time = _parse_clock(item.get("default_time") or item.get("defaultTime"))

    frequency = _parse_frequency(item.get("frequency"))
    recurring = frequency is not None and bool(item.get("recurring", True))
    if not recurring:
        frequency = None

    if kind == IntentType.EVENT.value:
        start = None
        if day is not None:
            start = datetime.combine(day, explicit_time or default_time or time())
        return EventIntent(
            title=title,
            raw_text=raw_text,
            date=start,
            location=_text(item.get("location")) or None,
            all_day=explicit_time is None,
            recurring=recurring,
            frequency=frequency,
        )

    if kind in (IntentType.TASK.value, IntentType.TODO.value):
        return TaskIntent(
            title=title,
            raw_text=raw_text,
            type=IntentType(kind),
            due_date=day,
            due_time=(explicit_time or default_time) if day is not None else None,
            recurring=recurring,
            frequency=frequency,
            needs_notification=needs_notification,
        )

    if kind == IntentType.SHOPPING.value:
        return ShoppingIntent(
            title=title if title is not None else _text(item.get("name")),
            raw_text=raw_text,
            quantity=_parse_quantity(item.get("quantity")),
            unit=_text(item.get("unit")) or None,
            category=_text(item.get("category")) or None,
        )

    if kind == IntentType.COMPLETE.value:
        return CompleteIntent(
            query=_text(item.get("query")) or title,
            title=title,
            raw_text=raw_text,
        )

    if kind == IntentType.LIST.value:
        return ListIntent(title=title, raw_text=raw_text)

    return UnknownIntent(title=title, raw_text=raw_text)


def normalize_response(payload: Any, raw_text: str = "") -> ParseResult:
    """
    Normalize any backend payload shape into a ``ParseResult``.

    Accepts a bare list of items, an ``{"items": [...]}`` envelope, or a
    single flat item object.

    Raises:
        AIBackendError: If the payload is none of those shapes
    """
    if isinstance(payload, list):
        raw_items = payload
    elif isinstance(payload, dict) and isinstance(payload.get("items"), list):
        raw_items = payload["items"]
    elif isinstance(payload, dict):
        raw_items = [payload]
    else:
        raise AIBackendError(f"Unexpected response from AI backend: {type(payload).__name__}")

    items = [item_to_intent(item, raw_text) for item in raw_items if isinstance(item, dict)]
    return ParseResult(items=items, raw_text=raw_text, source="ai")


class IntentParser:
    """
    Free text to intents: AI backend first, rule-based parser as fallback.

    The parser never raises for an ordinary utterance. AI failures are
    logged and recovered from locally; only ``parse_document``, which has no
    rule-based equivalent, propagates them.
    """

    def __init__(
        self,
        backend: Optional[IntentBackend] = None,
        rules: Optional[RuleBasedIntentParser] = None,
    ) -> None:
        self.backend = backend
        self.rules = rules or RuleBasedIntentParser()

    def parse(self, utterance: str, now: Optional[datetime] = None) -> Intent:
        """Parse one utterance into a single intent."""
        result = self.parse_all(utterance, now)
        if result.primary is not None:
            return result.primary
        if not result.items:
            return UnknownIntent(raw_text=utterance)
        logger.warning(
            f"Utterance produced {len(result.items)} items; returning the first. "
            "Use parse_all() to get every item."
        )
        return result.items[0]

    def parse_all(self, utterance: str, now: Optional[datetime] = None) -> ParseResult:
        """Parse one utterance, keeping every item the AI backend returned."""
        if self.backend is not None:
            try:
                payload = self.backend.parse_input(utterance)
                result = normalize_response(payload, utterance)
            except (AIBackendError, ValueError) as exc:
                logger.warning(f"AI parsing failed, using rule-based parser: {exc}")
            else:
                if result.items:
                    logger.info(f"AI backend parsed {len(result.items)} item(s)")
                    return result
                logger.warning("AI backend returned no items, using rule-based parser")

        intent = self.rules.parse(utterance, now)
        logger.info(f"Rule-based parser classified input as {intent.type.value}")
        return ParseResult(items=[intent], raw_text=utterance, source="rules")

    def parse_document(self, text: str, filename: Optional[str] = None) -> ParseResult:
        """
        Extract every event, task and shopping item from a document's text.

        Raises:
            AIBackendError: If no backend is configured or the backend fails
        """
        if self.backend is None:
            raise AIBackendError("Document parsing requires the AI backend")
        payload = self.backend.parse_input(text, is_document=True, filename=filename)
        result = normalize_response(payload, text)
        logger.info(f"Parsed {len(result.items)} item(s) from {filename or 'document'}")
        return result
