# Standard slot types, registered on every new engine.
from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

from .types import SlotTypeSpec

DEFAULT_TIMEZONE = "America/Los_Angeles"

DATE_FORMATS = [
    "%m/%d/%Y",      # M/D/YYYY
    "%m-%d-%Y",      # M-D-YYYY
    "%b %d %Y",      # MMM D YYYY
    "%b %d, %Y",     # MMM D, YYYY
    "%B %d %Y",      # MMMM D YYYY
    "%B %d, %Y",     # MMMM D, YYYY
    "%Y-%m-%d",      # YYYY-M-D
]

CANCEL_PHRASES = [
    "nevermind",
    "never mind",
    "nvm",
    "cancel",
    "forget it",
    "forget about it",
    "stop",
]

_NUMBER_RE = re.compile(r"[+-]?(?:\d{1,3}(?:,\d{3})+|\d*)(?:\.\d+)?")
_CURRENCY_RE = re.compile(r"([+-]?)\s*[$€£¥]?\s*(.+)")


def parse_number(text: str) -> Optional[Union[int, float]]:
    """'9,000.01' -> 9000.01, '0' -> 0. None when the text is not a plain number."""
    t = text.strip()
    if not _NUMBER_RE.fullmatch(t) or not re.search(r"\d", t):
        return None
    digits = t.replace(",", "")
    if "." not in digits:
        return int(digits)
    value = float(digits)
    if not math.isfinite(value):
        return None
    return value


def parse_currency(text: str) -> Optional[float]:
    m = _CURRENCY_RE.fullmatch(text.strip())
    if not m:
        return None
    amount = parse_number(m.group(2))
    if amount is None or m.group(2).lstrip()[:1] in ("+", "-"):
        return None
    value = round(float(amount), 2)
    return -value if m.group(1) == "-" else value


def make_date_parser(timezone: str = DEFAULT_TIMEZONE):
    tz = ZoneInfo(timezone)

    def parse_date(text: str) -> Optional[date]:
        t = text.strip()
        relative = t.lower()
        # Relative dates.
        if relative in ("today", "tomorrow", "yesterday"):
            today = datetime.now(tz).date()
            if relative == "tomorrow":
                return today + timedelta(days=1)
            if relative == "yesterday":
                return today - timedelta(days=1)
            return today

        # Specific dates.
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(t, fmt).date()
            except ValueError:
                continue
        return None

    return parse_date


def _identity(text: str) -> Any:
    return text


def standard_slot_types(
    timezone: str = DEFAULT_TIMEZONE,
    cancel_phrases: Optional[Iterable[str]] = None,
) -> List[SlotTypeSpec]:
    return [
        {"type": "STRING", "matcher": _identity},
        {"type": "WORD", "matcher": re.compile(r"^\w+$"), "base_matcher": r"\w+"},
        {"type": "NUMBER", "matcher": parse_number},
        {"type": "CURRENCY", "matcher": parse_currency},
        {"type": "DATE", "matcher": make_date_parser(timezone)},
        # Names start with @.
        {"type": "SLACK_NAME", "matcher": re.compile(r"^@\w+", re.I), "base_matcher": r"@\w+"},
        # Rooms start with #, but names work too.
        {"type": "SLACK_ROOM", "matcher": re.compile(r"^[#@]\w+", re.I), "base_matcher": r"[#@]\w+"},
        {"type": "NEVERMIND", "matcher": list(cancel_phrases or CANCEL_PHRASES)},
    ]
