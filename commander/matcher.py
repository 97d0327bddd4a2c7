"""
Utterance compilation and matching
----------------------------------

An utterance like "is {Color} the best color" becomes an anchored, case-insensitive
pattern with one capture group per placeholder. Each group pre-captures text using
its slot type's capture syntax; the slot type then validates/transforms the capture.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from common.models import Intent, IntentSlot
from services.spelling import SpellingSource
from .errors import UnknownSlotReference
from .slot_types import SlotTypeRegistry, evaluate_slot

# Lazy, non-global: each search looks at what is left of the utterance.
SLOT_RE = re.compile(r"{(\w+?)}")
BARE_SLOT_RE = re.compile(r"\s*{\w+?}\s*")
_WORD_SPLIT_RE = re.compile(r"(\w+)")
_WHITESPACE_RE = re.compile(r"\s+")
_BRACKETS_RE = re.compile(r"([\[\]()])")


@dataclass(frozen=True)
class CompiledMatcher:
    intent: Intent
    source_utterance: str
    pattern: "re.Pattern[str]"
    capture_order: List[IntentSlot]
    is_bare_slot: bool = False

    def check(self, command: str, slot_types: SlotTypeRegistry) -> Optional[Dict[str, Any]]:
        """
        Match a cleaned command.
        Returns slot name -> value ({} for slotless utterances), or None if no match.
        """
        m = self.pattern.match(command)
        if not m:
            return None
        if not self.capture_order:
            return {}

        values: Dict[str, Any] = {}
        for i, slot in enumerate(self.capture_order):
            ok, value = evaluate_slot(slot_types.get(slot.type), m.group(_group_name(i)))
            if not ok:
                return None
            values[slot.name] = value
        return values


def _group_name(i: int) -> str:
    return f"slot{i}"


def _literal_to_regexp(text: str, spelling: Optional[SpellingSource]) -> str:
    """Broaden known misspellings, collapse whitespace, escape brackets."""
    out: List[str] = []
    seen: Dict[str, str] = {}
    for i, piece in enumerate(_WORD_SPLIT_RE.split(text)):
        if not piece:
            continue
        if i % 2:  # a word
            key = piece.lower()
            if key not in seen:
                alt = spelling.alternation(piece) if spelling else None
                seen[key] = alt or ""
            out.append(seen[key] or piece)
        else:
            piece = _WHITESPACE_RE.sub(r"\\s+", piece)
            out.append(_BRACKETS_RE.sub(r"\\\1", piece))
    return "".join(out)


def compile_utterance(
    intent: Intent,
    utterance: str,
    slot_types: SlotTypeRegistry,
    spelling: Optional[SpellingSource] = None,
    anchor_end: bool = False,
) -> CompiledMatcher:
    """Build the matcher for one of an intent's utterances."""
    names = intent.slot_names
    parts: List[str] = []
    capture_order: List[IntentSlot] = []
    # Commands are trimmed before matching, so the template is too.
    rest = utterance.strip()

    while True:
        m = SLOT_RE.search(rest)
        if not m:
            break
        slot_name = m.group(1)
        if slot_name not in names:
            raise UnknownSlotReference(intent.name, slot_name, names)
        slot = intent.slots[names.index(slot_name)]
        slot_type = slot_types.get(slot.type)

        parts.append(_literal_to_regexp(rest[:m.start()], spelling))
        parts.append(f"(?P<{_group_name(len(capture_order))}>{slot_type.capture_syntax})")
        capture_order.append(slot)
        rest = rest[m.end():]
    parts.append(_literal_to_regexp(rest, spelling))

    source = r"^\s*" + "".join(parts)
    if anchor_end:
        source += r"\s*$"
    else:
        # Trailing text is allowed, but not the rest of a word ("test" != "testing").
        source += r"(?!\w)"

    return CompiledMatcher(
        intent=intent,
        source_utterance=utterance,
        pattern=re.compile(source, re.IGNORECASE),
        capture_order=capture_order,
        is_bare_slot=bool(BARE_SLOT_RE.fullmatch(utterance)),
    )
