from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from common.logging_config import LOGGER_NAME
from common.models import MatcherKind, SlotType
from .errors import DuplicateSlotType, SlotTypeInUse, UnknownSlotType

logger = logging.getLogger(LOGGER_NAME)


class SlotTypeRegistry:
    """Name -> SlotType table, shared by an engine and the sub-engines it scopes."""

    def __init__(self) -> None:
        self._types: Dict[str, SlotType] = {}
        self._users: Counter = Counter()

    def add(self, spec: Union[dict, SlotType]) -> SlotType:
        slot_type = spec if isinstance(spec, SlotType) else SlotType.from_spec(spec)
        # Don't allow overwriting slot types.
        if slot_type.name in self._types:
            raise DuplicateSlotType(slot_type.name)
        self._types[slot_type.name] = slot_type
        logger.debug("Added slot type %s (%s)", slot_type.name, slot_type.kind.value)
        return slot_type

    def remove(self, name: str) -> None:
        if name not in self._types:
            raise UnknownSlotType(name)
        if self._users[name] > 0:
            raise SlotTypeInUse(name, self._users[name])
        del self._types[name]
        self._users.pop(name, None)
        logger.debug("Removed slot type %s", name)

    def get(self, name: str) -> SlotType:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownSlotType(name) from None

    def retain(self, names: Iterable[str]) -> None:
        self._users.update(names)

    def release(self, names: Iterable[str]) -> None:
        for name in names:
            if self._users[name] > 0:
                self._users[name] -= 1

    def users(self, name: str) -> int:
        return self._users[name]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


# --------------- Evaluation ---------------
def _is_value(value: Any) -> bool:
    # 0, False and other falsy non-strings are real values.
    return value is not None and value != ""


def evaluate_slot(slot_type: SlotType, text: Optional[str]) -> Tuple[bool, Any]:
    """
    Check captured text against a slot type.
    Returns (matched, value); value is the transformed slot value on a match.
    """
    if text is None:
        return False, None
    kind = slot_type.kind

    if kind is MatcherKind.STRING:
        return (text.lower() == slot_type.matcher), text
    if kind is MatcherKind.STRING_SET:
        return (text.lower() in slot_type.matcher), text
    if kind is MatcherKind.PATTERN:
        return (slot_type.matcher.search(text) is not None), text
    if kind is MatcherKind.FUNCTION:
        value = slot_type.matcher(text)
        return _is_value(value), value
    raise AssertionError(f"unhandled matcher kind {kind!r}")
