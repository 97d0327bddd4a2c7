"""
Progressive filling of required slots.

When a command matches an intent but leaves required slots empty, the user is
prompted for each missing slot in declaration order. A reply is first tried against
the slot's own dialog utterances (default: just the slot); if none match, the whole
reply is taken verbatim as the slot's value.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from common.logging_config import LOGGER_NAME
from common.models import Intent, IntentSlot
from common.utils import invoke_callback
from services.spelling import SpellingSource
from .matcher import CompiledMatcher, compile_utterance
from .slot_types import SlotTypeRegistry

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class SlotFill:
    """A partially filled intent waiting on the user's next reply."""

    intent: Intent
    values: Dict[str, Any] = field(default_factory=dict)

    @property
    def next_slot(self) -> Optional[IntentSlot]:
        missing = self.intent.missing_required(self.values)
        return missing[0] if missing else None

    @property
    def name(self) -> str:
        return self.intent.name


class SlotFiller:
    def __init__(
        self,
        slot_types: SlotTypeRegistry,
        spelling: Optional[SpellingSource] = None,
        anchor_end: bool = False,
    ) -> None:
        self.slot_types = slot_types
        self.spelling = spelling
        self.anchor_end = anchor_end
        self._matchers: Dict[Tuple[str, str], List[CompiledMatcher]] = {}

    def prepare(self, intent: Intent) -> None:
        """Compile dialog utterances for the intent's required slots."""
        compiled: Dict[Tuple[str, str], List[CompiledMatcher]] = {}
        for slot in intent.slots:
            if not slot.required:
                continue
            dialog = Intent(
                name=intent.name,
                callback=intent.callback,
                slots=[slot],
                utterances=slot.utterances or ["{%s}" % slot.name],
            )
            compiled[(intent.name, slot.name)] = [
                compile_utterance(dialog, u, self.slot_types, self.spelling, self.anchor_end)
                for u in dialog.utterances
            ]
        self._matchers.update(compiled)

    def forget(self, intent_name: str) -> None:
        for key in [k for k in self._matchers if k[0] == intent_name]:
            del self._matchers[key]

    def fill(self, pending: SlotFill, command: str) -> IntentSlot:
        """Fill the next missing slot from a reply. Returns the slot that was filled."""
        slot = pending.next_slot
        if slot is None:
            raise ValueError(f"{pending.name} has no missing required slots")

        value = None
        for matcher in self._matchers.get((pending.name, slot.name), []):
            values = matcher.check(command, self.slot_types)
            if values is not None and values.get(slot.name) is not None:
                value = values[slot.name]
                break
        if value is None:
            value = command
        pending.values[slot.name] = value
        logger.debug("Filled %s.%s", pending.name, slot.name)
        return slot

    async def prompt(self, pending: SlotFill, has_data: bool, data: Any) -> Optional[IntentSlot]:
        """Ask for the next missing slot, if there is one."""
        slot = pending.next_slot
        if slot is not None:
            await invoke_callback(slot.prompt, has_data, data)
        return slot
