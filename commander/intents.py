from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from common.logging_config import LOGGER_NAME
from common.models import Intent
from services.spelling import SpellingSource
from .matcher import CompiledMatcher, compile_utterance
from .slot_types import SlotTypeRegistry

logger = logging.getLogger(LOGGER_NAME)


class IntentRegistry:
    """
    Intents plus their compiled matchers, in registration order.
    Matcher order is priority order: utterances added later are tried later.
    """

    def __init__(
        self,
        slot_types: SlotTypeRegistry,
        spelling: Optional[SpellingSource] = None,
        anchor_end: bool = False,
    ) -> None:
        self.slot_types = slot_types
        self.spelling = spelling
        self.anchor_end = anchor_end
        self._intents: Dict[str, Intent] = {}
        self._matchers: List[CompiledMatcher] = []

    def _compile(self, intent: Intent, utterance: str) -> CompiledMatcher:
        return compile_utterance(
            intent,
            utterance,
            self.slot_types,
            spelling=self.spelling,
            anchor_end=self.anchor_end,
        )

    def add(self, intent: Intent) -> bool:
        """Returns False if an intent with the same name already exists."""
        if intent.name in self._intents:
            return False
        for s in intent.slots:
            self.slot_types.get(s.type)
        # Compile everything first so a bad utterance leaves no partial state behind.
        compiled = [self._compile(intent, u) for u in intent.utterances]
        self._intents[intent.name] = intent
        self._matchers.extend(compiled)
        self.slot_types.retain(intent.slot_type_names)
        logger.debug("Registered intent %s with %d utterance(s)", intent.name, len(compiled))
        return True

    def remove(self, name: str) -> bool:
        intent = self._intents.pop(name, None)
        if intent is None:
            return False
        self._matchers = [m for m in self._matchers if m.intent is not intent]
        self.slot_types.release(intent.slot_type_names)
        logger.debug("Deregistered intent %s", name)
        return True

    def add_utterance(self, name: str, utterance: str) -> bool:
        intent = self._intents.get(name)
        if intent is None or utterance in intent.utterances:
            return False
        matcher = self._compile(intent, utterance)
        intent.utterances.append(utterance)
        self._matchers.append(matcher)
        return True

    def remove_utterance(self, name: str, utterance: str) -> bool:
        intent = self._intents.get(name)
        if intent is None or utterance not in intent.utterances:
            return False
        intent.utterances.remove(utterance)
        self._matchers = [
            m for m in self._matchers
            if not (m.intent is intent and m.source_utterance == utterance)
        ]
        return True

    def get(self, name: str) -> Optional[Intent]:
        return self._intents.get(name)

    def clear(self) -> None:
        for intent in list(self._intents.values()):
            self.remove(intent.name)

    @property
    def matchers(self) -> List[CompiledMatcher]:
        return list(self._matchers)

    def __contains__(self, name: object) -> bool:
        return name in self._intents

    def __iter__(self) -> Iterator[Intent]:
        return iter(list(self._intents.values()))

    def __len__(self) -> int:
        return len(self._intents)
