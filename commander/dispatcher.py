from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from common.logging_config import LOGGER_NAME
from common.models import Intent
from common.utils import invoke_callback, truncate
from .intents import IntentRegistry

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class Match:
    intent: Intent
    values: Dict[str, Any] = field(default_factory=dict)
    utterance: Optional[str] = None

    @property
    def name(self) -> str:
        return self.intent.name

    @property
    def ordered_values(self) -> List[Any]:
        return self.intent.ordered(self.values)

    async def dispatch(self, has_data: bool, data: Any) -> Any:
        return await invoke_callback(self.intent.callback, has_data, data, *self.ordered_values)


class Dispatcher:
    def __init__(self, intents: IntentRegistry) -> None:
        self.intents = intents

    def match(self, command: str, by_name: bool = True) -> Optional[Match]:
        """
        First match wins, in registration order. A match on an utterance that is just
        "{Slot}" does not stop the scan: a later, more specific utterance wins over it.
        """
        bare_match: Optional[Match] = None

        for matcher in self.intents.matchers:
            values = matcher.check(command, self.intents.slot_types)
            if values is None:
                continue
            found = Match(matcher.intent, values, matcher.source_utterance)
            if not matcher.is_bare_slot:
                logger.debug("Matched %s via %r", found.name, matcher.source_utterance)
                return found
            if bare_match is None:
                bare_match = found

        if bare_match is not None:
            logger.debug("Matched %s via bare slot utterance", bare_match.name)
            return bare_match

        # The intent name works as a keyword.
        intent = self.intents.get(command) if by_name else None
        if intent is not None:
            logger.debug("Matched %s by name", intent.name)
            return Match(intent)

        logger.debug("No match for %s", truncate(command))
        return None
