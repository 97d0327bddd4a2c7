"""
Questions: one pending dialog per user
--------------------------------------

Each registered question gets a private intent registry (sharing the parent's slot
types) holding a single-slot intent named after the question, plus an optional
cancellation intent registered first so cancel phrases win.

Per user key the state is either idle, awaiting an answer to a question, or filling
a required slot (see slot_filling). The pending entry is always removed before an
answer is evaluated, so answer callbacks can ask a new question.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Optional, Union

from common.logging_config import LOGGER_NAME
from common.models import Intent, IntentSlot, Question
from common.utils import invoke_callback
from constants.types import QuestionSpec
from services.spelling import SpellingSource
from .dispatcher import Dispatcher
from .errors import ConfigurationError, QuestionNotFound
from .intents import IntentRegistry
from .slot_filling import SlotFill
from .slot_types import SlotTypeRegistry

logger = logging.getLogger(LOGGER_NAME)

CANCEL_INTENT = "CANCEL"
CANCEL_SLOT_TYPE = "NEVERMIND"
ANSWER_SLOT = "Slot"
JUST_THE_SLOT_UTTERANCE = ["{%s}" % ANSWER_SLOT]


class ScopedQuestion:
    """A question and the private sub-engine that matches its answers."""

    def __init__(
        self,
        question: Question,
        slot_types: SlotTypeRegistry,
        spelling: Optional[SpellingSource] = None,
        anchor_end: bool = False,
    ) -> None:
        self.question = question
        self.intents = IntentRegistry(slot_types, spelling=spelling, anchor_end=anchor_end)
        self.dispatcher = Dispatcher(self.intents)

        slot_types.get(question.slot_type)
        try:
            # Register the cancel intent first, so it matches first.
            if question.cancel_callback:
                self.intents.add(self._cancel_intent())
            if not self.intents.add(self._question_intent()):
                raise ConfigurationError(f"Question name {question.name!r} is reserved")
        except Exception:
            self.intents.clear()
            raise

    @property
    def name(self) -> str:
        return self.question.name

    def _question_intent(self) -> Intent:
        return Intent(
            name=self.question.name,
            callback=self.question.success_callback,
            slots=[IntentSlot(ANSWER_SLOT, self.question.slot_type)],
            utterances=list(self.question.utterances or JUST_THE_SLOT_UTTERANCE),
        )

    def _cancel_intent(self) -> Intent:
        return Intent(
            name=CANCEL_INTENT,
            callback=self.question.cancel_callback,
            slots=[IntentSlot(ANSWER_SLOT, CANCEL_SLOT_TYPE)],
            utterances=list(JUST_THE_SLOT_UTTERANCE),
        )

    async def ask(self, has_data: bool, data: Any) -> None:
        await invoke_callback(self.question.question_callback, has_data, data)

    async def answer(self, command: str, has_data: bool, data: Any) -> Optional[str]:
        """Returns the question name, CANCEL, or None when the reply is not an answer."""
        match = self.dispatcher.match(command, by_name=False)
        if match is None:
            return None
        await match.dispatch(has_data, data)
        return match.name

    async def fail(self, has_data: bool, data: Any) -> None:
        await invoke_callback(self.question.fail_callback, has_data, data)

    def close(self) -> None:
        self.intents.clear()


PendingDialog = Union[ScopedQuestion, SlotFill]


class QuestionEngine:
    def __init__(
        self,
        slot_types: SlotTypeRegistry,
        spelling: Optional[SpellingSource] = None,
        anchor_end: bool = False,
    ) -> None:
        self.slot_types = slot_types
        self.spelling = spelling
        self.anchor_end = anchor_end
        self._questions: Dict[str, ScopedQuestion] = {}
        self._pending: Dict[Hashable, PendingDialog] = {}

    # --------------- Registration ---------------
    def register(self, spec: Union[QuestionSpec, Question]) -> bool:
        question = spec if isinstance(spec, Question) else Question.from_spec(spec)
        if question.name == CANCEL_INTENT or question.name in self._questions:
            return False
        self._questions[question.name] = ScopedQuestion(
            question, self.slot_types, spelling=self.spelling, anchor_end=self.anchor_end
        )
        logger.debug("Registered question %s (%s)", question.name, question.slot_type)
        return True

    def deregister(self, name: str) -> bool:
        scoped = self._questions.pop(name, None)
        if scoped is None:
            return False
        scoped.close()
        for key in [k for k, v in self._pending.items() if v is scoped]:
            del self._pending[key]
        logger.debug("Deregistered question %s", name)
        return True

    def get(self, name: str) -> Optional[ScopedQuestion]:
        return self._questions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._questions

    # --------------- Per-user state ---------------
    def pending(self, key: Hashable) -> Optional[PendingDialog]:
        return self._pending.get(key)

    def set_pending(self, key: Hashable, dialog: PendingDialog) -> None:
        self._pending[key] = dialog

    def pop_pending(self, key: Hashable) -> Optional[PendingDialog]:
        return self._pending.pop(key, None)

    def forget_intent(self, intent_name: str) -> None:
        """Drop slot fills for an intent that no longer exists."""
        for key in [k for k, v in self._pending.items() if isinstance(v, SlotFill) and v.name == intent_name]:
            del self._pending[key]

    async def ask(self, name: str, key: Hashable, has_data: bool, data: Any) -> str:
        scoped = self._questions.get(name)
        if scoped is None:
            raise QuestionNotFound(name)
        self._pending[key] = scoped
        logger.debug("Asking %s to %r", name, key)
        await scoped.ask(has_data, data)
        return name
