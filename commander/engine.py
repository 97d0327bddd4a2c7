"""
Natural Language Commander: public entry point
----------------------------------------------

Exports:
  - NaturalLanguageCommander
      add_slot_type / remove_slot_type
      register_intent / deregister_intent / add_utterance / remove_utterance
      register_question / deregister_question / register_not_found
      await handle_command(...)    # -> matched intent or question name
      await ask(...)               # -> question name
      clone() / from_config()
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Hashable, Optional, Union

from common.config_loader import cfg_get, load_config
from common.logging_config import LOGGER_NAME, configure_logging
from common.models import CommandRequest, AskRequest, Intent, Question, SlotType
from common.utils import clean_command, invoke_callback, truncate, user_key
from constants.standard_slots import DEFAULT_TIMEZONE, standard_slot_types
from constants.types import IntentSpec, QuestionSpec, SlotTypeSpec
from services.spelling import MisspellingIndex, NoSpelling, SpellingSource
from .dispatcher import Dispatcher, Match
from .errors import CommandNotMatched
from .intents import IntentRegistry
from .questions import CANCEL_INTENT, QuestionEngine, ScopedQuestion
from .slot_filling import SlotFill, SlotFiller
from .slot_types import SlotTypeRegistry

logger = logging.getLogger(LOGGER_NAME)


class NaturalLanguageCommander:
    """
    Holds registered slot types, intents and questions for one bot.

    Passing `slot_types` shares an existing registry instead of creating one seeded
    with the standard slot types; that is how sub-engines are scoped.
    """

    def __init__(
        self,
        slot_types: Optional[SlotTypeRegistry] = None,
        spelling: Optional[SpellingSource] = None,
        anchor_end: bool = False,
        timezone: str = DEFAULT_TIMEZONE,
        cancel_phrases=None,
    ) -> None:
        if slot_types is None:
            slot_types = SlotTypeRegistry()
            for spec in standard_slot_types(timezone, cancel_phrases):
                slot_types.add(spec)
        self.slot_types = slot_types
        self.spelling: SpellingSource = MisspellingIndex() if spelling is None else spelling
        self.anchor_end = anchor_end

        self.intents = IntentRegistry(self.slot_types, spelling=self.spelling, anchor_end=anchor_end)
        self.dispatcher = Dispatcher(self.intents)
        self.questions = QuestionEngine(self.slot_types, spelling=self.spelling, anchor_end=anchor_end)
        self.slot_filler = SlotFiller(self.slot_types, spelling=self.spelling, anchor_end=anchor_end)
        self._not_found: Optional[Callable[..., Any]] = None

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "NaturalLanguageCommander":
        cfg = load_config() if config is None else config
        configure_logging(cfg_get(cfg, "logging.level", "INFO"))

        spelling: SpellingSource
        if cfg_get(cfg, "matching.misspellings", True):
            spelling = MisspellingIndex()
            mistakes_path = cfg_get(cfg, "matching.mistakes_path")
            if mistakes_path:
                spelling.load_yaml(mistakes_path)
        else:
            spelling = NoSpelling()

        return cls(
            spelling=spelling,
            anchor_end=bool(cfg_get(cfg, "matching.anchor_end", False)),
            timezone=cfg_get(cfg, "slots.timezone", DEFAULT_TIMEZONE),
            cancel_phrases=cfg_get(cfg, "slots.cancel_phrases"),
        )

    def clone(self) -> "NaturalLanguageCommander":
        """A fresh engine with no intents, sharing this engine's slot types."""
        return type(self)(slot_types=self.slot_types, spelling=self.spelling, anchor_end=self.anchor_end)

    # --------------- Slot types ---------------
    def add_slot_type(self, spec: Union[SlotTypeSpec, SlotType]) -> None:
        self.slot_types.add(spec)

    def remove_slot_type(self, name: str) -> None:
        self.slot_types.remove(name)

    # --------------- Intents ---------------
    def register_intent(self, spec: Union[IntentSpec, Intent]) -> bool:
        """Returns False if the name is already taken by an intent, a question or CANCEL."""
        intent = spec if isinstance(spec, Intent) else Intent.from_spec(spec)
        if intent.name == CANCEL_INTENT or intent.name in self.intents or intent.name in self.questions:
            return False
        self.slot_filler.prepare(intent)
        try:
            return self.intents.add(intent)
        except Exception:
            self.slot_filler.forget(intent.name)
            raise

    def deregister_intent(self, name: str) -> bool:
        if not self.intents.remove(name):
            return False
        self.slot_filler.forget(name)
        self.questions.forget_intent(name)
        return True

    def add_utterance(self, intent_name: str, utterance: str) -> bool:
        return self.intents.add_utterance(intent_name, utterance)

    def remove_utterance(self, intent_name: str, utterance: str) -> bool:
        return self.intents.remove_utterance(intent_name, utterance)

    # --------------- Questions ---------------
    def register_question(self, spec: Union[QuestionSpec, Question]) -> bool:
        question = spec if isinstance(spec, Question) else Question.from_spec(spec)
        if question.name == CANCEL_INTENT or question.name in self.intents:
            return False
        return self.questions.register(question)

    def deregister_question(self, name: str) -> bool:
        return self.questions.deregister(name)

    def register_not_found(self, callback: Callable[..., Any]) -> None:
        self._not_found = callback

    # --------------- Commands ---------------
    async def handle_command(self, *args, **kwargs) -> str:
        """
        handle_command(command) / handle_command(data, command) /
        handle_command({"command": ..., "data": ..., "user_id": ...})

        Returns the name of the matched intent or answered question.
        Raises CommandNotMatched when nothing matched.
        """
        request = CommandRequest.from_call(*args, **kwargs)
        command = clean_command(request.command)
        has_data, data = request.has_data, request.callback_data
        key = user_key(request.user_id)

        # Never resolve on the caller's stack frame.
        await asyncio.sleep(0)

        # Back to idle before anything runs, so callbacks can ask again.
        pending = self.questions.pop_pending(key)

        if isinstance(pending, SlotFill):
            return await self._continue_fill(key, pending, command, has_data, data)

        # A pending question owns the reply; ordinary intents are not consulted.
        if isinstance(pending, ScopedQuestion):
            answered = await pending.answer(command, has_data, data)
            if answered is not None:
                logger.debug("Answered %s with %s", pending.name, answered)
                return answered
            logger.info("Bad answer to %s: %s", pending.name, truncate(command))
            await pending.fail(has_data, data)
            raise CommandNotMatched(command, question=pending.name)

        match = self.dispatcher.match(command)
        if match is not None:
            return await self._dispatch(key, match, has_data, data)

        logger.info("No intent matched: %s", truncate(command))
        await invoke_callback(self._not_found, has_data, data)
        raise CommandNotMatched(command)

    async def ask(self, *args, **kwargs) -> str:
        """
        ask(question) / ask({"question": ..., "data": ..., "user_id": ...})

        Returns the question name. Raises QuestionNotFound.
        """
        request = AskRequest.from_call(*args, **kwargs)
        await asyncio.sleep(0)
        return await self.questions.ask(
            request.question, user_key(request.user_id), request.has_data, request.callback_data
        )

    async def _dispatch(self, key: Hashable, match: Match, has_data: bool, data: Any) -> str:
        pending = SlotFill(match.intent, dict(match.values))
        if pending.next_slot is not None:
            self.questions.set_pending(key, pending)
            await self.slot_filler.prompt(pending, has_data, data)
            return match.name
        await match.dispatch(has_data, data)
        return match.name

    async def _continue_fill(self, key: Hashable, pending: SlotFill, command: str, has_data: bool, data: Any) -> str:
        self.slot_filler.fill(pending, command)
        if pending.next_slot is not None:
            self.questions.set_pending(key, pending)
            await self.slot_filler.prompt(pending, has_data, data)
            return pending.name
        intent = pending.intent
        await invoke_callback(intent.callback, has_data, data, *intent.ordered(pending.values))
        return pending.name
