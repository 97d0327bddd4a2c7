from __future__ import annotations

from typing import Iterable, Optional


class CommanderError(Exception):
    """Base class for everything the commander raises on purpose."""


# --------------- Configuration (programmer) errors ---------------
class ConfigurationError(CommanderError):
    pass


class DuplicateSlotType(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Slot type {name!r} already exists")
        self.name = name


class SlotTypeInUse(ConfigurationError):
    def __init__(self, name: str, users: int) -> None:
        super().__init__(f"Slot type {name!r} is still used by {users} intent slot(s)")
        self.name = name
        self.users = users


class UnknownSlotType(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Slot type {name!r} does not exist")
        self.name = name


class UnknownSlotReference(ConfigurationError):
    def __init__(self, intent: str, slot: str, valid: Iterable[str]) -> None:
        self.intent = intent
        self.slot = slot
        self.valid = list(valid)
        super().__init__(f"Slot {slot!r} not included in slots {self.valid} for {intent}")


# --------------- Runtime outcomes ---------------
class CommandNotMatched(CommanderError):
    """A command matched nothing. `question` is set when it was a failed answer."""

    def __init__(self, command: str, question: Optional[str] = None) -> None:
        self.command = command
        self.question = question
        if question:
            msg = f"{command!r} is not a valid answer to {question}"
        else:
            msg = f"No intent matched {command!r}"
        super().__init__(msg)


class QuestionNotFound(CommanderError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Question {name!r} is not registered")
        self.name = name
