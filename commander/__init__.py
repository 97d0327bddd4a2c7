from .engine import NaturalLanguageCommander
from .errors import (
    CommanderError,
    ConfigurationError,
    DuplicateSlotType,
    SlotTypeInUse,
    UnknownSlotType,
    UnknownSlotReference,
    CommandNotMatched,
    QuestionNotFound,
)
from .questions import CANCEL_INTENT

__all__ = [
    "NaturalLanguageCommander",
    "CommanderError",
    "ConfigurationError",
    "DuplicateSlotType",
    "SlotTypeInUse",
    "UnknownSlotType",
    "UnknownSlotReference",
    "CommandNotMatched",
    "QuestionNotFound",
    "CANCEL_INTENT",
]
