## common/models.py`

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from constants.types import IntentSlotSpec, IntentSpec, QuestionSpec, SlotTypeSpec

DEFAULT_CAPTURE = ".+"


class MatcherKind(str, Enum):
    STRING = "string"
    STRING_SET = "string_set"
    PATTERN = "pattern"
    FUNCTION = "function"


@dataclass(frozen=True)
class SlotType:
    name: str
    kind: MatcherKind
    # str | frozenset[str] | re.Pattern | Callable[[str], Any], depending on kind
    matcher: Any
    base_matcher: Optional[str] = None

    @property
    def capture_syntax(self) -> str:
        return self.base_matcher or DEFAULT_CAPTURE

    @classmethod
    def from_spec(cls, spec: SlotTypeSpec) -> "SlotType":
        """Classify a raw matcher into its kind. Strings are lower-cased here, once."""
        name = spec["type"]
        matcher = spec["matcher"]
        base = spec.get("base_matcher", spec.get("baseMatcher"))

        if isinstance(matcher, str):
            return cls(name, MatcherKind.STRING, matcher.lower(), base)
        if isinstance(matcher, re.Pattern):
            return cls(name, MatcherKind.PATTERN, matcher, base)
        if isinstance(matcher, (list, tuple, set, frozenset)):
            return cls(name, MatcherKind.STRING_SET, frozenset(m.lower() for m in matcher), base)
        if callable(matcher):
            return cls(name, MatcherKind.FUNCTION, matcher, base)
        raise TypeError(f"Slot type {name!r} has an unsupported matcher: {matcher!r}")


@dataclass
class IntentSlot:
    name: str
    type: str
    required: bool = False
    # Called with (data?) when this slot is missing and must be asked for.
    prompt: Optional[Callable[..., Any]] = None
    # Dialog templates tried before taking a reply verbatim; reference {<name>}.
    utterances: Optional[List[str]] = None

    @classmethod
    def from_spec(cls, spec: Union[IntentSlotSpec, "IntentSlot"]) -> "IntentSlot":
        if isinstance(spec, IntentSlot):
            return spec
        return cls(
            name=spec["name"],
            type=spec["type"],
            required=bool(spec.get("required", False)),
            prompt=spec.get("prompt"),
            utterances=list(spec["utterances"]) if spec.get("utterances") else None,
        )


@dataclass
class Intent:
    name: str
    callback: Callable[..., Any]
    slots: List[IntentSlot] = field(default_factory=list)
    utterances: List[str] = field(default_factory=list)

    @property
    def slot_names(self) -> List[str]:
        return [s.name for s in self.slots]

    @property
    def slot_type_names(self) -> List[str]:
        return [s.type for s in self.slots]

    def missing_required(self, values: dict) -> List[IntentSlot]:
        return [s for s in self.slots if s.required and values.get(s.name) is None]

    def ordered(self, values: dict) -> List[Any]:
        """Slot values in declaration order; None for slots nothing filled."""
        return [values.get(s.name) for s in self.slots]

    @classmethod
    def from_spec(cls, spec: IntentSpec) -> "Intent":
        utterances: List[str] = []
        for u in spec.get("utterances") or []:
            if u not in utterances:
                utterances.append(u)
        return cls(
            name=spec["intent"],
            callback=spec["callback"],
            slots=[IntentSlot.from_spec(s) for s in spec.get("slots") or []],
            utterances=utterances,
        )


@dataclass
class Question:
    name: str
    slot_type: str
    question_callback: Callable[..., Any]
    success_callback: Callable[..., Any]
    fail_callback: Callable[..., Any]
    cancel_callback: Optional[Callable[..., Any]] = None
    utterances: Optional[List[str]] = None

    @classmethod
    def from_spec(cls, spec: QuestionSpec) -> "Question":
        return cls(
            name=spec["name"],
            slot_type=spec.get("slot_type") or spec["slotType"],
            question_callback=spec.get("question_callback") or spec["questionCallback"],
            success_callback=spec.get("success_callback") or spec["successCallback"],
            fail_callback=spec.get("fail_callback") or spec["failCallback"],
            cancel_callback=spec.get("cancel_callback") or spec.get("cancelCallback"),
            utterances=list(spec["utterances"]) if spec.get("utterances") else None,
        )


# --------------- Requests ---------------
class _Request(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    data: Any = None
    user_id: Optional[Union[str, int]] = Field(default=None, alias="userId")

    @property
    def has_data(self) -> bool:
        """True only when the caller passed `data`, even if it is None or falsy."""
        return "data" in self.model_fields_set

    @property
    def callback_data(self) -> Any:
        return self.data


class CommandRequest(_Request):
    command: str

    @classmethod
    def from_call(cls, *args, **kwargs) -> "CommandRequest":
        """Accepts (command), (data, command), (request dict / model) or keywords."""
        if len(args) == 1 and isinstance(args[0], CommandRequest):
            return args[0]
        if len(args) == 1 and isinstance(args[0], dict) and not kwargs:
            return cls.model_validate(args[0])
        if len(args) == 2:
            return cls(data=args[0], command=args[1], **kwargs)
        if len(args) == 1:
            return cls(command=args[0], **kwargs)
        if args:
            raise TypeError(f"handle_command() takes at most 2 positional arguments ({len(args)} given)")
        return cls(**kwargs)


class AskRequest(_Request):
    question: str

    @classmethod
    def from_call(cls, *args, **kwargs) -> "AskRequest":
        if len(args) == 1 and isinstance(args[0], AskRequest):
            return args[0]
        if len(args) == 1 and isinstance(args[0], dict) and not kwargs:
            return cls.model_validate(args[0])
        if len(args) == 1:
            return cls(question=args[0], **kwargs)
        if args:
            raise TypeError(f"ask() takes at most 1 positional argument ({len(args)} given)")
        return cls(**kwargs)
