from __future__ import annotations
import re
from typing import TypedDict, Dict, Callable, Any, List, Union

SlotMatcher = Union[str, List[str], "re.Pattern[str]", Callable[[str], Any]]

class SlotTypeSpec(TypedDict, total=False):
    type: str
    matcher: SlotMatcher
    base_matcher: str

class IntentSlotSpec(TypedDict, total=False):
    name: str
    type: str
    required: bool
    prompt: Callable[..., Any]
    utterances: List[str]

class IntentSpec(TypedDict, total=False):
    intent: str
    slots: List[IntentSlotSpec]
    utterances: List[str]
    callback: Callable[..., Any]

class QuestionSpec(TypedDict, total=False):
    name: str
    slot_type: str
    utterances: List[str]
    question_callback: Callable[..., Any]
    success_callback: Callable[..., Any]
    fail_callback: Callable[..., Any]
    cancel_callback: Callable[..., Any]

MistakeTable = Dict[str, List[str]]
