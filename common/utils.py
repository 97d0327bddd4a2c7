## common/utils.py`

import asyncio
import json
import re
from typing import Any, Callable, Hashable, Optional

_SMART_SINGLE_RE = re.compile("[‘’]")
_SMART_DOUBLE_RE = re.compile("[“”]")


class _AnonymousUser:
    """Key for commands that carry no user id. Never equal to any real id."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<anonymous user>"


ANONYMOUS_USER = _AnonymousUser()


def user_key(user_id: Optional[Hashable]) -> Hashable:
    return ANONYMOUS_USER if user_id is None else user_id


def clean_command(command: str) -> str:
    """Replace smart quotes with their ASCII equivalents and trim."""
    command = _SMART_SINGLE_RE.sub("'", command)
    command = _SMART_DOUBLE_RE.sub('"', command)
    return command.strip()


def truncate(s: Any, limit: int = 200) -> str:
    """Safely truncate long values for logs (keeps unicode; appends ellipsis)."""
    if not isinstance(s, str):
        try:
            s = json.dumps(s, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(s)
    return s if len(s) <= limit else (s[:limit] + " …[truncated]")


async def invoke_callback(callback: Optional[Callable[..., Any]], has_data: bool, data: Any, *values: Any) -> Any:
    """Call `callback(data, *values)` or `callback(*values)`; awaits coroutine results."""
    if callback is None:
        return None
    args = (data, *values) if has_data else values
    res = callback(*args)
    if asyncio.iscoroutine(res):
        res = await res
    return res


__all__ = [
    "ANONYMOUS_USER",
    "user_key",
    "clean_command",
    "truncate",
    "invoke_callback",
]
