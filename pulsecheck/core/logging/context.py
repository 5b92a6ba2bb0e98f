from __future__ import annotations

import contextvars
from typing import Any, Dict, Optional

_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("log_context", default={})


def get_context() -> Dict[str, Any]:
    return dict(_context.get())


def bind(**values: Any) -> None:
    current = dict(_context.get())
    current.update({k: v for k, v in values.items() if v is not None})
    _context.set(current)


def unbind(*keys: str) -> None:
    current = dict(_context.get())
    for k in keys:
        current.pop(k, None)
    _context.set(current)


class context(object):
    """Bind values for the duration of a ``with`` block.

    Safe across ``await``: each asyncio task runs in its own copy of the
    context, so a probe cycle's fields never leak into another task.
    """

    def __init__(self, **values: Any) -> None:
        self._values = values
        self._token: Optional[contextvars.Token[Dict[str, Any]]] = None

    def __enter__(self) -> Dict[str, Any]:
        current = dict(_context.get())
        current.update({k: v for k, v in self._values.items() if v is not None})
        self._token = _context.set(current)
        return current

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._token is not None:
            _context.reset(self._token)
            self._token = None
        return False


def cycle_context(url: str, generation: int, cycle: int) -> context:
    """Context for one probe cycle of a monitor."""
    return context(url=url, generation=generation, cycle=cycle)
