# calheat/events.py
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

DOMAINS_LOADED = "domains_loaded"
MIN_DATE_REACHED = "min_date_reached"
MIN_DATE_NOT_REACHED = "min_date_not_reached"
MAX_DATE_REACHED = "max_date_reached"
MAX_DATE_NOT_REACHED = "max_date_not_reached"

Listener = Callable[..., Any]


class EventEmitter:
    """Synchronous name -> listeners dispatch.

    Listeners run in subscription order on the caller's thread; an exception
    raised by a listener propagates to the emitter's caller.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, name: str, fn: Listener) -> Callable[[], None]:
        """Subscribe `fn` to `name`; returns a callable that unsubscribes it."""
        if not callable(fn):
            raise TypeError(f"listener for {name!r} is not callable")
        self._listeners[name].append(fn)
        return lambda: self.off(name, fn)

    def off(self, name: str, fn: Listener | None = None) -> None:
        if fn is None:
            self._listeners.pop(name, None)
            return
        fns = self._listeners.get(name)
        if fns and fn in fns:
            fns.remove(fn)

    def emit(self, name: str, *args: Any) -> int:
        """Call every listener of `name` with `args`; returns how many ran."""
        fns = list(self._listeners.get(name, ()))
        for fn in fns:
            fn(*args)
        return len(fns)

    def clear(self) -> None:
        self._listeners.clear()
