from __future__ import annotations

from collections import defaultdict
from typing import Callable, DefaultDict

from ihl.contracts import LineupEvent

LineupHandler = Callable[[LineupEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: list[LineupHandler] = []
        self._counter: DefaultDict[str, int] = defaultdict(int)

    def subscribe(self, handler: LineupHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: LineupEvent) -> None:
        self._counter[event.scope] += 1
        for handler in self._handlers:
            handler(event)

    def emitted_count(self, scope: str | None = None) -> int:
        if scope is None:
            return sum(self._counter.values())
        return self._counter[scope]
