import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Set

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventDispatcher:
    """
    Maps event names to listeners.

    Listeners run synchronously, in the order they were added. Coroutine
    listeners are scheduled on the running loop and not awaited.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._pending: Set[asyncio.Task] = set()

    def on(self, event_name: str, listener: Listener) -> None:
        self._listeners[event_name].append(listener)

    def off(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, event_name: str) -> List[Listener]:
        return list(self._listeners.get(event_name, []))

    def emit(self, event_name: str, *args: Any) -> int:
        """Call every listener of event_name with args, returning how many ran"""
        called = 0
        for listener in self.listeners(event_name):
            called += 1
            try:
                result = listener(*args)
            except Exception:
                logger.exception(f"Listener for event {event_name} failed")
                continue
            if inspect.isawaitable(result):
                self._schedule(event_name, result)
        return called

    def _schedule(self, event_name: str, awaitable) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop in this thread, so nothing could run the coroutine later
            asyncio.run(self._run(event_name, awaitable))
            return
        task = loop.create_task(self._run(event_name, awaitable))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _run(event_name: str, awaitable) -> None:
        try:
            await awaitable
        except Exception:
            logger.exception(f"Async listener for event {event_name} failed")
