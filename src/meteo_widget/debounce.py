"""Debouncing of handlers on the asyncio event loop."""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class Debouncer:
    """Collapse bursts of calls into one delayed call with the latest arguments.

    Every call re-arms a timer on the running event loop. When ``delay_ms``
    milliseconds pass without another call, ``func`` is invoked once with the
    arguments of the last call. Coroutine functions are scheduled as tasks.

    Suppression state belongs to the instance: two ``Debouncer`` objects
    wrapping the same function do not suppress each other's calls.
    """

    def __init__(self, func: Callable[..., Any], delay_ms: float):
        """Initialize the debouncer.

        Args:
            func: Handler to invoke once the input settles
            delay_ms: Quiet period in milliseconds
        """
        self.func = func
        self.delay_ms = delay_ms
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay_ms / 1000, self._fire, args, kwargs)

    @property
    def pending(self) -> bool:
        """True while a call is armed or any of its coroutines is still running."""
        return self._handle is not None or any(not task.done() for task in self._tasks)

    def cancel(self) -> None:
        """Drop the armed call, if any, and cancel every running coroutine."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        for task in self._tasks:
            task.cancel()

    async def wait(self) -> None:
        """Wait until the armed call has fired and all its coroutines have finished."""
        loop = asyncio.get_running_loop()
        while self.pending:
            if self._handle is not None:
                await asyncio.sleep(max(self._handle.when() - loop.time(), 0))
            else:
                await asyncio.wait(set(self._tasks))

    def _fire(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        self._handle = None
        name = getattr(self.func, "__qualname__", repr(self.func))
        try:
            result = self.func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Debounced call to {name} failed: {e}")
            return

        if inspect.isawaitable(result):
            # Earlier firings may still be running, all of them are tracked
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            name = getattr(self.func, "__qualname__", repr(self.func))
            logger.error(f"Debounced coroutine {name} failed: {exc}")


def debounce(func: Callable[..., Any], delay_ms: float) -> Debouncer:
    """Wrap ``func`` in a new, independent :class:`Debouncer`.

    Each call creates fresh suppression state, so create the wrapper once
    and reuse it instead of calling ``debounce`` per event.
    """
    return Debouncer(func, delay_ms)
