"""
Schedulers - Where deferred chain steps wait for the next tick.

A deferred chain never runs its first step inside the call that queued it.
Instead the drain is handed to a scheduler:

- TickQueue keeps callbacks in a FIFO until someone calls run() (or the
  module-level flush()), like a hand-cranked event loop.
- AsyncioScheduler hands them to an asyncio event loop with call_soon.
- DefaultScheduler picks the running asyncio loop when there is one and the
  process tick queue otherwise.
"""

import asyncio
import logging
from collections import deque

logger = logging.getLogger(__name__)


class TickQueue:
    """FIFO of deferred callbacks, drained explicitly with run()."""

    def __init__(self):
        self._callbacks = deque()
        self._running = False

    def defer(self, fn, *args):
        """
        Queue `fn(*args)` for the next tick.

        Args:
            fn: Callable to run later
            *args: Positional arguments for fn

        Returns:
            self (for method chaining)
        """
        self._callbacks.append((fn, args))
        return self

    def run(self):
        """
        Run queued callbacks until the queue is empty.

        Callbacks deferred while draining run in the same call. Nested calls
        (a callback calling run()) return immediately.

        Returns:
            Number of callbacks that ran
        """
        if self._running:
            return 0

        self._running = True
        count = 0
        try:
            while self._callbacks:
                fn, args = self._callbacks.popleft()
                fn(*args)
                count += 1
        finally:
            self._running = False

        if count:
            logger.debug("Ran %d deferred callbacks", count)
        return count

    def clear(self):
        """Drop every pending callback."""
        self._callbacks.clear()
        return self

    def __len__(self):
        return len(self._callbacks)

    def __repr__(self):
        return f"TickQueue(pending={len(self._callbacks)})"


class AsyncioScheduler:
    """Defers callbacks onto an asyncio event loop."""

    def __init__(self, loop=None):
        """
        Args:
            loop: Event loop to use; the running loop when omitted
        """
        self._loop = loop

    def defer(self, fn, *args):
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        loop.call_soon(fn, *args)
        return self

    def __repr__(self):
        return f"AsyncioScheduler(loop={self._loop!r})"


_TICKS = TickQueue()


def tick_queue():
    """Return the process-wide tick queue used outside of asyncio."""
    return _TICKS


def flush():
    """Drain the process-wide tick queue. Returns the number of callbacks run."""
    return _TICKS.run()


class DefaultScheduler:
    """
    Uses the running asyncio loop if any, the process tick queue otherwise.

    Callbacks put on the process tick queue only run when the host calls
    callchains.flush(). Without a running asyncio loop, a deferred chain
    does nothing until then.
    """

    def defer(self, fn, *args):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _TICKS.defer(fn, *args)
        else:
            loop.call_soon(fn, *args)
        return self

    def __repr__(self):
        return "DefaultScheduler()"
