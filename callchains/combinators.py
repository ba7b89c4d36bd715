"""
Combinators - Fan out over several chains and join them back into one.
"""

import logging

from .chain import Chain
from .interop import is_async_value, observe

logger = logging.getLogger(__name__)


class _Join:
    """Collects the outcomes of the entries passed to all()."""

    def __init__(self, total):
        self.total = total
        self.complete = 0
        self.results = [None] * total
        self.errors = None
        self.first_error = None
        self.ctx = None

    def watch(self, index, entry):
        settled = []

        def succeeded(*args):
            if settled:
                return
            settled.append(True)
            self.results[index] = args[0] if len(args) == 1 else (list(args) if args else None)
            self._settled()

        def failed(error, *details):
            if settled:
                return
            settled.append(True)
            if self.errors is None:
                self.errors = [None] * self.total
                self.first_error = error
            self.errors[index] = error
            self._settled()

        try:
            observe(entry, succeeded, failed)
        except Exception as exc:
            logger.debug("all() entry %d raised while being observed", index, exc_info=True)
            failed(exc)

    def set_plain(self, index, value):
        self.results[index] = value
        self.complete += 1

    def _settled(self):
        self.complete += 1
        self.finish()

    def finish(self):
        if self.ctx is None or self.complete != self.total:
            return
        if self.errors is not None:
            logger.debug("all() rejected: %d of %d entries failed",
                         sum(1 for e in self.errors if e is not None), self.total)
            self.ctx.reject(self.first_error, self.errors)
        else:
            self.ctx.resume(self.results)


def all(values):
    """
    Wait for every entry of `values` to settle.

    Entries may be chains, thenables, asyncio futures or plain values; plain
    values count as settled right away. Only the point each chain has
    reached when all() is called is waited for.

    Args:
        values: List or tuple of entries

    Returns:
        Chain that resumes with the list of results in entry order (an entry
        settling with several values contributes a list of them), or is
        rejected with the first error seen. In the rejected case the list of
        errors by entry index is attached as the first error detail
        (``chain.error_details[0]`` / ``ctx.details[0]``).

    Raises:
        TypeError: If values is not a list or tuple
    """
    if not isinstance(values, (list, tuple)):
        raise TypeError(f"all() expects a list or tuple, got {type(values).__name__}")

    if not values:
        return Chain.now(([],))

    join = _Join(len(values))
    for index, entry in enumerate(values):
        if is_async_value(entry):
            join.watch(index, entry)
        else:
            join.set_plain(index, entry)

    def wait(ctx):
        join.ctx = ctx.suspend()
        join.finish()

    return Chain.now(None, wait)


def each(values, worker):
    """
    Apply `worker` to every item of `values`, then wait for all the results.

    The worker is called eagerly for every item before waiting starts.

    Args:
        values: List or tuple of items
        worker: Called as worker(item); may return a chain, thenable, future
            or plain value

    Returns:
        Chain, as returned by all()
    """
    if not isinstance(values, (list, tuple)):
        raise TypeError(f"each() expects a list or tuple, got {type(values).__name__}")
    return all([worker(item) for item in values])
