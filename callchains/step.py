"""
Step - One queued pair of success and failure handlers.
"""

import logging

from .interop import observe
from .result import Result

logger = logging.getLogger(__name__)


class Step:
    """
    A unit of work queued on a Chain.

    Exactly one of the two handlers runs when the step is reached: the
    failure handler if the chain has a pending error, the success handler
    otherwise. A missing handler for the current mode means the step is
    skipped.
    """

    __slots__ = ('success', 'failure', 'raw')

    def __init__(self, success=None, failure=None, raw=False):
        """
        Initialize a Step.

        Args:
            success: Called with the carried values when no error is pending
            failure: Called with the pending error
            raw: Call handlers without the step context as first argument
        """
        self.success = success if callable(success) else None
        self.failure = failure if callable(failure) else None
        self.raw = bool(raw)

    def handler_for(self, error_mode):
        """Return the handler acting in the given mode, or None."""
        return self.failure if error_mode else self.success

    def is_empty(self):
        """Return True if neither slot holds a callable."""
        return self.success is None and self.failure is None

    @classmethod
    def waiting_on(cls, target):
        """
        Build a step that waits for another chain, thenable or future.

        The target is observed right away, so an outcome that arrives before
        the step is reached is kept and delivered when it is.
        """
        return cls(_Waiter(target))

    def __repr__(self):
        return (f"Step(success={getattr(self.success, '__name__', self.success)}, "
                f"failure={getattr(self.failure, '__name__', self.failure)}, raw={self.raw})")


class _Waiter:
    """Success handler that resumes with the outcome of an observed value."""

    def __init__(self, target):
        self._outcome = None
        self._ctx = None
        try:
            observe(target, self._succeeded, self._failed)
        except Exception as exc:
            logger.debug("Observing %r raised", target, exc_info=True)
            self._failed(exc)

    def _succeeded(self, *args):
        self._settle(Result.ok(args))

    def _failed(self, error, *details):
        self._settle(Result.fail(error, *details))

    def _settle(self, outcome):
        if self._outcome is not None:
            return
        self._outcome = outcome
        if self._ctx is not None:
            self._deliver(self._ctx)

    def _deliver(self, ctx):
        outcome = self._outcome
        if outcome.is_success():
            ctx.resume(*outcome.args)
        else:
            ctx.reject(outcome.error, *outcome.details)

    def __call__(self, ctx, *args):
        if self._outcome is None:
            self._ctx = ctx.suspend()
        else:
            self._deliver(ctx)
