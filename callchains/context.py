"""
StepContext - Capabilities handed to the step handler that is currently running.
"""

from .errors import AdapterError, RejectedError
from .result import CARRY_PREVIOUS


class StepContext:
    """
    Passed as the first argument to every non-raw handler.

    A context lives for one settlement of one step. It lets the handler
    suspend the chain, resume it later with new values, reject it, or
    splice more steps in right after itself. Once the settlement is over
    (the handler returned without suspending, raised, or resume was called)
    suspend, resume and reject do nothing.
    """

    def __init__(self, owner, details=()):
        """
        Initialize the StepContext.

        Args:
            owner: The Chain running the step
            details: Details attached to the error being handled, if any
        """
        self._owner = owner
        self._details = tuple(details)
        self._running = True
        self._suspended = False
        self._resumed = False
        self._resume_args = CARRY_PREVIOUS

    @property
    def owner(self):
        """The Chain this step belongs to."""
        return self._owner

    @property
    def errors(self):
        """Copy of the owning chain's error history."""
        return self._owner.errors

    @property
    def details(self):
        """Details attached to the error handed to this failure handler."""
        return self._details

    @property
    def suspended(self):
        return self._suspended

    @property
    def resumed(self):
        return self._resumed

    @property
    def running(self):
        """True while the handler call itself has not returned."""
        return self._running

    def suspend(self):
        """
        Freeze the chain until resume() or reject() is called.

        Returns:
            self (so a handler can keep the context for later)
        """
        if not (self._suspended or self._resumed):
            self._suspended = True
            self._owner._paused = True
        return self

    pause = suspend

    def resume(self, *args):
        """
        Continue the chain, carrying `args` to the next step.

        With no arguments the chain keeps its current value. Only the first
        call counts.

        Returns:
            self
        """
        if self._resumed:
            return self

        self._resumed = True
        self._resume_args = args if args else CARRY_PREVIOUS
        self._owner._paused = False
        if not self._running:
            self._owner._continue_from(self)
        return self

    next = resume

    def reject(self, reason=None, *details):
        """
        Put the chain in error state and resume it.

        Args:
            reason: The error. A missing or falsy reason becomes a
                RejectedError.
            *details: Extra information handed to failure handlers via
                StepContext.details

        Returns:
            self
        """
        if self._resumed:
            return self
        if not reason:
            reason = RejectedError()
        self._owner._set_error(reason, details)
        return self.resume()

    def chain(self, success=None, failure=None, raw=False):
        """
        Queue a step to run right after the current one.

        Steps injected from the same settlement run in the order they were
        injected, ahead of everything that was already queued.

        Returns:
            self
        """
        self._owner._enqueue(success, failure, raw, inject=True)
        return self

    def fail(self, failure, raw=False):
        """Queue a failure-only step to run right after the current one."""
        return self.chain(None, failure, raw)

    def n_call(self, fn, *params):
        """
        Queue a call to an error-first callback function.

        `fn` is called as fn(*params, callback). When callback(error, *values)
        receives a truthy error the chain is rejected with it, otherwise it
        resumes with the values.

        Raises:
            AdapterError: If fn is not callable
        """
        if not callable(fn):
            raise AdapterError(f"n_call expects a callable, got {fn!r}")

        def call(ctx, *carried):
            ctx.suspend()

            def callback(error=None, *values):
                if error:
                    ctx.reject(error)
                else:
                    ctx.resume(*values)

            fn(*params, callback)

        return self.chain(call)

    def a_call(self, fn, *params):
        """
        Queue a call to a function that reports back through a callback.

        `fn` is called as fn(*params, callback) and the chain resumes with
        whatever the callback receives.

        Raises:
            AdapterError: If fn is not callable
        """
        if not callable(fn):
            raise AdapterError(f"a_call expects a callable, got {fn!r}")

        def call(ctx, *carried):
            ctx.suspend()
            fn(*params, ctx.resume)

        return self.chain(call)

    def c_call(self, fn, *params):
        """Queue a plain call; its return value becomes the chain's value."""
        if not callable(fn):
            raise AdapterError(f"c_call expects a callable, got {fn!r}")

        def call(ctx, *carried):
            return fn(*params)

        return self.chain(call)

    def _close(self):
        self._running = False
        self._resumed = True

    def __repr__(self):
        return (f"StepContext(chain={self._owner!r}, suspended={self._suspended}, "
                f"resumed={self._resumed})")
