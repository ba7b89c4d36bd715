"""
Chain - Runs queued steps one at a time against an evolving value or error.
"""

import logging
from collections import deque

from .config import get_config
from .context import StepContext
from .errors import AdapterError, RejectedError
from .interop import is_async_value, observe
from .modes import NOW, Start
from .result import CARRY_PREVIOUS, Result, to_args
from .step import Step

logger = logging.getLogger(__name__)

_NO_ERROR = object()
_STOP = object()


class ChainState:
    """Enumeration of the resolution engine's states."""
    IDLE = "idle"                        # Nothing queued, or not yet triggered
    DRAINING = "draining"                # Running steps, or a drain is scheduled
    PAUSED = "paused"                    # Waiting for resume() or unpause()
    AWAITING_NESTED = "awaiting_nested"  # Waiting for a returned async value


class Chain:
    """
    Sequences success/failure handler pairs against an evolving value.

    Guarantees:
    - Steps run in the order they were queued, except steps injected from a
      running handler, which run before the rest of the queue.
    - For each step at most one of its handlers runs, at most once.
    - While an error is pending, success handlers are skipped until a
      failure handler is found. Skipped steps are never revisited.
    - A failure handler that returns normally clears the error; one that
      raises replaces it.

    Handlers are called as ``success(ctx, *values)`` and
    ``failure(ctx, error)``, where ``ctx`` is a StepContext. Steps queued
    with ``raw=True`` get ``success(*values)`` and ``failure(error)``.

    A handler's return value becomes the chain's value: None carries nothing,
    a list or tuple carries its items as separate values, a chain, thenable
    or asyncio future is waited for, and anything else is carried as one
    value.

    Deferred steps run on the config's scheduler. With the default
    scheduler and no running asyncio loop, they wait for
    callchains.flush(); see DefaultScheduler.
    """

    def __init__(self, value=None, success=None, failure=None, raw=False, config=None):
        """
        Initialize a Chain.

        Args:
            value: Initial value, or a Start record (NOW, TICK, PAUSE, or a
                combination carrying a payload)
            success: First success handler (optional)
            failure: First failure handler (optional)
            raw: Call the first handlers without the step context
            config: ChainConfig to use (default: the process default)
        """
        self._config = config if config is not None else get_config()
        self._steps = deque()
        self._injected = []
        self._error = _NO_ERROR
        self._error_details = ()
        self._errors = []
        self._state = ChainState.IDLE
        self._suspended = None
        self._uid = self._config.new_uid()

        start = value if isinstance(value, Start) else Start(value=value)
        self._immediate = start.is_immediate(self._config.immediate)
        self._paused = start.paused
        self._args = to_args(start.value)

        self._report("created with %r", start)
        self.chain(success, failure, raw)

    # Construction shortcuts

    @classmethod
    def start(cls, value=None, success=None, failure=None, config=None):
        """Start a chain with an initial value."""
        return cls(value, success, failure, config=config)

    @classmethod
    def now(cls, value=None, success=None, failure=None, config=None):
        """Start a chain whose first step runs synchronously."""
        return cls(NOW.with_value(value), success, failure, config=config)

    @classmethod
    def failed(cls, error=None, config=None):
        """
        Start a chain that is already in error state.

        Args:
            error: The pending error (default, or when falsy: RejectedError)
            config: ChainConfig to use (optional)

        Returns:
            New Chain whose next failure handler receives `error`
        """
        ch = cls(config=config)
        ch._set_error(error or RejectedError())
        return ch

    @staticmethod
    def all(values):
        """See callchains.combinators.all."""
        from .combinators import all as join_all
        return join_all(values)

    @staticmethod
    def each(values, worker):
        """See callchains.combinators.each."""
        from .combinators import each
        return each(values, worker)

    # State

    @property
    def value(self):
        """The current value: one value as is, None for nothing, else a list."""
        if not self._args:
            return None
        if len(self._args) == 1:
            return self._args[0]
        return list(self._args)

    @property
    def args(self):
        """The current value as the tuple of arguments the next step receives."""
        return self._args

    @property
    def has_error(self):
        return self._error is not _NO_ERROR

    @property
    def error(self):
        """The pending error, or None."""
        return self._error if self.has_error else None

    @property
    def error_details(self):
        """Details attached to the pending error."""
        return self._error_details

    @property
    def errors(self):
        """Every error that was ever pending on this chain, oldest first."""
        return list(self._errors)

    @property
    def paused(self):
        return self._paused

    @property
    def resolving(self):
        return self._state != ChainState.IDLE

    @property
    def immediate(self):
        return self._immediate

    @property
    def state(self):
        return self._state

    @property
    def pending(self):
        """Number of steps still queued."""
        return len(self._steps) + len(self._injected)

    @property
    def uid(self):
        return self._uid

    @property
    def config(self):
        return self._config

    # Queueing

    def chain(self, success=None, failure=None, raw=False):
        """
        Queue a step and start resolving.

        Args:
            success: Called with the current values when no error is pending.
                A chain, thenable or future given here becomes a step that
                waits for it.
            failure: Called with the pending error
            raw: Call the handlers without the step context

        Returns:
            self (for method chaining)
        """
        self._enqueue(success, failure, raw)
        self.resolve()
        return self

    def fail(self, failure, raw=False):
        """Queue a step that only handles errors."""
        return self.chain(None, failure, raw)

    error_handler = fail

    def finally_(self, handler, raw=False):
        """Queue `handler` for both the success and the failure slot."""
        return self.chain(handler, handler, raw)

    fin = finally_

    def reject(self, reason=None, *details):
        """Queue a step that puts the chain in error state with `reason`."""
        def rejecting(ctx, *args):
            ctx.reject(reason, *details)

        return self.chain(rejecting)

    def then(self, success=None, failure=None):
        """
        Observe this point of the chain from a new, independent chain.

        The returned chain starts suspended and continues once this chain
        reaches the current point. This chain's own value and error are left
        as they were: values pass through, and an observed error stays
        pending.

        Args:
            success: Called as success(*values); its return value becomes
                the new chain's value
            failure: Called as failure(error); its return value becomes the
                new chain's value. Without it the new chain resumes with no
                value.

        Returns:
            New Chain
        """
        waiting = []
        sibling = Chain(NOW, lambda ctx: waiting.append(ctx.suspend()), config=self._config)
        sibling_ctx = waiting[0]

        def settle_sibling(handler, *args):
            try:
                result = handler(*args)
            except Exception as exc:
                logger.debug("then() observer %r raised", handler, exc_info=True)
                sibling_ctx.reject(exc)
            else:
                sibling_ctx.resume(*to_args(result))

        def observed(ctx, *args):
            if success is None:
                sibling_ctx.resume(*args)
            else:
                settle_sibling(success, *args)
            ctx.resume(*args)

        def observed_error(ctx, error):
            details = ctx.details
            if failure is None:
                sibling_ctx.resume()
            else:
                settle_sibling(failure, error)
            ctx.reject(error, *details)

        self.chain(observed, observed_error)
        return sibling

    def spread(self, success=None, failure=None, raw=False):
        """
        Queue handlers that receive a single carried sequence as separate values.

        One list or tuple value is expanded into its items, one other value
        is passed as is, and several values are passed unchanged.
        """
        return self.chain(_spread_values, None, True).chain(success, failure, raw)

    def n_call(self, fn, *params):
        """Queue a call to an error-first callback function (see StepContext.n_call)."""
        self._require_callable('n_call', fn)
        return self.chain(lambda ctx, *args: ctx.n_call(fn, *params))

    def a_call(self, fn, *params):
        """Queue a call to a callback function (see StepContext.a_call)."""
        self._require_callable('a_call', fn)
        return self.chain(lambda ctx, *args: ctx.a_call(fn, *params))

    def c_call(self, fn, *params):
        """Queue a plain call whose return value becomes the chain's value."""
        self._require_callable('c_call', fn)
        return self.chain(lambda ctx, *args: ctx.c_call(fn, *params))

    def unpause(self, *args):
        """
        Release a paused chain.

        Resumes the suspended step context if there is one, otherwise clears
        the pause a chain was started with.

        Args:
            *args: Values to carry forward (default: keep the current value)

        Returns:
            self
        """
        if self._suspended is not None:
            self._suspended.resume(*args)
            return self
        if not self._paused or self._state == ChainState.AWAITING_NESTED:
            return self

        self._paused = False
        self._report("unpaused")
        if self._state == ChainState.PAUSED:
            self._drain(args if args else CARRY_PREVIOUS)
        else:
            self.resolve()
        return self

    def resolve(self):
        """
        Start draining the queue unless that is already happening.

        Safe to call any number of times.

        Returns:
            self
        """
        if self._state != ChainState.IDLE or not (self._steps or self._injected):
            return self

        self._state = ChainState.DRAINING
        immediate, self._immediate = self._immediate, self._config.immediate
        if immediate:
            self._drain()
        else:
            self._config.scheduler.defer(self._drain)
        return self

    # Resolution engine

    def _enqueue(self, success, failure, raw, inject=False):
        if success is not None and not callable(success) and is_async_value(success):
            step = Step.waiting_on(success)
        else:
            step = Step(success, failure, raw)
        if step.is_empty():
            return
        if inject:
            self._injected.append(step)
        else:
            self._steps.append(step)

    def _drain(self, args=CARRY_PREVIOUS):
        self._state = ChainState.DRAINING
        while True:
            if args is CARRY_PREVIOUS:
                args = self._args
            else:
                self._args = args

            if self._injected:
                self._steps.extendleft(reversed(self._injected))
                self._injected = []

            if not self._steps:
                self._state = ChainState.IDLE
                return
            if self._paused:
                self._state = ChainState.PAUSED
                self._report("paused with %d steps queued", len(self._steps))
                return

            step = self._steps.popleft()
            handler = step.handler_for(self.has_error)
            if handler is None:
                continue

            args = self._settle(step, handler, args)
            if args is _STOP:
                return

    def _settle(self, step, handler, args):
        """Run one handler and return the arguments to continue with, or _STOP."""
        if self.has_error:
            ctx = StepContext(self, self._error_details)
            call_args = (self._error,)
            self._clear_error()
        else:
            ctx = StepContext(self)
            call_args = args
        if not step.raw:
            call_args = (ctx,) + tuple(call_args)

        self._report("running %s", getattr(handler, '__name__', handler))
        outcome = self._invoke(handler, call_args)

        if outcome.is_failure():
            ctx._close()
            self._paused = False
            self._set_error(outcome.error)
            return CARRY_PREVIOUS

        ctx._running = False
        if ctx.resumed:
            return ctx._resume_args
        if ctx.suspended:
            self._suspended = ctx
            self._state = ChainState.PAUSED
            self._report("suspended by handler")
            return _STOP
        ctx._close()

        value = outcome.value
        if value is self or isinstance(value, StepContext):
            value = None
        if is_async_value(value):
            return self._await_nested(value)

        self._report("value %r", value)
        return to_args(value)

    def _invoke(self, handler, call_args):
        try:
            return Result.ok(handler(*call_args))
        except Exception as exc:
            logger.debug("Chain handler %r raised", handler, exc_info=True)
            return Result.fail(exc)

    def _await_nested(self, value):
        waiter = _NestedWait(self)
        self._paused = True
        self._state = ChainState.AWAITING_NESTED
        self._report("waiting on %r", value)
        try:
            observe(value, waiter.succeeded, waiter.failed)
        except Exception as exc:
            logger.debug("Observing %r raised", value, exc_info=True)
            waiter.failed(exc)

        if waiter.outcome is None:
            waiter.detached = True
            return _STOP

        self._paused = False
        self._state = ChainState.DRAINING
        return self._continue_args(waiter.outcome)

    def _continue_args(self, outcome):
        if outcome.is_failure():
            self._set_error(outcome.error or RejectedError(), outcome.details)
            return CARRY_PREVIOUS
        return outcome.args if outcome.args else CARRY_PREVIOUS

    def _continue_from(self, ctx):
        """Resume draining after `ctx`, which suspended this chain, was resumed."""
        if self._suspended is not ctx:
            return
        self._suspended = None
        self._paused = False
        self._report("resumed")
        self._drain(ctx._resume_args)

    def _set_error(self, error, details=()):
        self._error = error
        self._error_details = tuple(details)
        self._errors.append(error)
        self._report("error %r", error)

    def _clear_error(self):
        self._error = _NO_ERROR
        self._error_details = ()

    def _require_callable(self, name, fn):
        if not callable(fn):
            raise AdapterError(f"{name} expects a callable, got {fn!r}")

    def _report(self, message, *args):
        if self._uid is not None:
            logger.debug("chain %s: " + message, self._uid, *args)

    def __repr__(self):
        error = f", error={self._error!r}" if self.has_error else ""
        return (f"Chain(state={self._state}, pending={self.pending}, "
                f"value={self.value!r}{error})")


class _NestedWait:
    """Listeners for an async value returned by a handler."""

    def __init__(self, chain):
        self._chain = chain
        self.outcome = None
        self.detached = False

    def succeeded(self, *args):
        self._settle(Result.ok(args))

    def failed(self, error, *details):
        self._settle(Result.fail(error, *details))

    def _settle(self, outcome):
        if self.outcome is not None:
            return
        self.outcome = outcome
        if self.detached:
            chain = self._chain
            chain._paused = False
            chain._drain(chain._continue_args(outcome))


def _spread_values(*args):
    if len(args) == 1:
        if isinstance(args[0], (list, tuple)):
            return list(args[0])
        return args[0]
    return list(args)
