"""
Interop - Recognizing and observing asynchronous values that are not plain values.

Three shapes are understood:

- Chainables expose chain(success, failure) with this package's contract:
  handlers receive a step context first, and the object returns itself.
- Thenables expose then(success, failure) with foreign semantics; the
  handlers receive plain arguments.
- asyncio futures, observed through add_done_callback.
"""

import asyncio

from .result import to_args


def _has_method(obj, name):
    if obj is None or isinstance(obj, type):
        return False
    return callable(getattr(obj, name, None))


def is_chainable(obj):
    """Return True if `obj` exposes a chain(success, failure) method."""
    return _has_method(obj, 'chain')


def is_thenable(obj):
    """Return True if `obj` exposes a then(success, failure) method."""
    return _has_method(obj, 'then')


def is_future(obj):
    """Return True if `obj` is an asyncio future (or task)."""
    return asyncio.isfuture(obj)


def is_async_value(obj):
    """Return True if a handler returning `obj` should wait for it to settle."""
    return is_chainable(obj) or is_thenable(obj) or is_future(obj)


def observe(target, on_success, on_failure):
    """
    Attach completion listeners to a chainable, thenable or future.

    Observing a chainable is a tap: on success the observed values continue
    down the observed chain unchanged, and on failure the error is rejected
    again so the observed chain stays in its error state.

    Args:
        target: Chainable, thenable or future to observe
        on_success: Called as on_success(*values)
        on_failure: Called as on_failure(error, *details)

    Returns:
        target

    Raises:
        TypeError: If target is none of the supported shapes
    """
    if is_chainable(target):
        def tap_success(ctx, *args):
            on_success(*args)
            ctx.resume(*args)

        def tap_failure(ctx, error):
            details = ctx.details
            on_failure(error, *details)
            ctx.reject(error, *details)

        target.chain(tap_success, tap_failure)

    elif is_thenable(target):
        def then_failure(*args):
            on_failure(args[0] if args else None)

        target.then(on_success, then_failure)

    elif is_future(target):
        def done(future):
            if future.cancelled():
                on_failure(asyncio.CancelledError())
                return
            error = future.exception()
            if error is not None:
                on_failure(error)
            else:
                on_success(*to_args(future.result()))

        target.add_done_callback(done)

    else:
        raise TypeError(f"Cannot observe {target!r}: not a chainable, thenable or future")

    return target
