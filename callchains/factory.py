"""
Entry points - Module-level ways to start a Chain.
"""

from .chain import Chain
from .errors import AdapterError


def start(value=None, success=None, failure=None, config=None):
    """
    Start a new Chain.

    Args:
        value: Initial value or Start record (optional)
        success: First success handler (optional)
        failure: First failure handler (optional)
        config: ChainConfig to use (optional)

    Returns:
        New Chain
    """
    return Chain(value, success, failure, config=config)


def begin(success=None, failure=None):
    """Start a new Chain with no initial value."""
    return start(None, success, failure)


def now(value=None, success=None, failure=None):
    """Start a new Chain whose first step runs synchronously."""
    return Chain.now(value, success, failure)


def failed(error=None):
    """
    Start a new Chain that is already in error state.

    Args:
        error: The pending error (default: RejectedError)

    Returns:
        New Chain
    """
    return Chain.failed(error)


fail = failed
reject = failed


def n_call(fn, *params):
    """
    Start a Chain waiting on an error-first callback function.

    `fn` is called right away as fn(*params, callback). The chain resumes
    with the values given to callback(error, *values), or is rejected with
    `error` when it is truthy.

    Raises:
        AdapterError: If fn is not callable
    """
    if not callable(fn):
        raise AdapterError(f"n_call expects a callable, got {fn!r}")
    return now(None, lambda ctx: ctx.n_call(fn, *params))


def a_call(fn, *params):
    """
    Start a Chain waiting on a callback function.

    `fn` is called right away as fn(*params, callback) and the chain
    resumes with whatever callback receives.
    """
    if not callable(fn):
        raise AdapterError(f"a_call expects a callable, got {fn!r}")
    return now(None, lambda ctx: ctx.a_call(fn, *params))
