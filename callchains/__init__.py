"""
callchains - Sequencing primitive for callback-driven work

A Chain runs a queue of steps one at a time. Each step is a pair of
handlers: the success handler runs with the chain's current value, the
failure handler runs when an earlier step failed. Handlers can suspend the
chain, resume it later from a callback, return another chain to wait for,
or splice extra steps in right after themselves.

- Steps run strictly in order, and each step runs at most once
- Errors skip success handlers until a failure handler takes them
- Chains start deferred (next tick) or immediate, and optionally paused
- all() and each() join several chains back into one

Example:
    import callchains

    def read(path, callback):
        callback(None, f"contents of {path}")

    def shout(ctx, text):
        return text.upper()

    def report(ctx, error):
        print(f"failed: {error}")

    ch = callchains.n_call(read, "notes.txt").chain(shout).fail(report)
    callchains.flush()   # run deferred steps when no asyncio loop is running
    print(ch.value)      # CONTENTS OF NOTES.TXT
"""

__version__ = "1.0.0"
__author__ = "callchains Contributors"

from .chain import Chain, ChainState
from .combinators import all, each
from .config import ChainConfig, configure, get_config, set_immediate, set_report
from .context import StepContext
from .errors import AdapterError, ChainError, RejectedError
from .factory import a_call, begin, fail, failed, n_call, now, reject, start
from .interop import is_async_value, is_chainable, is_future, is_thenable
from .modes import IMMEDIATE, NOW, PAUSE, TICK, Mode, Start
from .result import Result
from .scheduler import AsyncioScheduler, DefaultScheduler, TickQueue, flush, tick_queue
from .step import Step

__all__ = [
    'Chain',
    'ChainState',
    'StepContext',
    'Step',
    'Result',
    'Mode',
    'Start',
    'NOW',
    'IMMEDIATE',
    'TICK',
    'PAUSE',
    'ChainConfig',
    'configure',
    'get_config',
    'set_immediate',
    'set_report',
    'TickQueue',
    'AsyncioScheduler',
    'DefaultScheduler',
    'flush',
    'tick_queue',
    'start',
    'begin',
    'now',
    'failed',
    'fail',
    'reject',
    'n_call',
    'a_call',
    'all',
    'each',
    'is_chainable',
    'is_thenable',
    'is_future',
    'is_async_value',
    'ChainError',
    'RejectedError',
    'AdapterError',
]
