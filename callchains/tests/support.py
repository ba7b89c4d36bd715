"""
Shared helpers for the callchains tests.
"""

import sys
import os
import unittest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

from callchains import ChainConfig, configure, flush, get_config, tick_queue


class Recorder:
    """Handler that records every call it receives."""

    def __init__(self, returns=None):
        self.calls = []
        self.returns = returns

    def __call__(self, ctx, *args):
        self.calls.append(args)
        return self.returns

    @property
    def called(self):
        return bool(self.calls)

    @property
    def last(self):
        return self.calls[-1]


class ErrorRecorder:
    """Failure handler that records the errors it receives."""

    def __init__(self, returns=None):
        self.errors = []
        self.details = []
        self.returns = returns

    def __call__(self, ctx, error):
        self.errors.append(error)
        self.details.append(ctx.details)
        return self.returns


class FakeThenable:
    """Foreign async value with a then(success, failure) method."""

    def __init__(self):
        self.callbacks = []

    def then(self, success, failure):
        self.callbacks.append((success, failure))
        return self

    def settle(self, *values):
        for success, _ in self.callbacks:
            success(*values)

    def break_(self, error):
        for _, failure in self.callbacks:
            failure(error)


class RaisingThenable:
    """Thenable whose then() raises instead of registering the callbacks."""

    def then(self, success, failure):
        raise RuntimeError('then() blew up')


class ChainTestCase(unittest.TestCase):
    """Isolates the process-wide configuration and tick queue per test."""

    config = {}

    def setUp(self):
        self._saved_config = get_config()
        tick_queue().clear()
        configure(ChainConfig(**self.config))

    def tearDown(self):
        tick_queue().clear()
        configure(self._saved_config)

    def tick(self):
        return flush()


class AsyncChainTestCase(unittest.IsolatedAsyncioTestCase):
    """ChainTestCase for tests that run inside an asyncio event loop."""

    config = {}

    def setUp(self):
        self._saved_config = get_config()
        tick_queue().clear()
        configure(ChainConfig(**self.config))

    def tearDown(self):
        tick_queue().clear()
        configure(self._saved_config)

    async def spin(self, turns=3):
        """Let the event loop run a few iterations."""
        import asyncio
        for _ in range(turns):
            await asyncio.sleep(0)
