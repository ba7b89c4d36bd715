"""
Unit tests for the tick queue and the asyncio-backed schedulers.
"""

import asyncio
import unittest

from support import AsyncChainTestCase, ChainTestCase, Recorder

from callchains import AsyncioScheduler, ChainConfig, TickQueue, flush, start, tick_queue


class TestTickQueue(unittest.TestCase):

    def test_runs_in_fifo_order(self):
        queue = TickQueue()
        order = []
        queue.defer(order.append, 1).defer(order.append, 2)

        self.assertEqual(len(queue), 2)
        self.assertEqual(queue.run(), 2)
        self.assertEqual(order, [1, 2])
        self.assertEqual(len(queue), 0)

    def test_callbacks_deferred_while_running_run_too(self):
        queue = TickQueue()
        order = []

        def first():
            order.append('first')
            queue.defer(order.append, 'later')

        queue.defer(first)
        self.assertEqual(queue.run(), 2)
        self.assertEqual(order, ['first', 'later'])

    def test_run_is_not_reentrant(self):
        queue = TickQueue()
        nested = []

        queue.defer(lambda: nested.append(queue.run()))
        queue.run()

        self.assertEqual(nested, [0])

    def test_clear(self):
        queue = TickQueue().defer(print)
        queue.clear()
        self.assertEqual(queue.run(), 0)


class TestProcessTicks(ChainTestCase):

    def test_deferred_chain_uses_process_queue(self):
        rec = Recorder()
        start(1).chain(rec)

        self.assertEqual(len(tick_queue()), 1)
        self.assertEqual(flush(), 1)
        self.assertEqual(rec.calls, [(1,)])


class TestAsyncioDefault(AsyncChainTestCase):

    async def test_running_loop_is_used(self):
        rec = Recorder()
        start(1).chain(rec)

        self.assertEqual(len(tick_queue()), 0)
        self.assertFalse(rec.called)

        await self.spin()
        self.assertEqual(rec.calls, [(1,)])

    async def test_explicit_asyncio_scheduler(self):
        rec = Recorder()
        config = ChainConfig(scheduler=AsyncioScheduler(asyncio.get_running_loop()))
        start(1, config=config).chain(rec)

        await self.spin()
        self.assertEqual(rec.calls, [(1,)])


if __name__ == '__main__':
    unittest.main()
