"""
Unit tests for StepContext capabilities and the call adapters.
"""

import unittest

from support import ChainTestCase, ErrorRecorder, Recorder

from callchains import AdapterError, RejectedError, StepContext, a_call, failed, n_call, now, start


class TestSuspendResume(ChainTestCase):

    def test_context_is_first_argument(self):
        seen = []
        now(1).chain(lambda ctx, x: seen.append((type(ctx), x)))

        self.assertEqual(seen, [(StepContext, 1)])

    def test_suspend_is_idempotent(self):
        held = []

        def handler(ctx):
            held.append(ctx.suspend())
            held.append(ctx.pause())

        ch = now(None, handler)

        self.assertIs(held[0], held[1])
        self.assertTrue(held[0].suspended)
        self.assertTrue(ch.paused)

    def test_next_is_resume(self):
        rec = Recorder()
        ch_ctx = []
        now(None, lambda ctx: ch_ctx.append(ctx.pause())).chain(rec)
        ch_ctx[0].next('via next')

        self.assertEqual(rec.calls, [('via next',)])

    def test_late_resume_after_return_is_ignored(self):
        held = []
        rec = Recorder()

        def handler(ctx):
            held.append(ctx)
            return 'a'

        now(None, handler).chain(rec)
        held[0].resume('b')

        self.tick()
        self.assertEqual(rec.calls, [('a',)])
        self.assertTrue(held[0].resumed)

    def test_owner_and_errors(self):
        seen = []

        def handler(ctx, error):
            seen.append((ctx.owner, ctx.errors))

        ch = failed('first').fail(handler)

        self.tick()
        self.assertIs(seen[0][0], ch)
        self.assertEqual(seen[0][1], ['first'])


class TestReject(ChainTestCase):

    def test_reject_after_suspension(self):
        held = []
        skipped = Recorder()
        handler = ErrorRecorder()

        now(None, lambda ctx: held.append(ctx.suspend())).chain(skipped).fail(handler)
        held[0].reject('later')

        self.assertFalse(skipped.called)
        self.assertEqual(handler.errors, ['later'])

    def test_reject_default_reason(self):
        handler = ErrorRecorder()
        now(None, lambda ctx: ctx.reject()).fail(handler)

        self.tick()
        self.assertIsInstance(handler.errors[0], RejectedError)
        self.assertEqual(str(handler.errors[0]), "No reason given")

    def test_falsy_reason_uses_default(self):
        handler = ErrorRecorder()
        now(None, lambda ctx: ctx.reject(0)).fail(handler)
        failed('').fail(handler)

        self.tick()
        self.assertEqual(len(handler.errors), 2)
        for error in handler.errors:
            self.assertIsInstance(error, RejectedError)

    def test_reject_details_reach_failure_handler(self):
        handler = ErrorRecorder()
        ch = now(None, lambda ctx: ctx.reject('bad', {'code': 7}))

        self.assertEqual(ch.error_details, ({'code': 7},))
        ch.fail(handler)

        self.tick()
        self.assertEqual(handler.details, [({'code': 7},)])

    def test_reject_after_resume_is_ignored(self):
        rec = Recorder()

        def handler(ctx):
            ctx.resume('fine')
            ctx.reject('too late')

        ch = now(None, handler).chain(rec)

        self.tick()
        self.assertEqual(rec.calls, [('fine',)])
        self.assertFalse(ch.has_error)

    def test_failure_handler_can_reject_again(self):
        second = ErrorRecorder()
        ch = now(None, lambda ctx: ctx.reject('one'))
        ch.fail(lambda ctx, error: ctx.reject(error + ' two')).chain(Recorder()).fail(second)

        self.tick()
        self.assertEqual(second.errors, ['one two'])
        self.assertEqual(ch.errors, ['one', 'one two'])


class TestInjection(ChainTestCase):

    def test_fail_injects_failure_step(self):
        order = []

        def handler(ctx):
            ctx.fail(lambda c, e: order.append(('handled', e)))
            raise ValueError('x')

        start().chain(handler).chain(lambda ctx: order.append('after'))

        self.tick()
        self.assertEqual(len(order), 2)
        self.assertEqual(order[0][0], 'handled')
        self.assertEqual(order[1], 'after')

    def test_adapters_queue_in_order(self):
        calls = []

        def first():
            calls.append('first')
            return 1

        def second():
            calls.append('second')
            return 2

        ch = start().chain(lambda ctx: ctx.c_call(first).c_call(second))

        self.tick()
        self.assertEqual(calls, ['first', 'second'])
        self.assertEqual(ch.value, 2)


class TestCallAdapters(ChainTestCase):

    def test_n_call_success_async(self):
        pending = []
        rec = Recorder()

        def fetch(key, callback):
            pending.append((key, callback))

        n_call(fetch, 'k').chain(rec)
        self.assertEqual(pending[0][0], 'k')
        self.assertFalse(rec.called)

        pending[0][1](None, 'v1', 'v2')
        self.assertEqual(rec.calls, [('v1', 'v2')])

    def test_n_call_error(self):
        handler = ErrorRecorder()

        def fetch(callback):
            callback(IOError('disk'))

        n_call(fetch).fail(handler)

        self.tick()
        self.assertIsInstance(handler.errors[0], IOError)

    def test_n_call_falsy_error_resumes(self):
        rec = Recorder()
        n_call(lambda callback: callback(0, 'ok')).chain(rec)

        self.tick()
        self.assertEqual(rec.calls, [('ok',)])

    def test_n_call_requires_callable(self):
        with self.assertRaises(AdapterError):
            n_call('not a function')
        with self.assertRaises(TypeError):
            start(1).n_call(None)

    def test_a_call_resumes_with_everything(self):
        rec = Recorder()
        a_call(lambda x, callback: callback(x * 2, 'extra'), 21).chain(rec)

        self.tick()
        self.assertEqual(rec.calls, [(42, 'extra')])

    def test_a_call_requires_callable(self):
        with self.assertRaises(AdapterError):
            a_call(5)

    def test_instance_n_call(self):
        rec = Recorder()
        start(1).n_call(lambda key, callback: callback(None, key + '!'), 'a').chain(rec)

        self.tick()
        self.assertEqual(rec.calls, [('a!',)])

    def test_instance_a_call(self):
        rec = Recorder()
        start(1).a_call(lambda callback: callback('called back')).chain(rec)

        self.tick()
        self.assertEqual(rec.calls, [('called back',)])

    def test_instance_c_call(self):
        rec = Recorder()
        start(1).c_call(lambda a, b: a + b, 2, 3).chain(rec)

        self.tick()
        self.assertEqual(rec.calls, [(5,)])

    def test_adapter_raising_fails_step(self):
        handler = ErrorRecorder()

        def explode(callback):
            raise RuntimeError('sync failure')

        n_call(explode).fail(handler)

        self.tick()
        self.assertIsInstance(handler.errors[0], RuntimeError)


if __name__ == '__main__':
    unittest.main()
