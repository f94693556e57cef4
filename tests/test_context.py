from __future__ import annotations

import asyncio
import time

import pytest

from settle import (
    OutcomeKind,
    ProbeResult,
    WaitCancelledError,
    WaitContext,
    Waiter,
    WaitSpec,
    wait_for_state,
)

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit"), pytest.mark.timeout(30)]


class TestWaitContext:
    def test_fresh_context_is_not_done(self):
        ctx = WaitContext()
        assert not ctx.done()
        assert ctx.reason is None
        assert ctx.deadline is None
        assert ctx.remaining() is None

    def test_cancel_is_idempotent_first_reason_wins(self):
        ctx = WaitContext()
        ctx.cancel("user abort")
        ctx.cancel("shutdown")
        assert ctx.done()
        assert ctx.reason == "user abort"

    def test_deadline_in_the_past_is_done(self):
        ctx = WaitContext(timeout=0)
        assert ctx.done()
        assert ctx.reason == "deadline exceeded"
        assert ctx.remaining() == 0.0

    @pytest.mark.asyncio
    async def test_wait_returns_false_after_full_sleep(self):
        ctx = WaitContext()
        assert await ctx.wait(0.01) is False

    @pytest.mark.asyncio
    async def test_wait_wakes_on_cancel(self):
        ctx = WaitContext()
        asyncio.get_running_loop().call_later(0.05, ctx.cancel)

        start = time.monotonic()
        assert await ctx.wait(10) is True
        assert time.monotonic() - start < 1.0

    @pytest.mark.asyncio
    async def test_wait_stops_at_own_deadline(self):
        ctx = WaitContext(timeout=0.05)

        start = time.monotonic()
        await ctx.wait(10)
        assert time.monotonic() - start < 1.0


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_mid_sleep_returns_within_one_interval(self, scripted):
        interval = 2.0
        probe = scripted(["CREATING"])
        ctx = WaitContext()
        spec = WaitSpec(
            identifier="res-1",
            probe=probe,
            pending={"CREATING"},
            target={"ACTIVE"},
            poll_interval=interval,
        )

        task = asyncio.ensure_future(Waiter(spec, ctx).run())
        await asyncio.sleep(0.05)
        cancelled_at = time.monotonic()
        ctx.cancel("operator abort")
        outcome = await task

        assert time.monotonic() - cancelled_at < interval
        assert outcome.kind is OutcomeKind.CANCELLED
        assert isinstance(outcome.error, WaitCancelledError)
        assert outcome.error.reason == "operator abort"
        assert outcome.payload == {"state": "CREATING", "n": 0}
        assert probe.count == 1

    @pytest.mark.asyncio
    async def test_cancel_during_in_flight_probe(self, scripted):
        probe = scripted(["CREATING"], latency=5.0)
        ctx = WaitContext()
        spec = WaitSpec(identifier="res-1", probe=probe, pending={"CREATING"}, target={"ACTIVE"})

        asyncio.get_running_loop().call_later(0.05, ctx.cancel)
        start = time.monotonic()
        outcome = await Waiter(spec, ctx).run()

        assert time.monotonic() - start < 1.0
        assert outcome.kind is OutcomeKind.CANCELLED
        assert outcome.payload is None

    @pytest.mark.asyncio
    async def test_context_deadline_before_spec_timeout_is_cancelled(self, scripted):
        probe = scripted(["CREATING"])
        spec = WaitSpec(
            identifier="res-1",
            probe=probe,
            pending={"CREATING"},
            target={"ACTIVE"},
            poll_interval=0.05,
            timeout=10,
        )

        with pytest.raises(WaitCancelledError) as exc_info:
            await wait_for_state(spec, ctx=WaitContext(timeout=0.12))

        assert exc_info.value.reason == "deadline exceeded"
        assert exc_info.value.state == "CREATING"

    @pytest.mark.asyncio
    async def test_already_cancelled_context_issues_no_probe(self, scripted):
        probe = scripted(["ACTIVE"])
        ctx = WaitContext()
        ctx.cancel()

        outcome = await Waiter(WaitSpec(identifier="res-1", probe=probe, target={"ACTIVE"}), ctx).run()

        assert outcome.kind is OutcomeKind.CANCELLED
        assert probe.count == 0

    @pytest.mark.asyncio
    async def test_probe_result_is_kept_when_cancelled_after_it(self, scripted):
        ctx = WaitContext()

        async def probe(identifier: str) -> ProbeResult[str]:
            ctx.cancel()
            return ProbeResult(state="ACTIVE", payload="done")

        outcome = await Waiter(
            WaitSpec(identifier="res-1", probe=probe, pending={"CREATING"}, target={"ACTIVE"}),
            ctx,
        ).run()

        assert outcome.kind is OutcomeKind.SUCCESS
        assert outcome.payload == "done"

    @pytest.mark.asyncio
    async def test_task_cancellation_propagates(self, scripted):
        probe = scripted(["CREATING"])
        spec = WaitSpec(
            identifier="res-1",
            probe=probe,
            pending={"CREATING"},
            target={"ACTIVE"},
            poll_interval=5,
        )

        task = asyncio.ensure_future(wait_for_state(spec))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
