"""Generic state-convergence waiter.

Polls a resource through its probe until it reaches a target state, a
state outside pending and target, or a deadline. One Waiter serves every
resource kind; what differs between resources is only the WaitSpec.

Example:
    spec = WaitSpec(
        identifier=arn,
        probe=cluster_state_probe(client),
        pending={"CREATING"},
        target={"ACTIVE"},
        timeout=3600,
    )
    cluster = await wait_for_state(spec, extractor=cluster_state_info)
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import inspect
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from loguru import logger

from settle.context import WaitContext
from settle.core.exceptions import (
    ProbeError,
    ResourceNotFoundError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitError,
    WaitTimeoutError,
)
from settle.enrich import enrich
from settle.spec import WaitSpec
from settle.types import Extractor, Outcome, OutcomeKind, ProbeResult, StateToken

__all__ = ["Waiter", "wait_for_state", "wait_for_state_sync"]


@dataclass(slots=True)
class _Progress:
    """Mutable bookkeeping of the single polling loop that owns it."""

    payload: Any = None
    state: StateToken | None = None
    probes: int = 0
    target_hits: int = 0
    not_found_hits: int = 0


class Waiter[P]:
    """Drives one wait described by a WaitSpec.

    Probes are issued strictly one after another. Both suspension points,
    the in-flight probe and the sleep between probes, are raced against
    the context and the WaitSpec deadline.

    Synchronous probes run on ``executor``, or on the loop's default
    executor when none is given.
    """

    def __init__(
        self,
        spec: WaitSpec[P],
        ctx: WaitContext | None = None,
        *,
        executor: Executor | None = None,
    ) -> None:
        self.spec = spec
        self.ctx = ctx or WaitContext()
        self.executor = executor
        self._log = logger.bind(component="waiter", resource=spec.identifier)

    async def wait(self) -> P | None:
        """Run the wait and return the payload, raising the terminal error."""
        outcome = await self.run()
        return outcome.unwrap()

    async def run(self) -> Outcome[P]:
        """Run the wait to completion and describe how it ended.

        Never raises for failure, timeout or cancellation; those are
        reported through the returned Outcome.
        """
        spec = self.spec
        start = time.monotonic()
        deadline = start + spec.timeout if spec.timeout > 0 else None
        progress = _Progress()
        interval = spec.poll_interval

        if spec.delay > 0:
            self._log.debug(f"Delaying first probe by {spec.delay:g}s")
            interrupted = await self._sleep(spec.delay, deadline)
            if interrupted is not None:
                return self._stop(interrupted, progress, start)

        while True:
            if self.ctx.done():
                return self._stop(OutcomeKind.CANCELLED, progress, start)
            if deadline is not None and time.monotonic() >= deadline:
                return self._stop(OutcomeKind.TIMEOUT, progress, start)

            progress.probes += 1
            try:
                result = await self._invoke(deadline, progress)
            except ResourceNotFoundError as e:
                if not spec.target:
                    self._log.info("Resource is gone")
                    progress.payload = None
                    return self._finish(OutcomeKind.SUCCESS, None, progress, start)

                progress.target_hits = 0
                progress.not_found_hits += 1
                if progress.not_found_hits > spec.not_found_checks:
                    return self._finish(OutcomeKind.FAILURE, e, progress, start)
                self._log.debug(
                    f"Resource not found ({progress.not_found_hits}/{spec.not_found_checks}), "
                    "polling again"
                )
            except ProbeError as e:
                return self._finish(OutcomeKind.FAILURE, e, progress, start)
            except Exception as e:
                error = ProbeError(
                    f"probing {spec.identifier} failed: {e}",
                    payload=progress.payload,
                    state=progress.state,
                )
                error.__cause__ = e
                return self._finish(OutcomeKind.FAILURE, error, progress, start)
            else:
                if isinstance(result, OutcomeKind):
                    return self._stop(result, progress, start)

                progress.not_found_hits = 0
                progress.state = result.state
                progress.payload = result.payload
                self._log.debug(f"Probe #{progress.probes}: state={result.state!r}")

                if not spec.pending and not spec.target:
                    return self._finish(OutcomeKind.SUCCESS, None, progress, start)

                if result.state in spec.target:
                    progress.target_hits += 1
                    if progress.target_hits >= spec.continuous_target_occurrence:
                        self._log.info(f"Reached target state {result.state!r}")
                        return self._finish(OutcomeKind.SUCCESS, None, progress, start)
                elif result.state in spec.pending:
                    progress.target_hits = 0
                else:
                    error = UnexpectedStateError(
                        result.state, spec.target, payload=result.payload,
                    )
                    return self._finish(OutcomeKind.FAILURE, error, progress, start)

            sleep_for = max(interval, spec.min_interval)
            self._log.debug(f"Sleeping {sleep_for:g}s before next probe")
            interrupted = await self._sleep(sleep_for, deadline)
            if interrupted is not None:
                return self._stop(interrupted, progress, start)

            interval = interval * spec.backoff
            if spec.max_interval is not None:
                interval = min(interval, spec.max_interval)

    async def _sleep(self, seconds: float, deadline: float | None) -> OutcomeKind | None:
        """Sleep between probes. Returns the outcome kind if the sleep ended the wait."""
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= seconds:
                if await self.ctx.wait(max(remaining, 0.0)):
                    return OutcomeKind.CANCELLED
                return OutcomeKind.TIMEOUT

        if await self.ctx.wait(seconds):
            return OutcomeKind.CANCELLED
        return None

    async def _invoke(
        self, deadline: float | None, progress: _Progress
    ) -> ProbeResult[P] | OutcomeKind:
        """Issue one probe, racing it against the context and the deadline.

        A probe that has already completed wins over a deadline firing at
        the same time. An interrupted probe is cancelled. A probe call that
        ends cancelled on its own is a probe failure.
        """
        probe_task = asyncio.ensure_future(self._call_probe())
        watcher = asyncio.ensure_future(self.ctx.wait())
        timeout = None if deadline is None else max(deadline - time.monotonic(), 0.0)

        try:
            await asyncio.wait(
                {probe_task, watcher},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            watcher.cancel()
            interrupted = not probe_task.done()
            if interrupted:
                probe_task.cancel()

        if not interrupted:
            if not probe_task.cancelled():
                return probe_task.result()
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise asyncio.CancelledError()
            raise ProbeError(
                f"probing {self.spec.identifier} failed: call was cancelled",
                payload=progress.payload,
                state=progress.state,
            )

        if self.ctx.done():
            return OutcomeKind.CANCELLED
        return OutcomeKind.TIMEOUT

    async def _call_probe(self) -> ProbeResult[P]:
        probe = self.spec.probe
        if _is_async(probe):
            return await probe(self.spec.identifier)

        loop = asyncio.get_running_loop()
        call = functools.partial(contextvars.copy_context().run, probe, self.spec.identifier)
        result = await loop.run_in_executor(self.executor, call)
        if inspect.isawaitable(result):
            return await result
        return result

    def _stop(self, kind: OutcomeKind, progress: _Progress, start: float) -> Outcome[P]:
        """Resolve a wait interrupted by a deadline or by the context."""
        if kind is OutcomeKind.CANCELLED:
            error: WaitError = WaitCancelledError(
                self.spec.identifier,
                self.ctx.reason or "cancelled",
                payload=progress.payload,
                state=progress.state,
            )
            self._log.warning(f"Wait cancelled: {error.reason}")
        else:
            error = WaitTimeoutError(
                self.spec.timeout,
                self.spec.target,
                payload=progress.payload,
                state=progress.state,
            )
            self._log.warning(f"Timed out after {self.spec.timeout:g}s")
        return self._finish(kind, error, progress, start)

    def _finish(
        self,
        kind: OutcomeKind,
        error: BaseException | None,
        progress: _Progress,
        start: float,
    ) -> Outcome[P]:
        if kind is OutcomeKind.FAILURE:
            self._log.warning(f"Wait failed: {error}")

        return Outcome(
            kind=kind,
            payload=progress.payload,
            state=progress.state,
            error=error,
            probes=progress.probes,
            elapsed=time.monotonic() - start,
        )


async def wait_for_state[P](
    spec: WaitSpec[P],
    *,
    ctx: WaitContext | None = None,
    extractor: Extractor[P] | None = None,
    executor: Executor | None = None,
) -> P | None:
    """Wait until the resource described by ``spec`` converges.

    Args:
        spec: What to probe and which states to wait for.
        ctx: Optional cancellation context.
        extractor: Optional diagnostic extractor; when given, a failure on
            an unexpected state is replaced by the resource's own error.
        executor: Where synchronous probes run; the loop's default
            executor when None.

    Returns:
        The payload observed when the target was reached (None when an
        empty target was satisfied by the resource disappearing).

    Raises:
        ProbeError: The probe failed.
        UnexpectedStateError: The resource reached a state outside
            pending and target (EnrichedFailureError when enriched).
        WaitTimeoutError: WaitSpec.timeout expired while pending.
        WaitCancelledError: The context was cancelled or expired.
    """
    outcome = await Waiter(spec, ctx, executor=executor).run()
    if extractor is not None:
        error = enrich(outcome, extractor)
        if error is not None:
            raise error
    return outcome.unwrap()


def wait_for_state_sync[P](
    spec: WaitSpec[P],
    *,
    timeout: float | None = None,
    extractor: Extractor[P] | None = None,
) -> P | None:
    """Blocking variant of wait_for_state, for callers without an event loop.

    ``timeout`` bounds the whole call as a context deadline, independent
    of ``spec.timeout``. A synchronous probe call still in flight when the
    wait ends is abandoned, not joined: its thread finishes on its own.
    """

    async def _run() -> P | None:
        return await wait_for_state(
            spec, ctx=WaitContext(timeout), extractor=extractor, executor=executor
        )

    # The loop's default executor is joined on close; this one is not.
    executor = ThreadPoolExecutor(thread_name_prefix="settle")
    try:
        with asyncio.Runner() as runner:
            return runner.run(_run())
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _is_async(fn: object) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )
