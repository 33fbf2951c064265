"""Post-commit narrative dispatch.

The orchestrator hands each committed RoundOutcome to ``submit`` (a plain,
non-blocking call usable as a round listener). A worker coroutine drains
the queue on its own schedule and runs the blocking narrative client in a
thread. Results are kept per round; nothing flows back into the game.
"""

from __future__ import annotations

import asyncio

from gauntlet.game.models import RoundOutcome
from gauntlet.narrative.client import NarrativeClient, RoundNarrative
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


def _running_on(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class NarrativeDispatcher:
    """Queues committed outcomes and narrates them in the background."""

    def __init__(self, client: NarrativeClient):
        self.client = client
        self.narratives: dict[int, RoundNarrative] = {}
        self._queue: asyncio.Queue[RoundOutcome] = asyncio.Queue()
        self._running = False
        self._loop: asyncio.AbstractEventLoop | None = None

    def submit(self, outcome: RoundOutcome) -> None:
        """Enqueue a committed outcome. Never blocks.

        Safe to call from any thread: while the worker runs, outcomes from
        other threads are handed to its loop with ``call_soon_threadsafe``.
        """
        loop = self._loop
        if loop is not None and loop.is_running() and not _running_on(loop):
            loop.call_soon_threadsafe(self._queue.put_nowait, outcome)
        else:
            self._queue.put_nowait(outcome)
        log.debug("narrative_queued", round=outcome.round_number)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self) -> None:
        """Consume the queue until ``stop`` is called."""
        self._running = True
        self._loop = asyncio.get_running_loop()
        log.info("narrative_dispatcher_started")
        while self._running:
            try:
                outcome = await asyncio.wait_for(self._queue.get(), timeout=0.5)
            except asyncio.TimeoutError:
                continue
            await self._process(outcome)
        self._loop = None
        log.info("narrative_dispatcher_stopped")

    def stop(self) -> None:
        self._running = False

    def close(self) -> None:
        self.stop()
        self.client.close()

    async def drain(self) -> list[RoundNarrative]:
        """Narrate everything queued so far and return the new narratives."""
        produced = []
        while not self._queue.empty():
            produced.append(await self._process(self._queue.get_nowait()))
        return produced

    async def _process(self, outcome: RoundOutcome) -> RoundNarrative:
        profiles = [c.profile() for c in (*outcome.survivors, *outcome.eliminated)]
        try:
            narrative = await asyncio.to_thread(
                self.client.generate_narrative, outcome.round, profiles, outcome
            )
        except Exception as exc:
            log.error("narrative_failed", round=outcome.round_number, error=str(exc))
            alive_before = len(outcome.survivors) + len(outcome.eliminated)
            narrative = self.client.fallback.narrate(outcome, alive_before)
        finally:
            self._queue.task_done()
        self.narratives[outcome.round_number] = narrative
        return narrative
