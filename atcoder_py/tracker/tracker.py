"""Polling loop that follows submissions until they are judged."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Protocol, Tuple

from loguru import logger
from rich.console import Console

from ..client.models import Done, Progress, SubmissionRecord, SubmissionRow, Waiting
from ..utils.terminal import format_result_color
from .display import Indicator, LiveDisplay, final_message, submission_prefix


RECENT_WINDOW = timedelta(seconds=10)
MIN_INTERVAL_MS = 1000
TICK_MS = 100


class SubmissionSource(Protocol):
    """Anything that can list the user's submissions of a contest."""

    def fetch_submissions(self, contest_id: str) -> List[SubmissionRow]:
        ...


@dataclass
class TrackedSubmission:
    record: SubmissionRecord
    indicator: Indicator
    finalized: bool = False


class SubmissionTracker:
    """Polls a SubmissionSource and keeps one live indicator per submission.

    Two tasks run during track(): the poll task fetches and folds results,
    the render task redraws the display every tick. Only the poll task
    touches `submissions`.
    """

    def __init__(
        self,
        source: SubmissionSource,
        display=None,
        interval_ms: int = 2000,
        tick_ms: int = TICK_MS,
        now: Optional[datetime] = None,
        sleep=asyncio.sleep,
    ):
        self.source = source
        self.display = display if display is not None else LiveDisplay()
        self.interval_ms = max(MIN_INTERVAL_MS, interval_ms)
        self.tick_ms = tick_ms
        self.started_at = now or datetime.now(timezone.utc)
        self._sleep = sleep
        self.submissions: Dict[int, TrackedSubmission] = {}

    def fold(self, record: SubmissionRecord) -> bool:
        """Merge one observation into the working set.

        Returns True when the submission is judged.
        """
        tracked = self.submissions.get(record.id)
        if tracked is None:
            indicator = self.display.indicator(submission_prefix(record))
            tracked = TrackedSubmission(record, indicator)
            self.submissions[record.id] = tracked
        else:
            tracked.record.update(record)

        status = tracked.record.status
        if tracked.finalized:
            return isinstance(status, Done)

        if isinstance(status, Waiting):
            tracked.indicator.wait(status.reason.message)
            return False

        if isinstance(status, Progress):
            message = ""
            if status.outcome is not None:
                message = format_result_color(status.outcome)
            tracked.indicator.progress(status.completed, status.total, message)
            return False

        tracked.indicator.finish(final_message(tracked.record))
        tracked.finalized = True
        return True

    async def poll_once(
        self, contest_id: str, recent_only: bool
    ) -> Tuple[List[SubmissionRecord], bool]:
        """Fetch and fold one snapshot. Returns the records in scope and
        whether all of them are judged."""
        rows = await asyncio.to_thread(self.source.fetch_submissions, contest_id)
        records = [SubmissionRecord.from_row(row) for row in rows]

        if recent_only:
            records = [
                r
                for r in records
                if self.started_at - r.submitted_at <= RECENT_WINDOW or not r.done
            ]
        records.sort(key=lambda r: r.submitted_at)

        all_done = True
        for record in records:
            if not self.fold(record):
                all_done = False

        logger.debug(
            f"Polled {contest_id}: {len(rows)} submission(s), {len(records)} in scope, "
            f"all judged: {all_done}"
        )
        return records, all_done

    async def track(self, contest_id: str, recent_only: bool) -> Optional[int]:
        """Follow submissions of `contest_id`.

        In recent-only mode, returns the highest submission id seen once
        every tracked submission is judged. Otherwise runs until cancelled.
        """
        complete = asyncio.Event()

        with self.display:
            render = asyncio.ensure_future(self._render(complete))
            try:
                last_id = await self._poll(contest_id, recent_only)
            except BaseException:
                complete.set()
                # the poll failure is the one reported
                await asyncio.gather(render, return_exceptions=True)
                raise
            complete.set()
            await render
            return last_id

    async def _poll(self, contest_id: str, recent_only: bool) -> Optional[int]:
        while True:
            _, all_done = await self.poll_once(contest_id, recent_only)
            if recent_only and all_done:
                return max(self.submissions, default=None)
            await self._pace()

    async def _pace(self) -> None:
        for _ in range(max(1, self.interval_ms // self.tick_ms)):
            for tracked in self.submissions.values():
                if tracked.indicator.live:
                    tracked.indicator.tick()
            await self._sleep(self.tick_ms / 1000)

    async def _render(self, complete: asyncio.Event) -> None:
        while not complete.is_set():
            self.display.refresh()
            try:
                await asyncio.wait_for(complete.wait(), timeout=self.tick_ms / 1000)
            except asyncio.TimeoutError:
                pass
        self.display.refresh()


def track_submissions(
    source: SubmissionSource,
    contest_id: str,
    recent_only: bool,
    interval_ms: int = 2000,
    console: Optional[Console] = None,
) -> Optional[int]:
    """Blocking entry point used by the command line."""
    tracker = SubmissionTracker(source, LiveDisplay(console), interval_ms=interval_ms)
    return asyncio.run(tracker.track(contest_id, recent_only))
