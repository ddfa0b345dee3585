"""Notification dispatcher.

Sends one plan summary through every enabled reporter concurrently. The
plan is already final when this runs, so a reporter failing can only cost
that one notification: it is logged and recorded, and the others continue.
"""

import asyncio
import logging
import pathlib
from collections.abc import Sequence

from notify.base import Reporter
from notify.summary import PlanSummary

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class NotificationDispatcher:
    """Runs reporters concurrently with per-reporter fault isolation.

    Attributes:
        timeout_seconds: Maximum time to wait for a single reporter before
            cancelling it and marking it failed.
    """

    def __init__(self, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self,
        reporters: Sequence[Reporter],
        summary: PlanSummary,
        attachments: Sequence[str | pathlib.Path] = (),
    ) -> dict[str, bool]:
        """Send summary through every enabled reporter.

        Args:
            reporters:   Candidate reporters. Disabled ones are skipped
                         and do not appear in the result.
            summary:     The plan summary to deliver.
            attachments: Files offered to reporters that support them.

        Returns:
            Reporter name → True if it delivered, False if it failed.
        """
        active = [r for r in reporters if r.enabled]
        for skipped in (r for r in reporters if not r.enabled):
            logger.debug("Reporter '%s' not configured, skipping.", skipped.name)
        if not active:
            return {}

        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(self._send_safely(r, summary, attachments), name=r.name)
                for r in active
            ]

        return {r.name: t.result() for r, t in zip(active, tasks)}

    async def _send_safely(
        self,
        reporter: Reporter,
        summary: PlanSummary,
        attachments: Sequence[str | pathlib.Path],
    ) -> bool:
        """Run one reporter. Never raises; failures are logged and return False."""
        try:
            await asyncio.wait_for(
                reporter.send(summary, attachments),
                timeout=self.timeout_seconds,
            )
            return True

        except asyncio.TimeoutError:
            logger.error(
                "Reporter '%s' timed out after %ds, skipping.",
                reporter.name,
                self.timeout_seconds,
            )
            return False

        except Exception as exc:
            logger.error("Reporter '%s' failed, skipping. Error: %s", reporter.name, exc)
            return False
