"""Reporter abstract base class.

Defines the interface every outbound notification channel implements. The
CLI only depends on this interface: it builds the plan, summarizes it once,
and hands the same summary to every enabled reporter. Adding a channel
means writing a new subclass, with no change to the planner.
"""

import pathlib
from abc import ABC, abstractmethod
from collections.abc import Sequence

from notify.summary import PlanSummary

TIMEOUT_SECONDS = 15


class NotificationError(RuntimeError):
    """Raised when an outbound notification is rejected or cannot be sent."""


class Reporter(ABC):
    """Abstract base class for notification channels.

    Reporters receive their Settings at construction time and never read
    the environment. A reporter whose settings are incomplete reports
    enabled=False and is skipped by the caller.
    """

    name: str = "reporter"

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """True when the reporter has everything it needs to send."""

    @abstractmethod
    async def send(
        self,
        summary: PlanSummary,
        attachments: Sequence[str | pathlib.Path] = (),
    ) -> None:
        """Deliver the summary (and, where supported, the attachments).

        Raises:
            NotificationError: If the channel rejects the notification or
                cannot be reached.
        """
        ...
