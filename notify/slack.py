"""Slack reporter.

Posts the plan summary to a Slack incoming webhook. The webhook URL comes
from Settings. Incoming webhooks cannot carry files, so attachments are
ignored here; the message links to the dashboard instead.

Slack webhook reference: https://api.slack.com/messaging/webhooks
"""

import logging
import pathlib
from collections.abc import Sequence

import httpx

from config.settings import Settings
from notify.base import TIMEOUT_SECONDS, NotificationError, Reporter
from notify.summary import PlanSummary

logger = logging.getLogger(__name__)


class SlackReporter(Reporter):
    """Sends the plan summary to Slack via an incoming webhook.

    Attributes:
        settings:  Notification settings; only slack_webhook is used.
        transport: Optional httpx transport, for tests.
    """

    name = "slack"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.slack_enabled

    async def send(
        self,
        summary: PlanSummary,
        attachments: Sequence[str | pathlib.Path] = (),
    ) -> None:
        """Post summary.slack_text() to the webhook.

        Raises:
            NotificationError: If the webhook is not configured, the
                request fails, or Slack answers with a non-2xx status.
        """
        if not self.enabled:
            raise NotificationError("SLACK_WEBHOOK_URL is not configured.")

        async with httpx.AsyncClient(timeout=TIMEOUT_SECONDS, transport=self.transport) as client:
            try:
                resp = await client.post(
                    self.settings.slack_webhook,
                    json={"text": summary.slack_text()},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise NotificationError(
                    f"Slack webhook error {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise NotificationError(f"Slack webhook request failed: {exc}") from exc

        logger.info("Slack message sent via webhook.")
