"""Jira reporter.

Attaches the exported plan files to a Jira issue and adds a comment with
the plan summary. Uses basic auth (account email + API token) from
Settings.

Calls, in order:
    1. POST /rest/api/2/issue/{key}/attachments  (once per file)
    2. POST /rest/api/2/issue/{key}/comment      (summary tables)

Jira REST reference: https://developer.atlassian.com/cloud/jira/platform/rest/v2/
"""

import logging
import pathlib
from collections.abc import Sequence

import httpx

from config.settings import Settings
from notify.base import TIMEOUT_SECONDS, NotificationError, Reporter
from notify.summary import PlanSummary

logger = logging.getLogger(__name__)


class JiraReporter(Reporter):
    """Attaches plan artifacts and a summary comment to one Jira issue.

    Attributes:
        settings:  Notification settings; the jira_* fields are used.
        transport: Optional httpx transport, for tests.
    """

    name = "jira"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.jira_enabled

    async def send(
        self,
        summary: PlanSummary,
        attachments: Sequence[str | pathlib.Path] = (),
    ) -> None:
        """Upload attachments, then post the summary comment.

        Args:
            summary:     The plan summary to post as a comment.
            attachments: Files to attach (plan export, dashboard).

        Raises:
            NotificationError: If Jira is not configured or any call fails.
        """
        if not self.enabled:
            raise NotificationError("Jira settings are incomplete.")

        issue = self.settings.jira_issue
        logger.info("Attaching %d files to Jira issue %s.", len(attachments), issue)

        async with httpx.AsyncClient(
            base_url=self.settings.jira_base,
            auth=(self.settings.jira_email, self.settings.jira_token),
            timeout=TIMEOUT_SECONDS,
            transport=self.transport,
        ) as client:
            try:
                for path in attachments:
                    await self._attach(client, issue, pathlib.Path(path))

                resp = await client.post(
                    f"/rest/api/2/issue/{issue}/comment",
                    json={"body": summary.jira_text()},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise NotificationError(
                    f"Jira API error {exc.response.status_code}: {exc.response.text}"
                ) from exc
            except httpx.HTTPError as exc:
                raise NotificationError(f"Jira request failed: {exc}") from exc

        logger.info("Added comment and attachments to Jira issue %s.", issue)

    async def _attach(self, client: httpx.AsyncClient, issue: str, path: pathlib.Path) -> None:
        resp = await client.post(
            f"/rest/api/2/issue/{issue}/attachments",
            headers={"X-Atlassian-Token": "no-check"},
            files={"file": (path.name, path.read_bytes())},
        )
        resp.raise_for_status()
