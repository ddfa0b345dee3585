"""Outbound notification settings.

Credentials and webhook URLs are read from the environment (and a local
.env file) exactly once, at the entry point, and passed into the reporters
as a Settings object. Nothing in the scoring core ever reads them.

Environment variables:
    SLACK_WEBHOOK_URL  Incoming-webhook URL for the Slack summary.
    DASHBOARD_URL      Link target used for module names in summaries.
    JIRA_BASE          Jira site root, e.g. https://acme.atlassian.net
    JIRA_EMAIL         Account email for Jira basic auth.
    JIRA_TOKEN         Jira API token.
    JIRA_ISSUE_KEY     Issue to attach the plan to, e.g. QA-123.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    slack_webhook: str = ""
    dashboard_url: str = ""
    jira_base: str = ""
    jira_email: str = ""
    jira_token: str = ""
    jira_issue: str = ""

    @property
    def slack_enabled(self) -> bool:
        return bool(self.slack_webhook)

    @property
    def jira_enabled(self) -> bool:
        return all((self.jira_base, self.jira_email, self.jira_token, self.jira_issue))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build Settings from environ, or from os.environ after loading .env."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(
            slack_webhook=environ.get("SLACK_WEBHOOK_URL", ""),
            dashboard_url=environ.get("DASHBOARD_URL", ""),
            jira_base=environ.get("JIRA_BASE", "").rstrip("/"),
            jira_email=environ.get("JIRA_EMAIL", ""),
            jira_token=environ.get("JIRA_TOKEN", ""),
            jira_issue=environ.get("JIRA_ISSUE_KEY", ""),
        )
