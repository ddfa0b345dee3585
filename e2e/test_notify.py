"""Notification tests.

Covers Settings.from_env, the plan summary tables, the Slack and Jira
reporters (against httpx.MockTransport, no network) and the dispatcher's
fault isolation.
"""

import asyncio
import json

import httpx
import pytest

from config.settings import Settings
from notify.base import NotificationError, Reporter
from notify.dispatcher import NotificationDispatcher
from notify.jira import JiraReporter
from notify.slack import SlackReporter
from notify.summary import summarize, top_by_minutes
from schemas.incident import ScoredIncident
from schemas.plan import Plan


# ── Helpers ──────────────────────────────────────────────────────────────────

def make_scored(test_id="T1", module="checkout", final=10, priority=1.0, env="prod") -> ScoredIncident:
    return ScoredIncident(
        test_id=test_id,
        module=module,
        environment=env,
        failure_type="flaky",
        impacted_layers=("api",),
        base_minutes=final,
        final_minutes=final,
        priority_score=priority,
    )


def make_plan() -> Plan:
    return Plan(incidents=[
        make_scored("T1", "checkout", final=50, priority=9.0),
        make_scored("T2", "payments", final=10, priority=8.0),
        make_scored("T3", "search", final=60, priority=7.0),
        make_scored("T4", "profile", final=5, priority=6.0),
        make_scored("T5", "cart", final=30, priority=5.0),
        make_scored("T6", "admin", final=45, priority=4.0),
    ])


SLACK_SETTINGS = Settings(slack_webhook="https://hooks.slack.test/services/X", dashboard_url="http://dash")
JIRA_SETTINGS = Settings(
    jira_base="https://acme.atlassian.test",
    jira_email="qa@acme.test",
    jira_token="secret",
    jira_issue="QA-1",
)


class Recorder:
    """Collects requests and answers each with a fixed status."""

    def __init__(self, status: int = 200):
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json={"ok": self.status < 400})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


# ── Settings ──────────────────────────────────────────────────────────────────

class TestSettings:
    def test_from_env_mapping(self):
        settings = Settings.from_env({
            "SLACK_WEBHOOK_URL": "https://hook",
            "DASHBOARD_URL": "http://dash",
            "JIRA_BASE": "https://jira.test/",
            "JIRA_EMAIL": "a@b",
            "JIRA_TOKEN": "t",
            "JIRA_ISSUE_KEY": "QA-9",
        })
        assert settings.slack_webhook == "https://hook"
        assert settings.jira_base == "https://jira.test"
        assert settings.slack_enabled
        assert settings.jira_enabled

    def test_empty_env_disables_everything(self):
        settings = Settings.from_env({})
        assert not settings.slack_enabled
        assert not settings.jira_enabled

    def test_partial_jira_settings_disable_jira(self):
        settings = Settings.from_env({"JIRA_BASE": "https://jira.test", "JIRA_EMAIL": "a@b"})
        assert not settings.jira_enabled


# ── Summary ───────────────────────────────────────────────────────────────────

class TestSummary:
    def test_totals(self):
        summary = summarize(make_plan())
        assert summary.incident_count == 6
        assert summary.total_minutes == 200

    def test_top_by_priority_is_plan_prefix(self):
        summary = summarize(make_plan())
        assert [i.test_id for i in summary.top_by_priority] == ["T1", "T2", "T3", "T4", "T5"]

    def test_top_by_minutes(self):
        summary = summarize(make_plan())
        assert [i.test_id for i in summary.top_by_minutes] == ["T3", "T1", "T6", "T5", "T2"]

    def test_top_by_minutes_ties_break_on_priority(self):
        ranked = top_by_minutes([
            make_scored("low", final=20, priority=1.0),
            make_scored("high", final=20, priority=3.0),
        ])
        assert [i.test_id for i in ranked] == ["high", "low"]

    def test_near_cap_rows_are_flagged(self):
        table = summarize(make_plan()).minutes_table().splitlines()
        assert "⚠️" in table[0]       # 60 minutes
        assert "⚠️" in table[1]       # 50 minutes
        assert "⚠️" not in table[2]   # exactly 45 is not flagged

    def test_row_format(self):
        summary = summarize(Plan(incidents=[make_scored(final=12, priority=2.5)]), dashboard_url="http://dash")
        row = summary.priority_table()
        assert row.startswith(" 1.    <http://dash|checkout>")
        assert row.endswith("  12m   2.50")

    def test_slack_text_contains_both_tables(self):
        text = summarize(make_plan()).slack_text()
        assert "• Incidents: 6" in text
        assert "• Total minutes: 200" in text
        assert "*Top 5 by priority:*" in text
        assert "*Top 5 by final minutes:*" in text
        assert text.count("```") == 4

    def test_jira_text_uses_code_blocks(self):
        text = summarize(make_plan()).jira_text()
        assert text.count("{code}") == 4
        assert "*Incidents:* 6" in text

    def test_empty_plan_summary(self):
        summary = summarize(Plan(incidents=[]))
        assert summary.incident_count == 0
        assert summary.priority_table() == ""


# ── SlackReporter ─────────────────────────────────────────────────────────────

class TestSlackReporter:
    async def test_posts_text_payload(self):
        recorder = Recorder()
        reporter = SlackReporter(SLACK_SETTINGS, transport=recorder.transport())
        summary = summarize(make_plan(), dashboard_url=SLACK_SETTINGS.dashboard_url)

        await reporter.send(summary)

        assert len(recorder.requests) == 1
        request = recorder.requests[0]
        assert str(request.url) == SLACK_SETTINGS.slack_webhook
        assert json.loads(request.content) == {"text": summary.slack_text()}

    async def test_error_status_raises(self):
        reporter = SlackReporter(SLACK_SETTINGS, transport=Recorder(status=500).transport())
        with pytest.raises(NotificationError, match="500"):
            await reporter.send(summarize(make_plan()))

    async def test_unconfigured_raises(self):
        reporter = SlackReporter(Settings())
        assert not reporter.enabled
        with pytest.raises(NotificationError):
            await reporter.send(summarize(make_plan()))


# ── JiraReporter ──────────────────────────────────────────────────────────────

class TestJiraReporter:
    async def test_attaches_files_then_comments(self, tmp_path):
        plan_file = tmp_path / "plan.json"
        plan_file.write_text("[]", encoding="utf-8")
        dash_file = tmp_path / "dashboard.html"
        dash_file.write_text("<html></html>", encoding="utf-8")

        recorder = Recorder()
        reporter = JiraReporter(JIRA_SETTINGS, transport=recorder.transport())
        summary = summarize(make_plan())

        await reporter.send(summary, [plan_file, dash_file])

        paths = [r.url.path for r in recorder.requests]
        assert paths == [
            "/rest/api/2/issue/QA-1/attachments",
            "/rest/api/2/issue/QA-1/attachments",
            "/rest/api/2/issue/QA-1/comment",
        ]
        attach = recorder.requests[0]
        assert attach.headers["X-Atlassian-Token"] == "no-check"
        assert attach.headers["Authorization"].startswith("Basic ")
        assert b'filename="plan.json"' in attach.content
        assert json.loads(recorder.requests[2].content) == {"body": summary.jira_text()}

    async def test_comment_only_without_attachments(self):
        recorder = Recorder()
        await JiraReporter(JIRA_SETTINGS, transport=recorder.transport()).send(summarize(make_plan()))
        assert [r.url.path for r in recorder.requests] == ["/rest/api/2/issue/QA-1/comment"]

    async def test_error_status_raises(self):
        reporter = JiraReporter(JIRA_SETTINGS, transport=Recorder(status=403).transport())
        with pytest.raises(NotificationError, match="403"):
            await reporter.send(summarize(make_plan()))

    async def test_incomplete_settings_raise(self):
        reporter = JiraReporter(Settings(jira_base="https://jira.test"))
        assert not reporter.enabled
        with pytest.raises(NotificationError):
            await reporter.send(summarize(make_plan()))


# ── NotificationDispatcher ────────────────────────────────────────────────────

class StubReporter(Reporter):
    def __init__(self, name="stub", enabled=True, error=None, delay=0.0):
        self.name = name
        self._enabled = enabled
        self._error = error
        self._delay = delay
        self.sent = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def send(self, summary, attachments=()):
        await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        self.sent.append(summary)


class TestNotificationDispatcher:
    async def test_sends_through_enabled_reporters(self):
        ok = StubReporter("ok")
        result = await NotificationDispatcher().dispatch([ok], summarize(make_plan()))
        assert result == {"ok": True}
        assert len(ok.sent) == 1

    async def test_disabled_reporters_are_skipped(self):
        off = StubReporter("off", enabled=False)
        result = await NotificationDispatcher().dispatch([off], summarize(make_plan()))
        assert result == {}
        assert off.sent == []

    async def test_failing_reporter_does_not_stop_others(self):
        ok = StubReporter("ok")
        bad = StubReporter("bad", error=NotificationError("boom"))
        result = await NotificationDispatcher().dispatch([bad, ok], summarize(make_plan()))
        assert result == {"bad": False, "ok": True}
        assert len(ok.sent) == 1

    async def test_slow_reporter_times_out(self):
        slow = StubReporter("slow", delay=999)
        ok = StubReporter("ok")
        result = await NotificationDispatcher(timeout_seconds=1).dispatch(
            [slow, ok], summarize(make_plan())
        )
        assert result == {"slow": False, "ok": True}
