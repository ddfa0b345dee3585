"""Plan summary shared by every reporter.

Builds the two top-5 tables that go into chat and ticket notifications:

- Top 5 by priority:      the first five incidents of the plan, as ranked
- Top 5 by final minutes: final_minutes descending, then priority_score
                          descending; ties keep plan order

Incidents whose final_minutes exceed NEAR_CAP_MINUTES are flagged so the
reader can spot estimates that are close to the per-incident cap.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from schemas.incident import ScoredIncident
from schemas.plan import Plan

TOP_N = 5
NEAR_CAP_MINUTES = 45
WARN_MARK = "⚠️ "

HEADER = "#  Module                          Env      Mins   Priority"
FOOTNOTE = f"_⚠️ indicates incidents with final_minutes > {NEAR_CAP_MINUTES} (near the max cap)_"
TITLE = "✅ *Deterministic Test Plan generated*"


@dataclass(frozen=True)
class PlanSummary:
    """Totals and top-N rows for one plan.

    Attributes:
        incident_count: Number of incidents in the plan.
        total_minutes:  Sum of final_minutes across the plan.
        top_by_priority: First TOP_N incidents in plan order.
        top_by_minutes:  TOP_N incidents with the largest final_minutes.
        dashboard_url:   Link target for module names; may be empty.
    """

    incident_count: int
    total_minutes: int
    top_by_priority: tuple[ScoredIncident, ...]
    top_by_minutes: tuple[ScoredIncident, ...]
    dashboard_url: str = ""

    def priority_table(self) -> str:
        return "\n".join(self._row(i, r) for i, r in enumerate(self.top_by_priority, 1))

    def minutes_table(self) -> str:
        return "\n".join(self._row(i, r) for i, r in enumerate(self.top_by_minutes, 1))

    def slack_text(self) -> str:
        """Message body for Slack, using ``` code blocks."""
        return (
            f"{TITLE}\n"
            f"• Incidents: {self.incident_count}\n"
            f"• Total minutes: {self.total_minutes}\n\n"
            "*Top 5 by priority:*\n"
            f"```{HEADER}\n{self.priority_table()}\n```\n\n"
            "*Top 5 by final minutes:*\n"
            f"```{HEADER}\n{self.minutes_table()}\n```\n"
            f"{FOOTNOTE}"
        )

    def jira_text(self) -> str:
        """Comment body for Jira, using {code} blocks."""
        return (
            f"{TITLE}\n"
            f"*Incidents:* {self.incident_count} • *Total minutes:* {self.total_minutes}\n\n"
            "*Top 5 by priority:*\n"
            f"{{code}}\n{HEADER}\n{self.priority_table()}\n{{code}}\n\n"
            "*Top 5 by final minutes:*\n"
            f"{{code}}\n{HEADER}\n{self.minutes_table()}\n{{code}}\n"
            f"{FOOTNOTE}"
        )

    def _row(self, position: int, incident: ScoredIncident) -> str:
        warn = WARN_MARK if incident.final_minutes > NEAR_CAP_MINUTES else "   "
        link = f"<{self.dashboard_url}|{incident.module}>"
        return (
            f"{position:>2}. {warn}{link:<30} {incident.environment:<8} "
            f"{incident.final_minutes:>4}m   {incident.priority_score:.2f}"
        )


def summarize(plan: Plan, dashboard_url: str = "") -> PlanSummary:
    """Build the notification summary for a plan."""
    return PlanSummary(
        incident_count=plan.incident_count,
        total_minutes=plan.total_minutes,
        top_by_priority=tuple(plan.incidents[:TOP_N]),
        top_by_minutes=tuple(top_by_minutes(plan.incidents)),
        dashboard_url=dashboard_url,
    )


def top_by_minutes(incidents: Sequence[ScoredIncident], n: int = TOP_N) -> list[ScoredIncident]:
    """Largest final_minutes first, then highest priority; stable otherwise."""
    return sorted(
        incidents,
        key=lambda i: (-i.final_minutes, -i.priority_score),
    )[:n]
