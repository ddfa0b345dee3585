"""Planner: the top-level pipeline for one batch of failure records.

build_plan() is the single entry point collaborators call. It runs the
three core stages in one synchronous pass:

    1. Ingest raw lines into Incidents (malformed lines are reported, not fatal)
    2. Score each Incident under the Policy
    3. Rank the scored incidents into plan order

There is no state between calls and no I/O. The same lines and policy
always produce the same Plan, so callers can re-run freely.
"""

import logging
from collections.abc import Iterable

from ingestion.ingester import RecordIngester
from ranking.ranker import rank
from schemas.plan import Plan, SkippedLine
from schemas.policy import Policy
from scoring.scorer import score_all

logger = logging.getLogger(__name__)


def build_plan(lines: Iterable[str], policy: Policy) -> Plan:
    """Turn raw failure-record lines into a ranked Plan.

    Args:
        lines:  Raw text lines, one candidate record per line.
        policy: The loaded Policy for this run.

    Returns:
        A Plan whose incidents are rank(score_all(ingest(lines), policy)).
        A batch with no valid lines yields a Plan with no incidents.
    """
    report = RecordIngester().ingest_report(lines)

    ranked = rank(score_all(report.incidents, policy))

    skipped = [
        SkippedLine(line_number=err.line_number, reason=str(err), raw=err.raw)
        for err in report.errors
    ]

    plan = Plan(incidents=ranked, skipped_lines=skipped)
    logger.info(
        "Plan built: %d incidents, %d total minutes, %d lines skipped.",
        plan.incident_count,
        plan.total_minutes,
        len(skipped),
    )
    return plan
