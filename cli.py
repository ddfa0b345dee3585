"""Remediation planner: command-line runner.

Reads a policy file and a failures file (one JSON record per line), builds
the ranked remediation plan, writes it as JSON or CSV, optionally renders
the HTML dashboard, prints the top of the plan with Rich, and finally sends
the summary to any configured reporters (Slack, Jira).

Usage:
    uv run python cli.py --policy Policy.yaml --failures Failures.jsonl \\
        --out plan.json --dashboard dashboard.html

Notification credentials come from the environment or a local .env file;
see config/settings.py. Use --no-notify to skip them entirely.
"""

import argparse
import asyncio
import logging
import pathlib

from rich.console import Console

from config.log_setup import configure_logging
from config.settings import Settings
from core.planner import build_plan
from display.table import print_plan
from exporters.dashboard import write_dashboard
from exporters.plan_exporter import DEFAULT_OUTPUT, write_plan
from notify.dispatcher import NotificationDispatcher
from notify.jira import JiraReporter
from notify.slack import SlackReporter
from notify.summary import summarize
from schemas.plan import Plan
from schemas.policy import PolicyError, load_policy_file

logger = logging.getLogger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remediation-planner",
        description="Build a deterministic remediation plan from test-failure records.",
    )
    parser.add_argument("--policy", required=True, help="Policy file (YAML, or .json).")
    parser.add_argument("--failures", required=True, help="Failure records, one JSON object per line.")
    parser.add_argument("--out", default=DEFAULT_OUTPUT, help="Plan output; .csv for CSV, JSON otherwise.")
    parser.add_argument("--dashboard", help="Optional HTML dashboard output path.")
    parser.add_argument("--top", type=int, default=20, help="Rows to print in the terminal table.")
    parser.add_argument("--no-notify", action="store_true", help="Do not send Slack/Jira notifications.")
    parser.add_argument("--quiet", action="store_true", help="Only print file locations.")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    """Execute one planning run. Returns the process exit code."""
    try:
        policy = load_policy_file(args.policy)
    except PolicyError as exc:
        console.print(f"[bold red]✗ {exc}[/bold red]")
        return 1

    try:
        # Undecodable bytes become U+FFFD, so only their line is skipped.
        lines = pathlib.Path(args.failures).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        console.print(f"[bold red]✗ Cannot read failures file: {exc}[/bold red]")
        return 1

    plan = build_plan(lines, policy)

    try:
        out_path = write_plan(args.out, plan.incidents)
        artifacts = [out_path]
        if args.dashboard:
            artifacts.append(write_dashboard(args.dashboard, plan))
    except OSError as exc:
        console.print(f"[bold red]✗ Cannot write output: {exc}[/bold red]")
        return 1

    if not args.quiet:
        print_plan(plan, console, limit=args.top)

    console.print(f"[green]✓[/green] Plan saved to {out_path}")
    if args.dashboard:
        console.print(f"[green]✓[/green] Dashboard saved to {args.dashboard}")

    if not args.no_notify:
        delivered = asyncio.run(_notify(plan, settings, artifacts))
        for name, ok in delivered.items():
            mark = "[green]✓[/green]" if ok else "[red]✗[/red]"
            console.print(f"{mark} {name} notification {'sent' if ok else 'failed'}")

    return 0


async def _notify(plan: Plan, settings: Settings, artifacts: list[pathlib.Path]) -> dict[str, bool]:
    reporters = [SlackReporter(settings), JiraReporter(settings)]
    summary = summarize(plan, dashboard_url=settings.dashboard_url)
    return await NotificationDispatcher().dispatch(reporters, summary, artifacts)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(console=not args.quiet, level=logging.WARNING if args.quiet else logging.INFO)
    return run(args, Settings.from_env())


if __name__ == "__main__":
    raise SystemExit(main())
