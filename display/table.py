"""Rich terminal rendering of a plan.

Used by the CLI after the plan has been written. Rows are shown in plan
order. Final minutes above the near-cap threshold are highlighted so they
stand out in a long run.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from notify.summary import NEAR_CAP_MINUTES
from schemas.plan import Plan


def plan_table(plan: Plan, limit: int | None = None) -> Table:
    """Build a Rich Table for the first `limit` incidents (all if None)."""
    table = Table(
        title=f"Remediation Plan ({plan.incident_count} incidents, {plan.total_minutes} min)",
        show_lines=False,
        border_style="bright_black",
    )
    table.add_column("#",          style="dim",  width=4, justify="right")
    table.add_column("Test ID",    style="bold", min_width=8)
    table.add_column("Module",     min_width=12)
    table.add_column("Env",        min_width=8)
    table.add_column("Failure",    min_width=10)
    table.add_column("Layers",     style="dim",  min_width=12)
    table.add_column("Base",       justify="right")
    table.add_column("Final",      justify="right")
    table.add_column("Priority",   justify="right")

    rows = plan.incidents if limit is None else plan.incidents[:limit]
    for i, r in enumerate(rows, 1):
        mins_color = "red" if r.final_minutes > NEAR_CAP_MINUTES else "green"
        table.add_row(
            str(i),
            escape(r.test_id) if r.test_id else "[dim]—[/dim]",
            escape(r.module),
            escape(r.environment),
            escape(r.failure_type),
            escape(", ".join(r.impacted_layers)),
            str(r.base_minutes),
            f"[{mins_color}]{r.final_minutes}[/{mins_color}]",
            f"{r.priority_score:.3f}",
        )

    return table


def print_plan(plan: Plan, console: Console, limit: int | None = 20) -> None:
    """Print the plan table plus a note about skipped lines."""
    if not plan.incidents:
        console.print("\n[yellow]No incidents in plan.[/yellow]")
    else:
        console.print()
        console.print(plan_table(plan, limit))
        if limit is not None and plan.incident_count > limit:
            console.print(f"[dim]… {plan.incident_count - limit} more in the exported plan[/dim]")

    if plan.skipped_lines:
        numbers = ", ".join(str(s.line_number) for s in plan.skipped_lines)
        console.print(f"[yellow]⚠  Skipped {len(plan.skipped_lines)} malformed lines: {numbers}[/yellow]")
