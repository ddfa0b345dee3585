"""Plan exporter: serializes the ranked incident list.

Two formats, chosen by output path:
- .csv   header row plus one row per incident; layers joined with "; "
- other  pretty-printed JSON array (2-space indent)

Rows are written in plan order. The exporter never re-sorts.
"""

import csv
import io
import json
import logging
import pathlib
from collections.abc import Sequence

from schemas.incident import ScoredIncident

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "plan.json"

FIELDS = (
    "test_id",
    "module",
    "environment",
    "failure_type",
    "impacted_layers",
    "base_minutes",
    "final_minutes",
    "priority_score",
)


def export_json(incidents: Sequence[ScoredIncident]) -> str:
    """Return the incidents as a JSON array using the stable field names."""
    rows = [i.model_dump(mode="json", include=set(FIELDS)) for i in incidents]
    # model_dump keeps declaration order, which matches FIELDS.
    return json.dumps(rows, indent=2, ensure_ascii=False)


def export_csv(incidents: Sequence[ScoredIncident]) -> str:
    """Return the incidents as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(FIELDS)
    for i in incidents:
        writer.writerow([
            "" if i.test_id is None else i.test_id,
            i.module,
            i.environment,
            i.failure_type,
            "; ".join(i.impacted_layers),
            i.base_minutes,
            i.final_minutes,
            i.priority_score,
        ])
    return buffer.getvalue()


def write_plan(path: str | pathlib.Path, incidents: Sequence[ScoredIncident]) -> pathlib.Path:
    """Write incidents to path, as CSV when it ends in .csv, JSON otherwise.

    Returns:
        The path that was written.
    """
    path = pathlib.Path(path)
    if path.suffix.lower() == ".csv":
        content = export_csv(incidents)
    else:
        content = export_json(incidents)

    path.write_text(content, encoding="utf-8")
    logger.info("Plan with %d incidents written to %s.", len(incidents), path)
    return path
