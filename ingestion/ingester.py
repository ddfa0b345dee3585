"""Record ingester: raw failure lines to canonical Incidents.

This is the only place in the system that touches untyped record data.
For each input line it:
1. Skips blank lines
2. Decodes the line into a mapping (see utils.parse.decode_record)
3. Normalizes the mapping into a fully-formed Incident

A line that cannot be decoded becomes a RecordDecodeError in the report and
a logged warning. It never aborts the batch.

Output order matches input order. The ranker imposes the real order later.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from schemas.incident import Incident
from utils.parse import RecordDecodeError, decode_record

logger = logging.getLogger(__name__)


@dataclass
class LineResult:
    """Outcome of ingesting one non-blank line: an incident or an error."""

    line_number: int
    incident: Incident | None = None
    error: RecordDecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.incident is not None


@dataclass
class IngestReport:
    """Everything the ingester learned from one batch of lines.

    Attributes:
        results: One LineResult per non-blank line, in input order.
    """

    results: list[LineResult] = field(default_factory=list)

    @property
    def incidents(self) -> list[Incident]:
        return [r.incident for r in self.results if r.incident is not None]

    @property
    def errors(self) -> list[RecordDecodeError]:
        return [r.error for r in self.results if r.error is not None]


class RecordIngester:
    """Turns raw failure-record lines into Incidents, skipping bad lines."""

    def ingest(self, lines: Iterable[str]) -> list[Incident]:
        """Return the Incidents decoded from lines, in input order."""
        return self.ingest_report(lines).incidents

    def ingest_report(self, lines: Iterable[str]) -> IngestReport:
        """Ingest lines and return per-line results.

        Args:
            lines: Raw text lines, one candidate record per line. Line
                numbers in warnings are 1-based positions in this sequence,
                blank lines included.

        Returns:
            IngestReport with one LineResult per non-blank line.
        """
        report = IngestReport()

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = decode_record(line, line_number)
            except RecordDecodeError as exc:
                logger.warning("Skipping bad JSON on line %d.", line_number)
                report.results.append(LineResult(line_number=line_number, error=exc))
                continue
            report.results.append(
                LineResult(line_number=line_number, incident=normalize_record(record))
            )

        logger.info(
            "Ingested %d incidents, skipped %d malformed lines.",
            len(report.incidents),
            len(report.errors),
        )
        return report


def ingest(lines: Iterable[str]) -> list[Incident]:
    """Module-level shortcut for RecordIngester().ingest(lines)."""
    return RecordIngester().ingest(lines)


def normalize_record(record: dict) -> Incident:
    """Map one decoded record onto the canonical Incident shape.

    Missing or non-text fields become "", a missing test_id becomes None,
    and impacted_layers is normalized by normalize_layers().
    """
    return Incident(
        test_id=_test_id(record.get("test_id")),
        module=_text(record.get("module")),
        environment=_text(record.get("environment")),
        failure_type=_text(record.get("failure_type")),
        impacted_layers=normalize_layers(record.get("impacted_layers")),
    )


def normalize_layers(value: object) -> tuple[str, ...]:
    """Normalize impacted_layers from a list or a comma-separated string.

    A list passes through with each item converted to a string. A string is
    split on commas, each piece trimmed, empty pieces dropped. Anything else
    (None, numbers, mappings) yields no layers.
    """
    if isinstance(value, list):
        return tuple(_scalar_text(item) for item in value)
    if isinstance(value, str):
        return tuple(piece.strip() for piece in value.split(",") if piece.strip())
    return ()


# ── Private helpers ────────────────────────────────────────────────────────────

def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _test_id(value: object) -> str | None:
    if value is None:
        return None
    # Numeric ids are common in CI exports; keep them comparable as strings.
    if isinstance(value, (str, int, float)):
        return _scalar_text(value)
    return None


def _scalar_text(value: object) -> str:
    """Render a decoded JSON value the way the record producers print it.

    null, true and false keep their JSON spelling, and integral floats drop
    the trailing ".0" (1.0 is "1").
    """
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)
