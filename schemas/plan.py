"""Plan schemas.

The Plan is the system's sole output artifact: the ranked ScoredIncidents
plus a record of which input lines were skipped. It is what the exporters,
the dashboard, the reporters and the HTTP API all consume.
"""

from pydantic import BaseModel, ConfigDict, computed_field

from schemas.incident import ScoredIncident


class SkippedLine(BaseModel):
    """One input line the ingester could not decode.

    Attributes:
        line_number: 1-based position of the line in the failures input.
        reason: Short description of why decoding failed.
        raw: The original line text, untrimmed.
    """

    model_config = ConfigDict(frozen=True)

    line_number: int
    reason: str
    raw: str


class Plan(BaseModel):
    """Ranked remediation plan for one batch of failure records.

    Attributes:
        incidents: Scored incidents in plan order. The order is final;
            consumers must not re-sort it.
        skipped_lines: Lines dropped during ingestion, in input order.
    """

    model_config = ConfigDict(frozen=True)

    incidents: list[ScoredIncident]
    skipped_lines: list[SkippedLine] = []

    @computed_field
    @property
    def incident_count(self) -> int:
        return len(self.incidents)

    @computed_field
    @property
    def total_minutes(self) -> int:
        return sum(i.final_minutes for i in self.incidents)
