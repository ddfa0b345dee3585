"""Incident schemas.

Incident is the canonical, fully-formed shape of one test-failure record
after ingestion. Raw records are untyped mappings and may be missing any
field; the ingester fills every gap with an empty string or empty tuple, so
nothing downstream ever has to ask whether a field exists.

ScoredIncident adds the three fields the scoring engine derives from an
Incident and the Policy. Both models are frozen: an incident is scored
once and never mutated afterwards.
"""

from pydantic import BaseModel, ConfigDict, Field


class Incident(BaseModel):
    """One normalized test-failure record, ready for scoring.

    Attributes:
        test_id: Identifier of the failing test, or None when the record
            did not carry one. Kept as a string so ranking compares it
            lexicographically ("T10" sorts before "T2").
        module: Owning module (e.g. "checkout"). Looked up in
            Policy.module_priority.
        environment: Where the failure happened (e.g. "prod").
        failure_type: Failure category (e.g. "flaky", "regression").
        impacted_layers: Layers the failure touches, in record order.
            Each layer contributes Policy.layer_minutes minutes.
    """

    model_config = ConfigDict(frozen=True)

    test_id: str | None = None
    module: str = ""
    environment: str = ""
    failure_type: str = ""
    impacted_layers: tuple[str, ...] = ()


class ScoredIncident(Incident):
    """An Incident plus the values the scoring engine derived from it.

    Attributes:
        base_minutes: Sum of layer minutes over impacted_layers.
        final_minutes: base_minutes times the environment and failure-type
            multipliers, capped at Policy.cap_minutes, rounded up.
        priority_score: module priority times the environment and
            failure-type multipliers, rounded to 3 decimal places.
    """

    base_minutes: int = Field(ge=0)
    final_minutes: int
    priority_score: float
