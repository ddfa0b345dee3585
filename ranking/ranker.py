"""Ranker.

Imposes the plan's one meaningful order on a list of ScoredIncidents:

    1. priority_score  descending
    2. module          ascending
    3. test_id         ascending, compared as strings; None compares as "null"

Module comparison approximates locale collation without depending on the
machine's locale: names are compared case-insensitively first and by their
exact text only when they fold to the same string. test_id is compared by
exact text, so "T10" sorts before "T2".

The sort is stable. Incidents that tie on all three keys keep their input
order. Nothing is dropped or merged, and downstream exporters must not
re-sort the result.
"""

from collections.abc import Iterable

from schemas.incident import ScoredIncident

NULL_TEST_ID = "null"


def rank(scored: Iterable[ScoredIncident]) -> list[ScoredIncident]:
    """Return scored incidents in plan order. The input is not modified."""
    return sorted(scored, key=sort_key)


def sort_key(incident: ScoredIncident) -> tuple:
    """The comparator behind rank(), exposed for reporters and tests."""
    test_id = NULL_TEST_ID if incident.test_id is None else incident.test_id
    return (
        -incident.priority_score,
        incident.module.casefold(),
        incident.module,
        test_id,
    )
