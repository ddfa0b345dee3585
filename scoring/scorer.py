"""Scoring engine.

Applies the Policy to one Incident and derives three values:

    base_minutes   = sum(layer_minutes[l] for l in impacted_layers)
    final_minutes  = ceil(min(cap, base_minutes * env_mult * failure_mult))
    priority_score = round(module_priority * env_mult * failure_mult, 3)

The multiply-then-cap-then-ceil order matters: estimates are rounded up so
they never under-report, and the cap applies to the scaled value rather
than to base_minutes.

Arithmetic runs in Decimal, built from each weight's shortest repr, so a
policy weight of 1.1 means exactly 1.1. With binary floats, 10 * 1.1 is
11.000000000000002 and would ceil to 12.

No side effects, no I/O, no shared state. Same incident and policy always
produce the same ScoredIncident.
"""

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from schemas.incident import Incident, ScoredIncident
from schemas.policy import Policy

_PRIORITY_PLACES = Decimal("0.001")


def score(incident: Incident, policy: Policy) -> ScoredIncident:
    """Score one incident under the given policy.

    Args:
        incident: A normalized Incident from the ingester.
        policy:   The loaded Policy. Never mutated.

    Returns:
        A ScoredIncident carrying every Incident field plus base_minutes,
        final_minutes and priority_score.
    """
    env_mult = _exact(policy.environment_factor(incident.environment))
    failure_mult = _exact(policy.failure_type_factor(incident.failure_type))
    module_priority = _exact(policy.priority_for_module(incident.module))

    base_minutes = sum(policy.minutes_for_layer(layer) for layer in incident.impacted_layers)

    scaled = Decimal(base_minutes) * env_mult * failure_mult
    final_minutes = math.ceil(min(Decimal(policy.cap_minutes), scaled))

    priority = (module_priority * env_mult * failure_mult).quantize(
        _PRIORITY_PLACES, rounding=ROUND_HALF_UP
    )

    return ScoredIncident(
        **incident.model_dump(),
        base_minutes=base_minutes,
        final_minutes=final_minutes,
        priority_score=float(priority),
    )


def score_all(incidents: Iterable[Incident], policy: Policy) -> list[ScoredIncident]:
    """Score every incident, preserving input order."""
    return [score(incident, policy) for incident in incidents]


def _exact(value: float | int) -> Decimal:
    return Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
