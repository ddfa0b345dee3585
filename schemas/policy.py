"""Policy schema.

The Policy is the declarative weighting document that drives scoring. It is
loaded once per run, validated, and then treated as read-only: the scoring
engine only ever calls its lookup methods, and every lookup has an explicit
default so an incident that names an unknown environment, failure type,
layer or module can never make scoring fail.

Expected document shape (YAML or JSON):

    multipliers:
      by_environment:   {prod: 2.0, staging: 1.2}
      by_failure_type:  {flaky: 0.5, regression: 1.5}
    minutes_per_impacted_layer: {api: 10, db: 20}
    module_priority_score:      {checkout: 5}
    caps:
      per_incident_minutes_max: 60

Partial documents are accepted. A missing section becomes an empty mapping
and a missing cap becomes 60, with a warning logged for each. An entry
with no value (`prod:` in YAML) is dropped, so its lookup falls back to
the default. A section that
is present but has the wrong shape is a malformed policy and raises
PolicyError.
"""

import json
import logging
import pathlib

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CAP_MINUTES = 60
DEFAULT_MULTIPLIER = 1.0
DEFAULT_LAYER_MINUTES = 0
DEFAULT_MODULE_PRIORITY = 1.0


class PolicyError(ValueError):
    """Raised when a policy document is malformed.

    Missing sections are not errors (they default); this is only raised
    when the document is not a mapping or a section has the wrong shape.
    """


class Policy(BaseModel):
    """Validated, immutable weighting rules for one planning run.

    Attributes:
        environment_multiplier: environment name → multiplier applied to
            both the minute estimate and the priority score.
        failure_type_multiplier: failure type → multiplier, applied the
            same way.
        layer_minutes: impacted layer name → remediation minutes. Summed
            over an incident's layers to produce base_minutes.
        module_priority: module name → base priority weight.
        cap_minutes: Hard ceiling on one incident's final_minutes.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    environment_multiplier: dict[str, float] = Field(default_factory=dict)
    failure_type_multiplier: dict[str, float] = Field(default_factory=dict)
    layer_minutes: dict[str, int] = Field(default_factory=dict)
    module_priority: dict[str, float] = Field(default_factory=dict)
    cap_minutes: int = Field(default=DEFAULT_CAP_MINUTES, gt=0)

    def environment_factor(self, environment: str) -> float:
        return self.environment_multiplier.get(environment, DEFAULT_MULTIPLIER)

    def failure_type_factor(self, failure_type: str) -> float:
        return self.failure_type_multiplier.get(failure_type, DEFAULT_MULTIPLIER)

    def minutes_for_layer(self, layer: str) -> int:
        return self.layer_minutes.get(layer, DEFAULT_LAYER_MINUTES)

    def priority_for_module(self, module: str) -> float:
        return self.module_priority.get(module, DEFAULT_MODULE_PRIORITY)


def load_policy(raw: object) -> Policy:
    """Build a Policy from a parsed policy document.

    Args:
        raw: The parsed YAML/JSON document. Must be a mapping.

    Returns:
        A frozen Policy. Sections absent from the document are empty and
        the cap defaults to 60.

    Raises:
        PolicyError: If raw is not a mapping, a section is not a mapping,
            or a value fails validation (non-numeric weight, negative
            layer minutes, negative cap).
    """
    if not isinstance(raw, dict):
        raise PolicyError(
            f"Policy document must be a mapping, got {type(raw).__name__}."
        )

    multipliers = _section(raw, "multipliers")
    caps = _section(raw, "caps")

    cap = caps.get("per_incident_minutes_max")
    if not cap:
        # 0 and null are treated as "not configured".
        logger.warning(
            "Policy has no caps.per_incident_minutes_max, using %d.",
            DEFAULT_CAP_MINUTES,
        )
        cap = DEFAULT_CAP_MINUTES

    try:
        policy = Policy(
            environment_multiplier=_section(multipliers, "by_environment", "multipliers."),
            failure_type_multiplier=_section(multipliers, "by_failure_type", "multipliers."),
            layer_minutes=_section(raw, "minutes_per_impacted_layer"),
            module_priority=_section(raw, "module_priority_score"),
            cap_minutes=cap,
        )
    except ValidationError as exc:
        raise PolicyError(f"Invalid policy: {exc}") from exc

    for name, minutes in policy.layer_minutes.items():
        if minutes < 0:
            raise PolicyError(
                f"minutes_per_impacted_layer.{name} must be >= 0, got {minutes}."
            )

    _warn_non_positive(policy)
    return policy


def load_policy_file(path: str | pathlib.Path) -> Policy:
    """Read a policy file and load it.

    Files ending in .json are parsed as JSON; anything else as YAML.

    Raises:
        PolicyError: If the file cannot be read or parsed, or the parsed
            document is not a valid policy.
    """
    path = pathlib.Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PolicyError(f"Cannot read policy file {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(content)
        else:
            raw = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise PolicyError(f"Cannot parse policy file {path}: {exc}") from exc

    logger.info("Loaded policy document from %s.", path)
    return load_policy(raw)


# ── Private helpers ────────────────────────────────────────────────────────────

def _section(parent: dict, key: str, prefix: str = "") -> dict:
    """Return parent[key] as a mapping, defaulting to {} when absent."""
    value = parent.get(key)
    if value is None:
        logger.warning("Policy section '%s%s' is missing, using defaults.", prefix, key)
        return {}
    if not isinstance(value, dict):
        raise PolicyError(
            f"Policy section '{prefix}{key}' must be a mapping, "
            f"got {type(value).__name__}."
        )
    # YAML turns keys like `2024` or `yes` into non-strings, and `prod:` into None.
    entries = {}
    for k, v in value.items():
        if v is None:
            logger.warning("Policy entry '%s%s.%s' is empty, using its default.", prefix, key, k)
            continue
        entries[str(k)] = v
    return entries


def _warn_non_positive(policy: Policy) -> None:
    """Log every zero or negative weight. They are allowed, but unusual."""
    weights = {
        "multipliers.by_environment": policy.environment_multiplier,
        "multipliers.by_failure_type": policy.failure_type_multiplier,
        "module_priority_score": policy.module_priority,
    }
    for section, mapping in weights.items():
        for name, value in mapping.items():
            if value <= 0:
                logger.warning("Policy weight %s.%s is %s (not positive).", section, name, value)
