"""Remediation planner: HTTP API.

Exposes the planner to CI jobs that would rather POST their failure records
than shell out to the CLI. The endpoint is a thin wrapper: it validates the
request shape, calls build_plan(), and returns the Plan as JSON. Nothing is
stored between requests and no notifications are sent from here.

    POST /api/plan
        {"policy": {...policy document...},
         "failures": ["{...}", "{...}"]   or   "one record per line\\n..."}
        → 200 Plan JSON
        → 400 if the policy document is malformed

Run locally:
    uv run uvicorn main:app --reload
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from config.log_setup import configure_logging
from core.planner import build_plan
from exporters.dashboard import render_dashboard
from schemas.plan import Plan
from schemas.policy import PolicyError, load_policy

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

configure_logging()

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(title="Remediation Planner")


class PlanRequest(BaseModel):
    """Body of POST /api/plan.

    Attributes:
        policy: The policy document, already parsed (what a YAML or JSON
            policy file would load to). Validated by load_policy().
        failures: Either a list of record lines or one string holding
            newline-separated records.
    """

    policy: Any = None
    failures: list[str] | str = []

    def lines(self) -> list[str]:
        if isinstance(self.failures, str):
            return self.failures.splitlines()
        return self.failures


def _plan_from(request: PlanRequest) -> Plan:
    try:
        policy = load_policy(request.policy)
    except PolicyError as exc:
        logger.warning("Rejected plan request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
    return build_plan(request.lines(), policy)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/plan", response_model=Plan)
def create_plan(request: PlanRequest):
    """Build and return the ranked plan for the posted records."""
    plan = _plan_from(request)
    logger.info("Served plan with %d incidents.", plan.incident_count)
    return plan


@app.post("/api/plan/dashboard", response_class=HTMLResponse)
def create_dashboard(request: PlanRequest):
    """Build the plan and return it rendered as the HTML dashboard."""
    return render_dashboard(_plan_from(request))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
