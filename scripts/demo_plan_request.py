"""Post the bundled fixtures to a local planner API and print the plan."""

import json
import pathlib
import sys

import httpx
import yaml

BASE_URL = "http://127.0.0.1:8000"
FIXTURES = pathlib.Path(__file__).parents[1] / "fixtures"


def main() -> int:
    policy = yaml.safe_load((FIXTURES / "policy.yaml").read_text(encoding="utf-8"))
    failures = (FIXTURES / "failures.jsonl").read_text(encoding="utf-8")

    try:
        print("Posting fixtures to /api/plan ...")
        resp = httpx.post(
            f"{BASE_URL}/api/plan",
            json={"policy": policy, "failures": failures},
            timeout=10,
        )
    except httpx.HTTPError as exc:
        print(f"Failed to reach API at {BASE_URL}: {exc}", file=sys.stderr)
        print("Start it first with: uv run uvicorn main:app", file=sys.stderr)
        return 1

    if resp.status_code != 200:
        print(f"Unexpected response {resp.status_code}: {resp.text}", file=sys.stderr)
        return 2

    plan = resp.json()
    print(f"Incidents: {plan['incident_count']}  Total minutes: {plan['total_minutes']}")
    print(json.dumps(plan["incidents"], indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
