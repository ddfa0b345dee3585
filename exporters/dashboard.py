"""HTML dashboard: a standalone, static view of the plan.

Renders one self-contained HTML file: a totals header, filter selects for
module, environment and failure type, and the plan table with click-to-sort
headers. The rows are emitted in plan order. Sorting and filtering happen
in the reader's browser and never touch the plan itself.
"""

import logging
import pathlib

from jinja2 import Template

from schemas.plan import Plan

logger = logging.getLogger(__name__)

_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Deterministic Test Plan</title>
  <style>
    body { font-family: Arial, Helvetica, sans-serif; color: #333; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    th { background-color: #f4f4f4; cursor: pointer; }
    td.num { text-align: right; }
    tr:nth-child(even) { background-color: #fafafa; }
    .filters { margin-bottom: 15px; display: flex; gap: 15px; align-items: center; }
    .indicator { color: #aaa; font-size: 0.8em; }
  </style>
</head>
<body>
<h2>Deterministic Test Plan</h2>
<p>
  <b>Incidents:</b> {{ plan.incident_count }}
  &nbsp;&bull;&nbsp; <b>Total minutes:</b> {{ plan.total_minutes }}
  {% if plan.skipped_lines %}&nbsp;&bull;&nbsp; <b>Skipped lines:</b> {{ plan.skipped_lines | length }}{% endif %}
</p>

<div class="filters">
  <label>Module:
    <select id="moduleFilter"><option value="">All</option>
      {% for value in modules %}<option value="{{ value }}">{{ value }}</option>{% endfor %}
    </select>
  </label>
  <label>Environment:
    <select id="envFilter"><option value="">All</option>
      {% for value in environments %}<option value="{{ value }}">{{ value }}</option>{% endfor %}
    </select>
  </label>
  <label>Failure Type:
    <select id="failureFilter"><option value="">All</option>
      {% for value in failure_types %}<option value="{{ value }}">{{ value }}</option>{% endfor %}
    </select>
  </label>
</div>

<table id="plan">
<thead>
  <tr>
    <th>Test ID</th>
    <th>Module</th>
    <th>Environment</th>
    <th>Failure Type</th>
    <th>Impacted Layers</th>
    <th>Base Minutes</th>
    <th>Final Minutes</th>
    <th>Priority Score</th>
  </tr>
</thead>
<tbody>
{% for r in plan.incidents %}
  <tr data-module="{{ r.module }}" data-environment="{{ r.environment }}" data-failure-type="{{ r.failure_type }}">
    <td>{{ r.test_id or "" }}</td>
    <td>{{ r.module }}</td>
    <td>{{ r.environment }}</td>
    <td>{{ r.failure_type }}</td>
    <td>{{ r.impacted_layers | join(", ") }}</td>
    <td class="num">{{ r.base_minutes }}</td>
    <td class="num">{{ r.final_minutes }}</td>
    <td class="num">{{ "%.3f" | format(r.priority_score) }}</td>
  </tr>
{% endfor %}
</tbody>
</table>

<script>
  const table = document.getElementById("plan");
  const tbody = table.querySelector("tbody");
  const rows = Array.from(tbody.querySelectorAll("tr"));

  const applyFilters = () => {
    const m = document.getElementById("moduleFilter").value;
    const e = document.getElementById("envFilter").value;
    const f = document.getElementById("failureFilter").value;
    rows.forEach(row => {
      const match =
        (!m || row.dataset.module === m) &&
        (!e || row.dataset.environment === e) &&
        (!f || row.dataset.failureType === f);
      row.style.display = match ? "" : "none";
    });
  };
  ["moduleFilter", "envFilter", "failureFilter"].forEach(id =>
    document.getElementById(id).addEventListener("change", applyFilters));

  const cellValue = (row, index) => row.children[index].textContent;
  const comparer = (index, asc) => (a, b) => {
    const v1 = cellValue(asc ? a : b, index);
    const v2 = cellValue(asc ? b : a, index);
    return !isNaN(parseFloat(v1)) && !isNaN(parseFloat(v2))
      ? parseFloat(v1) - parseFloat(v2)
      : v1.localeCompare(v2);
  };

  const headers = table.querySelectorAll("th");
  headers.forEach((th, i) => {
    th.insertAdjacentHTML("beforeend", ' <span class="indicator">&#8645;</span>');
    th.addEventListener("click", () => {
      const asc = !(th.asc = !th.asc);
      Array.from(tbody.querySelectorAll("tr"))
        .sort(comparer(i, asc))
        .forEach(tr => tbody.appendChild(tr));
      headers.forEach(h => h.querySelector(".indicator").innerHTML = "&#8645;");
      th.querySelector(".indicator").innerHTML = asc ? "&#9650;" : "&#9660;";
    });
  });
</script>
</body>
</html>
""",
    autoescape=True,
)


def render_dashboard(plan: Plan) -> str:
    """Render the plan as a standalone HTML page."""
    return _TEMPLATE.render(
        plan=plan,
        modules=_distinct(i.module for i in plan.incidents),
        environments=_distinct(i.environment for i in plan.incidents),
        failure_types=_distinct(i.failure_type for i in plan.incidents),
    )


def write_dashboard(path: str | pathlib.Path, plan: Plan) -> pathlib.Path:
    """Render the dashboard and write it to path."""
    path = pathlib.Path(path)
    path.write_text(render_dashboard(plan), encoding="utf-8")
    logger.info("Dashboard written to %s.", path)
    return path


def _distinct(values) -> list[str]:
    """Unique values in first-seen order (plan order)."""
    return list(dict.fromkeys(values))
