# This file checks the built app against the public route table.
# It prints every contract route the app does not serve (or serves with the wrong method)
# and writes a markdown report. A non-zero exit fails CI before a release drops a route.
# ruff: noqa: E402

from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from cleo.api.app import app
from cleo.api.route_table import (
    ROUTE_CATEGORIES,
    categories_for,
    detect_route_drift,
    registered_routes,
    unique_routes,
)

REPORT_PATH = Path("reports/api/route_contract_report.md")


def main() -> int:
    expected = unique_routes()
    findings = detect_route_drift(expected=expected, registered=registered_routes(app))

    REPORT_PATH.parent.mkdir(parents=True, exist_ok=True)
    REPORT_PATH.write_text(_build_report(findings=findings), encoding="utf-8")

    if findings:
        print("Route contract drift detected:")
        for item in findings:
            print(f"- {item}")
        return 1

    print(f"All {len(expected)} contract routes are served.")
    return 0


def _build_report(*, findings: list[str]) -> str:
    lines: list[str] = [
        "# Route Contract Report",
        "",
        f"Generated at: {datetime.now(tz=UTC).isoformat()}",
        "",
        "## Contract",
        "",
    ]
    for route in unique_routes():
        lines.append(f"- `{route.method} {route.path}` ({', '.join(categories_for(route.path))})")
    lines.extend(["", f"Categories: {len(ROUTE_CATEGORIES)}", "", "## Findings", ""])
    if findings:
        lines.extend([f"- {item}" for item in findings])
    else:
        lines.append("No drift detected.")
    return "\n".join(lines) + "\n"


if __name__ == "__main__":
    raise SystemExit(main())
