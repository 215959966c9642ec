"""Export estimate reports to CSV, Markdown or JSON."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from landingzone.spec import EstimateReport

FORMATS = ("csv", "markdown", "json")


def export_report(report: EstimateReport, fmt: str, output: str | Path | None = None) -> str:
    """Render an EstimateReport in the given format. Returns the rendered string."""
    fmt = fmt.lower().strip()

    if fmt == "csv":
        from landingzone.exporter.csv_export import render

        content = render(report)
    elif fmt in ("markdown", "md"):
        from landingzone.exporter.markdown import render

        content = render(report)
    elif fmt == "json":
        content = report.to_json()
    else:
        raise ValueError(f"Unknown export format: {fmt!r}. Supported: {', '.join(FORMATS)}")

    if output:
        Path(output).write_text(content)
    return content
