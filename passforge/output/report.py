"""
PassForge Report Generator
===========================

Writes machine-readable JSON reports from :class:`shared.models.ScanResult`
objects, suitable for CI pipelines and audit trails.

The engine never places an evaluated password in a result, so reports
are safe to archive; generated secrets are the one exception and live
under ``metadata["passwords"]``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from shared.models import ScanResult


class ForgeReportGenerator:
    """Builds and writes JSON reports.

    Args:
        version: Tool version recorded in the report header.
    """

    def __init__(self, version: str = "1.0.0") -> None:
        self.version = version

    def build(self, result: ScanResult) -> dict[str, Any]:
        """Report dictionary for *result* (JSON-serialisable)."""
        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": result.tool_name,
                "target": result.target,
                "version": self.version,
            },
            "summary": {
                "total_findings": result.finding_count,
                "severity_counts": result.severity_counts,
                "highest_severity": (
                    result.highest_severity.value if result.highest_severity else None
                ),
                "risk": result.risk.model_dump(mode="json") if result.risk else None,
                "duration_seconds": result.duration_seconds,
                "description": result.summary,
            },
            "findings": [f.model_dump(mode="json") for f in result.findings],
            "metadata": result.metadata,
        }

    def to_json(self, result: ScanResult) -> str:
        return json.dumps(self.build(result), indent=2, ensure_ascii=False, default=str)

    def generate_json(self, result: ScanResult, output_path: Path) -> Path:
        """Write the JSON report to *output_path*, creating parent directories.

        Returns:
            Path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_json(result), encoding="utf-8")
        return output_path
