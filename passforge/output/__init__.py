"""
PassForge Output
=================

Rich console renderers and JSON report generation.
"""

from passforge.output.console import ForgeConsoleOutput
from passforge.output.report import ForgeReportGenerator

__all__ = ["ForgeConsoleOutput", "ForgeReportGenerator"]
