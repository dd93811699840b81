"""Presentation layer: terminal rendering of report results."""

from startup_guardian.presentation.console import ReportConsole

__all__ = ["ReportConsole"]
