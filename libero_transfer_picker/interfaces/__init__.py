"""Presentation helpers and report sinks."""

from .display_utils import LoggingReportSink, plan_to_dataframe

__all__ = ["LoggingReportSink", "plan_to_dataframe"]
