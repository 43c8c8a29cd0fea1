"""Pure analysis package for timeReports.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
database I/O.
"""

from .report_transform import ReportTransformer, transform_report

__all__ = ["ReportTransformer", "transform_report"]
