"""
Reporting module for Haven Homes.

Generates property valuation PDF reports.
"""

from .valuation_pdf import (
    ValuationReportGenerator,
    ReportSuccess,
    generate_report,
)

__all__ = [
    "ValuationReportGenerator",
    "ReportSuccess",
    "generate_report",
]
