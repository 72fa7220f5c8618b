"""Reporting module for inspection results.

This module assembles inspection reports from the fragments produced by the
analysis stages and renders them as markdown (console), HTML or PDF.
"""

from .report_builder import ReportBuilder
from .report_generator import ReportGenerator, format_percent, truncate_value
from .html_report_generator import HTMLReportGenerator
from .pdf_report_generator import PDFReportGenerator

__all__ = [
    'ReportBuilder',
    'ReportGenerator',
    'HTMLReportGenerator',
    'PDFReportGenerator',
    'format_percent',
    'truncate_value',
]
