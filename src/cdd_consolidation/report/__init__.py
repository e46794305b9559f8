"""Report output: Excel writer."""

from .excel_writer import write_consolidation_report

__all__ = ["write_consolidation_report"]
