"""Pipeline I/O: auditor workbook readers."""

from .workbook_reader import read_auditor_workbook, read_workbook_dir, row_from_record

__all__ = ["read_auditor_workbook", "read_workbook_dir", "row_from_record"]
