"""Consolidation of CDD/KYC auditor testing workbooks into findings reports."""

from .core import (
    ConsolidatedCustomer,
    ConsolidationResult,
    GeneratedWorkbook,
    WorkbookRow,
    classify_risk_tier,
    consolidate,
    consolidate_by_customer,
)
from .pipeline import run_pipeline

__version__ = "0.1.0"

__all__ = [
    "ConsolidatedCustomer",
    "ConsolidationResult",
    "GeneratedWorkbook",
    "WorkbookRow",
    "classify_risk_tier",
    "consolidate",
    "consolidate_by_customer",
    "run_pipeline",
]
