"""Consolidation core: result vocabulary, row model, risk tiers and the engine."""

from .aggregation import (
    case_key,
    calculate_metrics,
    extract_exceptions,
    findings_by_attribute,
    findings_by_auditor,
    findings_by_category,
    findings_by_jurisdiction,
    findings_by_risk_tier,
    group_and_aggregate,
)
from .customers import consolidate_by_customer
from .engine import consolidate, flatten_rows
from .models import (
    AttributeMetrics,
    AuditorMetrics,
    CategoryMetrics,
    ConsolidatedCustomer,
    ConsolidatedMetrics,
    ConsolidationResult,
    CustomerFailure,
    CustomerObservation,
    CustomerQuestion,
    EntitySummary,
    ExceptionDetail,
    GeneratedWorkbook,
    JurisdictionMetrics,
    RawData,
    ResultTally,
    RiskTierMetrics,
    WorkbookRow,
    WorkbookSummary,
)
from .risk import RISK_TIER_ORDER, classify_risk_tier
from .workbook import summarize_workbook, unique_entities, update_row_result

__all__ = [
    "AttributeMetrics",
    "AuditorMetrics",
    "CategoryMetrics",
    "ConsolidatedCustomer",
    "ConsolidatedMetrics",
    "ConsolidationResult",
    "CustomerFailure",
    "CustomerObservation",
    "CustomerQuestion",
    "EntitySummary",
    "ExceptionDetail",
    "GeneratedWorkbook",
    "JurisdictionMetrics",
    "RawData",
    "ResultTally",
    "RiskTierMetrics",
    "WorkbookRow",
    "WorkbookSummary",
    "RISK_TIER_ORDER",
    "calculate_metrics",
    "case_key",
    "classify_risk_tier",
    "consolidate",
    "consolidate_by_customer",
    "extract_exceptions",
    "findings_by_attribute",
    "findings_by_auditor",
    "findings_by_category",
    "findings_by_jurisdiction",
    "findings_by_risk_tier",
    "flatten_rows",
    "group_and_aggregate",
    "summarize_workbook",
    "unique_entities",
    "update_row_result",
]
