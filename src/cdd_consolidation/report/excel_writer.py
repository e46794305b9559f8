"""Excel report writer: one tab per consolidation view."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..core.models import (
    AttributeMetrics,
    AuditorMetrics,
    CategoryMetrics,
    ConsolidatedCustomer,
    ConsolidationResult,
    ExceptionDetail,
    JurisdictionMetrics,
    ResultTally,
    RiskTierMetrics,
    WorkbookRow,
)
from ..utils import get_logger

_log = get_logger(__name__)

SHEET_SUMMARY = "Executive Summary"
SHEET_CATEGORY = "By Category"
SHEET_ATTRIBUTE = "By Attribute"
SHEET_JURISDICTION = "By Jurisdiction"
SHEET_AUDITOR = "By Auditor"
SHEET_RISK_TIER = "By Risk Tier"
SHEET_EXCEPTIONS = "Exceptions Detail"
SHEET_CUSTOMERS = "Customer Findings"
SHEET_RAW = "Raw Data"


def format_rate(value: float) -> float:
    return round(value, 2)


def _tally_columns(t: ResultTally) -> dict[str, Any]:
    return {
        "Total Tests": t.total_tests,
        "Pass": t.pass_count,
        "Pass w/Observation": t.pass_with_observation_count,
        "Fail 1 - Regulatory": t.fail1_regulatory_count,
        "Fail 2 - Procedure": t.fail2_procedure_count,
        "Question to LOB": t.question_to_lob_count,
        "N/A": t.na_count,
        "Pending": t.pending_count,
        "Pass Rate (%)": format_rate(t.pass_rate),
        "Fail Rate (%)": format_rate(t.fail_rate),
    }


def summary_rows(result: ConsolidationResult) -> list[dict[str, Any]]:
    """Label/value pairs for the executive summary tab."""
    m = result.metrics

    def share(count: int) -> float:
        return format_rate(count / m.total_tests * 100) if m.total_tests else 0.0

    rows: list[dict[str, Any]] = [
        {"Metric": "Report ID", "Value": result.id, "Share (%)": None},
        {"Metric": "Audit Run ID", "Value": result.audit_run_id, "Share (%)": None},
        {"Metric": "Generated At", "Value": result.generated_at, "Share (%)": None},
        {"Metric": "Total Tests Performed", "Value": m.total_tests, "Share (%)": None},
        {"Metric": "Workbooks Submitted", "Value": m.workbooks_submitted, "Share (%)": None},
        {"Metric": "Unique Entities Tested", "Value": m.unique_entities_tested, "Share (%)": None},
        {"Metric": "Unique Attributes Tested", "Value": m.unique_attributes_tested, "Share (%)": None},
    ]
    for label, count in (
        ("Pass", m.pass_count),
        ("Pass with Observation", m.pass_with_observation_count),
        ("Fail 1 - Regulatory", m.fail1_regulatory_count),
        ("Fail 2 - Procedure", m.fail2_procedure_count),
        ("Question to LOB", m.question_to_lob_count),
        ("N/A", m.na_count),
        ("Not Yet Tested", m.pending_count),
    ):
        rows.append({"Metric": label, "Value": count, "Share (%)": share(count)})
    rows.extend(
        [
            {"Metric": "Overall Pass Rate (%)", "Value": format_rate(m.pass_rate), "Share (%)": None},
            {"Metric": "Overall Fail Rate (%)", "Value": format_rate(m.fail_rate), "Share (%)": None},
            {"Metric": "Total Exceptions", "Value": m.exceptions_count, "Share (%)": None},
        ]
    )
    return rows


def category_row(f: CategoryMetrics) -> dict[str, Any]:
    return {"Category": f.category, "Attribute Count": f.attribute_count, **_tally_columns(f)}


def attribute_row(f: AttributeMetrics, max_observations: int = 3) -> dict[str, Any]:
    return {
        "Attribute ID": f.attribute_id,
        "Attribute Name": f.attribute_name,
        "Category": f.category,
        **_tally_columns(f),
        "Observations": "; ".join(f.observations[:max_observations]),
    }


def jurisdiction_row(f: JurisdictionMetrics) -> dict[str, Any]:
    return {
        "Jurisdiction ID": f.jurisdiction_id,
        "Jurisdiction": f.jurisdiction_name,
        "Entity Count": f.entity_count,
        **_tally_columns(f),
    }


def auditor_row(f: AuditorMetrics) -> dict[str, Any]:
    return {
        "Auditor ID": f.auditor_id,
        "Auditor Name": f.auditor_name,
        "Entity Count": f.entity_count,
        **_tally_columns(f),
        "Completion Rate (%)": format_rate(f.completion_rate),
    }


def risk_tier_row(f: RiskTierMetrics) -> dict[str, Any]:
    return {"Risk Tier": f.risk_tier, "Entity Count": f.entity_count, **_tally_columns(f)}


def exception_row(e: ExceptionDetail) -> dict[str, Any]:
    return {
        "Exception ID": e.id,
        "Entity Name": e.entity_name,
        "Case ID": e.case_id,
        "Jurisdiction": e.jurisdiction_id,
        "Party Type": e.party_type,
        "Risk Tier": e.risk_tier,
        "Attribute ID": e.attribute_id,
        "Attribute Name": e.attribute_name,
        "Category": e.category,
        "Result Type": e.result_type,
        "Observation": e.observation,
        "Evidence Reference": e.evidence_reference,
        "Auditor ID": e.auditor_id,
        "Auditor Name": e.auditor_name,
    }


def customer_rows(c: ConsolidatedCustomer) -> list[dict[str, Any]]:
    """One line per observation, question and failure of a customer."""
    base = {
        "Case ID": c.customer_id,
        "Customer Name": c.customer_name,
        "Jurisdiction": c.jurisdiction_id,
        "Party Type": c.party_type,
        "Risk Tier": c.risk_tier,
        "Overall Result": c.overall_result,
    }
    counts = {
        "Total Tests": c.total_tests,
        "Pass": c.pass_count,
        "Pass w/Observation": c.pass_with_observation_count,
        "Fail": c.fail_count,
        "Question": c.question_count,
        "N/A": c.na_count,
    }
    out: list[dict[str, Any]] = []
    for obs in c.observations:
        out.append({**base, "Finding Type": "Observation", "Attribute ID": obs.attribute_id,
                    "Attribute Name": obs.attribute_name, "Category": obs.attribute_category,
                    "Detail": obs.observation_text, "Auditor": obs.auditor_name, **counts})
    for q in c.questions_to_lob:
        out.append({**base, "Finding Type": "Question to LOB", "Attribute ID": q.attribute_id,
                    "Attribute Name": q.attribute_name, "Category": q.attribute_category,
                    "Detail": q.question_text, "Auditor": q.auditor_name, **counts})
    for fail in c.failures:
        out.append({**base, "Finding Type": f"Failure - {fail.failure_type}", "Attribute ID": fail.attribute_id,
                    "Attribute Name": fail.attribute_name, "Category": fail.attribute_category,
                    "Detail": fail.failure_reason, "Auditor": fail.auditor_name, **counts})
    if not out:
        # Clean customers still get a line so the tab lists every entity.
        out.append({**base, "Finding Type": "", "Attribute ID": "", "Attribute Name": "",
                    "Category": "", "Detail": "", "Auditor": "", **counts})
    return out


def raw_row(r: WorkbookRow) -> dict[str, Any]:
    return {
        "Row ID": r.row_id,
        "Auditor": r.auditor_id,
        "Auditor Name": r.auditor_name,
        "Legal Name": r.legal_name,
        "Case ID": r.case_id,
        "Jurisdiction": r.jurisdiction_id,
        "Party Type": r.party_type,
        "IRR": r.irr,
        "DRR": r.drr,
        "Attribute ID": r.attribute_id,
        "Attribute Name": r.attribute_name,
        "Category": r.category,
        "Group": r.group,
        "Result": r.result,
        "Comments": r.comments,
        "Source File": r.source_file,
        "KYC Date": r.kyc_date,
        "Primary FLU": r.primary_flu,
    }


def write_consolidation_report(
    result: ConsolidationResult,
    path: str | Path,
    *,
    max_observations: int = 3,
    include_raw_data: bool = True,
) -> Path:
    """Write a ConsolidationResult to a multi-tab Excel report.

    The summary tab is always written; breakdown, exception, customer and raw
    tabs are skipped when they would be empty.

    Args:
        result: Output of ``consolidate``.
        path: Output file path (e.g. out/consolidation_report.xlsx).
        max_observations: Failure comments listed per attribute.
        include_raw_data: Add the flattened rows when the result carries them.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    tabs: list[tuple[str, list[dict[str, Any]]]] = [
        (SHEET_CATEGORY, [category_row(f) for f in result.findings_by_category]),
        (SHEET_ATTRIBUTE, [attribute_row(f, max_observations) for f in result.findings_by_attribute]),
        (SHEET_JURISDICTION, [jurisdiction_row(f) for f in result.findings_by_jurisdiction]),
        (SHEET_AUDITOR, [auditor_row(f) for f in result.findings_by_auditor]),
        (SHEET_RISK_TIER, [risk_tier_row(f) for f in result.findings_by_risk_tier]),
        (SHEET_EXCEPTIONS, [exception_row(e) for e in result.exceptions]),
        (SHEET_CUSTOMERS, [row for c in result.customer_findings for row in customer_rows(c)]),
    ]
    if include_raw_data and result.raw_data.rows:
        tabs.append((SHEET_RAW, [raw_row(r) for r in result.raw_data.rows]))

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(summary_rows(result)).to_excel(writer, sheet_name=SHEET_SUMMARY, index=False)
        for sheet_name, rows in tabs:
            if not rows:
                continue
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False)
            writer.sheets[sheet_name].freeze_panes = "A2"

    _log.info("Wrote consolidation report to %s", path)
    return path
