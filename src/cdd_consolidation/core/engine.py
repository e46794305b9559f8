"""Consolidation engine: roll auditor workbooks up into one ConsolidationResult."""

from __future__ import annotations

import dataclasses
import time
from datetime import datetime, timezone

from ..utils import get_logger
from .aggregation import (
    calculate_metrics,
    extract_exceptions,
    findings_by_attribute,
    findings_by_auditor,
    findings_by_category,
    findings_by_jurisdiction,
    findings_by_risk_tier,
)
from .customers import consolidate_by_customer
from .models import ConsolidationResult, GeneratedWorkbook, RawData, WorkbookRow

_log = get_logger(__name__)


def flatten_rows(workbooks: list[GeneratedWorkbook]) -> list[WorkbookRow]:
    """All rows of all workbooks, in workbook order.

    Rows that do not name their auditor take it from the owning workbook so
    auditor grouping survives the flattening.
    """
    rows: list[WorkbookRow] = []
    for wb in workbooks:
        for row in wb.rows:
            if not row.auditor_id and wb.auditor_id:
                row = dataclasses.replace(
                    row,
                    auditor_id=wb.auditor_id,
                    auditor_name=row.auditor_name or wb.auditor_name,
                )
            rows.append(row)
    return rows


def consolidate(
    workbooks: list[GeneratedWorkbook],
    *,
    audit_run_id: str | None = None,
    include_rows: bool = True,
) -> ConsolidationResult:
    """Aggregate every row of every workbook into a ConsolidationResult.

    Pure apart from reading the clock for the result id and timestamp. Empty
    input (no workbooks, or workbooks without rows) yields zeroed metrics and
    empty lists.

    Args:
        workbooks: Auditor workbooks to merge.
        audit_run_id: Recorded on the result; defaults to ``BATCH-<ms>`` when
            any workbook was supplied.
        include_rows: Embed the flattened rows in ``raw_data`` for export.
    """
    stamp = int(time.time() * 1000)
    now = datetime.now(timezone.utc)
    rows = flatten_rows(workbooks)

    if audit_run_id is None:
        audit_run_id = f"BATCH-{stamp}" if workbooks else ""

    result = ConsolidationResult(
        id=f"CONSOL-{stamp}",
        audit_run_id=audit_run_id,
        generated_at=now.isoformat(),
        metrics=calculate_metrics(rows, len(workbooks)),
        findings_by_category=findings_by_category(rows),
        findings_by_attribute=findings_by_attribute(rows),
        findings_by_jurisdiction=findings_by_jurisdiction(rows),
        findings_by_auditor=findings_by_auditor(rows),
        findings_by_risk_tier=findings_by_risk_tier(rows),
        exceptions=extract_exceptions(rows, run_stamp=stamp),
        customer_findings=consolidate_by_customer(rows, processed_at=now),
        raw_data=RawData(
            workbook_ids=[wb.id for wb in workbooks],
            total_rows=len(rows),
            rows=rows if include_rows else None,
        ),
    )
    _log.debug(
        "Consolidated %s rows from %s workbooks: %s exceptions, %s customers",
        len(rows),
        len(workbooks),
        len(result.exceptions),
        len(result.customer_findings),
    )
    return result
