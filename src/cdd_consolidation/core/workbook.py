"""Helpers over a single auditor workbook's rows."""

from __future__ import annotations

import dataclasses

from .aggregation import case_key
from .models import EntitySummary, ResultTally, WorkbookRow, WorkbookSummary
from .results import TERMINAL_RESULTS, TestResult


def summarize_workbook(rows: list[WorkbookRow]) -> WorkbookSummary:
    """Count one workbook's rows by result.

    Args:
        rows: The workbook's rows, tested or not.

    Returns:
        WorkbookSummary; completion_percentage is 0 for an empty workbook.
    """
    tally = ResultTally()
    for row in rows:
        tally.add(row.result)
    total = tally.total_tests
    return WorkbookSummary(
        total_rows=total,
        completed_rows=tally.completed_count,
        pass_count=tally.pass_count,
        pass_with_observation_count=tally.pass_with_observation_count,
        fail1_count=tally.fail1_regulatory_count,
        fail2_count=tally.fail2_procedure_count,
        question_to_lob_count=tally.question_to_lob_count,
        na_count=tally.na_count,
        empty_count=tally.pending_count,
        completion_percentage=tally.completed_count / total * 100 if total > 0 else 0.0,
    )


def update_row_result(
    rows: list[WorkbookRow],
    row_id: str,
    result: TestResult,
    comments: str | None = None,
) -> list[WorkbookRow]:
    """Return a copy of ``rows`` with one row's result (and comment) replaced.

    ``comments=None`` keeps the existing comment. An unknown or blank
    ``row_id`` returns an unchanged copy.
    """
    updated = []
    for row in rows:
        if row_id and row.row_id == row_id:
            row = dataclasses.replace(
                row,
                result=result,
                comments=row.comments if comments is None else comments,
            )
        updated.append(row)
    return updated


def unique_entities(rows: list[WorkbookRow]) -> list[EntitySummary]:
    """Progress per case id, in encounter order; the first row names the entity."""
    seen: dict[str, EntitySummary] = {}
    for row in rows:
        key = case_key(row)
        entry = seen.get(key)
        if entry is None:
            entry = seen[key] = EntitySummary(case_id=key, legal_name=row.legal_name or key)
        entry.row_count += 1
        entry.attribute_ids.add(row.attribute_id)
        if row.result in TERMINAL_RESULTS:
            entry.completed_count += 1
    return list(seen.values())
