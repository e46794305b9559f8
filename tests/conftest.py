"""Shared factories for workbook rows and workbooks."""

from __future__ import annotations

import itertools

import pytest

from cdd_consolidation.core import GeneratedWorkbook, WorkbookRow

_row_ids = itertools.count(1)


def build_row(**overrides) -> WorkbookRow:
    n = next(_row_ids)
    fields = {
        "case_id": "E1",
        "legal_name": "Entity One Ltd",
        "attribute_id": f"ATTR{n:03d}",
        "attribute_name": f"Attribute {n}",
        "category": "AML",
        "jurisdiction_id": "US",
        "party_type": "Corporate",
        "irr": 2.0,
        "drr": 1.0,
        "auditor_id": "AUD001",
        "auditor_name": "Avery Stone",
        "result": "Pass",
        "comments": "",
        "row_id": f"ROW-{n}",
    }
    fields.update(overrides)
    return WorkbookRow(**fields)


@pytest.fixture
def make_row():
    return build_row


@pytest.fixture
def make_workbook():
    def _make(auditor_id: str, rows: list[WorkbookRow], auditor_name: str = "") -> GeneratedWorkbook:
        return GeneratedWorkbook(auditor_id=auditor_id, auditor_name=auditor_name or auditor_id, rows=rows)

    return _make


@pytest.fixture
def mixed_rows(make_row):
    """Two entities, two auditors, every result kind at least once."""
    return [
        make_row(case_id="E1", attribute_id="A1", category="AML", result="Pass"),
        make_row(case_id="E1", attribute_id="A2", category="AML", result="Pass w/Observation", comments="doc aging"),
        make_row(case_id="E1", attribute_id="A3", category="Ownership", result="Fail 1 - Regulatory", comments="BO expired"),
        make_row(case_id="E2", legal_name="Entity Two", attribute_id="A1", category="AML", jurisdiction_id="UK",
                 irr=4.2, auditor_id="AUD002", auditor_name="Blake Rivers", result="Fail 2 - Procedure",
                 comments="screening stale"),
        make_row(case_id="E2", legal_name="Entity Two", attribute_id="A2", category="AML", jurisdiction_id="UK",
                 irr=4.2, auditor_id="AUD002", auditor_name="Blake Rivers", result="Question to LOB",
                 comments="confirm source of funds"),
        make_row(case_id="E2", legal_name="Entity Two", attribute_id="A3", category="Ownership", jurisdiction_id="UK",
                 irr=4.2, auditor_id="AUD002", auditor_name="Blake Rivers", result="N/A"),
    ]
