"""Customer-centric consolidation: every finding grouped per entity."""

from __future__ import annotations

from datetime import datetime, timezone

from ..utils import UNKNOWN, get_logger
from .aggregation import case_key, category_key
from .models import (
    OVERALL_RESULT_ORDER,
    ConsolidatedCustomer,
    CustomerFailure,
    CustomerObservation,
    CustomerQuestion,
    OverallResult,
    WorkbookRow,
)
from .results import (
    FAIL_RESULTS,
    FAILURE_TYPES,
    NOT_APPLICABLE,
    PASS,
    PASS_WITH_OBSERVATION,
    QUESTION_TO_LOB,
)
from .risk import classify_risk_tier

_log = get_logger(__name__)

UNKNOWN_AUDITOR = "Unknown Auditor"


def _seed_customer(key: str, row: WorkbookRow) -> ConsolidatedCustomer:
    # First row seen for an entity fixes its descriptive fields.
    return ConsolidatedCustomer(
        customer_id=key,
        customer_name=row.legal_name or key,
        jurisdiction_id=row.jurisdiction_id or UNKNOWN,
        party_type=row.party_type or UNKNOWN,
        risk_tier=classify_risk_tier(row.irr),
    )


def overall_result(customer: ConsolidatedCustomer) -> OverallResult:
    """Worst outcome wins: Fail, then Question, then Pass w/Observation.

    A customer whose rows are all N/A or untested has no negative finding
    and therefore reads as Pass.
    """
    if customer.fail_count > 0:
        return "Fail"
    if customer.question_count > 0:
        return "Question"
    if customer.pass_with_observation_count > 0 or customer.observations:
        return "Pass w/Observation"
    return "Pass"


def _record(customer: ConsolidatedCustomer, row: WorkbookRow, now: datetime) -> None:
    customer.total_tests += 1
    result = row.result
    auditor_id = row.auditor_id or UNKNOWN
    auditor_name = row.auditor_name or UNKNOWN_AUDITOR
    category = category_key(row)

    if result == PASS:
        customer.pass_count += 1
    elif result == PASS_WITH_OBSERVATION:
        customer.pass_with_observation_count += 1
        if row.comments:
            customer.observations.append(
                CustomerObservation(
                    attribute_id=row.attribute_id,
                    attribute_name=row.attribute_name,
                    attribute_category=category,
                    observation_text=row.comments,
                    auditor_id=auditor_id,
                    auditor_name=auditor_name,
                    timestamp=now,
                )
            )
    elif result in FAIL_RESULTS:
        customer.fail_count += 1
        if row.comments:
            customer.failures.append(
                CustomerFailure(
                    attribute_id=row.attribute_id,
                    attribute_name=row.attribute_name,
                    attribute_category=category,
                    failure_type=FAILURE_TYPES[result],
                    failure_reason=row.comments,
                    auditor_id=auditor_id,
                    auditor_name=auditor_name,
                    timestamp=now,
                )
            )
    elif result == QUESTION_TO_LOB:
        customer.question_count += 1
        if row.comments:
            customer.questions_to_lob.append(
                CustomerQuestion(
                    attribute_id=row.attribute_id,
                    attribute_name=row.attribute_name,
                    attribute_category=category,
                    question_text=row.comments,
                    auditor_id=auditor_id,
                    auditor_name=auditor_name,
                    timestamp=now,
                )
            )
    elif result == NOT_APPLICABLE:
        customer.na_count += 1


def consolidate_by_customer(
    rows: list[WorkbookRow],
    *,
    processed_at: datetime | None = None,
) -> list[ConsolidatedCustomer]:
    """Group rows by case id into ConsolidatedCustomer records.

    Rows from different workbooks for the same case merge into one customer.
    Every commented observation, question and failure is kept, so a customer
    may carry several entries per list. Output is ordered by overall result
    (Fail first) and then by number of findings, most first.

    Args:
        rows: Flattened rows from all workbooks.
        processed_at: Timestamp stamped on each finding entry; defaults to now.
    """
    now = processed_at or datetime.now(timezone.utc)
    customers: dict[str, ConsolidatedCustomer] = {}

    for row in rows:
        key = case_key(row)
        customer = customers.get(key)
        if customer is None:
            customer = customers[key] = _seed_customer(key, row)
        _record(customer, row, now)

    for customer in customers.values():
        customer.overall_result = overall_result(customer)

    ordered = sorted(
        customers.values(),
        key=lambda c: (OVERALL_RESULT_ORDER.index(c.overall_result), -c.findings_count),
    )
    _log.debug("Consolidated %s rows into %s customers", len(rows), len(ordered))
    return ordered
