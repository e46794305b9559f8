"""Aggregation: scalar metrics, dimensional breakdowns and exceptions over workbook rows."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import TypeVar

from ..utils import UNCATEGORIZED, UNKNOWN, get_logger
from .models import (
    AttributeMetrics,
    AuditorMetrics,
    CategoryMetrics,
    ConsolidatedMetrics,
    ExceptionDetail,
    JurisdictionMetrics,
    ResultTally,
    RiskTierMetrics,
    WorkbookRow,
)
from .results import EXCEPTION_RESULTS, FAIL_RESULTS
from .risk import classify_risk_tier, risk_tier_rank

_log = get_logger(__name__)

T = TypeVar("T", bound=ResultTally)


def case_key(row: WorkbookRow) -> str:
    return row.case_id or UNKNOWN


def category_key(row: WorkbookRow) -> str:
    return row.category or UNCATEGORIZED


def attribute_key(row: WorkbookRow) -> str:
    return row.attribute_id or UNKNOWN


def jurisdiction_key(row: WorkbookRow) -> str:
    return row.jurisdiction_id or UNKNOWN


def auditor_key(row: WorkbookRow) -> str:
    return row.auditor_id or UNKNOWN


def risk_tier_key(row: WorkbookRow) -> str:
    return classify_risk_tier(row.irr)


def group_and_aggregate(
    rows: Iterable[WorkbookRow],
    key: Callable[[WorkbookRow], str],
    seed: Callable[[str, WorkbookRow], T],
    collect: Callable[[T, WorkbookRow], None] | None = None,
) -> dict[str, T]:
    """Tally rows into one record per key, in first-seen key order.

    ``seed`` builds a group's record from its key and first row; ``collect``
    runs for every row after the result has been counted.
    """
    groups: dict[str, T] = {}
    for row in rows:
        k = key(row)
        record = groups.get(k)
        if record is None:
            record = groups[k] = seed(k, row)
        record.add(row.result)
        if collect is not None:
            collect(record, row)
    return groups


def calculate_metrics(rows: list[WorkbookRow], workbook_count: int) -> ConsolidatedMetrics:
    """Overall result counts and rates across every flattened row.

    Args:
        rows: Rows from all workbooks.
        workbook_count: Number of workbooks the rows came from.

    Returns:
        ConsolidatedMetrics with distinct entity and attribute counts.
    """
    metrics = ConsolidatedMetrics(workbooks_submitted=workbook_count)
    entities: set[str] = set()
    attributes: set[str] = set()
    for row in rows:
        metrics.add(row.result)
        entities.add(case_key(row))
        attributes.add(attribute_key(row))
    metrics.unique_entities_tested = len(entities)
    metrics.unique_attributes_tested = len(attributes)
    return metrics


def findings_by_category(rows: list[WorkbookRow]) -> list[CategoryMetrics]:
    """Tally rows per attribute category.

    Args:
        rows: Rows from all workbooks; a blank category groups as Uncategorized.

    Returns:
        One CategoryMetrics per category, highest fail rate first.
    """
    def collect(rec: CategoryMetrics, row: WorkbookRow) -> None:
        rec.attribute_ids.add(row.attribute_id)

    groups = group_and_aggregate(
        rows, category_key, lambda k, _row: CategoryMetrics(category=k), collect
    )
    return sorted(groups.values(), key=lambda r: r.fail_rate, reverse=True)


def findings_by_attribute(rows: list[WorkbookRow]) -> list[AttributeMetrics]:
    """Tally rows per attribute and collect distinct failure comments.

    Args:
        rows: Rows from all workbooks.

    Returns:
        One AttributeMetrics per attribute id, highest fail rate first. The
        first row seen for an attribute supplies its name and category.
    """
    def seed(k: str, row: WorkbookRow) -> AttributeMetrics:
        return AttributeMetrics(
            attribute_id=k,
            attribute_name=row.attribute_name,
            category=category_key(row),
        )

    def collect(rec: AttributeMetrics, row: WorkbookRow) -> None:
        if row.result in FAIL_RESULTS and row.comments and row.comments not in rec.observations:
            rec.observations.append(row.comments)

    groups = group_and_aggregate(rows, attribute_key, seed, collect)
    return sorted(groups.values(), key=lambda r: r.fail_rate, reverse=True)


def findings_by_jurisdiction(rows: list[WorkbookRow]) -> list[JurisdictionMetrics]:
    """Tally rows per jurisdiction.

    Args:
        rows: Rows from all workbooks.

    Returns:
        One JurisdictionMetrics per jurisdiction id, most tests first.
    """
    def collect(rec: JurisdictionMetrics, row: WorkbookRow) -> None:
        rec.entity_ids.add(case_key(row))

    groups = group_and_aggregate(
        rows,
        jurisdiction_key,
        # No jurisdiction reference table here; the id doubles as the name.
        lambda k, _row: JurisdictionMetrics(jurisdiction_id=k, jurisdiction_name=k),
        collect,
    )
    return sorted(groups.values(), key=lambda r: r.total_tests, reverse=True)


def findings_by_auditor(rows: list[WorkbookRow]) -> list[AuditorMetrics]:
    """Tally rows per auditor, with completion rate.

    Args:
        rows: Rows from all workbooks, auditor already stamped.

    Returns:
        One AuditorMetrics per auditor id, most tests first.
    """
    def seed(k: str, row: WorkbookRow) -> AuditorMetrics:
        return AuditorMetrics(auditor_id=k, auditor_name=row.auditor_name or k)

    def collect(rec: AuditorMetrics, row: WorkbookRow) -> None:
        rec.entity_ids.add(case_key(row))

    groups = group_and_aggregate(rows, auditor_key, seed, collect)
    return sorted(groups.values(), key=lambda r: r.total_tests, reverse=True)


def findings_by_risk_tier(rows: list[WorkbookRow]) -> list[RiskTierMetrics]:
    """Tally rows per risk tier derived from each row's IRR.

    Args:
        rows: Rows from all workbooks.

    Returns:
        RiskTierMetrics for the tiers present, Critical to Low.
    """
    def collect(rec: RiskTierMetrics, row: WorkbookRow) -> None:
        rec.entity_ids.add(case_key(row))

    groups = group_and_aggregate(
        rows, risk_tier_key, lambda k, _row: RiskTierMetrics(risk_tier=k), collect
    )
    return sorted(groups.values(), key=lambda r: risk_tier_rank(r.risk_tier))


def extract_exceptions(rows: list[WorkbookRow], *, run_stamp: int | None = None) -> list[ExceptionDetail]:
    """One ExceptionDetail per failing or questioned row, in row order.

    Ids are ``EXC-<run_stamp>-<n>``: unique within one run only.
    """
    stamp = run_stamp if run_stamp is not None else int(time.time() * 1000)
    exceptions: list[ExceptionDetail] = []
    for row in rows:
        if row.result not in EXCEPTION_RESULTS:
            continue
        exceptions.append(
            ExceptionDetail(
                id=f"EXC-{stamp}-{len(exceptions)}",
                case_id=case_key(row),
                entity_name=row.legal_name,
                attribute_id=row.attribute_id,
                attribute_name=row.attribute_name,
                category=category_key(row),
                result_type=row.result,
                observation=row.comments,
                evidence_reference=row.source_file,
                auditor_notes=row.comments,
                jurisdiction_id=jurisdiction_key(row),
                auditor_id=auditor_key(row),
                auditor_name=row.auditor_name or auditor_key(row),
                party_type=row.party_type or UNKNOWN,
                risk_tier=classify_risk_tier(row.irr),
            )
        )
    _log.debug("Extracted %s exceptions from %s rows", len(exceptions), len(rows))
    return exceptions
