"""Row model and consolidation result records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .results import (
    FAIL_PROCEDURE,
    FAIL_REGULATORY,
    NOT_APPLICABLE,
    PASS,
    PASS_WITH_OBSERVATION,
    PENDING,
    QUESTION_TO_LOB,
    FailureType,
    TestResult,
)

OverallResult = Literal["Fail", "Question", "Pass w/Observation", "Pass"]

OVERALL_RESULT_ORDER: tuple[OverallResult, ...] = ("Fail", "Question", "Pass w/Observation", "Pass")


# ---------------------------------------------------------------------------
# Input: auditor workbooks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkbookRow:
    """One test case: a (case, attribute) pair assigned to one auditor.

    Rows are replaced, never edited in place; see ``update_row_result``.
    """

    case_id: str
    legal_name: str
    attribute_id: str
    attribute_name: str
    category: str = ""
    jurisdiction_id: str = ""
    party_type: str = ""
    irr: float = 0.0  # inherent risk rating, drives the risk tier
    drr: float = 0.0  # design risk rating, carried only
    auditor_id: str = ""
    auditor_name: str = ""
    result: TestResult = PENDING
    comments: str = ""
    row_id: str = ""
    source_file: str = ""
    group: str = ""
    kyc_date: str = ""
    primary_flu: str = ""


@dataclass(frozen=True)
class GeneratedWorkbook:
    """The rows assigned to one auditor for one audit run."""

    auditor_id: str
    auditor_name: str
    rows: list[WorkbookRow] = field(default_factory=list)
    workbook_id: str = ""
    generated_at: str = ""

    @property
    def id(self) -> str:
        return self.workbook_id or self.auditor_id


@dataclass(frozen=True)
class WorkbookSummary:
    total_rows: int
    completed_rows: int
    pass_count: int
    pass_with_observation_count: int
    fail1_count: int
    fail2_count: int
    question_to_lob_count: int
    na_count: int
    empty_count: int
    completion_percentage: float


@dataclass
class EntitySummary:
    """Per-entity progress within one workbook."""

    case_id: str
    legal_name: str
    row_count: int = 0
    completed_count: int = 0
    attribute_ids: set[str] = field(default_factory=set, repr=False)

    @property
    def attribute_count(self) -> int:
        return len(self.attribute_ids)

    @property
    def percent_complete(self) -> float:
        return _pct(self.completed_count, self.row_count)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def _pct(numerator: int, denominator: int) -> float:
    return numerator / denominator * 100 if denominator > 0 else 0.0


@dataclass(kw_only=True)
class ResultTally:
    """Per-result counters plus the pass/fail rates derived from them.

    Rates use pass + fail rows as the denominator; questions, N/A and
    pending rows are outside both rates.
    """

    total_tests: int = 0
    pass_count: int = 0
    pass_with_observation_count: int = 0
    fail1_regulatory_count: int = 0
    fail2_procedure_count: int = 0
    question_to_lob_count: int = 0
    na_count: int = 0
    pending_count: int = 0

    def add(self, result: str) -> None:
        self.total_tests += 1
        if result == PASS:
            self.pass_count += 1
        elif result == PASS_WITH_OBSERVATION:
            self.pass_with_observation_count += 1
        elif result == FAIL_REGULATORY:
            self.fail1_regulatory_count += 1
        elif result == FAIL_PROCEDURE:
            self.fail2_procedure_count += 1
        elif result == QUESTION_TO_LOB:
            self.question_to_lob_count += 1
        elif result == NOT_APPLICABLE:
            self.na_count += 1
        else:
            self.pending_count += 1

    @property
    def total_pass_count(self) -> int:
        return self.pass_count + self.pass_with_observation_count

    @property
    def fail_count(self) -> int:
        return self.fail1_regulatory_count + self.fail2_procedure_count

    @property
    def tested_count(self) -> int:
        return self.total_pass_count + self.fail_count

    @property
    def completed_count(self) -> int:
        return self.total_tests - self.pending_count

    @property
    def pass_rate(self) -> float:
        return _pct(self.total_pass_count, self.tested_count)

    @property
    def fail_rate(self) -> float:
        return _pct(self.fail_count, self.tested_count)


@dataclass(kw_only=True)
class ConsolidatedMetrics(ResultTally):
    unique_entities_tested: int = 0
    unique_attributes_tested: int = 0
    workbooks_submitted: int = 0

    @property
    def exceptions_count(self) -> int:
        return self.fail_count + self.question_to_lob_count


@dataclass(kw_only=True)
class CategoryMetrics(ResultTally):
    category: str
    attribute_ids: set[str] = field(default_factory=set, repr=False)

    @property
    def attribute_count(self) -> int:
        return len(self.attribute_ids)


@dataclass(kw_only=True)
class AttributeMetrics(ResultTally):
    attribute_id: str
    attribute_name: str
    category: str
    # Distinct failure comments in encounter order.
    observations: list[str] = field(default_factory=list)


@dataclass(kw_only=True)
class JurisdictionMetrics(ResultTally):
    jurisdiction_id: str
    jurisdiction_name: str
    entity_ids: set[str] = field(default_factory=set, repr=False)

    @property
    def entity_count(self) -> int:
        return len(self.entity_ids)


@dataclass(kw_only=True)
class AuditorMetrics(ResultTally):
    auditor_id: str
    auditor_name: str
    entity_ids: set[str] = field(default_factory=set, repr=False)

    @property
    def entity_count(self) -> int:
        return len(self.entity_ids)

    @property
    def completion_rate(self) -> float:
        return _pct(self.completed_count, self.total_tests)


@dataclass(kw_only=True)
class RiskTierMetrics(ResultTally):
    risk_tier: str
    entity_ids: set[str] = field(default_factory=set, repr=False)

    @property
    def entity_count(self) -> int:
        return len(self.entity_ids)


@dataclass(frozen=True)
class ExceptionDetail:
    id: str
    case_id: str
    entity_name: str
    attribute_id: str
    attribute_name: str
    category: str
    result_type: TestResult
    observation: str
    evidence_reference: str
    auditor_notes: str
    jurisdiction_id: str
    auditor_id: str
    auditor_name: str
    party_type: str
    risk_tier: str


# ---------------------------------------------------------------------------
# Customer view
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CustomerObservation:
    attribute_id: str
    attribute_name: str
    attribute_category: str
    observation_text: str
    auditor_id: str
    auditor_name: str
    timestamp: datetime


@dataclass(frozen=True)
class CustomerQuestion:
    attribute_id: str
    attribute_name: str
    attribute_category: str
    question_text: str
    auditor_id: str
    auditor_name: str
    timestamp: datetime


@dataclass(frozen=True)
class CustomerFailure:
    attribute_id: str
    attribute_name: str
    attribute_category: str
    failure_type: FailureType
    failure_reason: str
    auditor_id: str
    auditor_name: str
    timestamp: datetime


@dataclass
class ConsolidatedCustomer:
    """Every finding recorded against one entity, across all workbooks."""

    customer_id: str
    customer_name: str
    jurisdiction_id: str
    party_type: str
    risk_tier: str
    total_tests: int = 0
    pass_count: int = 0
    pass_with_observation_count: int = 0
    fail_count: int = 0
    question_count: int = 0
    na_count: int = 0
    overall_result: OverallResult = "Pass"
    observations: list[CustomerObservation] = field(default_factory=list)
    questions_to_lob: list[CustomerQuestion] = field(default_factory=list)
    failures: list[CustomerFailure] = field(default_factory=list)

    @property
    def findings_count(self) -> int:
        return len(self.failures) + len(self.questions_to_lob) + len(self.observations)


# ---------------------------------------------------------------------------
# Engine output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawData:
    workbook_ids: list[str]
    total_rows: int
    rows: list[WorkbookRow] | None = None


@dataclass(frozen=True)
class ConsolidationResult:
    id: str
    audit_run_id: str
    generated_at: str
    metrics: ConsolidatedMetrics
    findings_by_category: list[CategoryMetrics]
    findings_by_attribute: list[AttributeMetrics]
    findings_by_jurisdiction: list[JurisdictionMetrics]
    findings_by_auditor: list[AuditorMetrics]
    findings_by_risk_tier: list[RiskTierMetrics]
    exceptions: list[ExceptionDetail]
    customer_findings: list[ConsolidatedCustomer]
    raw_data: RawData
