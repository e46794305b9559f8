"""Tests for scalar metrics, dimensional breakdowns and exception extraction."""

import pytest

from cdd_consolidation.core.aggregation import (
    calculate_metrics,
    extract_exceptions,
    findings_by_attribute,
    findings_by_auditor,
    findings_by_category,
    findings_by_jurisdiction,
    findings_by_risk_tier,
    group_and_aggregate,
)
from cdd_consolidation.core.models import CategoryMetrics, ResultTally


def _six_counts(t: ResultTally) -> int:
    return (
        t.pass_count
        + t.pass_with_observation_count
        + t.fail1_regulatory_count
        + t.fail2_procedure_count
        + t.question_to_lob_count
        + t.na_count
    )


class TestResultTally:
    def test_empty_rates_are_zero(self):
        t = ResultTally()
        assert t.pass_rate == 0.0
        assert t.fail_rate == 0.0

    def test_only_questions_and_na(self):
        t = ResultTally()
        for r in ("Question to LOB", "N/A", "N/A"):
            t.add(r)
        assert t.tested_count == 0
        assert t.pass_rate == 0.0
        assert t.fail_rate == 0.0

    def test_unrecognized_result_counts_as_pending(self):
        t = ResultTally()
        t.add("Maybe")
        assert t.pending_count == 1
        assert t.total_tests == 1


class TestCalculateMetrics:
    def test_counts(self, mixed_rows):
        m = calculate_metrics(mixed_rows, workbook_count=2)
        assert m.total_tests == 6
        assert m.pass_count == 1
        assert m.pass_with_observation_count == 1
        assert m.fail1_regulatory_count == 1
        assert m.fail2_procedure_count == 1
        assert m.fail_count == 2
        assert m.question_to_lob_count == 1
        assert m.na_count == 1
        assert m.exceptions_count == 3
        assert m.unique_entities_tested == 2
        assert m.unique_attributes_tested == 3
        assert m.workbooks_submitted == 2

    def test_count_conservation(self, mixed_rows):
        m = calculate_metrics(mixed_rows, 2)
        assert _six_counts(m) == m.total_tests

    def test_pending_rows_counted_separately(self, make_row):
        rows = [make_row(result="Pass"), make_row(result=""), make_row(result="")]
        m = calculate_metrics(rows, 1)
        assert m.pending_count == 2
        assert _six_counts(m) + m.pending_count == m.total_tests

    def test_rates_exclude_questions_and_na(self, mixed_rows):
        m = calculate_metrics(mixed_rows, 2)
        # 2 passes and 2 fails are tested; the question and the N/A are not.
        assert m.pass_rate == pytest.approx(50.0)
        assert m.fail_rate == pytest.approx(50.0)

    def test_rate_bounds(self, make_row):
        rows = [make_row(result=r) for r in ("Pass", "Pass", "Fail 2 - Procedure", "Question to LOB", "N/A", "")]
        m = calculate_metrics(rows, 1)
        assert 0 <= m.pass_rate <= 100
        assert 0 <= m.fail_rate <= 100
        assert m.pass_rate + m.fail_rate <= 100 + 1e-9

    def test_blank_case_id_counts_as_one_unknown_entity(self, make_row):
        rows = [make_row(case_id=""), make_row(case_id=""), make_row(case_id="E9")]
        assert calculate_metrics(rows, 1).unique_entities_tested == 2
        (jurisdiction,) = findings_by_jurisdiction(rows)
        assert jurisdiction.entity_ids == {"Unknown", "E9"}
        assert {e.case_id for e in extract_exceptions([make_row(case_id="", result="Fail 1 - Regulatory")])} == {"Unknown"}

    def test_empty(self):
        m = calculate_metrics([], 0)
        assert m.total_tests == 0
        assert m.pass_rate == 0.0
        assert m.fail_rate == 0.0


class TestGroupAndAggregate:
    def test_first_seen_order_and_collect(self, make_row):
        rows = [make_row(category="B"), make_row(category="A"), make_row(category="B", result="N/A")]
        seen = []
        groups = group_and_aggregate(
            rows,
            lambda r: r.category,
            lambda k, _row: CategoryMetrics(category=k),
            lambda rec, row: seen.append((rec.category, row.result)),
        )
        assert list(groups) == ["B", "A"]
        assert groups["B"].total_tests == 2
        assert groups["B"].na_count == 1
        assert seen == [("B", "Pass"), ("A", "Pass"), ("B", "N/A")]


class TestDimensions:
    def test_category_sorted_by_fail_rate(self, mixed_rows):
        cats = findings_by_category(mixed_rows)
        assert [c.category for c in cats] == ["Ownership", "AML"]
        assert cats[0].fail_rate == pytest.approx(100.0)
        assert cats[1].fail_rate == pytest.approx(100 / 3)
        assert cats[1].attribute_count == 2

    def test_missing_category_is_uncategorized(self, make_row):
        cats = findings_by_category([make_row(category=""), make_row(category="")])
        assert [c.category for c in cats] == ["Uncategorized"]
        assert cats[0].total_tests == 2

    def test_attribute_sorted_and_observations_from_failures_only(self, mixed_rows):
        attrs = findings_by_attribute(mixed_rows)
        assert [a.attribute_id for a in attrs] == ["A3", "A1", "A2"]
        by_id = {a.attribute_id: a for a in attrs}
        assert by_id["A3"].observations == ["BO expired"]
        assert by_id["A1"].observations == ["screening stale"]
        assert by_id["A2"].observations == []

    def test_attribute_observations_deduplicated(self, make_row):
        rows = [
            make_row(case_id=f"E{i}", attribute_id="A1", result="Fail 1 - Regulatory", comments=c)
            for i, c in enumerate(["expired", "expired", "missing", "", "stale", "late"])
        ]
        (attr,) = findings_by_attribute(rows)
        assert attr.observations == ["expired", "missing", "stale", "late"]
        assert attr.fail_count == 6

    def test_jurisdiction_sorted_by_volume(self, make_row):
        rows = [make_row(jurisdiction_id="HK")] + [make_row(jurisdiction_id="UK", case_id=f"E{i}") for i in range(3)]
        jurs = findings_by_jurisdiction(rows)
        assert [j.jurisdiction_id for j in jurs] == ["UK", "HK"]
        assert jurs[0].entity_count == 3
        assert jurs[0].jurisdiction_name == "UK"

    def test_missing_jurisdiction_collapses_to_unknown(self, make_row):
        rows = [make_row(jurisdiction_id="", case_id="E1"), make_row(jurisdiction_id="", case_id="E2")]
        (jur,) = findings_by_jurisdiction(rows)
        assert jur.jurisdiction_id == "Unknown"
        assert jur.entity_count == 2

    def test_auditor_completion_rate(self, make_row):
        rows = [
            make_row(auditor_id="AUD9", auditor_name="", result="Pass"),
            make_row(auditor_id="AUD9", auditor_name="", result=""),
            make_row(auditor_id="AUD9", auditor_name="", result="Question to LOB"),
            make_row(auditor_id="AUD9", auditor_name="", result=""),
        ]
        (aud,) = findings_by_auditor(rows)
        assert aud.auditor_name == "AUD9"
        assert aud.completion_rate == pytest.approx(50.0)
        assert aud.pass_rate == pytest.approx(100.0)

    def test_auditor_sorted_by_volume(self, mixed_rows, make_row):
        rows = mixed_rows + [make_row(auditor_id="AUD002", case_id="E3")]
        auds = findings_by_auditor(rows)
        assert [a.auditor_id for a in auds] == ["AUD002", "AUD001"]
        assert auds[0].entity_count == 2

    def test_risk_tiers_in_severity_order(self, make_row):
        rows = [make_row(irr=s, case_id=f"E{s}") for s in (1.5, 2.5, 3.5, 4.5)]
        tiers = findings_by_risk_tier(rows)
        assert [t.risk_tier for t in tiers] == ["Critical", "High", "Medium", "Low"]
        assert all(t.total_tests == 1 and t.entity_count == 1 for t in tiers)

    def test_risk_tiers_not_sorted_by_count(self, make_row):
        rows = [make_row(irr=1.0, case_id=f"L{i}") for i in range(5)] + [make_row(irr=3.2)]
        tiers = findings_by_risk_tier(rows)
        assert [t.risk_tier for t in tiers] == ["High", "Low"]

    def test_empty_rows(self):
        assert findings_by_category([]) == []
        assert findings_by_attribute([]) == []
        assert findings_by_jurisdiction([]) == []
        assert findings_by_auditor([]) == []
        assert findings_by_risk_tier([]) == []


class TestExtractExceptions:
    def test_only_follow_up_results_in_order(self, mixed_rows):
        exc = extract_exceptions(mixed_rows, run_stamp=42)
        assert [(e.case_id, e.result_type) for e in exc] == [
            ("E1", "Fail 1 - Regulatory"),
            ("E2", "Fail 2 - Procedure"),
            ("E2", "Question to LOB"),
        ]

    def test_ids_unique_within_run(self, mixed_rows):
        exc = extract_exceptions(mixed_rows, run_stamp=42)
        assert [e.id for e in exc] == ["EXC-42-0", "EXC-42-1", "EXC-42-2"]

    def test_context_carried(self, mixed_rows):
        question = extract_exceptions(mixed_rows, run_stamp=1)[-1]
        assert question.entity_name == "Entity Two"
        assert question.observation == "confirm source of funds"
        assert question.auditor_id == "AUD002"
        assert question.auditor_name == "Blake Rivers"
        assert question.jurisdiction_id == "UK"
        assert question.risk_tier == "Critical"

    def test_none_when_clean(self, make_row):
        assert extract_exceptions([make_row(result="Pass"), make_row(result="N/A")]) == []
