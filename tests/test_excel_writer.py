"""Tests for the consolidation Excel report."""

import openpyxl
import pandas as pd
import pytest

from cdd_consolidation.core import consolidate, findings_by_attribute
from cdd_consolidation.report import write_consolidation_report
from cdd_consolidation.report.excel_writer import attribute_row, customer_rows, summary_rows


@pytest.fixture
def result(mixed_rows, make_workbook):
    return consolidate([make_workbook("AUD001", mixed_rows[:3]), make_workbook("AUD002", mixed_rows[3:])])


class TestWriteReport:
    def test_all_tabs(self, result, tmp_path):
        path = write_consolidation_report(result, tmp_path / "out" / "report.xlsx")
        assert path.exists()
        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == [
            "Executive Summary",
            "By Category",
            "By Attribute",
            "By Jurisdiction",
            "By Auditor",
            "By Risk Tier",
            "Exceptions Detail",
            "Customer Findings",
            "Raw Data",
        ]
        assert wb["By Category"].freeze_panes == "A2"

    def test_empty_result_writes_summary_only(self, tmp_path):
        path = write_consolidation_report(consolidate([]), tmp_path / "empty.xlsx")
        assert openpyxl.load_workbook(path).sheetnames == ["Executive Summary"]

    def test_raw_data_optional(self, result, tmp_path):
        path = write_consolidation_report(result, tmp_path / "r.xlsx", include_raw_data=False)
        assert "Raw Data" not in openpyxl.load_workbook(path).sheetnames

    def test_risk_tier_tab_content(self, result, tmp_path):
        path = write_consolidation_report(result, tmp_path / "r.xlsx")
        df = pd.read_excel(path, sheet_name="By Risk Tier")
        assert df["Risk Tier"].tolist() == ["Critical", "Medium"]
        assert df["Total Tests"].tolist() == [3, 3]

    def test_exceptions_tab_content(self, result, tmp_path):
        path = write_consolidation_report(result, tmp_path / "r.xlsx")
        df = pd.read_excel(path, sheet_name="Exceptions Detail")
        assert df["Result Type"].tolist() == ["Fail 1 - Regulatory", "Fail 2 - Procedure", "Question to LOB"]


class TestRowBuilders:
    def test_summary_rates(self, result):
        rows = {r["Metric"]: r for r in summary_rows(result)}
        assert rows["Total Tests Performed"]["Value"] == 6
        assert rows["Overall Pass Rate (%)"]["Value"] == 50.0
        assert rows["Total Exceptions"]["Value"] == 3
        assert rows["N/A"]["Share (%)"] == pytest.approx(16.67)

    def test_attribute_observations_capped(self, make_row):
        rows = [
            make_row(case_id=f"E{i}", attribute_id="A1", result="Fail 2 - Procedure", comments=f"c{i}")
            for i in range(5)
        ]
        (attr,) = findings_by_attribute(rows)
        assert attribute_row(attr)["Observations"] == "c0; c1; c2"
        assert attribute_row(attr, max_observations=5)["Observations"] == "c0; c1; c2; c3; c4"

    def test_customer_lines(self, result):
        lines = [line for c in result.customer_findings for line in customer_rows(c)]
        kinds = sorted(line["Finding Type"] for line in lines)
        assert kinds == ["Failure - Procedure", "Failure - Regulatory", "Observation", "Question to LOB"]

    def test_clean_customer_still_listed(self, make_row, make_workbook):
        res = consolidate([make_workbook("AUD1", [make_row(result="Pass")])])
        (line,) = customer_rows(res.customer_findings[0])
        assert line["Overall Result"] == "Pass"
        assert line["Finding Type"] == ""
