"""Pipeline: read auditor workbooks -> consolidate -> write the Excel report."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .core import consolidate
from .io import read_workbook_dir
from .report import write_consolidation_report
from .utils import get_logger, setup_logging


def run_pipeline(
    config: dict[str, Any],
    *,
    workbook_dir: str | Path | None = None,
    output_dir: str | Path | None = None,
    audit_run_id: str | None = None,
) -> Path:
    """Consolidate every workbook in ``workbook_dir`` and return the report path."""
    setup_logging(config.get("logging", {}))
    log = get_logger(__name__)

    paths = config.get("paths", {})
    excel_cfg = config.get("excel", {})
    report_cfg = config.get("report", {})
    workbook_dir = workbook_dir or paths.get("workbook_dir")
    output_dir = Path(output_dir or paths.get("output_dir", "out"))

    if not workbook_dir:
        raise ValueError("workbook_dir path is required (--input-dir)")

    output_dir.mkdir(parents=True, exist_ok=True)
    log.info("Reading auditor workbooks from %s", workbook_dir)
    workbooks = read_workbook_dir(workbook_dir, excel_cfg)
    if not workbooks:
        log.warning("No workbooks matched in %s; writing an empty report", workbook_dir)

    result = consolidate(workbooks, audit_run_id=audit_run_id)
    m = result.metrics
    log.info(
        "Consolidated %s tests across %s entities: pass rate %.2f%%, fail rate %.2f%%, %s exceptions",
        m.total_tests,
        m.unique_entities_tested,
        m.pass_rate,
        m.fail_rate,
        m.exceptions_count,
    )

    return write_consolidation_report(
        result,
        output_dir / report_cfg.get("filename", "consolidation_report.xlsx"),
        max_observations=int(report_cfg.get("max_observations", 3)),
        include_raw_data=bool(report_cfg.get("include_raw_data", True)),
    )
