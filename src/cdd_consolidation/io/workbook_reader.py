"""Excel readers: auditor testing workbooks saved as .xlsx."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..core.models import GeneratedWorkbook, WorkbookRow
from ..core.results import PENDING, parse_result
from ..utils import (
    UNCATEGORIZED,
    UNKNOWN,
    clean_number,
    clean_text,
    get_logger,
    is_blank,
    normalize_column_name,
)

_log = get_logger(__name__)

# Normalized header -> WorkbookRow field. Covers the test grid export headers
# plus the plain field names.
COLUMN_ALIASES: dict[str, str] = {
    "case_id_aware": "case_id",
    "case_id": "case_id",
    "entity_id": "case_id",
    "sample_item_id": "case_id",
    "legal_name": "legal_name",
    "entity_name": "legal_name",
    "attribute_id": "attribute_id",
    "attribute_name": "attribute_name",
    "category": "category",
    "jurisdiction": "jurisdiction_id",
    "jurisdiction_id": "jurisdiction_id",
    "party_type": "party_type",
    "irr": "irr",
    "inherent_risk_rating": "irr",
    "drr": "drr",
    "design_risk_rating": "drr",
    "auditor": "auditor_id",
    "auditor_id": "auditor_id",
    "auditor_name": "auditor_name",
    "result": "result",
    "comments": "comments",
    "comment": "comments",
    "row_id": "row_id",
    "source_file": "source_file",
    "group": "group",
    "kyc_date": "kyc_date",
    "primary_flu": "primary_flu",
}

REQUIRED_FIELDS = ("case_id", "attribute_id")


def map_columns(columns: list[Any]) -> dict[Any, str]:
    """Map sheet headers to row fields; the first header claiming a field wins."""
    mapping: dict[Any, str] = {}
    claimed: set[str] = set()
    for col in columns:
        target = COLUMN_ALIASES.get(normalize_column_name(col))
        if target and target not in claimed:
            mapping[col] = target
            claimed.add(target)
    return mapping


def row_from_record(record: dict[str, Any], *, source: str = "") -> WorkbookRow:
    """Build a WorkbookRow from a record keyed by row field names."""
    result = parse_result(record.get("result"))
    if result is None:
        _log.warning(
            "%s: unrecognized result %r for %s/%s, treating as not yet tested",
            source or "workbook",
            record.get("result"),
            clean_text(record.get("case_id")),
            clean_text(record.get("attribute_id")),
        )
        result = PENDING
    return WorkbookRow(
        case_id=clean_text(record.get("case_id")),
        legal_name=clean_text(record.get("legal_name")),
        attribute_id=clean_text(record.get("attribute_id")),
        attribute_name=clean_text(record.get("attribute_name")),
        category=clean_text(record.get("category"), UNCATEGORIZED),
        jurisdiction_id=clean_text(record.get("jurisdiction_id"), UNKNOWN),
        party_type=clean_text(record.get("party_type"), UNKNOWN),
        irr=clean_number(record.get("irr")),
        drr=clean_number(record.get("drr")),
        auditor_id=clean_text(record.get("auditor_id")),
        auditor_name=clean_text(record.get("auditor_name")),
        result=result,
        comments=clean_text(record.get("comments")),
        row_id=clean_text(record.get("row_id")),
        source_file=clean_text(record.get("source_file")),
        group=clean_text(record.get("group")),
        kyc_date=clean_text(record.get("kyc_date")),
        primary_flu=clean_text(record.get("primary_flu")),
    )


def read_auditor_workbook(
    path: str | Path,
    excel_config: dict[str, Any] | None = None,
) -> GeneratedWorkbook:
    """Read one auditor's testing workbook.

    Args:
        path: Path to the .xlsx file.
        excel_config: Optional dict with 'sheet' and 'header_row'.

    Returns:
        GeneratedWorkbook whose auditor identity comes from the sheet's
        auditor columns, or the file stem when the sheet has none.
    """
    config = excel_config or {}
    sheet = config.get("sheet", 0)
    header_row = int(config.get("header_row", 0))
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Auditor workbook not found: {path}")

    # "N/A" is a result and "NA" a jurisdiction code, so no cell text is read as missing.
    df = pd.read_excel(path, sheet_name=sheet, header=header_row, dtype=object, keep_default_na=False)
    mapping = map_columns(list(df.columns))
    missing = [f for f in REQUIRED_FIELDS if f not in mapping.values()]
    if missing:
        raise ValueError(f"Expected columns for {', '.join(missing)} in {path}")

    rows: list[WorkbookRow] = []
    for raw in df.to_dict("records"):
        record = {field: raw.get(col) for col, field in mapping.items()}
        if is_blank(record.get("case_id")) and is_blank(record.get("attribute_id")):
            continue
        if is_blank(record.get("row_id")):
            record["row_id"] = f"{path.stem}-{len(rows) + 1}"
        rows.append(row_from_record(record, source=path.name))

    auditor_id = next((r.auditor_id for r in rows if r.auditor_id), "") or path.stem
    auditor_name = next((r.auditor_name for r in rows if r.auditor_name), "") or auditor_id
    _log.debug("Read %s rows for auditor %s from %s", len(rows), auditor_id, path)
    return GeneratedWorkbook(
        auditor_id=auditor_id,
        auditor_name=auditor_name,
        rows=rows,
        workbook_id=path.stem,
    )


def read_workbook_dir(
    directory: str | Path,
    excel_config: dict[str, Any] | None = None,
) -> list[GeneratedWorkbook]:
    """Read every workbook in ``directory`` matching the configured pattern."""
    config = excel_config or {}
    pattern = config.get("pattern", "*.xlsx")
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Workbook directory not found: {directory}")

    paths = sorted(p for p in directory.glob(pattern) if not p.name.startswith("~$"))
    workbooks = [read_auditor_workbook(p, config) for p in paths]
    _log.info("Read %s workbooks from %s", len(workbooks), directory)
    return workbooks
