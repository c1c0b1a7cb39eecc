"""Survey workbook loading with an explicit header schema."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from heritage_atlas.common.errors import ContractError, MissingInputError
from heritage_atlas.common.fs import read_csv_rows
from heritage_atlas.common.models import SourceRecord

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


@dataclass(frozen=True)
class ResolvedSchema:
    """Field name -> headers present in the sheet, in configured priority order."""

    headers_by_field: dict[str, tuple[str, ...]]

    def value(self, row: dict, field_name: str) -> str:
        for header in self.headers_by_field.get(field_name, ()):
            value = _as_text(row.get(header))
            if value:
                return value
        return ""


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def resolve_schema(sheet_headers: list[str], source_fields: dict) -> ResolvedSchema:
    present = {_as_text(header): header for header in sheet_headers}
    headers_by_field: dict[str, tuple[str, ...]] = {}
    missing: list[str] = []

    for field_name, spec in source_fields.items():
        found = tuple(present[h] for h in spec["headers"] if h in present)
        if not found and spec.get("required", False):
            missing.append(f"{field_name} ({' | '.join(spec['headers'])})")
        headers_by_field[field_name] = found

    if missing:
        raise ContractError(f"Workbook is missing required columns: {', '.join(missing)}")
    return ResolvedSchema(headers_by_field=headers_by_field)


def _read_excel_rows(path: Path) -> tuple[list[str], list[dict]]:
    frame = pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False)
    frame = frame.fillna("")
    headers = [str(column) for column in frame.columns]
    frame.columns = headers
    return headers, frame.to_dict(orient="records")


def read_sheet(path: Path) -> tuple[list[str], list[dict]]:
    if not path.exists():
        raise MissingInputError(f"Workbook not found: {path}")
    if path.suffix.lower() in EXCEL_SUFFIXES:
        return _read_excel_rows(path)
    return read_csv_rows(path)


def load_source_records(path: Path, source_fields: dict) -> list[SourceRecord]:
    headers, rows = read_sheet(path)
    schema = resolve_schema(headers, source_fields)

    records = []
    for row_number, row in enumerate(rows, start=1):
        values = {name: schema.value(row, name) for name in source_fields}
        records.append(SourceRecord(row_number=row_number, **values))
    return records
