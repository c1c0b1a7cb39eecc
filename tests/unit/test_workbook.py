from pathlib import Path

import pandas as pd
import pytest

from heritage_atlas.common.errors import ContractError, MissingInputError
from heritage_atlas.pipeline.workbook import load_source_records, resolve_schema

SOURCE_FIELDS = {
    "record_id": {"headers": ["#"], "required": False},
    "name": {"headers": ["Name / Description"], "required": True},
    "address": {"headers": ["Address", "77 Shortmarket Street"], "required": True},
    "gps": {"headers": ["CMA_GPS"], "required": True},
    "zoning": {"headers": ["CMA_Zoning", "Zoning"], "required": False},
    "owner": {"headers": ["CMA_Owner", "Owner"], "required": False},
}


def _write_csv(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_source_records_from_csv_applies_header_fallbacks(tmp_path: Path):
    path = _write_csv(
        tmp_path / "survey.csv",
        "#,Name / Description,77 Shortmarket Street,CMA_GPS,CMA_Zoning,Zoning,Extra\n"
        '1,Langham House,59 Long St,"18.4185, -33.9230",,GB7,x\n'
        ',Tobacco Mini Market,93 Loop Street,,MU2,GB7,y\n',
    )

    records = load_source_records(path, SOURCE_FIELDS)

    assert [r.row_number for r in records] == [1, 2]
    first, second = records
    assert first.record_id == "1"
    assert first.address == "59 Long St"
    assert first.gps == "18.4185, -33.9230"
    assert first.zoning == "GB7"
    assert second.zoning == "MU2"
    assert second.record_id == ""
    assert second.gps == ""
    assert second.owner == ""


def test_load_source_records_from_first_excel_sheet(tmp_path: Path):
    path = tmp_path / "survey.xlsx"
    frame = pd.DataFrame(
        {
            "#": ["7", ""],
            "Name / Description": ["121 Long Salon", "Langham House"],
            "Address": ["121 Long St", "59 Long St"],
            "CMA_GPS": ["18.4190, -33.9222", ""],
        }
    )
    with pd.ExcelWriter(path) as writer:
        frame.to_excel(writer, sheet_name="Stock", index=False)
        pd.DataFrame({"ignored": ["x"]}).to_excel(writer, sheet_name="Notes", index=False)

    records = load_source_records(path, SOURCE_FIELDS)

    assert len(records) == 2
    assert records[0].record_id == "7"
    assert records[0].gps == "18.4190, -33.9222"
    assert records[1].record_id == ""
    assert records[1].gps == ""


def test_missing_required_header_is_fatal(tmp_path: Path):
    path = _write_csv(tmp_path / "survey.csv", "#,Name / Description,Address\n1,Langham House,59 Long St\n")

    with pytest.raises(ContractError, match="gps"):
        load_source_records(path, SOURCE_FIELDS)


def test_missing_workbook_is_fatal(tmp_path: Path):
    with pytest.raises(MissingInputError):
        load_source_records(tmp_path / "absent.xlsx", SOURCE_FIELDS)


def test_resolve_schema_keeps_configured_header_priority():
    schema = resolve_schema(["Zoning", "CMA_GPS", "CMA_Zoning ", "Name / Description", "Address"], SOURCE_FIELDS)

    assert schema.headers_by_field["zoning"] == ("CMA_Zoning ", "Zoning")
    assert schema.headers_by_field["record_id"] == ()
    assert schema.value({"CMA_Zoning ": " ", "Zoning": " GB7 "}, "zoning") == "GB7"
