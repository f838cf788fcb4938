from __future__ import annotations

from datetime import datetime

import pytest

from contract_tracker.excel.reader import IngestionError, read_first_sheet, unique_headers


def test_first_row_is_header_and_empty_cells_are_omitted(make_workbook):
    payload = make_workbook(
        [
            ["Zoom Pro", "online", "2024-03-01", 12],
            ["DocuSign", None, datetime(2024, 2, 1), 6],
        ]
    )
    sheet = read_first_sheet(payload)
    assert sheet.sheet_name == "Contracts"
    assert sheet.headers == ["Name", "Status", "Startdatum", "Laufzeit in M"]
    assert len(sheet.rows) == 2
    assert dict(sheet.rows[0]) == {"Name": "Zoom Pro", "Status": "online", "Startdatum": "2024-03-01", "Laufzeit in M": 12}
    assert "Status" not in sheet.rows[1]
    assert sheet.rows[1]["Startdatum"] == datetime(2024, 2, 1)


def test_raw_rows_are_read_only(make_workbook):
    sheet = read_first_sheet(make_workbook([["A", "online", "2024-01-01", 1]]))
    with pytest.raises(TypeError):
        sheet.rows[0]["Name"] = "B"  # type: ignore[index]


def test_blank_rows_are_skipped(make_workbook):
    payload = make_workbook(
        [
            ["A", "online", "2024-01-01", 1],
            [None, None, None, None],
            ["B", "online", "2024-01-01", 2],
        ]
    )
    sheet = read_first_sheet(payload)
    assert [r["Name"] for r in sheet.rows] == ["A", "B"]


def test_na_strings_stay_text(make_workbook):
    sheet = read_first_sheet(make_workbook([["NA", "n/a", "NULL", 3]]))
    assert sheet.rows[0]["Name"] == "NA"
    assert sheet.rows[0]["Status"] == "n/a"
    assert sheet.rows[0]["Startdatum"] == "NULL"


def test_extra_columns_are_kept(make_workbook):
    payload = make_workbook(
        [["A", "online", "2024-01-01", 1, "Team X", 99.5]],
        header=["Name", "Status", "Startdatum", "Laufzeit in M", "Abteilung", "Kosten"],
    )
    sheet = read_first_sheet(payload)
    assert sheet.headers[4:] == ["Abteilung", "Kosten"]
    assert sheet.rows[0]["Kosten"] == 99.5


def test_only_first_sheet_is_read(make_workbook_sheets):
    payload = make_workbook_sheets(
        {
            "First": [["Name"], ["Alpha"]],
            "Second": [["Name"], ["Beta"]],
        }
    )
    sheet = read_first_sheet(payload)
    assert sheet.sheet_name == "First"
    assert [r["Name"] for r in sheet.rows] == ["Alpha"]


def test_header_only_sheet(make_workbook):
    sheet = read_first_sheet(make_workbook([]))
    assert sheet.headers == ["Name", "Status", "Startdatum", "Laufzeit in M"]
    assert sheet.rows == []


def test_unique_headers():
    assert unique_headers(["Name", "Name", None, "", "Name", 2024.0]) == [
        "Name",
        "Name_1",
        "__EMPTY",
        "__EMPTY_1",
        "Name_2",
        "2024",
    ]


@pytest.mark.parametrize(
    "payload",
    [b"", b"this is not a spreadsheet", b"PK\x03\x04broken zip archive", b"\x00" * 64],
)
def test_decode_failures(payload: bytes):
    with pytest.raises(IngestionError) as e:
        read_first_sheet(payload)
    assert "decode failure" in str(e.value)


def test_legacy_xls_is_decoded(make_legacy_xls):
    payload = make_legacy_xls(
        [
            ["Zoom Pro", "online", "2024-03-01", 12],
            ["DocuSign", None, "01.02.2024", 6],
        ]
    )
    sheet = read_first_sheet(payload)
    assert sheet.sheet_name == "Sheet 1"  # BIFF2 ファイルはシート名を持たない
    assert sheet.headers == ["Name", "Status", "Startdatum", "Laufzeit in M"]
    assert dict(sheet.rows[0]) == {"Name": "Zoom Pro", "Status": "online", "Startdatum": "2024-03-01", "Laufzeit in M": 12}
    assert dict(sheet.rows[1]) == {"Name": "DocuSign", "Startdatum": "01.02.2024", "Laufzeit in M": 6}
