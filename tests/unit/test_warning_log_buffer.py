from __future__ import annotations

import json
from pathlib import Path

from contract_tracker.logging.warning_log import FieldWarning, WarningLogBuffer


def test_field_warning_json_line():
    w = FieldWarning.create(3, "Startdatum", "INVALID_START_DATE", "31.02.2024")
    data = json.loads(w.to_json_line())
    assert data == {"row": 3, "field": "Startdatum", "code": "INVALID_START_DATE", "raw_value": "31.02.2024"}
    data = json.loads(w.to_json_line("contracts.xlsx"))
    assert data["source"] == "contracts.xlsx"


def test_field_warning_raw_value_rendering():
    assert FieldWarning.create(1, "Name", "MISSING_NAME").raw_value == ""
    long_value = "x" * 500
    assert FieldWarning.create(1, "Name", "MISSING_NAME", long_value).raw_value.endswith("...")


def test_warning_log_buffer_flush(temp_workdir: Path):
    buf = WarningLogBuffer(temp_workdir / "logs")
    buf.append(FieldWarning.create(1, "Laufzeit in M", "NEGATIVE_DURATION", -5), source="a.xlsx")
    buf.extend([FieldWarning.create(2, "Name", "MISSING_NAME")], source="a.xlsx")
    assert len(buf) == 2
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.name.startswith("warnings-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        obj = json.loads(raw)
        assert set(obj.keys()) == {"row", "field", "code", "raw_value", "source"}
    # flush 後バッファクリア
    assert len(buf) == 0


def test_warning_log_buffer_empty_flush(temp_workdir: Path):
    buf = WarningLogBuffer(temp_workdir / "logs")
    assert buf.flush() is None
    assert not (temp_workdir / "logs").exists()


def test_warning_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = WarningLogBuffer(temp_workdir / "logs")
    buf.append(FieldWarning.create(1, "Name", "MISSING_NAME"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(FieldWarning.create(2, "Name", "MISSING_NAME"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_warning_log_groups_entries_per_source(temp_workdir: Path):
    buf = WarningLogBuffer(temp_workdir / "logs")
    buf.extend([FieldWarning.create(4, "Name", "MISSING_NAME")], source="a.xlsx")
    buf.extend([FieldWarning.create(1, "Startdatum", "INVALID_START_DATE", "morgen")], source="b.xls")
    buf.append(FieldWarning.create(2, "Laufzeit in M", "NEGATIVE_DURATION", -1), source="a.xlsx")
    buf.extend([], source="empty.xlsx")
    assert buf.sources == ["a.xlsx", "b.xls"]
    assert buf.code_counts() == {"MISSING_NAME": 1, "INVALID_START_DATE": 1, "NEGATIVE_DURATION": 1}

    path = buf.flush()
    entries = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [(e["source"], e["row"]) for e in entries] == [("a.xlsx", 2), ("a.xlsx", 4), ("b.xls", 1)]
    assert buf.sources == []
    assert not buf.code_counts()
