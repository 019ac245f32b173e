"""Tests for common.local_io module."""

import json
from dataclasses import dataclass

from common.local_io import save_jsonl_records_local, write_text_atomic


@dataclass
class Row:
    name: str


class TestSaveJsonlRecordsLocal:
    def test_writes_one_line_per_record(self, tmp_path) -> None:
        path = save_jsonl_records_local([Row("a"), {"name": "나"}], "rows", output_dir=str(tmp_path))
        assert path.parent == tmp_path
        assert path.name.startswith("rows_")
        assert path.suffix == ".jsonl"
        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line) for line in lines] == [{"name": "a"}, {"name": "나"}]


class TestWriteTextAtomic:
    def test_creates_parents_and_leaves_no_temp_file(self, tmp_path) -> None:
        target = tmp_path / "nested" / "state.json"
        write_text_atomic(target, "{}")
        assert target.read_text(encoding="utf-8") == "{}"
        assert not (tmp_path / "nested" / "state.json.tmp").exists()

    def test_overwrites_existing(self, tmp_path) -> None:
        target = tmp_path / "state.json"
        target.write_text("old", encoding="utf-8")
        write_text_atomic(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
