"""Tests for lawcite.law_index module."""
import json
from pathlib import Path

import pytest

from lawcite.errors import IndexFormatError
from lawcite.law_index import LawIndexEntry, load_law_index


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


class TestLoadLawIndex:
    def test_reads_entries(self, tmp_path: Path) -> None:
        index = _write(
            tmp_path / "index.json",
            [
                {"name": "行政手続法", "num": "平成五年法律第八十八号",
                 "file": "405AC0000000088.xml", "id": "405AC0000000088"},
                {"file": "sub/other.xml"},
            ],
        )
        entries = load_law_index(index)
        assert entries == [
            LawIndexEntry(
                file="405AC0000000088.xml",
                name="行政手続法",
                num="平成五年法律第八十八号",
            ),
            LawIndexEntry(file="sub/other.xml"),
        ]

    def test_resolve_joins_work_dir(self, tmp_path: Path) -> None:
        entry = LawIndexEntry(file="sub/law.xml")
        assert entry.resolve(tmp_path) == tmp_path / "sub" / "law.xml"

    def test_empty_index(self, tmp_path: Path) -> None:
        assert load_law_index(_write(tmp_path / "index.json", [])) == []

    def test_not_an_array(self, tmp_path: Path) -> None:
        with pytest.raises(IndexFormatError, match="JSON array"):
            load_law_index(_write(tmp_path / "index.json", {"file": "a.xml"}))

    def test_entry_not_an_object(self, tmp_path: Path) -> None:
        with pytest.raises(IndexFormatError, match="entry 1 must be an object"):
            load_law_index(_write(tmp_path / "index.json", [{"file": "a.xml"}, "b.xml"]))

    def test_entry_without_file(self, tmp_path: Path) -> None:
        with pytest.raises(IndexFormatError, match="entry 0 has no 'file'"):
            load_law_index(_write(tmp_path / "index.json", [{"name": "x"}]))
