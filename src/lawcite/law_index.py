"""Law index: which statute XML files to scan.

The index is a JSON array with one object per law. Only ``file`` (the XML
path relative to the work directory) is required; ``name`` and ``num`` are
kept when present for logging, anything else is ignored::

    [
      {"name": "行政手続法", "num": "平成五年法律第八十八号",
       "file": "405AC0000000088_20240401/405AC0000000088_20240401.xml"},
      ...
    ]
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lawcite.errors import IndexFormatError
from lawcite.io_utils import load_json


@dataclass(frozen=True, slots=True)
class LawIndexEntry:
    """One law listed in the index."""

    file: str
    name: str = ""
    num: str = ""

    def resolve(self, work_dir: Path) -> Path:
        return work_dir / self.file


def parse_index_entry(raw: Any, position: int) -> LawIndexEntry:
    if not isinstance(raw, dict):
        raise IndexFormatError(
            f"index entry {position} must be an object, got {type(raw).__name__}"
        )
    file = raw.get("file")
    if not isinstance(file, str) or not file:
        raise IndexFormatError(f"index entry {position} has no 'file' path")
    return LawIndexEntry(
        file=file,
        name=str(raw.get("name") or ""),
        num=str(raw.get("num") or ""),
    )


def load_law_index(path: Path) -> list[LawIndexEntry]:
    """Read the index file. Raises IndexFormatError on an unexpected shape."""
    data = load_json(path)
    if not isinstance(data, list):
        raise IndexFormatError(f"{path}: expected a JSON array of index entries")
    return [parse_index_entry(raw, i) for i, raw in enumerate(data)]
