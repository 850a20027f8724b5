"""I/O utilities for JSON input and the citation output array.

orjson handles all encoding and decoding. Output keeps non-ASCII text as-is
(orjson always emits UTF-8), so Japanese law numbers stay readable.
"""
from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO

import orjson

from lawcite.address import CitationRecord


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 if pretty else 0
    path.write_bytes(orjson.dumps(obj, option=opts))


class CitationArrayWriter:
    """Write CitationRecords as a JSON array, one record at a time.

    Layout matches what earlier runs produced::

        [
        {"num":...,"chapter_data":[...]},
        {"num":...,"chapter_data":[...]}
        ]

    An array with no records is written as ``[\\n]``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.count = 0
        self._fh: BinaryIO | None = None

    def __enter__(self) -> CitationArrayWriter:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.path, "wb")
        self._fh.write(b"[")
        return self

    def write(self, record: CitationRecord) -> None:
        if self._fh is None:
            raise RuntimeError("CitationArrayWriter used outside its context")
        self._fh.write(b"\n" if self.count == 0 else b",\n")
        self._fh.write(orjson.dumps(record.to_dict()))
        self.count += 1

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._fh is None:
            return
        try:
            # Close the array even on failure so partial output stays valid JSON.
            self._fh.write(b"\n]")
            self._fh.flush()
        finally:
            self._fh.close()
            self._fh = None


def load_citation_records(path: Path) -> list[CitationRecord]:
    """Read an output array back into CitationRecords."""
    data = load_json(path)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of citation records")
    return [CitationRecord.from_dict(d) for d in data]
