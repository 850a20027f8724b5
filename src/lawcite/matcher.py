"""Search statute XML for terms and record where they occur.

Single streaming pass: the HierarchyTracker follows the document structure,
the MatchCollector tests every text node against the search terms and keeps
a snapshot of the address for each hit, and ``assemble`` turns the hits into
a deduplicated, canonically ordered CitationRecord at end of stream.

Usage::

    with open("405AC0000000088_20240401.xml", "rb") as fh:
        record = search_xml(fh, SearchTerms.of("特例措置"))
    record.to_dict()
    # {"num": "平成五年法律第八十八号", "chapter_data": [{"article": "5", ...}]}
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from lawcite.address import Address, CitationRecord, canonicalize
from lawcite.errors import CitationScanError
from lawcite.tracker import HierarchyTracker
from lawcite.xml_events import (
    DEFAULT_CHUNK_SIZE,
    EndEvent,
    StartEvent,
    TextEvent,
    XmlEvent,
    iter_xml_events,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchTerms:
    """Literal, case-sensitive search terms. A text matches if it contains any."""

    terms: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.terms:
            raise ValueError("at least one search term is required")
        if any(t == "" for t in self.terms):
            raise ValueError("search terms must be non-empty strings")

    @classmethod
    def of(cls, *terms: str) -> SearchTerms:
        return cls.from_iterable(terms)

    @classmethod
    def from_iterable(cls, terms: Iterable[str]) -> SearchTerms:
        """Build from any iterable, dropping repeated terms but keeping order."""
        return cls(tuple(dict.fromkeys(terms)))

    def matches(self, text: str) -> bool:
        return any(term in text for term in self.terms)


class MatchCollector:
    """Collects addresses of matching text nodes and the law number."""

    def __init__(self, terms: SearchTerms) -> None:
        self.terms = terms
        self.law_num = ""
        self.matches: list[Address] = []

    def on_text(self, text: str, tracker: HierarchyTracker) -> None:
        if tracker.in_law_num:
            # Last text node inside <LawNum> wins.
            self.law_num = text
        elif self.terms.matches(text):
            self.matches.append(tracker.address.snapshot())

    def assemble(self) -> CitationRecord:
        return CitationRecord(
            num=self.law_num,
            chapter_data=canonicalize(self.matches),
        )


def search_events(
    events: Iterable[XmlEvent],
    terms: SearchTerms,
) -> CitationRecord:
    """Run tracker and collector over an already-decoded event stream."""
    tracker = HierarchyTracker()
    collector = MatchCollector(terms)
    for event in events:
        match event:
            case StartEvent(tag=tag, attrib=attrib):
                tracker.on_start(tag, attrib)
            case EndEvent(tag=tag):
                tracker.on_end(tag)
            case TextEvent(text=text):
                collector.on_text(text, tracker)
    return collector.assemble()


def search_xml(
    source: BinaryIO,
    terms: SearchTerms | Sequence[str],
    *,
    doc_id: str | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> CitationRecord:
    """Stream one statute document and return its citation record.

    Raises a CitationScanError subclass (tagged with ``doc_id``) on the
    first malformed-markup, decode, or missing-attribute failure.
    """
    if not isinstance(terms, SearchTerms):
        terms = SearchTerms.from_iterable(terms)
    try:
        with closing(iter_xml_events(source, chunk_size=chunk_size)) as events:
            record = search_events(events, terms)
    except CitationScanError as exc:
        if doc_id is not None:
            exc.with_doc_id(doc_id)
        raise
    log.debug(
        "%s: %s, %d matching locations",
        doc_id or "<stream>", record.num or "<no law number>",
        len(record.chapter_data),
    )
    return record


def search_file(
    path: Path,
    terms: SearchTerms | Sequence[str],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> CitationRecord:
    """Open ``path`` in binary mode and scan it with :func:`search_xml`."""
    with open(path, "rb") as fh:
        return search_xml(fh, terms, doc_id=str(path), chunk_size=chunk_size)
