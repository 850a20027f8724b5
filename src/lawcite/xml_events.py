"""Pull-based XML event source backed by lxml.

The document is fed to an lxml target parser in fixed-size chunks. The
target only records events; they are handed to the caller after each chunk,
so memory stays bounded by the chunk size plus the events it produced and
no element tree is ever built.

Text handling:
  - character data between two markup boundaries becomes one TextEvent
  - text is stripped; whitespace-only text produces no event
  - decoding follows the XML declaration, UTF-8 when there is none
"""
from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import BinaryIO

from lxml import etree

from lawcite.errors import CitationScanError, DecodeError, MalformedMarkupError

DEFAULT_CHUNK_SIZE = 64 * 1024

# libxml2 error types that mean "bytes could not be decoded".
_ENCODING_ERROR_TYPES: frozenset[int] = frozenset(
    getattr(etree.ErrorTypes, name)
    for name in (
        "ERR_INVALID_ENCODING",
        "ERR_UNKNOWN_ENCODING",
        "ERR_UNSUPPORTED_ENCODING",
        "I18N_CONV_FAILED",
        "I18N_NO_NAME",
        "I18N_NO_HANDLER",
    )
    if hasattr(etree.ErrorTypes, name)
)

# Older libxml2 reports undecodable input as ERR_INVALID_CHAR; only this
# message separates it from a legal byte that is an illegal XML character.
_NOT_UTF8_RE = re.compile(r"not proper UTF-8", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class StartEvent:
    tag: str
    attrib: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EndEvent:
    tag: str


@dataclass(frozen=True, slots=True)
class TextEvent:
    text: str


XmlEvent = StartEvent | EndEvent | TextEvent


class _EventSink:
    """lxml parser target that buffers events until drained."""

    def __init__(self) -> None:
        self._events: list[XmlEvent] = []
        self._text: list[str] = []

    def _flush_text(self) -> None:
        if not self._text:
            return
        text = "".join(self._text).strip()
        self._text.clear()
        if text:
            self._events.append(TextEvent(text))

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        self._flush_text()
        self._events.append(StartEvent(tag, dict(attrib)))

    def end(self, tag: str) -> None:
        self._flush_text()
        self._events.append(EndEvent(tag))

    def data(self, data: str) -> None:
        self._text.append(data)

    def comment(self, text: str) -> None:
        self._flush_text()

    def pi(self, target: str, data: str | None = None) -> None:
        self._flush_text()

    def close(self) -> None:
        self._flush_text()

    def drain(self) -> list[XmlEvent]:
        events = self._events
        self._events = []
        return events


def translate_syntax_error(exc: etree.XMLSyntaxError) -> CitationScanError:
    """Map an lxml syntax failure onto the scan error taxonomy."""
    message = str(getattr(exc, "msg", None) or exc)
    code = getattr(exc, "code", None)
    if code in _ENCODING_ERROR_TYPES or (
        code == etree.ErrorTypes.ERR_INVALID_CHAR
        and _NOT_UTF8_RE.search(message) is not None
    ):
        return DecodeError(message)
    return MalformedMarkupError(message)


def iter_xml_events(
    source: BinaryIO,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[XmlEvent]:
    """Yield start/end/text events from a binary XML stream, in order.

    Raises DecodeError or MalformedMarkupError on the first parse failure;
    nothing after the failing chunk is yielded.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    sink = _EventSink()
    parser = etree.XMLParser(
        target=sink,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )
    try:
        while chunk := source.read(chunk_size):
            parser.feed(chunk)
            yield from sink.drain()
        parser.close()
    except etree.XMLSyntaxError as exc:
        raise translate_syntax_error(exc) from exc
    except UnicodeDecodeError as exc:
        raise DecodeError(str(exc)) from exc
    yield from sink.drain()
