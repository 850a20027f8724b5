"""Error taxonomy for the citation scan.

Every failure is fatal for the document being scanned. The scan stops
consuming events at the first error and raises one of these; callers decide
whether a failed document aborts the run or is skipped.
"""
from __future__ import annotations


class CitationScanError(RuntimeError):
    """Base class for fatal per-document scan failures."""

    def __init__(self, message: str, *, doc_id: str | None = None) -> None:
        self.message = message
        self.doc_id = doc_id
        super().__init__(self._render())

    def _render(self) -> str:
        if self.doc_id is None:
            return self.message
        return f"{self.doc_id}: {self.message}"

    def with_doc_id(self, doc_id: str) -> CitationScanError:
        """Attach the document identifier (first one wins) and return self."""
        if self.doc_id is None:
            self.doc_id = doc_id
            self.args = (self._render(),)
        return self


class MalformedMarkupError(CitationScanError):
    """The XML parser rejected the document (truncated or invalid markup)."""


class DecodeError(CitationScanError):
    """Text or attribute bytes are not valid under the document encoding."""


class MissingAttributeError(CitationScanError):
    """A structural element lacks an attribute the address depends on."""

    def __init__(
        self,
        tag: str,
        attribute: str,
        *,
        doc_id: str | None = None,
    ) -> None:
        self.tag = tag
        self.attribute = attribute
        super().__init__(
            f"<{tag}> is missing required attribute {attribute!r}",
            doc_id=doc_id,
        )


class IndexFormatError(ValueError):
    """The law index file does not have the expected shape."""
