"""Structural addresses inside a statute and the per-law citation record.

An Address says where a piece of text sits in the statute hierarchy:

  part / chapter / section / subsection / division
      1-based sibling counters (編 / 章 / 節 / 款 / 目)
  article / paragraph / item
      string codes from the ``Num`` attribute (条 / 項 / 号); article codes
      are compound ("3_2"), so they stay strings
  sub_item
      (depth, code) for SubItem1..SubItem7 (イロハ and below)
  suppl_provision_title
      AmendLawNum of the enclosing SupplProvision (附則); set only in the
      supplementary sub-space

The canonical order compares fields in the order above, None first.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

COUNTER_FIELDS: tuple[str, ...] = (
    "part",
    "chapter",
    "section",
    "subsection",
    "division",
)

SUB_ITEM_MAX_DEPTH = 7


def _opt(value: Any) -> tuple[Any, ...]:
    """Sort key component with None ordered before any value."""
    return (0,) if value is None else (1, value)


@dataclass(slots=True)
class Address:
    """Mutable structural address, updated in place while scanning."""

    part: int | None = None
    chapter: int | None = None
    section: int | None = None
    subsection: int | None = None
    division: int | None = None
    article: str | None = None
    paragraph: str | None = None
    item: str | None = None
    sub_item: tuple[int, str] | None = None
    suppl_provision_title: str | None = None

    def snapshot(self) -> Address:
        """Independent copy of the current state."""
        return replace(self)

    def sort_key(self) -> tuple[tuple[Any, ...], ...]:
        return tuple(_opt(getattr(self, f.name)) for f in fields(self))

    @property
    def in_suppl_provision(self) -> bool:
        return self.suppl_provision_title is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the present fields only.

        ``article`` is dropped when empty. ``suppl_provision_title`` is kept
        even when it is the empty string, since its presence alone marks the
        supplementary sub-space.
        """
        out: dict[str, Any] = {}
        for name in COUNTER_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        if self.article:
            out["article"] = self.article
        if self.paragraph is not None:
            out["paragraph"] = self.paragraph
        if self.item is not None:
            out["item"] = self.item
        if self.sub_item is not None:
            out["sub_item"] = [self.sub_item[0], self.sub_item[1]]
        if self.suppl_provision_title is not None:
            out["suppl_provision_title"] = self.suppl_provision_title
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Address:
        """Inverse of :meth:`to_dict`. Unknown keys are ignored."""
        sub_item_raw = data.get("sub_item")
        sub_item: tuple[int, str] | None = None
        if sub_item_raw is not None:
            depth, code = sub_item_raw
            sub_item = (int(depth), str(code))
        article = data.get("article")
        return cls(
            part=_opt_int(data.get("part")),
            chapter=_opt_int(data.get("chapter")),
            section=_opt_int(data.get("section")),
            subsection=_opt_int(data.get("subsection")),
            division=_opt_int(data.get("division")),
            # Older outputs always carried "article", empty outside articles.
            article=str(article) if article else None,
            paragraph=_opt_str(data.get("paragraph")),
            item=_opt_str(data.get("item")),
            sub_item=sub_item,
            suppl_provision_title=_opt_str(data.get("suppl_provision_title")),
        )


def _opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def canonicalize(addresses: list[Address]) -> tuple[Address, ...]:
    """Sort addresses canonically and drop duplicates.

    Duplicates are removed after sorting, so equal addresses anywhere in the
    input collapse to one. Applying this to its own output is a no-op.
    """
    ordered = sorted(addresses, key=Address.sort_key)
    out: list[Address] = []
    for addr in ordered:
        if not out or out[-1] != addr:
            out.append(addr)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class CitationRecord:
    """One law number paired with every address where a search term occurs."""

    num: str
    chapter_data: tuple[Address, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.chapter_data

    def to_dict(self) -> dict[str, Any]:
        return {
            "num": self.num,
            "chapter_data": [addr.to_dict() for addr in self.chapter_data],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CitationRecord:
        return cls(
            num=str(data.get("num", "")),
            chapter_data=tuple(
                Address.from_dict(d) for d in data.get("chapter_data", [])
            ),
        )
