"""Hierarchy tracking over a stream of statute XML events.

The tracker keeps one flat Address and overwrites it going forward. It never
keeps a stack of open elements: closing tags leave the address alone, and
the next structural start tag decides what changes.

Element handling:
  LawNum                  law-number capture mode until </LawNum>
  Part .. Division        bump the counter, reset the counters below it,
                          drop paragraph/item/sub_item
  Article                 article = Num, drop paragraph/item/sub_item
  Paragraph               paragraph = Num, drop item/sub_item
  Item                    item = Num, drop sub_item
  SubItem1 .. SubItem7    sub_item = (depth, Num); deeper levels overwrite
  SupplProvision          fresh address keyed by AmendLawNum
"""
from __future__ import annotations

import logging
import re

from lawcite.address import COUNTER_FIELDS, SUB_ITEM_MAX_DEPTH, Address
from lawcite.errors import MissingAttributeError

log = logging.getLogger(__name__)

ATTR_NUM = "Num"
ATTR_AMEND_LAW_NUM = "AmendLawNum"

# Element name -> Address counter field, outermost first.
COUNTER_TAGS: dict[str, str] = {
    "Part": "part",
    "Chapter": "chapter",
    "Section": "section",
    "Subsection": "subsection",
    "Division": "division",
}

_SUB_ITEM_RE = re.compile(rf"SubItem([1-{SUB_ITEM_MAX_DEPTH}])")


def sub_item_depth(tag: str) -> int | None:
    """Return 1-7 for SubItem1..SubItem7, None for any other tag."""
    m = _SUB_ITEM_RE.fullmatch(tag)
    if m is None:
        return None
    return int(m.group(1))


def _required(tag: str, attrib: dict[str, str], name: str) -> str:
    try:
        return attrib[name]
    except KeyError:
        raise MissingAttributeError(tag, name) from None


class HierarchyTracker:
    """Maintains the current structural address while events stream past."""

    def __init__(self) -> None:
        self.address = Address()
        self.in_law_num = False

    def on_start(self, tag: str, attrib: dict[str, str]) -> None:
        match tag:
            case "LawNum":
                self.in_law_num = True
            case "Part" | "Chapter" | "Section" | "Subsection" | "Division":
                self._open_container(COUNTER_TAGS[tag])
            case "Article":
                addr = self.address
                addr.article = _required(tag, attrib, ATTR_NUM)
                addr.paragraph = None
                addr.item = None
                addr.sub_item = None
                log.debug("article %s: %s", addr.article, addr)
            case "Paragraph":
                self.address.paragraph = _required(tag, attrib, ATTR_NUM)
                self.address.item = None
                self.address.sub_item = None
            case "Item":
                self.address.item = _required(tag, attrib, ATTR_NUM)
                self.address.sub_item = None
            case "SupplProvision":
                title = attrib.get(ATTR_AMEND_LAW_NUM, "")
                self.address = Address(suppl_provision_title=title)
                log.debug("entering supplementary provision %r", title)
            case _:
                depth = sub_item_depth(tag)
                if depth is not None:
                    self.address.sub_item = (depth, _required(tag, attrib, ATTR_NUM))

    def on_end(self, tag: str) -> None:
        if tag == "LawNum":
            self.in_law_num = False

    def _open_container(self, field_name: str) -> None:
        addr = self.address
        current = getattr(addr, field_name)
        setattr(addr, field_name, 1 if current is None else current + 1)
        level = COUNTER_FIELDS.index(field_name)
        for lower in COUNTER_FIELDS[level + 1:]:
            setattr(addr, lower, None)
        # Article and the supplementary title carry forward.
        addr.paragraph = None
        addr.item = None
        addr.sub_item = None
