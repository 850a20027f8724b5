"""Tests for lawcite.address module."""
from lawcite.address import Address, CitationRecord, canonicalize


class TestSnapshot:
    def test_copy_is_independent(self) -> None:
        addr = Address(article="1", paragraph="2")
        snap = addr.snapshot()
        addr.paragraph = "3"
        assert snap.paragraph == "2"
        assert snap == Address(article="1", paragraph="2")


class TestSortKey:
    def test_none_sorts_first(self) -> None:
        assert Address(article="1").sort_key() < Address(part=1, article="1").sort_key()

    def test_counters_compare_numerically(self) -> None:
        assert Address(chapter=2).sort_key() < Address(chapter=10).sort_key()

    def test_codes_compare_by_code_point(self) -> None:
        # "10" < "2" as strings; article codes are not numbers.
        assert Address(article="10").sort_key() < Address(article="2").sort_key()

    def test_fields_compared_in_declared_order(self) -> None:
        a = Address(chapter=1, article="9")
        b = Address(chapter=2, article="1")
        assert a.sort_key() < b.sort_key()

    def test_sub_item_depth_before_code(self) -> None:
        a = Address(article="1", sub_item=(1, "ロ"))
        b = Address(article="1", sub_item=(2, "イ"))
        assert a.sort_key() < b.sort_key()

    def test_suppl_without_article_sorts_before_articles(self) -> None:
        primary = Address(article="1")
        suppl = Address(suppl_provision_title="平成三十年法律第一号")
        assert sorted([primary, suppl], key=Address.sort_key) == [suppl, primary]


class TestToDict:
    def test_only_present_fields(self) -> None:
        assert Address(article="5", paragraph="2").to_dict() == {
            "article": "5",
            "paragraph": "2",
        }

    def test_full_address(self) -> None:
        addr = Address(
            part=1, chapter=2, section=3, subsection=4, division=5,
            article="6_2", paragraph="1", item="3", sub_item=(2, "イ"),
        )
        assert addr.to_dict() == {
            "part": 1,
            "chapter": 2,
            "section": 3,
            "subsection": 4,
            "division": 5,
            "article": "6_2",
            "paragraph": "1",
            "item": "3",
            "sub_item": [2, "イ"],
        }

    def test_suppl_only(self) -> None:
        addr = Address(suppl_provision_title="平成三十年法律第一号")
        assert addr.to_dict() == {"suppl_provision_title": "平成三十年法律第一号"}

    def test_empty_suppl_title_kept(self) -> None:
        assert Address(suppl_provision_title="").to_dict() == {
            "suppl_provision_title": "",
        }

    def test_empty_article_dropped(self) -> None:
        assert Address(article="").to_dict() == {}


class TestFromDict:
    def test_inverse_of_to_dict(self) -> None:
        addr = Address(chapter=3, article="12", item="2", sub_item=(3, "(1)"))
        assert Address.from_dict(addr.to_dict()) == addr

    def test_legacy_empty_article(self) -> None:
        addr = Address.from_dict({"article": "", "suppl_provision_title": "x"})
        assert addr.article is None
        assert addr.suppl_provision_title == "x"


class TestCanonicalize:
    def test_sorts_and_dedups_non_adjacent(self) -> None:
        a = Address(article="1")
        b = Address(article="2")
        out = canonicalize([b, a, b.snapshot(), a.snapshot()])
        assert out == (a, b)

    def test_idempotent(self) -> None:
        addrs = [
            Address(article="3", item="2"),
            Address(article="3", item="1"),
            Address(article="3", item="2"),
            Address(suppl_provision_title=""),
        ]
        once = canonicalize(addrs)
        assert canonicalize(list(once)) == once

    def test_empty(self) -> None:
        assert canonicalize([]) == ()


class TestCitationRecord:
    def test_to_dict_shape(self) -> None:
        rec = CitationRecord(
            num="令和三年法律第十号",
            chapter_data=(Address(article="5", paragraph="2"),),
        )
        assert rec.to_dict() == {
            "num": "令和三年法律第十号",
            "chapter_data": [{"article": "5", "paragraph": "2"}],
        }
        assert not rec.is_empty

    def test_empty_record(self) -> None:
        rec = CitationRecord(num="")
        assert rec.is_empty
        assert rec.to_dict() == {"num": "", "chapter_data": []}

    def test_from_dict(self) -> None:
        data = {"num": "n", "chapter_data": [{"article": "1"}, {"article": "2"}]}
        rec = CitationRecord.from_dict(data)
        assert rec.num == "n"
        assert [a.article for a in rec.chapter_data] == ["1", "2"]
