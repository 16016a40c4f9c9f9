"""Tests for location hierarchy and grouping helpers."""
import pytest

from conftest import make_item, make_term
from src.tagging.taxonomy import (
    TaxonomyError,
    ancestors,
    group_by_classification,
    related_items,
    root_term,
)


@pytest.fixture()
def terms():
    africa = make_term(1, "africa")
    kenya = make_term(10, "kenya", parent_id=1)
    nairobi = make_term(100, "nairobi", parent_id=10)
    return {t.id: t for t in (africa, kenya, nairobi)}


class TestHierarchy:
    """Parent walking and cycle detection."""

    def test_ancestors_nearest_first(self, terms):
        assert [t.id for t in ancestors(terms[100], terms)] == [10, 1]

    def test_root_of_root_is_itself(self, terms):
        assert root_term(terms[1], terms) is terms[1]

    def test_root_term(self, terms):
        assert root_term(terms[100], terms).id == 1

    def test_unknown_parent_ends_chain(self):
        orphan = make_term(5, "orphan", parent_id=999)
        assert ancestors(orphan, {5: orphan}) == []

    def test_cycle_raises(self):
        a = make_term(1, "a", parent_id=2)
        b = make_term(2, "b", parent_id=1)
        with pytest.raises(TaxonomyError):
            ancestors(a, {1: a, 2: b})


class TestRelatedItems:
    """Verify related-item selection and limits."""

    def test_shares_first_term_excludes_self(self, kenya, united_states):
        target = make_item(1, "A", "/a", kenya, united_states)
        items = [
            target,
            make_item(2, "B", "/b", kenya),
            make_item(3, "C", "/c", united_states),
            make_item(4, "D", "/d", united_states, kenya),
        ]
        assert [i.id for i in related_items(target, items)] == [2, 4]

    def test_limit(self, kenya):
        items = [make_item(i, f"T{i}", f"/t{i}", kenya) for i in range(1, 10)]
        assert len(related_items(items[0], items, limit=4)) == 4

    def test_no_terms(self, kenya):
        target = make_item(1, "A", "/a")
        assert related_items(target, [target, make_item(2, "B", "/b", kenya)]) == []

    def test_zero_limit(self, kenya):
        items = [make_item(1, "A", "/a", kenya), make_item(2, "B", "/b", kenya)]
        assert related_items(items[0], items, limit=0) == []


class TestGroupByClassification:
    """Verify grouping follows the configured order."""

    def test_follows_order_and_drops_unknown(self):
        items = [
            make_item(1, "A", "/a", classification="education"),
            make_item(2, "B", "/b", classification="water"),
            make_item(3, "C", "/c", classification="health"),
            make_item(4, "D", "/d"),
        ]
        groups = group_by_classification(items, ["water", "education", "faith"])
        assert list(groups) == ["water", "education", "faith"]
        assert [i.id for i in groups["water"]] == [2]
        assert [i.id for i in groups["education"]] == [1]
        assert groups["faith"] == []

    def test_empty_order(self):
        assert group_by_classification([make_item(1, "A", "/a", classification="x")], []) == {}
