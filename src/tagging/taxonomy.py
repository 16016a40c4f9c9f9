"""Location hierarchy and project grouping helpers."""
from typing import Mapping, Sequence

from src.mapping.models import ContentItem, LocationTerm


class TaxonomyError(ValueError):
    """Raised when the location hierarchy is inconsistent."""


def ancestors(term: LocationTerm, terms: Mapping[int, LocationTerm]) -> list[LocationTerm]:
    """Return the chain of parents of term, nearest first.

    A parent id that is not in terms ends the chain. Cycles raise TaxonomyError.
    """
    chain: list[LocationTerm] = []
    seen = {term.id}
    parent_id = term.parent_id
    while parent_id is not None:
        if parent_id in seen:
            raise TaxonomyError(f"Cycle in location hierarchy at term {parent_id}")
        parent = terms.get(parent_id)
        if parent is None:
            break
        seen.add(parent_id)
        chain.append(parent)
        parent_id = parent.parent_id
    return chain


def root_term(term: LocationTerm, terms: Mapping[int, LocationTerm]) -> LocationTerm:
    """Return the top-most known ancestor of term, or term itself."""
    chain = ancestors(term, terms)
    return chain[-1] if chain else term


def related_items(
    item: ContentItem,
    items: Sequence[ContentItem],
    limit: int = 4,
) -> list[ContentItem]:
    """Other items sharing the first location term of item.

    Input order is preserved and malformed items are left out. Returns an
    empty list when item has no terms.
    """
    if not item.terms or limit <= 0:
        return []
    location_id = item.terms[0].id

    result: list[ContentItem] = []
    for other in items:
        if other.id == item.id or not other.is_valid:
            continue
        if any(t.id == location_id for t in other.terms):
            result.append(other)
            if len(result) >= limit:
                break
    return result


def group_by_classification(
    items: Sequence[ContentItem],
    order: Sequence[str],
) -> dict[str, list[ContentItem]]:
    """Group items under the configured classification order.

    Every slug in order gets a key (possibly an empty list). Items whose
    classification is missing or not in order are left out.
    """
    groups: dict[str, list[ContentItem]] = {slug: [] for slug in order}
    for item in items:
        if item.classification in groups:
            groups[item.classification].append(item)
    return groups
