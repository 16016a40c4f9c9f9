"""Aggregate tagged project items into per-location map markers.

The result is a read-time projection: it is rebuilt from the current
items on every call and never stored. Location order in the dataset
follows first appearance in the input, so callers that need a stable
first_item_id must pass a stably ordered sequence.
"""
import logging
from typing import Iterable, Mapping, Optional, Sequence

from src.mapping.models import (
    AggregationResult,
    ContentItem,
    ItemLink,
    LocationTerm,
    MarkerDataset,
    MarkerEntry,
)
from src.tagging.taxonomy import root_term

logger = logging.getLogger("project_map.mapping.aggregator")


def _add(dataset: MarkerDataset, term: LocationTerm, item: ContentItem) -> None:
    link = ItemLink(title=item.title, permalink=item.permalink)
    entry = dataset.get(term.id)
    if entry is None:
        dataset[term.id] = MarkerEntry(
            location_id=term.id,
            location_name=term.name,
            coordinates=term.coordinates,
            first_item_id=item.id,
            items={item.id: link},
        )
    else:
        # Keyed by item id: a repeated item overwrites its own entry.
        entry.items[item.id] = link


def _iter_valid(items: Iterable[ContentItem]) -> tuple[list[ContentItem], int]:
    valid: list[ContentItem] = []
    skipped = 0
    for item in items:
        if not item.is_valid:
            skipped += 1
            logger.warning(
                "Skipping malformed item id=%r title=%r permalink=%r",
                item.id, item.title, item.permalink,
            )
            continue
        valid.append(item)
    return valid, skipped


def aggregate(
    items: Sequence[ContentItem],
    exclude_slug: Optional[str] = None,
) -> AggregationResult:
    """Build the marker dataset for a sequence of items.

    Terms whose slug equals exclude_slug never produce an entry. An empty
    or None exclude_slug excludes nothing. Items missing an id, title or
    permalink are skipped and counted in AggregationResult.skipped.
    """
    dataset: MarkerDataset = {}
    valid, skipped = _iter_valid(items)

    for item in valid:
        for term in item.terms:
            if exclude_slug and term.slug == exclude_slug:
                continue
            _add(dataset, term, item)

    logger.debug(
        "Aggregated %d items into %d locations (%d skipped)",
        len(valid), len(dataset), skipped,
    )
    return AggregationResult(dataset=dataset, skipped=skipped)


def aggregate_by_region(
    items: Sequence[ContentItem],
    terms: Mapping[int, LocationTerm],
    exclude_slug: Optional[str] = None,
) -> AggregationResult:
    """Like aggregate(), but rolls every term up to the root of its hierarchy.

    The exclusion is checked against both the item's own term and its root,
    so an excluded umbrella region never becomes a key. An item tagged with
    two countries of the same region counts once there.
    """
    dataset: MarkerDataset = {}
    valid, skipped = _iter_valid(items)

    for item in valid:
        for term in item.terms:
            if exclude_slug and term.slug == exclude_slug:
                continue
            root = root_term(term, terms)
            if exclude_slug and root.slug == exclude_slug:
                continue
            _add(dataset, root, item)

    return AggregationResult(dataset=dataset, skipped=skipped)
