"""Build map data from the content store.

Reads the current items and terms, aggregates them and hands back the
result for the CLI and web server to serialize.
"""
import logging
from typing import Optional

from src.app.config import get_settings
from src.mapping.aggregator import aggregate, aggregate_by_region
from src.mapping.models import AggregationResult, ContentItem
from src.storage.dao import ItemDAO, TermDAO
from src.tagging.taxonomy import group_by_classification, related_items

logger = logging.getLogger("project_map.mapping.service")


def build_map_data(
    exclude_slug: Optional[str] = None,
    by_region: bool = False,
) -> AggregationResult:
    """Aggregate every stored item.

    exclude_slug falls back to settings.exclude_slug when None.
    """
    settings = get_settings()
    slug = settings.exclude_slug if exclude_slug is None else exclude_slug

    items = ItemDAO().find_all()
    if by_region:
        result = aggregate_by_region(items, TermDAO().find_all(), exclude_slug=slug)
    else:
        result = aggregate(items, exclude_slug=slug)

    if slug and TermDAO().find_by_slug(slug) is None:
        logger.info("Exclude slug %r matches no stored location", slug)
    if result.skipped:
        logger.warning("%d malformed items left off the map", result.skipped)
    unplaced = [e.location_name for e in result.dataset.values() if not e.coordinates.is_complete]
    if unplaced:
        logger.warning("%d locations have no coordinates: %s", len(unplaced), ", ".join(unplaced))
    logger.info("Map data built: %d locations from %d items", len(result.dataset), len(items))
    return result


def find_related(item_id: int, limit: Optional[int] = None) -> Optional[list[ContentItem]]:
    """Related items for item_id, or None when the item does not exist."""
    dao = ItemDAO()
    item = dao.find_by_id(item_id)
    if item is None:
        return None
    n = get_settings().related_limit if limit is None else limit
    return related_items(item, dao.find_all(), limit=n)


def build_archive() -> dict[str, list[ContentItem]]:
    """Items grouped by the configured classification order."""
    order = get_settings().get_classification_order()
    return group_by_classification(ItemDAO().find_all(), order)
