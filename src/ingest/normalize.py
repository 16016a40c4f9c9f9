"""Normalize exported content-store records into domain objects."""
import json
import logging
from pathlib import Path
from typing import Any, Optional

from src.mapping.models import ContentItem, Coordinates, LocationTerm
from src.tagging.taxonomy import TaxonomyError, ancestors

logger = logging.getLogger("project_map.ingest.normalize")


class SnapshotError(ValueError):
    """Raised when a snapshot file cannot be read or has the wrong shape."""


def normalize_title(title: Optional[str]) -> Optional[str]:
    """Strip whitespace, collapse multiple spaces. Blank becomes None."""
    if title is None:
        return None
    collapsed = " ".join(str(title).split()).strip()
    return collapsed or None


def normalize_permalink(permalink: Optional[str]) -> Optional[str]:
    """Strip whitespace and trailing slashes, keeping a bare "/"."""
    if permalink is None:
        return None
    stripped = str(permalink).strip()
    if not stripped:
        return None
    return stripped.rstrip("/") or "/"


def parse_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def parse_coordinate(value: Any, limit: float) -> Optional[float]:
    """Parse a latitude/longitude from a number or numeric string.

    Blank, non-numeric and out-of-range values become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric coordinate %r", value)
        return None
    if number != number or abs(number) > limit:
        logger.warning("Ignoring out-of-range coordinate %r", value)
        return None
    return number


def normalize_term(raw: dict) -> LocationTerm:
    term_id = parse_id(raw.get("id"))
    if term_id is None:
        raise SnapshotError(f"Location term without a valid id: {raw!r}")
    lat = raw.get("latitude", raw.get("lat"))
    lng = raw.get("longitude", raw.get("lng"))
    return LocationTerm(
        id=term_id,
        name=normalize_title(raw.get("name")) or "",
        slug=str(raw.get("slug") or "").strip().lower(),
        parent_id=parse_id(raw.get("parent")),
        coordinates=Coordinates(
            lat=parse_coordinate(lat, 90.0),
            lng=parse_coordinate(lng, 180.0),
        ),
    )


def normalize_item(raw: dict, terms: dict[int, LocationTerm]) -> ContentItem:
    """Build a ContentItem, resolving term ids against terms.

    Unknown term ids are dropped with a warning. Missing id, title or
    permalink are kept as None so aggregation can report the item as skipped.
    """
    item_id = parse_id(raw.get("id"))
    refs = raw.get("terms") or []
    if not isinstance(refs, list):
        raise SnapshotError(f"Item {item_id!r}: \"terms\" must be a list")

    resolved: list[LocationTerm] = []
    for ref in refs:
        term_id = parse_id(ref.get("id") if isinstance(ref, dict) else ref)
        term = terms.get(term_id) if term_id is not None else None
        if term is None:
            logger.warning("Item %r references unknown term %r", item_id, ref)
            continue
        resolved.append(term)

    classification = raw.get("classification")
    return ContentItem(
        id=item_id,
        title=normalize_title(raw.get("title")),
        permalink=normalize_permalink(raw.get("permalink")),
        terms=tuple(resolved),
        classification=str(classification).strip() if classification else None,
    )


def _entries(data: dict, key: str, path: Path) -> list[dict]:
    """The list under key, every entry a JSON object. Missing or null is empty."""
    entries = data.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise SnapshotError(f"Snapshot {path}: \"{key}\" must be a list")
    for raw in entries:
        if not isinstance(raw, dict):
            raise SnapshotError(f"Snapshot {path}: {key} entry {raw!r} is not an object")
    return entries


def load_snapshot(path: Path) -> tuple[dict[int, LocationTerm], list[ContentItem]]:
    """Read a `{"terms": [...], "items": [...]}` JSON export."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot {path} must be a JSON object")

    terms: dict[int, LocationTerm] = {}
    for raw in _entries(data, "terms", path):
        term = normalize_term(raw)
        terms[term.id] = term

    for term in terms.values():
        try:
            ancestors(term, terms)
        except TaxonomyError as e:
            raise SnapshotError(f"Snapshot {path}: {e}") from e

    items = [normalize_item(raw, terms) for raw in _entries(data, "items", path)]
    logger.info("Loaded %d terms and %d items from %s", len(terms), len(items), path)
    return terms, items
