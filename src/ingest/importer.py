"""Load a content-store snapshot into the local database."""
import logging
from dataclasses import dataclass
from pathlib import Path

from src.ingest.normalize import load_snapshot
from src.storage.dao import ItemDAO, TermDAO

logger = logging.getLogger("project_map.ingest.importer")


@dataclass(frozen=True)
class ImportStats:
    terms: int
    items: int
    skipped: int


def import_snapshot(path: Path) -> ImportStats:
    """Upsert every term, then every item that has an id.

    Items without an id cannot be keyed and are counted as skipped.
    Items missing only a title or permalink are stored; aggregation
    reports them later.
    """
    terms, items = load_snapshot(path)

    term_dao = TermDAO()
    for term in terms.values():
        term_dao.upsert(term)

    item_dao = ItemDAO()
    stored = 0
    skipped = 0
    for item in items:
        if item.id is None:
            skipped += 1
            logger.warning("Skipping item without id: %r", item.title)
            continue
        item_dao.upsert(item)
        stored += 1

    logger.info("Imported %d terms, %d items (%d skipped)", len(terms), stored, skipped)
    return ImportStats(terms=len(terms), items=stored, skipped=skipped)
