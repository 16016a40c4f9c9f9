"""Shared test fixtures for Project Map tests."""
import json
from contextlib import ExitStack
from unittest.mock import patch

import pytest

from src.app.config import Settings
from src.mapping.models import ContentItem, Coordinates, LocationTerm
from src.storage.db import init_db

# Every module that imports get_settings by name.
_SETTINGS_TARGETS = (
    "src.app.config.get_settings",
    "src.app.paths.get_settings",
    "src.app.logging.get_settings",
    "src.storage.db.get_settings",
    "src.mapping.service.get_settings",
    "src.web.server.get_settings",
    "src.cli.main.get_settings",
)


@pytest.fixture()
def tmp_settings(tmp_path):
    """Create a Settings instance backed by a temporary directory.

    Patches get_settings globally so all modules use the temp paths.
    """
    settings = Settings(
        db_path=tmp_path / "test.db",
        log_path=tmp_path / "logs" / "app.log",
        exclude_slug="",
        classification_order="water,education",
        related_limit=4,
        _env_file=None,
    )
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)

    with ExitStack() as stack:
        for target in _SETTINGS_TARGETS:
            stack.enter_context(patch(target, return_value=settings))
        init_db()
        yield settings


# ── domain builders ─────────────────────────────────────────────


def make_term(tid, slug, name=None, lat=None, lng=None, parent_id=None) -> LocationTerm:
    return LocationTerm(
        id=tid,
        name=name or slug.replace("-", " ").title(),
        slug=slug,
        parent_id=parent_id,
        coordinates=Coordinates(lat=lat, lng=lng),
    )


def make_item(iid, title, permalink, *terms, classification=None) -> ContentItem:
    return ContentItem(
        id=iid,
        title=title,
        permalink=permalink,
        terms=tuple(terms),
        classification=classification,
    )


@pytest.fixture()
def kenya():
    return make_term(10, "kenya", "Kenya", lat=-1.3, lng=36.8, parent_id=1)


@pytest.fixture()
def united_states():
    return make_term(20, "united-states", "United States", lat=39.8, lng=-98.6, parent_id=2)


# ── snapshot files ──────────────────────────────────────────────

SNAPSHOT = {
    "terms": [
        {"id": 1, "name": "Africa", "slug": "africa", "latitude": 1.6, "longitude": 17.3},
        {"id": 2, "name": "North America", "slug": "north-america", "latitude": 47.1, "longitude": -101.3},
        {"id": 10, "name": "Kenya", "slug": "kenya", "parent": 1, "latitude": "-1.3", "longitude": "36.8"},
        {"id": 11, "name": "Uganda", "slug": "uganda", "parent": 1, "latitude": 1.4, "longitude": 32.3},
        {"id": 20, "name": "United States", "slug": "united-states", "parent": 2,
         "latitude": 39.8, "longitude": -98.6},
        {"id": 21, "name": "Texas", "slug": "texas", "parent": 20, "latitude": "", "longitude": ""},
    ],
    "items": [
        {"id": 1, "title": "Clean Water Kisumu", "permalink": "/projects/clean-water-kisumu/",
         "terms": [10], "classification": "water"},
        {"id": 2, "title": "School  Build", "permalink": "/projects/school-build",
         "terms": [10, 20], "classification": "education"},
        {"id": 3, "title": "Kampala Wells", "permalink": "/projects/kampala-wells",
         "terms": [11], "classification": "water"},
        {"id": 4, "title": "Houston Outreach", "permalink": "/projects/houston-outreach",
         "terms": [21], "classification": "health"},
        {"id": 5, "title": "", "permalink": "/projects/untitled", "terms": [10]},
        {"id": 6, "title": "Unplaced", "permalink": "/projects/unplaced", "terms": []},
    ],
}


@pytest.fixture()
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return path


@pytest.fixture()
def loaded_store(tmp_settings, snapshot_file):
    """Import the sample snapshot into the temp database."""
    from src.ingest.importer import import_snapshot

    import_snapshot(snapshot_file)
    return tmp_settings
