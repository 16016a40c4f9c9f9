"""FastAPI web server exposing project map data."""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from src.app.config import get_settings
from src.app.paths import ensure_dirs
from src.mapping.models import ContentItem
from src.mapping.serialize import dataset_to_dict, dataset_to_widget_dict, render_localized_script
from src.mapping.service import build_archive, build_map_data, find_related
from src.storage.db import init_db
from src.tagging.taxonomy import TaxonomyError

logger = logging.getLogger("project_map.web")

app = FastAPI(title="Project Map")


def _item_summary(item: ContentItem) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "permalink": item.permalink,
        "locations": [t.name for t in item.terms],
    }


@app.on_event("startup")
async def startup():
    ensure_dirs()
    init_db()


@app.get("/api/map")
async def map_data(exclude: Optional[str] = None, by_region: bool = False):
    try:
        result = build_map_data(exclude_slug=exclude, by_region=by_region)
    except TaxonomyError as e:
        logger.warning("Map request failed: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e
    return {
        "locations": dataset_to_dict(result.dataset),
        "skipped": result.skipped,
    }


@app.get("/api/map/widget")
async def map_widget_data(exclude: Optional[str] = None):
    result = build_map_data(exclude_slug=exclude)
    return dataset_to_widget_dict(result.dataset)


@app.get("/map-data.js", response_class=PlainTextResponse)
async def map_data_script(exclude: Optional[str] = None):
    result = build_map_data(exclude_slug=exclude)
    script = render_localized_script(result.dataset, get_settings().map_var_name)
    return PlainTextResponse(script, media_type="application/javascript")


@app.get("/api/items/{item_id}/related")
async def item_related(item_id: int, limit: Optional[int] = None):
    related = find_related(item_id, limit=limit)
    if related is None:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
    return [_item_summary(item) for item in related]


@app.get("/api/archive")
async def archive():
    groups = build_archive()
    return {slug: [_item_summary(item) for item in items] for slug, items in groups.items()}
