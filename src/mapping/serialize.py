"""Serialize marker datasets for the client-side map."""
import json
import re

from src.mapping.models import MarkerDataset, MarkerEntry

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_js_identifier(name: str) -> bool:
    return bool(_JS_IDENTIFIER.fullmatch(name))


def _entry_to_dict(entry: MarkerEntry) -> dict:
    return {
        "representative_item_id": entry.first_item_id,
        "item_count": entry.item_count,
        "location_name": entry.location_name,
        "coordinates": {
            "lat": entry.coordinates.lat,
            "lng": entry.coordinates.lng,
        },
        "items": {
            str(item_id): {"title": link.title, "permalink": link.permalink}
            for item_id, link in entry.items.items()
        },
    }


def dataset_to_dict(dataset: MarkerDataset) -> dict[str, dict]:
    """JSON-ready dict keyed by location id (as string, like JSON object keys)."""
    return {str(location_id): _entry_to_dict(entry) for location_id, entry in dataset.items()}


def dataset_to_widget_dict(dataset: MarkerDataset) -> dict[str, dict]:
    """Shape consumed by the archive map script (country_* / project_* keys)."""
    result: dict[str, dict] = {}
    for location_id, entry in dataset.items():
        result[str(location_id)] = {
            "country_name": entry.location_name,
            "project_count": entry.item_count,
            "country_coords": {
                "latitude": entry.coordinates.lat,
                "longitude": entry.coordinates.lng,
            },
            "projects": {
                str(item_id): {"title": link.title, "permalink": link.permalink}
                for item_id, link in entry.items.items()
            },
        }
    return result


def render_localized_script(dataset: MarkerDataset, var_name: str = "map_project_data") -> str:
    """Render `var <name> = {...};` for embedding before the map script.

    "</" is escaped so a title cannot close the surrounding script tag.
    """
    if not is_js_identifier(var_name):
        raise ValueError(f"Invalid JavaScript variable name: {var_name!r}")
    payload = json.dumps(dataset_to_widget_dict(dataset), ensure_ascii=False)
    payload = payload.replace("</", "<\\/")
    return f"var {var_name} = {payload};\n"
