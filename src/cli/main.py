"""CLI entry point for Project Map."""
import argparse
import json
import sys
from pathlib import Path

from src.app.config import get_settings
from src.app.logging import setup_logging
from src.app.paths import ensure_dirs
from src.storage.db import init_db


def cmd_import(args):
    """Load a JSON snapshot into the content store."""
    from src.ingest.importer import import_snapshot
    from src.ingest.normalize import SnapshotError
    from src.storage.db import clear_db

    if args.replace:
        clear_db()
    try:
        stats = import_snapshot(Path(args.file))
    except SnapshotError as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1

    print(f"  terms: {stats.terms}")
    print(f"  items: {stats.items}")
    if stats.skipped:
        print(f"  skipped: {stats.skipped}")
    return 0


def cmd_map(args):
    """Build map data and print or write it."""
    from src.mapping.serialize import dataset_to_dict, dataset_to_widget_dict, render_localized_script
    from src.mapping.service import build_map_data
    from src.tagging.taxonomy import TaxonomyError

    try:
        result = build_map_data(exclude_slug=args.exclude, by_region=args.by_region)
    except TaxonomyError as e:
        print(f"Map failed: {e}", file=sys.stderr)
        return 1

    if args.format == "script":
        output = render_localized_script(result.dataset, get_settings().map_var_name)
    elif args.format == "widget":
        output = json.dumps(dataset_to_widget_dict(result.dataset), ensure_ascii=False, indent=2)
    else:
        output = json.dumps(dataset_to_dict(result.dataset), ensure_ascii=False, indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output, encoding="utf-8")
        print(f"Map data written to {out_path} ({len(result.dataset)} locations)")
    else:
        print(output)

    if result.skipped:
        print(f"Skipped {result.skipped} malformed items", file=sys.stderr)
    return 0


def cmd_related(args):
    """List items sharing a location with the given item."""
    from src.mapping.service import find_related

    related = find_related(args.item_id, limit=args.limit)
    if related is None:
        print(f"Item {args.item_id} not found", file=sys.stderr)
        return 1
    if not related:
        print("No related items.")
        return 0
    for item in related:
        print(f"  [{item.id}] {item.title}")
        print(f"         {item.permalink}")
    return 0


def cmd_serve(args):
    """Start the web server."""
    import uvicorn
    from src.web.server import app

    settings = get_settings()
    port = args.port or settings.web_port
    host = settings.web_host

    print(f"Starting server at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-map",
        description="Project Map: aggregate projects into map markers",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # import
    p_import = subparsers.add_parser("import", help="Import a JSON snapshot")
    p_import.add_argument("file")
    p_import.add_argument("--replace", action="store_true", help="Clear the store first")
    p_import.set_defaults(func=cmd_import)

    # map
    p_map = subparsers.add_parser("map", help="Build map marker data")
    p_map.add_argument("--exclude", default=None, help="Location slug to leave off the map")
    p_map.add_argument("--format", default="json", choices=["json", "widget", "script"])
    p_map.add_argument("--by-region", action="store_true", help="Roll locations up to their region")
    p_map.add_argument("--out", default=None)
    p_map.set_defaults(func=cmd_map)

    # related
    p_related = subparsers.add_parser("related", help="Show related items")
    p_related.add_argument("item_id", type=int)
    p_related.add_argument("--limit", type=int, default=None)
    p_related.set_defaults(func=cmd_related)

    # serve
    p_serve = subparsers.add_parser("serve", help="Start web server")
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    setup_logging()
    ensure_dirs()
    init_db()

    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
