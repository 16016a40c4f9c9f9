"""Data Access Objects for location terms and project items."""
import sqlite3
from typing import Optional

from src.mapping.models import ContentItem, Coordinates, LocationTerm
from src.storage.db import get_connection


def _row_to_term(row: sqlite3.Row) -> LocationTerm:
    return LocationTerm(
        id=row["id"],
        name=row["name"],
        slug=row["slug"],
        parent_id=row["parent_id"],
        coordinates=Coordinates(lat=row["latitude"], lng=row["longitude"]),
    )


class TermDAO:
    def upsert(self, term: LocationTerm) -> None:
        conn = get_connection()
        try:
            conn.execute(
                """INSERT INTO location_terms
                   (id, name, slug, parent_id, latitude, longitude)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     name=excluded.name,
                     slug=excluded.slug,
                     parent_id=excluded.parent_id,
                     latitude=excluded.latitude,
                     longitude=excluded.longitude
                """,
                (term.id, term.name, term.slug, term.parent_id,
                 term.coordinates.lat, term.coordinates.lng),
            )
            conn.commit()
        finally:
            conn.close()

    def find_by_id(self, tid: int) -> Optional[LocationTerm]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM location_terms WHERE id = ?", (tid,)
            ).fetchone()
            if row is None:
                return None
            return _row_to_term(row)
        finally:
            conn.close()

    def find_by_slug(self, slug: str) -> Optional[LocationTerm]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM location_terms WHERE slug = ? ORDER BY id LIMIT 1",
                (slug,),
            ).fetchone()
            if row is None:
                return None
            return _row_to_term(row)
        finally:
            conn.close()

    def find_all(self) -> dict[int, LocationTerm]:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM location_terms ORDER BY id").fetchall()
            return {r["id"]: _row_to_term(r) for r in rows}
        finally:
            conn.close()


class ItemDAO:
    def upsert(self, item: ContentItem) -> None:
        """Insert or replace an item and its ordered term links.

        Terms must already exist in location_terms.
        """
        if item.id is None:
            raise ValueError("Cannot store an item without an id")
        conn = get_connection()
        try:
            conn.execute(
                """INSERT INTO content_items (id, title, permalink, classification)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     title=excluded.title,
                     permalink=excluded.permalink,
                     classification=excluded.classification
                """,
                (item.id, item.title, item.permalink, item.classification),
            )
            conn.execute("DELETE FROM item_terms WHERE item_id = ?", (item.id,))
            conn.executemany(
                "INSERT OR IGNORE INTO item_terms (item_id, term_id, position) VALUES (?, ?, ?)",
                [(item.id, term.id, pos) for pos, term in enumerate(item.terms)],
            )
            conn.commit()
        finally:
            conn.close()

    def _load(self, conn: sqlite3.Connection, rows: list[sqlite3.Row]) -> list[ContentItem]:
        if not rows:
            return []
        ids = [r["id"] for r in rows]
        placeholders = ",".join("?" for _ in ids)
        links = conn.execute(
            f"""SELECT it.item_id, t.* FROM item_terms it
                JOIN location_terms t ON t.id = it.term_id
                WHERE it.item_id IN ({placeholders})
                ORDER BY it.item_id, it.position""",
            ids,
        ).fetchall()

        terms_by_item: dict[int, list[LocationTerm]] = {}
        for link in links:
            terms_by_item.setdefault(link["item_id"], []).append(_row_to_term(link))

        return [
            ContentItem(
                id=r["id"],
                title=r["title"],
                permalink=r["permalink"],
                terms=tuple(terms_by_item.get(r["id"], [])),
                classification=r["classification"],
            )
            for r in rows
        ]

    def find_by_id(self, iid: int) -> Optional[ContentItem]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM content_items WHERE id = ?", (iid,)
            ).fetchone()
            if row is None:
                return None
            return self._load(conn, [row])[0]
        finally:
            conn.close()

    def find_all(self, limit: Optional[int] = None) -> list[ContentItem]:
        """All items ordered by id, so aggregation order is stable."""
        conn = get_connection()
        try:
            if limit is None:
                rows = conn.execute("SELECT * FROM content_items ORDER BY id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM content_items ORDER BY id LIMIT ?", (limit,)
                ).fetchall()
            return self._load(conn, rows)
        finally:
            conn.close()

    def count_all(self) -> int:
        conn = get_connection()
        try:
            row = conn.execute("SELECT COUNT(*) FROM content_items").fetchone()
            return row[0]
        finally:
            conn.close()

    def delete(self, iid: int) -> None:
        conn = get_connection()
        try:
            conn.execute("DELETE FROM content_items WHERE id = ?", (iid,))
            conn.commit()
        finally:
            conn.close()
