import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from studydeck.config import settings
from studydeck.models.flashcard import (
    CardDraft,
    DeckStats,
    Flashcard,
    MaterialDeckStats,
    ReviewUpdate,
)
from studydeck.models.material import (
    StudyMaterial,
    StudyMaterialCreate,
    StudyMaterialUpdate,
)

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS materials (
    id                TEXT PRIMARY KEY,
    title             TEXT NOT NULL,
    subject           TEXT NOT NULL DEFAULT '',
    extracted_content TEXT NOT NULL DEFAULT '',
    created_at        TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS flashcards (
    id             TEXT PRIMARY KEY,
    material_id    TEXT NOT NULL REFERENCES materials(id) ON DELETE CASCADE,
    front          TEXT NOT NULL,
    back           TEXT NOT NULL,
    difficulty     TEXT NOT NULL DEFAULT 'medium',
    correct_streak INTEGER NOT NULL DEFAULT 0,
    review_count   INTEGER NOT NULL DEFAULT 0,
    next_review    TEXT NOT NULL,
    created_at     TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at     TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_flashcards_material ON flashcards(material_id);
CREATE INDEX IF NOT EXISTS idx_flashcards_review ON flashcards(next_review);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()


@asynccontextmanager
async def open_db() -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection to the initialized database with row access by name."""
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys=ON")
        yield db


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    async with open_db() as db:
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


# --- Study materials ---


def _row_to_material(row: aiosqlite.Row) -> StudyMaterial:
    return StudyMaterial(**dict(row))


async def create_material(
    db: aiosqlite.Connection, material: StudyMaterialCreate
) -> StudyMaterial:
    material_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO materials
           (id, title, subject, extracted_content, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (
            material_id,
            material.title,
            material.subject,
            material.extracted_content,
            now,
            now,
        ),
    )
    await db.commit()
    return await get_material(db, material_id)  # type: ignore[return-value]


async def get_material(
    db: aiosqlite.Connection, material_id: str
) -> StudyMaterial | None:
    cursor = await db.execute("SELECT * FROM materials WHERE id = ?", (material_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return _row_to_material(row)


async def list_materials(
    db: aiosqlite.Connection, offset: int = 0, limit: int = 50
) -> tuple[list[StudyMaterial], int]:
    cursor = await db.execute("SELECT COUNT(*) FROM materials")
    total = (await cursor.fetchone())[0]

    cursor = await db.execute(
        "SELECT * FROM materials ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
        (limit, offset),
    )
    rows = await cursor.fetchall()
    return [_row_to_material(r) for r in rows], total


async def update_material(
    db: aiosqlite.Connection, material_id: str, updates: StudyMaterialUpdate
) -> StudyMaterial | None:
    fields = updates.model_dump(exclude_none=True)
    if not fields:
        return await get_material(db, material_id)

    fields["updated_at"] = _now()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = list(fields.values()) + [material_id]

    await db.execute(
        f"UPDATE materials SET {set_clause} WHERE id = ?",  # noqa: S608
        values,
    )
    await db.commit()
    return await get_material(db, material_id)


async def delete_material(db: aiosqlite.Connection, material_id: str) -> bool:
    """Delete a material; its flashcards go with it via ON DELETE CASCADE."""
    cursor = await db.execute("DELETE FROM materials WHERE id = ?", (material_id,))
    await db.commit()
    return (cursor.rowcount or 0) > 0


# --- Flashcards ---


def _row_to_flashcard(row: aiosqlite.Row) -> Flashcard:
    return Flashcard(**dict(row))


async def list_flashcards(
    db: aiosqlite.Connection, material_id: str
) -> list[Flashcard]:
    """Return every card of a material in insertion order."""
    cursor = await db.execute(
        "SELECT * FROM flashcards WHERE material_id = ? ORDER BY rowid ASC",
        (material_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_flashcard(r) for r in rows]


async def insert_flashcard(
    db: aiosqlite.Connection,
    material_id: str,
    draft: CardDraft,
    next_review: date,
) -> Flashcard:
    card_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO flashcards
           (id, material_id, front, back, difficulty,
            correct_streak, review_count, next_review, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, 0, 0, ?, ?, ?)""",
        (
            card_id,
            material_id,
            draft.front,
            draft.back,
            draft.difficulty.value,
            next_review.isoformat(),
            now,
            now,
        ),
    )
    await db.commit()
    return await get_flashcard(db, card_id)  # type: ignore[return-value]


async def insert_flashcards(
    db: aiosqlite.Connection,
    material_id: str,
    drafts: list[CardDraft],
    next_review: date,
) -> list[Flashcard]:
    """Insert a batch of new cards in one transaction: all rows or none."""
    card_ids = []
    now = _now()
    try:
        for draft in drafts:
            card_id = str(uuid.uuid4())
            await db.execute(
                """INSERT INTO flashcards
                   (id, material_id, front, back, difficulty,
                    correct_streak, review_count, next_review, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, 0, 0, ?, ?, ?)""",
                (
                    card_id,
                    material_id,
                    draft.front,
                    draft.back,
                    draft.difficulty.value,
                    next_review.isoformat(),
                    now,
                    now,
                ),
            )
            card_ids.append(card_id)
        await db.commit()
    except aiosqlite.Error:
        await db.rollback()
        raise

    cards = []
    for card_id in card_ids:
        cards.append(await get_flashcard(db, card_id))
    return cards


async def get_flashcard(db: aiosqlite.Connection, card_id: str) -> Flashcard | None:
    cursor = await db.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,))
    row = await cursor.fetchone()
    return _row_to_flashcard(row) if row else None


async def update_flashcard_review(
    db: aiosqlite.Connection,
    card_id: str,
    update: ReviewUpdate,
) -> Flashcard | None:
    cursor = await db.execute(
        """UPDATE flashcards
           SET correct_streak = ?, review_count = ?, next_review = ?, updated_at = ?
           WHERE id = ?""",
        (
            update.correct_streak,
            update.review_count,
            update.next_review.isoformat(),
            _now(),
            card_id,
        ),
    )
    await db.commit()
    if (cursor.rowcount or 0) == 0:
        return None
    return await get_flashcard(db, card_id)


async def delete_flashcard(db: aiosqlite.Connection, card_id: str) -> bool:
    cursor = await db.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
    await db.commit()
    return (cursor.rowcount or 0) > 0


async def get_deck_stats(db: aiosqlite.Connection, today: date) -> DeckStats:
    """Return total cards, cards due on or before ``today``, and a per-material breakdown."""
    today_iso = today.isoformat()

    total_cursor = await db.execute("SELECT COUNT(*) FROM flashcards")
    total_row = await total_cursor.fetchone()
    total_cards: int = total_row[0] if total_row else 0

    due_cursor = await db.execute(
        "SELECT COUNT(*) FROM flashcards WHERE next_review <= ?", (today_iso,)
    )
    due_row = await due_cursor.fetchone()
    due_today: int = due_row[0] if due_row else 0

    per_material_cursor = await db.execute(
        """SELECT f.material_id, m.title,
                  COUNT(*) as total,
                  SUM(CASE WHEN f.next_review <= ? THEN 1 ELSE 0 END) as due
           FROM flashcards f
           LEFT JOIN materials m ON m.id = f.material_id
           GROUP BY f.material_id
           ORDER BY m.title ASC""",
        (today_iso,),
    )
    per_material_rows = await per_material_cursor.fetchall()
    per_material = [
        MaterialDeckStats(
            material_id=row[0],
            title=row[1] or row[0],
            total=row[2],
            due=row[3] or 0,
        )
        for row in per_material_rows
    ]

    return DeckStats(
        total_cards=total_cards, due_today=due_today, per_material=per_material
    )
