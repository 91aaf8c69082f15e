"""SQLite persistence for decks and flashcards."""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from .models import Deck, Flashcard

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class DeckStore:
    """Database access layer for decks and their flashcards."""

    def __init__(self, db_path: Path | str) -> None:
        """Open the database and bring its schema up to date."""
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {current} is newer than supported {SCHEMA_VERSION}.")

        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """)

        for version in range(current + 1, SCHEMA_VERSION + 1):
            if version == 1:
                self._migrate_to_v1()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
                self._conn.execute(
                    "INSERT OR REPLACE INTO schema_migrations (version, applied_at) VALUES (?, ?)",
                    (version, datetime.now(UTC).isoformat()),
                )
            logger.debug("Migrated deck store to schema version %d", version)

    def _migrate_to_v1(self) -> None:
        """Create deck and flashcard tables."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS decks (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    created_at INTEGER NOT NULL
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS flashcards (
                    id TEXT PRIMARY KEY,
                    deck_id TEXT NOT NULL,
                    front TEXT NOT NULL,
                    back TEXT NOT NULL,
                    created_at INTEGER NOT NULL
                )
                """)
            self._conn.execute("CREATE INDEX IF NOT EXISTS idx_flashcards_deck ON flashcards (deck_id)")

    def list_decks(self) -> list[Deck]:
        """Return decks ordered by creation time."""
        rows = self._conn.execute("SELECT id, name, created_at FROM decks ORDER BY created_at, rowid").fetchall()
        return [_deck_from_row(row) for row in rows]

    def get_deck(self, deck_id: str) -> Deck | None:
        """Get one deck by id."""
        row = self._conn.execute("SELECT id, name, created_at FROM decks WHERE id = ?", (deck_id,)).fetchone()
        if row is None:
            return None
        return _deck_from_row(row)

    def add_deck(self, deck: Deck) -> Deck:
        """Insert a new deck."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO decks (id, name, created_at) VALUES (?, ?, ?)",
                (deck.id, deck.name, deck.created_at),
            )
        logger.debug("Added deck %s", deck.id)
        return deck

    def rename_deck(self, deck_id: str, name: str) -> bool:
        """Replace a deck's display name."""
        with self._conn:
            cursor = self._conn.execute("UPDATE decks SET name = ? WHERE id = ?", (name, deck_id))
        return cursor.rowcount > 0

    def remove_deck(self, deck_id: str) -> bool:
        """Delete a deck and all of its flashcards in one transaction."""
        with self._conn:
            removed_cards = self._conn.execute("DELETE FROM flashcards WHERE deck_id = ?", (deck_id,)).rowcount
            cursor = self._conn.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
        if cursor.rowcount > 0:
            logger.debug("Removed deck %s and %d flashcards", deck_id, removed_cards)
        return cursor.rowcount > 0

    def list_flashcards(self) -> list[Flashcard]:
        """Return every flashcard, including orphans, in creation order."""
        rows = self._conn.execute(
            "SELECT id, deck_id, front, back, created_at FROM flashcards ORDER BY created_at, rowid"
        ).fetchall()
        return [_card_from_row(row) for row in rows]

    def list_flashcards_by_deck(self, deck_id: str) -> list[Flashcard]:
        """Return the flashcards owned by one deck in creation order."""
        rows = self._conn.execute(
            """
            SELECT id, deck_id, front, back, created_at
            FROM flashcards
            WHERE deck_id = ?
            ORDER BY created_at, rowid
            """,
            (deck_id,),
        ).fetchall()
        return [_card_from_row(row) for row in rows]

    def get_flashcard(self, card_id: str) -> Flashcard | None:
        """Get one flashcard by id."""
        row = self._conn.execute(
            "SELECT id, deck_id, front, back, created_at FROM flashcards WHERE id = ?",
            (card_id,),
        ).fetchone()
        if row is None:
            return None
        return _card_from_row(row)

    def add_flashcard(self, card: Flashcard) -> Flashcard:
        """Insert a new flashcard."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO flashcards (id, deck_id, front, back, created_at) VALUES (?, ?, ?, ?, ?)",
                (card.id, card.deck_id, card.front, card.back, card.created_at),
            )
        logger.debug("Added flashcard %s to deck %s", card.id, card.deck_id)
        return card

    def update_flashcard(self, card_id: str, front: str, back: str) -> bool:
        """Replace both sides of a flashcard."""
        with self._conn:
            cursor = self._conn.execute(
                "UPDATE flashcards SET front = ?, back = ? WHERE id = ?",
                (front, back, card_id),
            )
        return cursor.rowcount > 0

    def remove_flashcard(self, card_id: str) -> bool:
        """Delete one flashcard."""
        with self._conn:
            cursor = self._conn.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
        return cursor.rowcount > 0

    def count_flashcards(self, deck_id: str | None = None) -> int:
        """Count flashcards in one deck, or in the whole store."""
        if deck_id is None:
            row = self._conn.execute("SELECT COUNT(*) FROM flashcards").fetchone()
        else:
            row = self._conn.execute("SELECT COUNT(*) FROM flashcards WHERE deck_id = ?", (deck_id,)).fetchone()
        return int(row[0])

    def is_empty(self) -> bool:
        """Return whether the store holds no decks."""
        return self._conn.execute("SELECT 1 FROM decks LIMIT 1").fetchone() is None

    def close(self) -> None:
        """Close db connection."""
        self._conn.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort connection cleanup."""
        try:
            self.close()
        except Exception:
            pass


def _deck_from_row(row: sqlite3.Row) -> Deck:
    return Deck(id=str(row["id"]), name=str(row["name"]), created_at=int(row["created_at"]))


def _card_from_row(row: sqlite3.Row) -> Flashcard:
    return Flashcard(
        id=str(row["id"]),
        deck_id=str(row["deck_id"]),
        front=str(row["front"]),
        back=str(row["back"]),
        created_at=int(row["created_at"]),
    )
