"""Application service for decks, flashcards, and study sessions."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from .content_loader import SampleDeck, load_sample_decks
from .errors import DeckNotFoundError, FlashcardNotFoundError, ValidationError
from .models import Deck, Flashcard
from .session import StudySession
from .store import DeckStore

logger = logging.getLogger(__name__)

DAY_MS = 86_400_000


@dataclass(frozen=True)
class DeckOverview:
    """Deck row for list and picker screens."""

    deck: Deck
    card_count: int

    @property
    def studyable(self) -> bool:
        return self.card_count > 0


class StudyService:
    """Coordinates the deck store and study sessions."""

    def __init__(
        self,
        db_path: Path | str,
        *,
        rng: random.Random | None = None,
        seed_samples: bool = True,
    ) -> None:
        """Open the store, seeding starter decks into a fresh database."""
        self.store = DeckStore(db_path)
        self.rng = rng
        if seed_samples and self.store.is_empty():
            self.seed(load_sample_decks())

    def seed(self, decks: list[SampleDeck]) -> int:
        """Insert starter decks, oldest first; return the number of cards added."""
        now = _now_ms()
        added = 0
        for index, sample in enumerate(decks):
            created_at = now - DAY_MS * (len(decks) - 1 - index)
            self.store.add_deck(Deck(id=sample.id, name=sample.name, created_at=created_at))
            for card in sample.cards:
                self.store.add_flashcard(
                    Flashcard(id=card.id, deck_id=sample.id, front=card.front, back=card.back, created_at=created_at)
                )
                added += 1
        logger.info("Seeded %d sample decks with %d cards", len(decks), added)
        return added

    def list_decks(self) -> list[Deck]:
        """Return all decks."""
        return self.store.list_decks()

    def get_deck(self, deck_id: str) -> Deck:
        """Get one deck, raising when it does not exist."""
        deck = self.store.get_deck(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)
        return deck

    def create_deck(self, name: str) -> Deck:
        """Create deck by name."""
        cleaned = _require_text(name, "Deck name")
        return self.store.add_deck(Deck(id=str(uuid4()), name=cleaned, created_at=_now_ms()))

    def rename_deck(self, deck_id: str, name: str) -> Deck:
        """Rename one deck."""
        cleaned = _require_text(name, "Deck name")
        if not self.store.rename_deck(deck_id, cleaned):
            raise DeckNotFoundError(deck_id)
        return self.get_deck(deck_id)

    def delete_deck(self, deck_id: str) -> bool:
        """Delete one deck and its flashcards."""
        return self.store.remove_deck(deck_id)

    def list_flashcards(self, deck_id: str) -> list[Flashcard]:
        """Return flashcards of one deck."""
        return self.store.list_flashcards_by_deck(deck_id)

    def create_flashcard(self, deck_id: str, front: str, back: str) -> Flashcard:
        """Add a card to an existing deck."""
        front_text = _require_text(front, "Question")
        back_text = _require_text(back, "Answer")
        self.get_deck(deck_id)
        card = Flashcard(id=str(uuid4()), deck_id=deck_id, front=front_text, back=back_text, created_at=_now_ms())
        return self.store.add_flashcard(card)

    def update_flashcard(self, card_id: str, front: str, back: str) -> Flashcard:
        """Replace both sides of a card."""
        front_text = _require_text(front, "Question")
        back_text = _require_text(back, "Answer")
        card = self.store.get_flashcard(card_id)
        if card is None:
            raise FlashcardNotFoundError(card_id)
        self.store.update_flashcard(card_id, front_text, back_text)
        return card.edited(front_text, back_text)

    def delete_flashcard(self, card_id: str) -> bool:
        """Delete one card."""
        return self.store.remove_flashcard(card_id)

    def flashcard_count(self, deck_id: str) -> int:
        """Return card count for one deck."""
        return self.store.count_flashcards(deck_id)

    def total_flashcards(self) -> int:
        """Return card count across all decks."""
        return self.store.count_flashcards()

    def deck_overviews(self) -> list[DeckOverview]:
        """Return decks with their card counts."""
        return [
            DeckOverview(deck=deck, card_count=self.store.count_flashcards(deck.id)) for deck in self.store.list_decks()
        ]

    def start_session(self, deck_id: str) -> StudySession:
        """Build a fresh study session for one deck."""
        session = StudySession(self.store, rng=self.rng)
        session.select_deck(deck_id)
        return session

    def close(self) -> None:
        """Close resources."""
        self.store.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort cleanup for test/process teardown."""
        try:
            self.close()
        except Exception:
            pass


def _require_text(value: str, label: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{label} is required.")
    return cleaned


def _now_ms() -> int:
    return time.time_ns() // 1_000_000
