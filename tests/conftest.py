from __future__ import annotations

import random
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from flashdeck.models import Flashcard  # noqa: E402
from flashdeck.service import StudyService  # noqa: E402


class ListSource:
    """In-memory card source for engine tests."""

    def __init__(self, cards: list[Flashcard]) -> None:
        self.cards = list(cards)
        self.calls = 0

    def list_flashcards_by_deck(self, deck_id: str) -> list[Flashcard]:
        self.calls += 1
        return [card for card in self.cards if card.deck_id == deck_id]


def make_cards(deck_id: str, *labels: str) -> list[Flashcard]:
    return [
        Flashcard(id=label, deck_id=deck_id, front=f"{label}?", back=f"{label}!", created_at=index)
        for index, label in enumerate(labels)
    ]


@pytest.fixture
def service() -> Iterator[StudyService]:
    """In-memory service without sample decks and with a fixed shuffle seed."""
    svc = StudyService(":memory:", rng=random.Random(1234), seed_samples=False)
    try:
        yield svc
    finally:
        svc.store.close()
