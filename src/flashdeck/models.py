"""Core domain records for decks and flashcards."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Deck:
    """Named collection of flashcards."""

    id: str
    name: str
    created_at: int


@dataclass(frozen=True)
class Flashcard:
    """One question/answer card owned by a deck."""

    id: str
    deck_id: str
    front: str
    back: str
    created_at: int

    def edited(self, front: str, back: str) -> Flashcard:
        """Return a copy with both sides replaced."""
        return replace(self, front=front, back=back)
