"""Study session engine: shuffled single pass over a deck with right/wrong scoring."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import EmptyCardSetError, InvalidStateTransition
from .models import Flashcard
from .shuffle import shuffle

logger = logging.getLogger(__name__)


class CardSource(Protocol):
    """Read-only view of the entity store used to build a session."""

    def list_flashcards_by_deck(self, deck_id: str) -> list[Flashcard]: ...


class SessionState(Enum):
    """Lifecycle of a study session."""

    SELECTING_DECK = "selecting-deck"
    ACTIVE = "active"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SessionStats:
    """Running answer counters for the current pass."""

    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect


@dataclass(frozen=True)
class SessionSummary:
    """Final statistics of a completed pass."""

    correct: int
    incorrect: int
    total: int

    @property
    def accuracy(self) -> int:
        """Percentage correct, rounded half up; 0 when nothing was answered."""
        return accuracy_percent(self.correct, self.total)


def accuracy_percent(correct: int, total: int) -> int:
    """Return round(100 * correct / total) with halves rounded up, or 0 for total 0."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


class StudySession:
    """One pass through a shuffled copy of a deck's cards.

    The card sequence is captured when a deck is selected; later edits to the deck
    are not picked up until a new deck selection. Every operation raises
    ``InvalidStateTransition`` when called in a state that does not allow it.
    """

    def __init__(self, source: CardSource, rng: random.Random | None = None) -> None:
        """Create a session in the deck-selection state."""
        self._source = source
        self._rng = rng
        self._deck_id: str | None = None
        self._cards: list[Flashcard] = []
        self._cursor = 0
        self._revealed = False
        self._stats = SessionStats()
        self._state = SessionState.SELECTING_DECK

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def deck_id(self) -> str | None:
        return self._deck_id

    @property
    def cards(self) -> tuple[Flashcard, ...]:
        """Study order of the current pass."""
        return tuple(self._cards)

    @property
    def revealed(self) -> bool:
        return self._revealed

    @property
    def stats(self) -> SessionStats:
        return self._stats

    def is_empty(self) -> bool:
        """Return whether a deck is selected and it has no cards."""
        return self._deck_id is not None and not self._cards

    def progress(self) -> tuple[int, int]:
        """Return (cursor, sequence length)."""
        return (self._cursor, len(self._cards))

    def select_deck(self, deck_id: str) -> None:
        """Load, shuffle and start studying the cards of ``deck_id``."""
        if self._state is SessionState.ACTIVE and not self.is_empty():
            raise InvalidStateTransition("select a deck", self._state.value, reason="finish the current pass first")
        cards = self._source.list_flashcards_by_deck(deck_id)
        self._deck_id = deck_id
        self._begin_pass(cards)
        logger.debug("Selected deck %s with %d cards", deck_id, len(self._cards))

    def reveal(self) -> None:
        """Show the answer side of the current card."""
        self._require_current("reveal the answer")
        self._revealed = True

    def record_answer(self, correct: bool) -> None:
        """Score the current card and move to the next one."""
        self._require_current("record an answer")
        if not self._revealed:
            raise InvalidStateTransition(
                "record an answer", self._state.value, reason="the answer has not been revealed"
            )
        if correct:
            self._stats = SessionStats(correct=self._stats.correct + 1, incorrect=self._stats.incorrect)
        else:
            self._stats = SessionStats(correct=self._stats.correct, incorrect=self._stats.incorrect + 1)
        self._cursor += 1
        self._revealed = False
        if self._cursor >= len(self._cards):
            self._cursor = len(self._cards)
            self._state = SessionState.COMPLETE
            logger.debug("Completed pass over deck %s: %s", self._deck_id, self._stats)

    def restart(self) -> None:
        """Reshuffle the same cards and start a new pass."""
        if self._state is not SessionState.COMPLETE:
            raise InvalidStateTransition("restart", self._state.value)
        self._begin_pass(self._cards)
        logger.debug("Restarted deck %s", self._deck_id)

    def reset(self) -> None:
        """Drop the selected deck and return to deck selection."""
        self._deck_id = None
        self._cards = []
        self._cursor = 0
        self._revealed = False
        self._stats = SessionStats()
        self._state = SessionState.SELECTING_DECK

    def current_card(self) -> Flashcard:
        """Return the card under the cursor."""
        self._require_current("show the current card")
        return self._cards[self._cursor]

    def summary(self) -> SessionSummary:
        """Return final statistics of the completed pass."""
        if self._state is not SessionState.COMPLETE:
            raise InvalidStateTransition("summarize", self._state.value)
        return SessionSummary(
            correct=self._stats.correct,
            incorrect=self._stats.incorrect,
            total=self._stats.total,
        )

    def _begin_pass(self, cards: list[Flashcard]) -> None:
        self._cards = shuffle(cards, self._rng)
        self._cursor = 0
        self._revealed = False
        self._stats = SessionStats()
        self._state = SessionState.ACTIVE

    def _require_current(self, operation: str) -> None:
        if self._state is not SessionState.ACTIVE:
            raise InvalidStateTransition(operation, self._state.value)
        if not self._cards:
            raise EmptyCardSetError(self._deck_id)
