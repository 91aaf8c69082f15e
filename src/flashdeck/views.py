"""Navigation state: one variant per screen, carrying only what that screen needs."""

from __future__ import annotations

from dataclasses import dataclass

from .session import StudySession


@dataclass(frozen=True)
class LandingView:
    """Home menu."""


@dataclass(frozen=True)
class DeckListView:
    """Deck management list."""


@dataclass(frozen=True)
class DeckCardsView:
    """Card management for one deck."""

    deck_id: str


@dataclass(frozen=True)
class DeckPickerView:
    """Choose a deck to study."""


@dataclass(frozen=True)
class StudyView:
    """Active study screen."""

    session: StudySession


View = LandingView | DeckListView | DeckCardsView | DeckPickerView | StudyView
