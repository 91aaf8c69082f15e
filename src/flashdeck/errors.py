"""Exception hierarchy for flashdeck."""

from __future__ import annotations


class FlashdeckError(Exception):
    """Base exception for all flashdeck errors."""

    def __init__(self, message: str) -> None:
        """Initialize exception with a user-presentable message."""
        self.message = message
        super().__init__(self.message)


class InvalidStateTransition(FlashdeckError):
    """A study session operation was called in a state that does not allow it."""

    def __init__(self, operation: str, state: str, *, reason: str | None = None) -> None:
        """Initialize with the rejected operation and the session state it was called in."""
        self.operation = operation
        self.state = state
        detail = f"Cannot {operation} while session is {state}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail + ".")


class EmptyCardSetError(FlashdeckError):
    """The selected deck resolved to zero cards."""

    def __init__(self, deck_id: str | None = None) -> None:
        """Initialize with the deck that has no cards."""
        self.deck_id = deck_id
        if deck_id is not None:
            super().__init__(f"Deck {deck_id} has no cards to study.")
        else:
            super().__init__("No cards to study.")


class NotFoundError(FlashdeckError):
    """Entity not found error."""


class DeckNotFoundError(NotFoundError):
    """Deck not found error."""

    def __init__(self, deck_id: str) -> None:
        """Initialize with deck id."""
        self.deck_id = deck_id
        super().__init__(f"Deck with id {deck_id} not found")


class FlashcardNotFoundError(NotFoundError):
    """Flashcard not found error."""

    def __init__(self, card_id: str) -> None:
        """Initialize with card id."""
        self.card_id = card_id
        super().__init__(f"Flashcard with id {card_id} not found")


class ValidationError(FlashdeckError):
    """User input failed validation."""
