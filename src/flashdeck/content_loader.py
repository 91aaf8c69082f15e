"""Load bundled starter decks from JSON resources."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONTENT_PACKAGE = "flashdeck.content"


@dataclass(frozen=True)
class SampleCard:
    """Starter card definition."""

    id: str
    front: str
    back: str


@dataclass(frozen=True)
class SampleDeck:
    """Starter deck definition with its cards."""

    id: str
    name: str
    order: int
    cards: tuple[SampleCard, ...]


def _card_from_dict(deck_id: str, raw: dict[str, Any]) -> SampleCard:
    """Build a sample card from raw JSON content."""
    card_id = str(raw.get("id", "")).strip()
    if not card_id:
        raise ValueError(f"Deck '{deck_id}' has a card without an id.")
    front = str(raw.get("front", "")).strip()
    back = str(raw.get("back", "")).strip()
    if not front or not back:
        raise ValueError(f"Card '{card_id}' needs both a front and a back.")
    return SampleCard(id=card_id, front=front, back=back)


def _deck_from_dict(raw: dict[str, Any]) -> SampleDeck:
    """Build a sample deck from raw JSON content."""
    deck_id = str(raw["id"])
    name = str(raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"Deck '{deck_id}' has an empty name.")
    cards = tuple(_card_from_dict(deck_id, item) for item in raw.get("cards", []))
    return SampleDeck(id=deck_id, name=name, order=int(raw.get("order", 0)), cards=cards)


def load_sample_decks() -> list[SampleDeck]:
    """Load bundled starter decks."""
    raws = [
        json.loads(entry.read_text(encoding="utf-8-sig"))
        for entry in sorted(resources.files(CONTENT_PACKAGE).iterdir(), key=lambda item: item.name)
        if entry.name.endswith(".json")
    ]
    return _build_decks(raws)


def load_sample_decks_from_dir(path: Path) -> list[SampleDeck]:
    """Load starter decks from a directory for tests/tools."""
    raws = [json.loads(file_path.read_text(encoding="utf-8-sig")) for file_path in sorted(path.glob("*.json"))]
    return _build_decks(raws)


def _build_decks(raws: list[dict[str, Any]]) -> list[SampleDeck]:
    decks: dict[str, SampleDeck] = {}
    for raw in raws:
        deck = _deck_from_dict(raw)
        if deck.id in decks:
            raise ValueError(f"Duplicate deck id: {deck.id}")
        decks[deck.id] = deck
    _validate_unique_card_ids(decks)
    ordered = sorted(decks.values(), key=lambda item: (item.order, item.id))
    logger.debug("Loaded %d sample decks", len(ordered))
    return ordered


def _validate_unique_card_ids(decks: dict[str, SampleDeck]) -> None:
    """Validate that card IDs are globally unique across all decks."""
    seen: dict[str, str] = {}
    for deck in decks.values():
        for card in deck.cards:
            previous = seen.get(card.id)
            if previous is not None:
                raise ValueError(f"Duplicate card id: {card.id} (in {previous} and {deck.id})")
            seen[card.id] = deck.id
