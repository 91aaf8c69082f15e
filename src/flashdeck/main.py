"""CLI entrypoint for the flashcard study app."""

from __future__ import annotations

import argparse
import logging
import os
import random
from collections.abc import Callable
from pathlib import Path

from .errors import FlashdeckError
from .models import Deck, Flashcard
from .service import DeckOverview, StudyService
from .session import SessionState, StudySession
from .views import DeckCardsView, DeckListView, DeckPickerView, LandingView, StudyView, View

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
BACK_COMMANDS = {":back", ":b", "back"}
MENU_QUIT_COMMANDS = {"q"}
FLOW_EXIT_COMMANDS = {":quit", ":exit", ":q"}
MENU_BACK_COMMANDS = {"b"}
YES_ANSWERS = {"y", "yes"}
NO_ANSWERS = {"n", "no"}
DB_ENV_VAR = "FLASHDECK_DB"
DEFAULT_DB_PATH = Path(".flashdeck") / "decks.db"

logger = logging.getLogger(__name__)


class QuitApp(Exception):
    """Signal immediate app exit from nested menu flows."""


def _resolve_db_path(value: str | None) -> Path | str:
    """Pick the database location from the CLI flag, environment, or default."""
    raw = value or os.environ.get(DB_ENV_VAR)
    if not raw:
        return DEFAULT_DB_PATH
    if raw == ":memory:":
        return raw
    return Path(raw).expanduser()


def _service(db_path: Path | str | None = None, seed: int | None = None) -> StudyService:
    """Create app service with local database path."""
    target = db_path if db_path is not None else _resolve_db_path(None)
    rng = random.Random(seed) if seed is not None else None
    return StudyService(db_path=target, rng=rng)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="flashdeck", description="Flashcard decks with shuffled study sessions")
    parser.add_argument("command", nargs="?", default="play", choices=["play"])
    parser.add_argument(
        "--db", dest="db_path", default=None, help=f"database file (default: ${DB_ENV_VAR} or {DEFAULT_DB_PATH})"
    )
    parser.add_argument("--seed", type=int, default=None, help="seed the shuffle for a reproducible study order")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return play_shell(db_path=_resolve_db_path(args.db_path), seed=args.seed)


def play_shell(
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    *,
    db_path: Path | str | None = None,
    seed: int | None = None,
) -> int:
    """Run persistent menu-driven shell."""
    service = _service(db_path, seed)
    try:
        view: View = LandingView()
        try:
            while True:
                view = _render(service, view, input_fn, print_fn)
        except QuitApp:
            return 0
    finally:
        service.close()


def _render(service: StudyService, view: View, input_fn: InputFn, print_fn: PrintFn) -> View:
    """Show one screen and return the next one."""
    try:
        if isinstance(view, LandingView):
            return _landing_flow(service, input_fn, print_fn)
        if isinstance(view, DeckListView):
            return _deck_list_flow(service, input_fn, print_fn)
        if isinstance(view, DeckCardsView):
            return _deck_cards_flow(service, view.deck_id, input_fn, print_fn)
        if isinstance(view, DeckPickerView):
            return _deck_picker_flow(service, input_fn, print_fn)
        return _study_flow(service, view.session, input_fn, print_fn)
    except FlashdeckError as exc:
        logger.debug("Recovered from %s on %s", type(exc).__name__, view)
        print_fn(exc.message)
        return view if not isinstance(view, StudyView) else DeckPickerView()


def _landing_flow(service: StudyService, input_fn: InputFn, print_fn: PrintFn) -> View:
    """Home menu."""
    decks = service.list_decks()
    print_fn("\n=== Flashcards ===")
    print_fn(f"{service.total_flashcards()} cards in {len(decks)} {'deck' if len(decks) == 1 else 'decks'}")
    print_fn("1) Study")
    print_fn("2) Manage decks")
    print_fn("q) Quit")
    choice = input_fn("Choose: ").strip().lower()
    if choice == "1":
        return DeckPickerView()
    if choice == "2":
        return DeckListView()
    if choice in MENU_QUIT_COMMANDS:
        raise QuitApp()
    print_fn("Invalid choice.")
    return LandingView()


def _print_deck_rows(rows: list[DeckOverview], print_fn: PrintFn, *, mark_empty: bool = False) -> None:
    count_width = max(len(str(row.card_count)) for row in rows)
    for idx, row in enumerate(rows, start=1):
        noun = "card" if row.card_count == 1 else "cards"
        suffix = "  (empty)" if mark_empty and not row.studyable else ""
        print_fn(f"{idx:>2}) {row.card_count:>{count_width}} {noun:<5} {row.deck.name}{suffix}")


def _pick_index(choice: str, size: int) -> int | None:
    if not choice.isdigit():
        return None
    index = int(choice) - 1
    if 0 <= index < size:
        return index
    return None


def _deck_list_flow(service: StudyService, input_fn: InputFn, print_fn: PrintFn) -> View:
    """List decks with create/delete/open actions."""
    rows = service.deck_overviews()
    print_fn("\n=== Decks ===")
    if rows:
        _print_deck_rows(rows, print_fn)
    else:
        print_fn("No decks yet.")
    print_fn("n) New deck")
    print_fn("d) Delete deck")
    print_fn("b) Back")
    print_fn("q) Quit")
    choice = input_fn("Choose deck: ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return LandingView()
    if choice in MENU_QUIT_COMMANDS:
        raise QuitApp()
    if choice == "n":
        name = input_fn("New deck name: ")
        created = service.create_deck(name)
        print_fn(f"Created deck '{created.name}'.")
        return DeckCardsView(created.id)
    if choice == "d":
        _delete_deck_flow(service, rows, input_fn, print_fn)
        return DeckListView()
    index = _pick_index(choice, len(rows))
    if index is None:
        print_fn("Invalid choice.")
        return DeckListView()
    return DeckCardsView(rows[index].deck.id)


def _delete_deck_flow(service: StudyService, rows: list[DeckOverview], input_fn: InputFn, print_fn: PrintFn) -> None:
    """Delete a deck with explicit confirmation safeguard."""
    if not rows:
        print_fn("No decks available to delete.")
        return
    choice = input_fn("Choose deck to delete (b to cancel): ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return
    index = _pick_index(choice, len(rows))
    if index is None:
        print_fn("Invalid choice.")
        return
    target = rows[index]
    print_fn(f"WARNING: This permanently deletes deck '{target.deck.name}' and its {target.card_count} cards.")
    confirm = input_fn("Type YES to confirm deletion: ").strip()
    if confirm != "YES":
        print_fn("Deletion cancelled.")
        return
    if service.delete_deck(target.deck.id):
        print_fn(f"Deleted deck '{target.deck.name}'.")
    else:
        print_fn("Deck was not found.")


def _deck_cards_flow(service: StudyService, deck_id: str, input_fn: InputFn, print_fn: PrintFn) -> View:
    """Card management for one deck."""
    deck = service.store.get_deck(deck_id)
    if deck is None:
        print_fn("Deck no longer exists.")
        return DeckListView()
    cards = service.list_flashcards(deck_id)
    print_fn(f"\n=== Deck: {deck.name} ===")
    if cards:
        for idx, card in enumerate(cards, start=1):
            print_fn(f"{idx:>2}) {card.front}")
    else:
        print_fn("No cards yet.")
    print_fn("a) Add card")
    print_fn("e) Edit card")
    print_fn("d) Delete card")
    print_fn("r) Rename deck")
    print_fn("s) Study this deck")
    print_fn("b) Back")
    print_fn("q) Quit")
    choice = input_fn("Choose: ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return DeckListView()
    if choice in MENU_QUIT_COMMANDS:
        raise QuitApp()
    if choice == "a":
        front = input_fn("Question: ")
        back = input_fn("Answer: ")
        service.create_flashcard(deck_id, front, back)
        print_fn("Card added.")
    elif choice == "e":
        _edit_card_flow(service, cards, input_fn, print_fn)
    elif choice == "d":
        _delete_card_flow(service, cards, input_fn, print_fn)
    elif choice == "r":
        renamed = service.rename_deck(deck_id, input_fn("New deck name: "))
        print_fn(f"Renamed deck to '{renamed.name}'.")
    elif choice == "s":
        return _study_view_for(service, deck, print_fn, fallback=DeckCardsView(deck_id))
    else:
        index = _pick_index(choice, len(cards))
        if index is None:
            print_fn("Invalid choice.")
        else:
            _show_card(cards[index], print_fn)
    return DeckCardsView(deck_id)


def _show_card(card: Flashcard, print_fn: PrintFn) -> None:
    print_fn(f"Q: {card.front}")
    print_fn(f"A: {card.back}")


def _edit_card_flow(service: StudyService, cards: list[Flashcard], input_fn: InputFn, print_fn: PrintFn) -> None:
    """Replace question and answer of a card; blank input keeps the current side."""
    index = _pick_index(input_fn("Card number to edit: ").strip(), len(cards))
    if index is None:
        print_fn("Invalid choice.")
        return
    card = cards[index]
    _show_card(card, print_fn)
    front = input_fn("New question (blank keeps): ").strip() or card.front
    back = input_fn("New answer (blank keeps): ").strip() or card.back
    service.update_flashcard(card.id, front, back)
    print_fn("Card updated.")


def _delete_card_flow(service: StudyService, cards: list[Flashcard], input_fn: InputFn, print_fn: PrintFn) -> None:
    index = _pick_index(input_fn("Card number to delete: ").strip(), len(cards))
    if index is None:
        print_fn("Invalid choice.")
        return
    card = cards[index]
    confirm = input_fn(f"Delete '{card.front}'? (y/n): ").strip().lower()
    if confirm not in YES_ANSWERS:
        print_fn("Deletion cancelled.")
        return
    service.delete_flashcard(card.id)
    print_fn("Card deleted.")


def _study_view_for(service: StudyService, deck: Deck, print_fn: PrintFn, *, fallback: View) -> View:
    """Start studying a deck, or explain why it cannot be studied."""
    session = service.start_session(deck.id)
    if session.is_empty():
        print_fn(f"Deck '{deck.name}' has no cards yet. Add some cards first.")
        return fallback
    return StudyView(session)


def _deck_picker_flow(service: StudyService, input_fn: InputFn, print_fn: PrintFn) -> View:
    """Choose a deck to study."""
    rows = service.deck_overviews()
    print_fn("\n=== Choose a Deck to Study ===")
    if not rows:
        print_fn("No decks available to study. Create one under Manage decks.")
        return LandingView()
    _print_deck_rows(rows, print_fn, mark_empty=True)
    print_fn("b) Back")
    print_fn("q) Quit")
    choice = input_fn("Choose deck: ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return LandingView()
    if choice in MENU_QUIT_COMMANDS:
        raise QuitApp()
    index = _pick_index(choice, len(rows))
    if index is None:
        print_fn("Invalid choice.")
        return DeckPickerView()
    return _study_view_for(service, rows[index].deck, print_fn, fallback=DeckPickerView())


def _study_flow(service: StudyService, session: StudySession, input_fn: InputFn, print_fn: PrintFn) -> View:
    """Run the current pass of a study session, then offer to study again."""
    deck = service.store.get_deck(session.deck_id or "")
    deck_name = deck.name if deck is not None else "Deleted deck"
    if session.is_empty():
        print_fn("This deck has no cards yet.")
        return DeckPickerView()

    if session.state is SessionState.ACTIVE:
        print_fn(f"\n=== Studying: {deck_name} ===")
        print_fn("Type :b to leave or :q to quit.")
    while session.state is SessionState.ACTIVE:
        cursor, length = session.progress()
        card = session.current_card()
        stats = session.stats
        print_fn(f"\nCard {cursor + 1} of {length}  |  {stats.correct} right, {stats.incorrect} wrong")
        print_fn(f"Q: {card.front}")
        reply = input_fn("Press Enter to reveal: ").strip().lower()
        if reply in BACK_COMMANDS:
            print_fn("Leaving study session.")
            return DeckPickerView()
        if reply in FLOW_EXIT_COMMANDS:
            raise QuitApp()
        session.reveal()
        print_fn(f"A: {card.back}")
        while True:
            verdict = input_fn("Did you get it right? (y/n): ").strip().lower()
            if verdict in BACK_COMMANDS:
                print_fn("Leaving study session.")
                return DeckPickerView()
            if verdict in FLOW_EXIT_COMMANDS:
                raise QuitApp()
            if verdict in YES_ANSWERS or verdict in NO_ANSWERS:
                session.record_answer(verdict in YES_ANSWERS)
                break
            print_fn("Please answer y or n.")

    summary = session.summary()
    print_fn("\n=== Study Complete ===")
    print_fn(f"Deck: {deck_name}")
    print_fn(f"Correct: {summary.correct}")
    print_fn(f"Incorrect: {summary.incorrect}")
    print_fn(f"Accuracy: {summary.accuracy}%")
    print_fn("s) Study again")
    print_fn("b) Back to decks")
    print_fn("h) Home")
    print_fn("q) Quit")
    while True:
        choice = input_fn("Choose: ").strip().lower()
        if choice == "s":
            session.restart()
            return StudyView(session)
        if choice in MENU_BACK_COMMANDS:
            return DeckPickerView()
        if choice == "h":
            return LandingView()
        if choice in MENU_QUIT_COMMANDS:
            raise QuitApp()
        print_fn("Invalid choice.")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
