import random

from conftest import ListSource, make_cards

from flashdeck.errors import EmptyCardSetError, FlashdeckError, InvalidStateTransition
from flashdeck.session import SessionState, SessionStats, SessionSummary, StudySession, accuracy_percent


def _session(*labels: str, seed: int = 5) -> tuple[StudySession, ListSource]:
    source = ListSource(make_cards("deck", *labels) + make_cards("other", "X", "Y"))
    return StudySession(source, rng=random.Random(seed)), source


def _answer(session: StudySession, correct: bool) -> None:
    session.reveal()
    session.record_answer(correct)


def test_new_session_is_selecting_deck() -> None:
    session, _ = _session("A")
    assert session.state is SessionState.SELECTING_DECK
    assert session.deck_id is None
    assert session.is_empty() is False
    assert session.progress() == (0, 0)


def test_select_deck_loads_shuffled_permutation_of_deck_cards() -> None:
    session, source = _session("A", "B", "C", "D")
    session.select_deck("deck")
    assert source.calls == 1
    assert session.state is SessionState.ACTIVE
    assert sorted(card.id for card in session.cards) == ["A", "B", "C", "D"]
    assert session.progress() == (0, 4)
    assert session.revealed is False
    assert session.stats == SessionStats()


def test_abc_scenario() -> None:
    session, _ = _session("A", "B", "C")
    session.select_deck("deck")
    assert {card.id for card in session.cards} == {"A", "B", "C"}
    assert session.progress() == (0, 3)

    first = session.current_card()
    session.reveal()
    assert session.revealed is True
    session.record_answer(True)
    assert session.stats.correct == 1
    assert session.stats.total == 1
    assert session.progress() == (1, 3)
    assert session.revealed is False
    assert session.current_card() != first

    _answer(session, False)
    _answer(session, False)
    assert session.state is SessionState.COMPLETE
    assert session.progress() == (3, 3)
    summary = session.summary()
    assert summary == SessionSummary(correct=1, incorrect=2, total=3)
    assert summary.accuracy == 33


def test_each_card_shown_exactly_once_per_pass() -> None:
    labels = [f"c{index}" for index in range(12)]
    session, _ = _session(*labels)
    session.select_deck("deck")
    seen: list[str] = []
    while session.state is SessionState.ACTIVE:
        seen.append(session.current_card().id)
        _answer(session, len(seen) % 2 == 0)
    assert sorted(seen) == sorted(labels)
    assert session.stats.total == len(labels)
    assert session.stats.correct + session.stats.incorrect == session.stats.total


def test_record_answer_before_reveal_is_rejected() -> None:
    session, _ = _session("A", "B")
    session.select_deck("deck")
    _answer(session, True)
    try:
        session.record_answer(True)
        raise AssertionError("Expected InvalidStateTransition.")
    except InvalidStateTransition as exc:
        assert exc.operation == "record an answer"
        assert "not been revealed" in exc.message
    assert session.stats.total == 1
    assert session.progress() == (1, 2)


def test_reveal_is_idempotent() -> None:
    session, _ = _session("A", "B")
    session.select_deck("deck")
    session.reveal()
    session.reveal()
    session.record_answer(False)
    assert session.stats == SessionStats(correct=0, incorrect=1)


def test_operations_rejected_before_deck_selected() -> None:
    session, _ = _session("A")
    for operation in (session.reveal, session.current_card, session.restart, session.summary):
        try:
            operation()
            raise AssertionError(f"Expected InvalidStateTransition from {operation.__name__}.")
        except InvalidStateTransition as exc:
            assert exc.state == "selecting-deck"
    try:
        session.record_answer(True)
        raise AssertionError("Expected InvalidStateTransition.")
    except InvalidStateTransition:
        pass


def test_operations_rejected_after_completion() -> None:
    session, _ = _session("A")
    session.select_deck("deck")
    _answer(session, True)
    assert session.state is SessionState.COMPLETE
    for operation in (session.reveal, session.current_card):
        try:
            operation()
            raise AssertionError("Expected InvalidStateTransition.")
        except InvalidStateTransition as exc:
            assert exc.state == "complete"
    try:
        session.record_answer(False)
        raise AssertionError("Expected InvalidStateTransition.")
    except InvalidStateTransition:
        pass
    assert session.summary().total == 1


def test_restart_only_from_complete() -> None:
    session, _ = _session("A", "B")
    session.select_deck("deck")
    try:
        session.restart()
        raise AssertionError("Expected InvalidStateTransition.")
    except InvalidStateTransition as exc:
        assert "restart" in str(exc)


def test_summary_only_from_complete() -> None:
    session, _ = _session("A", "B")
    session.select_deck("deck")
    try:
        session.summary()
        raise AssertionError("Expected InvalidStateTransition.")
    except InvalidStateTransition:
        pass


def test_restart_reshuffles_same_cards_without_refetch() -> None:
    session, source = _session(*[f"c{index}" for index in range(8)])
    session.select_deck("deck")
    before = {card.id for card in session.cards}
    while session.state is SessionState.ACTIVE:
        _answer(session, True)

    source.cards.extend(make_cards("deck", "late"))
    session.restart()
    assert source.calls == 1
    assert session.state is SessionState.ACTIVE
    assert {card.id for card in session.cards} == before
    assert session.progress() == (0, 8)
    assert session.revealed is False
    assert session.stats == SessionStats()


def test_restart_produces_new_order_eventually() -> None:
    session, _ = _session(*[f"c{index}" for index in range(8)])
    session.select_deck("deck")
    orders = set()
    for _ in range(5):
        orders.add(tuple(card.id for card in session.cards))
        while session.state is SessionState.ACTIVE:
            _answer(session, True)
        session.restart()
    assert len(orders) > 1


def test_session_ignores_deck_changes_mid_pass() -> None:
    session, source = _session("A", "B")
    session.select_deck("deck")
    source.cards.extend(make_cards("deck", "C"))
    assert session.progress() == (0, 2)
    _answer(session, True)
    _answer(session, True)
    assert session.state is SessionState.COMPLETE


def test_select_deck_rejected_mid_pass_and_allowed_after_completion() -> None:
    session, source = _session("A")
    session.select_deck("deck")
    try:
        session.select_deck("other")
        raise AssertionError("Expected InvalidStateTransition.")
    except InvalidStateTransition:
        pass
    _answer(session, False)
    source.cards.extend(make_cards("deck", "B"))
    session.select_deck("deck")
    assert source.calls == 2
    assert session.progress() == (0, 2)
    assert session.stats.total == 0


def test_empty_deck_signals_empty_state() -> None:
    session, _ = _session("A")
    session.select_deck("missing-deck")
    assert session.is_empty() is True
    assert session.state is SessionState.ACTIVE
    assert session.progress() == (0, 0)
    for operation in (session.current_card, session.reveal):
        try:
            operation()
            raise AssertionError("Expected EmptyCardSetError.")
        except EmptyCardSetError as exc:
            assert exc.deck_id == "missing-deck"
            assert isinstance(exc, FlashdeckError)
    try:
        session.record_answer(True)
        raise AssertionError("Expected EmptyCardSetError.")
    except EmptyCardSetError:
        pass
    assert session.stats.total == 0


def test_empty_session_can_select_another_deck() -> None:
    session, _ = _session("A")
    session.select_deck("nothing")
    session.select_deck("deck")
    assert session.is_empty() is False
    assert session.current_card().id == "A"


def test_reset_returns_to_deck_selection() -> None:
    session, _ = _session("A", "B")
    session.select_deck("deck")
    _answer(session, True)
    session.reset()
    assert session.state is SessionState.SELECTING_DECK
    assert session.deck_id is None
    assert session.progress() == (0, 0)
    assert session.stats.total == 0


def test_cards_property_is_a_copy() -> None:
    session, _ = _session("A", "B")
    session.select_deck("deck")
    cards = session.cards
    assert isinstance(cards, tuple)
    assert session.cards == cards


def test_accuracy_percent() -> None:
    assert accuracy_percent(0, 0) == 0
    assert accuracy_percent(1, 3) == 33
    assert accuracy_percent(2, 3) == 67
    assert accuracy_percent(1, 8) == 13
    assert accuracy_percent(1, 200) == 1
    assert accuracy_percent(0, 5) == 0
    assert accuracy_percent(5, 5) == 100
    for total in range(1, 40):
        for correct in range(total + 1):
            assert accuracy_percent(correct, total) == int(100 * correct / total + 0.5 + 1e-9)


def test_summary_accuracy_uses_totals() -> None:
    assert SessionSummary(correct=0, incorrect=0, total=0).accuracy == 0
    assert SessionSummary(correct=3, incorrect=1, total=4).accuracy == 75
