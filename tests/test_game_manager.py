"""Tests for GameManager: persistence, transactions and the event log."""

import pytest

from core.exceptions import (
    AlreadyStarted,
    GameAlreadyOver,
    GameNotFound,
    NotPlayersTurn,
    TileAlreadySet,
)
from core.game_engine import GameRules
from core.game_manager import GameManager, get_rules
from core.game_record import GameStatus, Mark, Won
from database import get_settings
from models import EventLog, Game, utcnow
from services.history_service import get_move_history

P1 = "alice"
P2 = "bob"


def _started_game(db):
    game = GameManager.create_game(db)
    return GameManager.start_game(db, game.id, [P1, P2])


def _events(db, game_id):
    return [
        event.event_type
        for event in db.query(EventLog).filter(EventLog.game_id == game_id).order_by(EventLog.id)
    ]


def test_create_game_persists_fresh_record(db):
    game = GameManager.create_game(db)
    stored = db.query(Game).filter(Game.id == game.id).one()

    record = stored.to_record()
    assert record.turn == 0
    assert record.players == ("", "")
    assert all(cell is None for row in record.board for cell in row)
    assert stored.status == GameStatus.ACTIVE
    assert stored.winner is None
    assert _events(db, game.id) == ["GAME_CREATED"]


def test_start_game_binds_players(db):
    game = _started_game(db)

    assert game.turn == 1
    assert game.players == (P1, P2)
    assert _events(db, game.id) == ["GAME_CREATED", "GAME_STARTED"]


def test_start_game_twice_is_rolled_back(db):
    game = _started_game(db)

    with pytest.raises(AlreadyStarted):
        GameManager.start_game(db, game.id, ["carol", "dave"])

    db.expire_all()
    stored = GameManager.get_game_by_id(db, game.id)
    assert stored.players == (P1, P2)
    assert stored.turn == 1


def test_unknown_game_raises_not_found(db):
    with pytest.raises(GameNotFound):
        GameManager.get_game_by_id(db, "missing")
    with pytest.raises(GameNotFound):
        GameManager.start_game(db, "missing", [P1, P2])
    with pytest.raises(GameNotFound):
        GameManager.play_move(db, "missing", P1, 0, 0)


def test_play_move_persists_board_and_turn(db):
    game = _started_game(db)
    GameManager.play_move(db, game.id, P1, 1, 1)

    db.expire_all()
    stored = GameManager.get_game_by_id(db, game.id)
    assert stored.turn == 2
    assert stored.board[1][1] == Mark.FIRST.value


def test_rejected_move_leaves_row_and_log_untouched(db):
    game = _started_game(db)
    GameManager.play_move(db, game.id, P1, 0, 0)

    with pytest.raises(TileAlreadySet):
        GameManager.play_move(db, game.id, P2, 0, 0)
    with pytest.raises(NotPlayersTurn):
        GameManager.play_move(db, game.id, P1, 2, 2)

    db.expire_all()
    stored = GameManager.get_game_by_id(db, game.id)
    assert stored.turn == 2
    assert stored.board[2][2] is None
    assert _events(db, game.id).count("MOVE_PLAYED") == 1


def test_winning_move_records_winner(db):
    game = _started_game(db)
    for caller, row, column in [(P1, 0, 0), (P2, 1, 1), (P1, 0, 1), (P2, 1, 0), (P1, 0, 2)]:
        GameManager.play_move(db, game.id, caller, row, column)

    db.expire_all()
    stored = GameManager.get_game_by_id(db, game.id)
    assert stored.status == GameStatus.WON
    assert stored.winner == P1
    assert stored.state == Won(winner=P1)
    assert stored.turn == 5
    assert _events(db, game.id)[-1] == "GAME_WON"

    with pytest.raises(GameAlreadyOver):
        GameManager.play_move(db, game.id, P2, 2, 2)


def test_legacy_rules_tie_is_persisted(db):
    game = _started_game(db)
    rules = GameRules(legacy_full_board_scan=True)
    moves = [(0, 2), (2, 2), (0, 0), (0, 1), (1, 0), (1, 1), (2, 1), (2, 0)]
    for index, (row, column) in enumerate(moves):
        caller = P1 if index % 2 == 0 else P2
        GameManager.play_move(db, game.id, caller, row, column, rules=rules)

    db.expire_all()
    stored = GameManager.get_game_by_id(db, game.id)
    assert stored.status == GameStatus.TIE
    assert stored.winner is None
    assert stored.turn == 8
    assert _events(db, game.id)[-1] == "GAME_TIED"


def test_move_history_lists_accepted_moves_in_order(db):
    game = _started_game(db)
    GameManager.play_move(db, game.id, P1, 0, 0)
    GameManager.play_move(db, game.id, P2, 2, 1)

    assert get_move_history(game.id, db) == [
        {"turn": 1, "player": P1, "caller": P1, "mark": "first", "row": 0, "column": 0},
        {"turn": 2, "player": P2, "caller": P2, "mark": "second", "row": 2, "column": 1},
    ]


def test_history_credits_turn_owner_when_turn_order_is_loose(db):
    game = _started_game(db)
    rules = GameRules(enforce_turn_order=False)
    for row, column in [(0, 0), (1, 1), (0, 1), (1, 0), (0, 2)]:
        GameManager.play_move(db, game.id, "mallory", row, column, rules=rules)

    history = get_move_history(game.id, db)
    won = (
        db.query(EventLog)
        .filter(EventLog.game_id == game.id, EventLog.event_type == "GAME_WON")
        .one()
    )
    assert [entry["player"] for entry in history] == [P1, P2, P1, P2, P1]
    assert all(entry["caller"] == "mallory" for entry in history)
    assert history[-1]["player"] == won.data["winner"] == P1


@pytest.fixture
def env_rules(monkeypatch):
    """Select rules through environment variables, as a deployment would."""

    monkeypatch.setenv("ENFORCE_TURN_ORDER", "false")
    monkeypatch.setenv("LEGACY_FULL_BOARD_SCAN", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_rules_come_from_settings_by_default(db, env_rules):
    assert get_rules() == GameRules(enforce_turn_order=False, legacy_full_board_scan=True)

    game = _started_game(db)
    # turn order is not checked: the second player makes the first move
    GameManager.play_move(db, game.id, P2, 0, 2)
    for row, column in [(2, 2), (0, 0), (0, 1), (1, 0), (1, 1), (2, 1), (2, 0)]:
        GameManager.play_move(db, game.id, P2, row, column)

    db.expire_all()
    stored = GameManager.get_game_by_id(db, game.id)
    # legacy scan: tie with (1, 2) still empty
    assert stored.status == GameStatus.TIE
    assert stored.turn == 8
    assert stored.board[1][2] is None


def test_default_settings_enforce_turn_order(monkeypatch):
    monkeypatch.delenv("ENFORCE_TURN_ORDER", raising=False)
    monkeypatch.delenv("LEGACY_FULL_BOARD_SCAN", raising=False)
    get_settings.cache_clear()
    try:
        assert get_rules() == GameRules()
    finally:
        get_settings.cache_clear()


def test_timestamps_are_timezone_aware(db):
    assert utcnow().tzinfo is not None

    game = GameManager.create_game(db)
    assert game.created_at is not None
    assert game.updated_at is not None
