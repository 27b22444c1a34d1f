"""
GameEngine：井字棋的狀態機

職責：
1. start：綁定兩位玩家，turn 0 -> 1
2. play：檢查前置條件、放棋子、判定勝負、推進 turn

原則：
- 純函式：輸入一個 GameRecord，回傳新的 GameRecord，不碰資料庫
- 所有前置條件都在修改之前檢查，失敗時直接拋出異常
- 不做 lock、不做 retry：同一筆記錄的呼叫必須由外層（GameManager + DB transaction）序列化
"""
from dataclasses import dataclass, replace
from typing import Sequence
import logging

from core.game_record import Coordinate, GameRecord, Identity, is_terminal
from core.exceptions import (
    AlreadyStarted,
    GameAlreadyOver,
    GameNotStarted,
    NotPlayersTurn,
    TileAlreadySet,
    TileOutOfBounds,
)
from services.board_service import get_cell, is_in_bounds, place_mark
from services.outcome_service import evaluate
from services.turn_service import expected_player, mark_for_turn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameRules:
    """
    可切換的規則

    enforce_turn_order: 檢查呼叫者是否為目前輪到的玩家
    legacy_full_board_scan: 「棋盤已滿」只掃描前兩欄（舊版行為）
    """
    enforce_turn_order: bool = True
    legacy_full_board_scan: bool = False


DEFAULT_RULES = GameRules()


class GameEngine:
    """井字棋狀態機"""

    @staticmethod
    def start(record: GameRecord, players: Sequence[Identity]) -> GameRecord:
        """
        開始遊戲（turn 0 -> 1）

        前置條件：
            record.turn == 0（每筆記錄只能 start 一次）

        參數：
            record: 尚未開始的 GameRecord
            players: (先手, 後手) 兩位玩家

        返回：
            新的 GameRecord：players 依序存入、turn = 1，棋盤和狀態不變

        異常：
            AlreadyStarted: turn 不是 0
            ValueError: players 不是兩個
        """
        if record.turn != 0:
            raise AlreadyStarted(f"Game already started (turn={record.turn})")

        if len(players) != 2:
            raise ValueError(f"Exactly 2 players are required, got {len(players)}")

        # 兩位玩家相同並不算錯誤
        first, second = players
        return replace(record, players=(first, second), turn=1)

    @staticmethod
    def play(
        record: GameRecord,
        caller: Identity,
        tile: Coordinate,
        rules: GameRules = DEFAULT_RULES,
    ) -> GameRecord:
        """
        下一步棋

        前置條件（依序檢查）：
        0. 遊戲已 start
        1. 遊戲狀態是 Active
        2. row、column 都在 0..2
        3. 目標格子是空的
        4. 呼叫者是輪到的玩家（rules.enforce_turn_order 時）

        流程：
        1. 依 turn 決定棋子（奇數步 FIRST，偶數步 SECOND）
        2. 放上棋子
        3. 判定勝負（贏家是剛下棋的玩家）
        4. 仍是 Active 才推進 turn；遊戲結束時 turn 停在最後一步

        返回：
            新的 GameRecord

        異常：
            GameNotStarted, GameAlreadyOver, TileOutOfBounds,
            TileAlreadySet, NotPlayersTurn
        """
        # 1. 前置條件
        if not record.is_started:
            raise GameNotStarted("Game has not been started")

        if is_terminal(record.state):
            raise GameAlreadyOver(f"Game is already over ({record.state.status.value})")

        row, column = tile.row, tile.column
        if not is_in_bounds(row, column):
            raise TileOutOfBounds(row, column)

        if get_cell(record.board, row, column) is not None:
            raise TileAlreadySet(row, column)

        mover = expected_player(record)
        if rules.enforce_turn_order and caller != mover:
            raise NotPlayersTurn(caller, mover)

        # 2. 放棋子
        mark = mark_for_turn(record.turn)
        board = place_mark(record.board, row, column, mark)

        # 3. 判定勝負
        state = evaluate(board, mover, legacy_column_scan=rules.legacy_full_board_scan)

        # 4. 推進 turn
        turn = record.turn if is_terminal(state) else record.turn + 1

        logger.debug(
            f"Turn {record.turn}: {mover} placed {mark.value} at ({row}, {column}) "
            f"-> {state.status.value}"
        )
        return replace(record, board=board, state=state, turn=turn)
