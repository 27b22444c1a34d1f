"""
Game Manager：管理 Game 記錄的完整生命週期

職責：
1. 建立 Game 記錄（turn = 0）
2. 開始遊戲（綁定兩位玩家）
3. 下棋（交給 GameEngine 判斷，再寫回資料庫）
4. 查詢 Game

原則：
- 規則全部在 GameEngine，Manager 只負責 lock / 讀寫 / 記錄事件
- 每個修改操作都是一個 transaction：失敗時 rollback，記錄完全不變
"""
from sqlalchemy.orm import Session
from typing import Optional, Sequence
import logging

from models import Game, EventLog
from core.game_engine import GameEngine, GameRules
from core.game_record import Coordinate, GameStatus, Identity, Won
from services.turn_service import expected_player
from core.locks import with_game_lock
from core.exceptions import GameNotFound
from database import get_settings, transactional
from services.board_service import render_board

logger = logging.getLogger(__name__)


def get_rules() -> GameRules:
    """從 Settings 建立目前的規則"""
    settings = get_settings()
    return GameRules(
        enforce_turn_order=settings.enforce_turn_order,
        legacy_full_board_scan=settings.legacy_full_board_scan,
    )


class GameManager:
    """Game 生命週期管理器"""

    @staticmethod
    @transactional
    def create_game(db: Session) -> Game:
        """
        建立新的 Game 記錄

        新記錄：turn = 0、空棋盤、status = ACTIVE、尚未綁定玩家

        參數：
            db: SQLAlchemy Session

        返回：
            Game
        """
        game = Game(turn=0, status=GameStatus.ACTIVE)
        db.add(game)
        db.flush()  # 取得 game.id

        logger.info(f"Created game {game.id}")

        db.add(EventLog(game_id=game.id, event_type="GAME_CREATED", data={}))
        return game

    @staticmethod
    @transactional
    def start_game(db: Session, game_id: str, players: Sequence[Identity]) -> Game:
        """
        開始遊戲（turn 0 -> 1）

        流程：
        1. 取得並鎖定 Game
        2. 透過 GameEngine.start 轉換狀態
        3. 寫回並記錄事件

        參數：
            db: SQLAlchemy Session
            game_id: Game id
            players: (先手, 後手)

        返回：
            更新後的 Game

        異常：
            GameNotFound: Game 不存在
            AlreadyStarted: Game 已經開始過
        """
        # 1. 取得並鎖定 Game
        game = with_game_lock(game_id, db).first()
        if not game:
            raise GameNotFound(game_id)

        # 2. 狀態轉換
        record = GameEngine.start(game.to_record(), players)

        # 3. 寫回並記錄事件
        game.apply_record(record)
        db.add(EventLog(
            game_id=game.id,
            event_type="GAME_STARTED",
            data={"players": list(record.players)}
        ))

        logger.info(f"Started game {game_id}: {record.players[0]} vs {record.players[1]}")
        return game

    @staticmethod
    @transactional
    def play_move(
        db: Session,
        game_id: str,
        caller: Identity,
        row: int,
        column: int,
        rules: Optional[GameRules] = None,
    ) -> Game:
        """
        下一步棋

        流程：
        1. 取得並鎖定 Game
        2. 透過 GameEngine.play 檢查並計算新狀態
        3. 寫回並記錄 MOVE_PLAYED（遊戲結束時再記錄 GAME_WON / GAME_TIED）

        參數：
            db: SQLAlchemy Session
            game_id: Game id
            caller: 已驗證的呼叫者 Identity
            row, column: 座標
            rules: 規則；None 時使用 Settings

        返回：
            更新後的 Game

        異常：
            GameNotFound, GameNotStarted, GameAlreadyOver,
            TileOutOfBounds, TileAlreadySet, NotPlayersTurn
        """
        rules = rules or get_rules()

        # 1. 取得並鎖定 Game
        game = with_game_lock(game_id, db).first()
        if not game:
            raise GameNotFound(game_id)

        # 2. 引擎計算（失敗會直接拋出，記錄不變）
        before = game.to_record()
        after = GameEngine.play(before, caller, Coordinate(row, column), rules)

        # 3. 寫回並記錄事件
        game.apply_record(after)
        logger.debug(f"Game {game_id} board after turn {before.turn}:\n{render_board(after.board)}")
        mark = after.board[row][column]
        # 棋子和勝利都歸給 turn 對應的玩家，呼叫者另外記錄
        mover = expected_player(before)
        db.add(EventLog(
            game_id=game.id,
            event_type="MOVE_PLAYED",
            data={
                "turn": before.turn,
                "player": mover,
                "caller": caller,
                "mark": mark.value,
                "row": row,
                "column": column,
            }
        ))

        if isinstance(after.state, Won):
            logger.info(f"Game {game_id} won by {after.state.winner} on turn {after.turn}")
            db.add(EventLog(
                game_id=game.id,
                event_type="GAME_WON",
                data={"winner": after.state.winner, "turn": after.turn}
            ))
        elif after.state.status == GameStatus.TIE:
            logger.info(f"Game {game_id} ended in a tie on turn {after.turn}")
            db.add(EventLog(
                game_id=game.id,
                event_type="GAME_TIED",
                data={"turn": after.turn}
            ))

        return game

    @staticmethod
    def get_game_by_id(db: Session, game_id: str) -> Game:
        """
        透過 id 取得 Game

        異常：
            GameNotFound: Game 不存在
        """
        game = db.query(Game).filter(Game.id == game_id).first()
        if not game:
            raise GameNotFound(game_id)
        return game
