"""
SQLAlchemy Models

- Game：每場遊戲一列（players / turn / board / status / winner）
- EventLog：遊戲生命週期事件（建立、開始、下棋、結束）

Game 和引擎之間透過 to_record() / apply_record() 轉換，
引擎本身不知道資料庫的存在。
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, String, Integer, DateTime, JSON, Enum as SAEnum, ForeignKey

from database import Base
from core.game_record import (
    Active,
    GameRecord,
    GameState,
    GameStatus,
    Mark,
    Tie,
    Won,
    empty_board,
)


def _new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize_board(board) -> list:
    """Board（tuple of tuple of Mark）-> JSON 友善的 list"""
    return [[cell.value if cell is not None else None for cell in row] for row in board]


def deserialize_board(payload) -> tuple:
    """JSON list -> Board"""
    return tuple(
        tuple(Mark(cell) if cell is not None else None for cell in row)
        for row in payload
    )


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, default=_new_id)
    player_one = Column(String, nullable=True)
    player_two = Column(String, nullable=True)
    turn = Column(Integer, nullable=False, default=0)
    board = Column(JSON, nullable=False, default=lambda: serialize_board(empty_board()))
    status = Column(SAEnum(GameStatus), nullable=False, default=GameStatus.ACTIVE)
    # 只有 status == WON 時才有值
    winner = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def players(self):
        return (self.player_one or "", self.player_two or "")

    @property
    def state(self) -> GameState:
        if self.status == GameStatus.WON:
            return Won(winner=self.winner)
        if self.status == GameStatus.TIE:
            return Tie()
        return Active()

    def to_record(self) -> GameRecord:
        """把資料列轉成引擎使用的 GameRecord"""
        return GameRecord(
            players=self.players,
            turn=self.turn or 0,
            board=deserialize_board(self.board) if self.board else empty_board(),
            state=self.state,
        )

    def apply_record(self, record: GameRecord) -> None:
        """把引擎回傳的 GameRecord 寫回資料列"""
        self.player_one, self.player_two = record.players
        self.turn = record.turn
        self.board = serialize_board(record.board)
        self.status = record.state.status
        self.winner = record.state.winner if isinstance(record.state, Won) else None


class EventLog(Base):
    __tablename__ = "event_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(String(36), ForeignKey("games.id"), nullable=False, index=True)
    event_type = Column(String, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow)
