"""
Pydantic Schemas：API 的請求與回應格式
"""
from typing import List, Optional

from pydantic import BaseModel, Field, constr

from core.game_record import GameStatus, Mark
from models import Game


class GameStart(BaseModel):
    # 先手在前、後手在後
    players: List[constr(min_length=1)] = Field(..., min_length=2, max_length=2)


class MovePlay(BaseModel):
    # 範圍由引擎檢查（超出範圍回 TileOutOfBounds，而不是 422）
    row: int
    column: int


class GameStateResponse(BaseModel):
    status: GameStatus
    winner: Optional[str] = None


class GameResponse(BaseModel):
    game_id: str
    players: List[str]
    turn: int
    board: List[List[Optional[Mark]]]
    state: GameStateResponse

    @classmethod
    def from_game(cls, game: Game) -> "GameResponse":
        record = game.to_record()
        return cls(
            game_id=game.id,
            players=list(record.players),
            turn=record.turn,
            board=[list(row) for row in record.board],
            state=GameStateResponse(
                status=record.state.status,
                winner=getattr(record.state, "winner", None),
            ),
        )


class MoveResponse(BaseModel):
    turn: int
    player: str
    caller: Optional[str] = None
    mark: Mark
    row: int
    column: int
