"""
Game API Endpoints

職責：
1. 建立 / 開始遊戲
2. 下棋
3. 查詢遊戲狀態與下棋紀錄

呼叫者身分：
- 由 X-Player-Id header 提供，視為已經過外部驗證
- 這裡只負責取出來，不做任何驗證
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
import logging

from database import get_db
from schemas import GameStart, MovePlay, GameResponse, MoveResponse
from core.game_manager import GameManager
from core.exceptions import (
    TicTacToeException,
    GameNotFound,
    AlreadyStarted,
    GameNotStarted,
    GameAlreadyOver,
    TileOutOfBounds,
    TileAlreadySet,
    NotPlayersTurn,
)
from services.history_service import get_move_history

router = APIRouter(prefix="/api/games", tags=["games"])
logger = logging.getLogger(__name__)

# 異常 -> HTTP status code
ERROR_STATUS = {
    GameNotFound: 404,
    AlreadyStarted: 409,
    GameNotStarted: 409,
    GameAlreadyOver: 409,
    TileAlreadySet: 409,
    TileOutOfBounds: 400,
    NotPlayersTurn: 403,
}


def get_caller_identity(x_player_id: Optional[str] = Header(None)) -> str:
    """
    FastAPI dependency：取得呼叫者 Identity

    異常：
        HTTPException 401: 沒有提供 X-Player-Id
    """
    if not x_player_id:
        raise HTTPException(status_code=401, detail="Missing X-Player-Id header")
    return x_player_id


def _to_http_error(error: TicTacToeException) -> HTTPException:
    status_code = ERROR_STATUS.get(type(error), 400)
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": str(error)}
    )


@router.post("", response_model=GameResponse, status_code=201)
def create_game(db: Session = Depends(get_db)):
    """
    建立新的遊戲記錄（turn = 0，尚未綁定玩家）
    """
    try:
        game = GameManager.create_game(db)
        return GameResponse.from_game(game)

    except Exception as e:
        logger.error(f"Failed to create game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/start", response_model=GameResponse)
def start_game(game_id: str, start_data: GameStart, db: Session = Depends(get_db)):
    """
    開始遊戲

    前置條件：
    - Game 必須存在
    - Game 尚未開始（turn == 0）

    返回：
        開始後的 Game（turn = 1）
    """
    try:
        game = GameManager.start_game(db, game_id, start_data.players)
        return GameResponse.from_game(game)

    except TicTacToeException as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to start game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/play", response_model=GameResponse)
def play_move(
    game_id: str,
    move: MovePlay,
    caller: str = Depends(get_caller_identity),
    db: Session = Depends(get_db)
):
    """
    下一步棋

    前置條件（依序）：
    - 遊戲已開始、尚未結束
    - 座標在 0..2 之間
    - 格子是空的
    - 呼叫者是輪到的玩家（Settings.enforce_turn_order）

    返回：
        下完之後的 Game；任何失敗都不會改變記錄
    """
    try:
        logger.info(f"Player {caller} plays ({move.row}, {move.column}) in game {game_id}")
        game = GameManager.play_move(db, game_id, caller, move.row, move.column)
        return GameResponse.from_game(game)

    except TicTacToeException as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to play move: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{game_id}", response_model=GameResponse)
def get_game(game_id: str, db: Session = Depends(get_db)):
    """
    查詢遊戲狀態（players / turn / board / state）
    """
    try:
        game = GameManager.get_game_by_id(db, game_id)
        return GameResponse.from_game(game)

    except GameNotFound as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to get game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{game_id}/moves", response_model=List[MoveResponse])
def get_moves(game_id: str, db: Session = Depends(get_db)):
    """
    取得已接受的下棋紀錄（依順序）
    """
    try:
        GameManager.get_game_by_id(db, game_id)
        return [MoveResponse(**entry) for entry in get_move_history(game_id, db)]

    except GameNotFound as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to get moves: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
