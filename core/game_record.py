"""
遊戲記錄的資料結構（純資料，不碰資料庫）

GameRecord 是引擎唯一操作的對象：
- players: 兩位玩家的 Identity（固定順序）
- turn: 1-based 的步數，0 表示尚未 start
- board: 3x3 的 Optional[Mark]
- state: Active | Tie | Won(winner)

GameRecord 是 frozen dataclass，引擎永遠回傳新的 record，
失敗時原本的 record 不會有任何改變。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

# 由外部驗證過的玩家身分，引擎只做相等比較
Identity = str

BOARD_SIZE = 3


class Mark(str, Enum):
    """棋子：先手 FIRST、後手 SECOND"""
    FIRST = "first"
    SECOND = "second"


class GameStatus(str, Enum):
    """遊戲狀態標籤（資料庫欄位用）"""
    ACTIVE = "active"
    TIE = "tie"
    WON = "won"


Cell = Optional[Mark]
Board = Tuple[Tuple[Cell, ...], ...]


def empty_board() -> Board:
    """建立空棋盤"""
    return tuple(tuple(None for _ in range(BOARD_SIZE)) for _ in range(BOARD_SIZE))


@dataclass(frozen=True)
class Coordinate:
    """棋盤座標（row, column），合法範圍 0..2"""
    row: int
    column: int


# ============ GameState：三種狀態 ============

@dataclass(frozen=True)
class Active:
    """遊戲進行中"""
    status = GameStatus.ACTIVE


@dataclass(frozen=True)
class Tie:
    """平手（棋盤已滿且沒有連線）"""
    status = GameStatus.TIE


@dataclass(frozen=True)
class Won:
    """有人連成一線"""
    winner: Identity
    status = GameStatus.WON


GameState = Union[Active, Tie, Won]


def is_terminal(state: GameState) -> bool:
    """Tie 或 Won 之後不能再下棋"""
    return not isinstance(state, Active)


@dataclass(frozen=True)
class GameRecord:
    """一場遊戲的完整狀態"""
    players: Tuple[Identity, Identity] = ("", "")
    turn: int = 0
    board: Board = field(default_factory=empty_board)
    state: GameState = field(default_factory=Active)

    @property
    def is_started(self) -> bool:
        return self.turn > 0
