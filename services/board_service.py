"""
棋盤服務：3x3 棋盤的基本操作

純計算邏輯，不涉及狀態轉換；棋盤是 immutable 的 tuple，
place_mark 會回傳新的棋盤
"""
from typing import List, Optional, Tuple

from core.game_record import BOARD_SIZE, Board, Mark


def is_in_bounds(row: int, column: int) -> bool:
    """
    檢查座標是否在棋盤內

    參數：
        row: 列（0-2）
        column: 欄（0-2）

    返回：
        True 如果兩個座標都在 0..2 之間（負數也算超出範圍）
    """
    return 0 <= row < BOARD_SIZE and 0 <= column < BOARD_SIZE


def get_cell(board: Board, row: int, column: int) -> Optional[Mark]:
    return board[row][column]


def place_mark(board: Board, row: int, column: int, mark: Mark) -> Board:
    """
    在指定格子放上棋子，回傳新的棋盤

    注意：
        - 不檢查格子是否已有棋子（由 GameEngine 負責）
        - 原本的 board 不會被修改
    """
    return tuple(
        tuple(
            mark if (r, c) == (row, column) else cell
            for c, cell in enumerate(cells)
        )
        for r, cells in enumerate(board)
    )


def get_empty_cells(board: Board) -> List[Tuple[int, int]]:
    """
    取得所有空格

    返回：
        (row, column) 列表，依列優先排序
    """
    return [
        (row, column)
        for row in range(BOARD_SIZE)
        for column in range(BOARD_SIZE)
        if board[row][column] is None
    ]


def render_board(board: Board) -> str:
    """
    把棋盤轉成文字（X = FIRST, O = SECOND, . = 空）

    範例：
        X O .
        . X .
        . . O
    """
    symbols = {Mark.FIRST: "X", Mark.SECOND: "O", None: "."}
    return "\n".join(" ".join(symbols[cell] for cell in row) for row in board)
