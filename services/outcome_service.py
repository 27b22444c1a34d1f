"""
勝負判定服務：每一步被接受之後，檢查棋盤是否分出勝負

判定順序：
1. 三列（row 0..2）
2. 三欄（column 0..2）
3. 兩條對角線
找到第一條連線就是 Won(剛下棋的玩家)；都沒有且棋盤已滿就是 Tie；
否則維持 Active

純計算邏輯，不改變任何記錄
"""
from typing import List, Optional, Tuple

from core.game_record import BOARD_SIZE, Active, Board, GameState, Identity, Tie, Won
from services.board_service import get_empty_cells

Line = List[Tuple[int, int]]

# 所有可能的連線（順序即檢查順序）
WINNING_LINES: List[Line] = [
    # Rows
    [(0, 0), (0, 1), (0, 2)],
    [(1, 0), (1, 1), (1, 2)],
    [(2, 0), (2, 1), (2, 2)],
    # Columns
    [(0, 0), (1, 0), (2, 0)],
    [(0, 1), (1, 1), (2, 1)],
    [(0, 2), (1, 2), (2, 2)],
    # Diagonals
    [(0, 0), (1, 1), (2, 2)],
    [(0, 2), (1, 1), (2, 0)],
]

# 舊版「棋盤已滿」判斷只掃描 column 0 和 1
LEGACY_SCAN_COLUMNS = 2


def _is_line_complete(board: Board, line: Line) -> bool:
    first_row, first_column = line[0]
    first = board[first_row][first_column]
    if first is None:
        return False
    return all(board[row][column] == first for row, column in line[1:])


def find_winning_line(board: Board) -> Optional[Line]:
    """
    找出第一條三格同色的連線

    返回：
        連線的 (row, column) 列表，沒有則回傳 None
    """
    for line in WINNING_LINES:
        if _is_line_complete(board, line):
            return line
    return None


def is_board_full(board: Board, legacy_column_scan: bool = False) -> bool:
    """
    檢查棋盤是否已滿

    參數：
        board: 棋盤
        legacy_column_scan: True 時重現舊版行為，只檢查 column 0、1；
            最後一欄有空格的棋盤也會被當成「已滿」

    返回：
        True 如果掃描範圍內沒有空格
    """
    columns = LEGACY_SCAN_COLUMNS if legacy_column_scan else BOARD_SIZE
    return not any(column < columns for _, column in get_empty_cells(board))


def evaluate(board: Board, mover: Identity, legacy_column_scan: bool = False) -> GameState:
    """
    根據剛下完的棋盤決定遊戲狀態

    參數：
        board: 已放上本步棋子的棋盤
        mover: 剛下棋的玩家（連線時就是贏家）
        legacy_column_scan: 見 is_board_full

    返回：
        Won(mover) / Tie() / Active()
    """
    if find_winning_line(board) is not None:
        return Won(winner=mover)
    if is_board_full(board, legacy_column_scan=legacy_column_scan):
        return Tie()
    return Active()
