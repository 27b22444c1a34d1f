"""
自定義異常類別

集中管理所有遊戲規則異常，方便 API 層統一處理

每個異常都帶有 code（錯誤種類名稱），API 回應會把它放進 detail
"""


class TicTacToeException(Exception):
    """所有遊戲異常的基類"""
    code = "TicTacToeError"


# ============ Game 記錄相關異常 ============

class GameNotFound(TicTacToeException):
    """遊戲記錄不存在"""
    code = "GameNotFound"

    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


class AlreadyStarted(TicTacToeException):
    """start 只能執行一次（turn 必須是 0）"""
    code = "AlreadyStarted"


class GameNotStarted(TicTacToeException):
    """遊戲尚未 start（turn == 0），不能下棋"""
    code = "GameNotStarted"


# ============ 下棋（play）相關異常 ============

class GameAlreadyOver(TicTacToeException):
    """遊戲已經結束（Tie 或 Won）"""
    code = "GameAlreadyOver"


class TileOutOfBounds(TicTacToeException):
    """座標超出 3x3 棋盤"""
    code = "TileOutOfBounds"

    def __init__(self, row, column):
        self.row = row
        self.column = column
        super().__init__(f"Tile ({row}, {column}) is outside the 3x3 board")


class TileAlreadySet(TicTacToeException):
    """格子已經有棋子"""
    code = "TileAlreadySet"

    def __init__(self, row, column):
        self.row = row
        self.column = column
        super().__init__(f"Tile ({row}, {column}) is already set")


class NotPlayersTurn(TicTacToeException):
    """呼叫者不是目前輪到的玩家"""
    code = "NotPlayersTurn"

    def __init__(self, caller, expected):
        self.caller = caller
        self.expected = expected
        super().__init__(f"It is not {caller}'s turn (expected {expected})")
