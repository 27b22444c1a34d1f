"""
輪次服務：從 turn 計數推算輪到誰

turn 是 1-based 的步數：
- turn 1, 3, 5, 7, 9: players[0]，放 FIRST
- turn 2, 4, 6, 8: players[1]，放 SECOND

公式：目前玩家 index = (turn - 1) % 2
"""
from core.game_record import GameRecord, Identity, Mark


def current_player_index(turn: int) -> int:
    """
    根據 turn 決定目前玩家的 index

    參數：
        turn: 1-based 步數（必須 >= 1）

    返回：
        0 或 1

    範例：
        current_player_index(1) -> 0
        current_player_index(2) -> 1
        current_player_index(5) -> 0
    """
    if turn < 1:
        raise ValueError(f"turn must be >= 1, got {turn}")
    return (turn - 1) % 2


def mark_for_turn(turn: int) -> Mark:
    """第 turn 步要放的棋子：奇數步 FIRST，偶數步 SECOND"""
    return Mark.FIRST if current_player_index(turn) == 0 else Mark.SECOND


def expected_player(record: GameRecord) -> Identity:
    """目前應該下棋的玩家 Identity"""
    return record.players[current_player_index(record.turn)]
