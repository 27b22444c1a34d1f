"""
並發控制工具

提供 Database-level 的鎖定機制，確保同一場遊戲的 start / play
是一個接一個執行的（引擎本身不做任何 lock）

主要使用 SELECT ... FOR UPDATE 來實現悲觀鎖（Pessimistic Locking）；
SQLite 不支援 FOR UPDATE，會直接忽略，靠單一寫入者序列化
"""
from sqlalchemy.orm import Session, Query

from models import Game


def with_game_lock(game_id: str, db: Session) -> Query:
    """
    鎖定一場 Game（行級鎖）

    使用場景：
    - start / play 讀取並修改 Game 時
    - 需要確保 Game 在整個 transaction 期間不被其他請求修改

    範例：
        game = with_game_lock(game_id, db).first()
        if not game:
            raise GameNotFound(game_id)
        game.apply_record(GameEngine.play(game.to_record(), caller, tile))

    參數：
        game_id: Game 的 id
        db: SQLAlchemy Session

    返回：
        Query object（需要呼叫 .first() 或 .one() 來取得結果）

    注意：
        - nowait=False 表示如果鎖被佔用，會等待
        - 必須在 transaction 內使用（確保有 commit 或 rollback）
    """
    return db.query(Game).filter(
        Game.id == game_id
    ).with_for_update(nowait=False)
