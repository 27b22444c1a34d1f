"""
Move history service.

Builds the ordered list of accepted moves for a game from the
MOVE_PLAYED events so clients can replay the board step by step.
"""
from typing import List, Dict, Any

from sqlalchemy.orm import Session

from models import EventLog


def get_move_history(game_id: str, db: Session) -> List[Dict[str, Any]]:
    """
    Return accepted moves for the game in the order they were played.

    Rejected moves never reach the log (their transaction is rolled back),
    so every entry corresponds to a cell that is set on the board.
    """
    events = (
        db.query(EventLog)
        .filter(EventLog.game_id == game_id, EventLog.event_type == "MOVE_PLAYED")
        .order_by(EventLog.id)
        .all()
    )

    history: List[Dict[str, Any]] = []
    for event in events:
        data = event.data or {}
        history.append({
            "turn": data.get("turn"),
            "player": data.get("player"),
            "caller": data.get("caller"),
            "mark": data.get("mark"),
            "row": data.get("row"),
            "column": data.get("column"),
        })

    return history
