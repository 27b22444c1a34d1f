"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- BoardService：棋盤操作
- TurnService：從 turn 推算輪到誰
- OutcomeService：勝負判定
- HistoryService：下棋紀錄查詢
"""
