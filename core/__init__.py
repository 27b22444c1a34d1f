"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- GameEngine：井字棋狀態機（start / play），純函式
- GameRecord：引擎操作的資料結構
- GameManager：管理 Game 記錄的生命週期（lock、transaction、事件紀錄）
- Locks：並發控制工具
"""
