"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- 狀態機：集中管理所有狀態轉換
- Manager：管理 Game 的生命週期（建立、下注、結算、重置）
- Registry：持有所有進行中的遊戲
- Locks / Scheduler：並發控制與背景排程
"""
