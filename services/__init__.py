"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- BidLedger：單一回合的下注帳本
- SettlementService：三種拍賣模式的結算
- RoundPolicyService：總回合數與結束條件
- WinnerService：總冠軍判定
- NamingService：代碼與名稱
- StateService：狀態快照
"""
