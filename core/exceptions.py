"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

分類（API 層依分類轉換 HTTP status）：
- NotFound: 遊戲或玩家不存在 -> 404
- Forbidden: 呼叫者沒有權限（例如不是 Host）-> 403
- InvalidState: 目前階段不允許此操作 -> 400
- InvalidInput: 輸入不合法（下注金額、名稱等）-> 400
"""


class AuctionGameException(Exception):
    """所有遊戲異常的基類"""
    pass


class NotFound(AuctionGameException):
    pass


class Forbidden(AuctionGameException):
    pass


class InvalidState(AuctionGameException):
    pass


class InvalidInput(AuctionGameException):
    pass


# ============ Game 相關異常 ============

class GameNotFound(NotFound):
    """遊戲不存在"""
    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


class GameNotAcceptingPlayers(InvalidState):
    """遊戲不接受新玩家加入（已經開始遊戲）"""
    pass


class InvalidPlayerCount(InvalidState):
    """玩家數量不足（至少 2 人）"""
    pass


class InvalidAuctionMode(InvalidInput):
    """不支援的拍賣模式"""
    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Unknown auction mode: {mode}")


# ============ Player 相關異常 ============

class PlayerNotFound(NotFound):
    """玩家不存在（或不屬於這場遊戲）"""
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id} not found")


class NotHost(Forbidden):
    """只有 Host 可以執行此操作"""
    pass


class InvalidPlayerName(InvalidInput):
    """玩家名稱為空白"""
    pass


class PlayerNameTaken(InvalidInput):
    """名稱已被同一場遊戲的其他玩家使用"""
    def __init__(self, name):
        self.name = name
        super().__init__(f"Name {name!r} is already taken in this game")


# ============ 下注相關異常 ============

class BiddingClosed(InvalidState):
    """本回合所有人都已下注，帳本已關閉"""
    pass


class BidAlreadyPlaced(InvalidInput):
    """玩家本回合已經下注過了"""
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id} has already placed a bid this round")


class InvalidBidAmount(InvalidInput):
    """下注金額不合法（必須是 0 ~ 目前餘額的整數）"""
    pass


# ============ 狀態轉換異常 ============

class InvalidStateTransition(InvalidState):
    """非法的狀態轉換"""
    pass
