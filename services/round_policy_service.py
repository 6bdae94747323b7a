"""
回合規則服務：總回合數與遊戲結束條件

- 總回合數在開始遊戲時依玩家人數決定，之後不再改變
- All-Pay 模式有提前結束條件（有人拿到 rounds_to_win 勝場）
- Standard / Vickrey 一定打完全部回合
"""
from models import AuctionMode, Game


def total_rounds_for(player_count: int) -> int:
    """
    根據玩家人數決定總回合數

    規則：
    - 2 人以下: 5 回合
    - 3 人: 7 回合
    - 4 人以上: 9 回合

    範例：
        total_rounds_for(2) -> 5
        total_rounds_for(3) -> 7
        total_rounds_for(5) -> 9
    """
    if player_count <= 2:
        return 5
    elif player_count == 3:
        return 7
    else:
        return 9


def someone_reached_win_threshold(game: Game) -> bool:
    return any(p.rounds_won >= game.rounds_to_win for p in game.players)


def is_game_over(game: Game) -> bool:
    """
    檢查遊戲是否該結束

    用途：
        每次結算後、每次進入下一回合前都會呼叫

    返回：
        True 如果應該進入 gameComplete
    """
    if game.current_round >= game.total_rounds:
        return True
    if game.auction_mode == AuctionMode.ALL_PAY:
        return someone_reached_win_threshold(game)
    return False
