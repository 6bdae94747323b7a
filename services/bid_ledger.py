"""
下注帳本：記錄一個回合內每位玩家的下注

規則：
- 每位玩家每回合最多下注一次，下注後不可修改
- 所有玩家都下注後帳本關閉，直到下一回合 clear() 之前不接受新下注
"""
from typing import Dict, Iterable, Optional

from core.exceptions import BidAlreadyPlaced, BiddingClosed


class BidLedger:
    """單一回合的 player_id -> 下注金額"""

    def __init__(self):
        self._bids: Dict[str, int] = {}
        self.closed = False

    def place(self, player_id: str, amount: int) -> None:
        if self.closed:
            raise BiddingClosed("Bidding is closed for this round")
        if player_id in self._bids:
            raise BidAlreadyPlaced(player_id)
        self._bids[player_id] = amount

    def has_bid(self, player_id: str) -> bool:
        return player_id in self._bids

    def get(self, player_id: str) -> Optional[int]:
        return self._bids.get(player_id)

    def is_complete(self, player_ids: Iterable[str]) -> bool:
        """所有玩家都已下注"""
        return all(pid in self._bids for pid in player_ids)

    def close(self) -> None:
        self.closed = True

    def clear(self) -> None:
        self._bids = {}
        self.closed = False

    def as_dict(self) -> Dict[str, int]:
        return dict(self._bids)

    def __len__(self) -> int:
        return len(self._bids)
