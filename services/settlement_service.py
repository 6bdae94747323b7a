"""
結算服務：回合結束時計算付款與勝場

純計算邏輯，不負責狀態轉換（由 GameManager 負責）

三種拍賣模式共用同一份排名（最高 / 第二高 / 第三高下注），
只有「誰付錢、付多少」不同：

┌──────────┬──────────────┬───────────────────────────────────────────┐
│ 模式     │ 誰付錢       │ 付多少                                    │
├──────────┼──────────────┼───────────────────────────────────────────┤
│ All-Pay  │ 所有下注者   │ 自己的下注                                │
│ Standard │ 最高下注者   │ 自己的下注                                │
│ Vickrey  │ 最高下注者   │ 單一贏家：第二高；平手：第三高 > 第二高 > 0 │
└──────────┴──────────────┴───────────────────────────────────────────┘

勝場一律給最高下注者，平手時依人數拆分（見 win_credit）。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Mapping, Optional, Sequence
import logging

from models import AuctionMode, Player

logger = logging.getLogger(__name__)

# 平手人數 -> 每位贏家得到的勝場（1, 2, 3, 4 人）；5 人以上一律 CREDIT_CAP
WIN_CREDIT_TABLE = (Fraction(1), Fraction(1, 2), Fraction(2, 5), Fraction(3, 10))
CREDIT_CAP = Fraction(1, 5)


@dataclass
class BidRanking:
    """下注排名（三種模式共用）"""
    highest_bid: Optional[int] = None
    highest_bidders: List[str] = field(default_factory=list)
    second_highest_bid: Optional[int] = None
    third_highest_bid: Optional[int] = None

    @property
    def is_tie(self) -> bool:
        return len(self.highest_bidders) > 1


@dataclass
class SettlementResult:
    """一個回合的結算結果（給外部顯示用）"""
    round_number: int
    bids: Dict[str, int]
    highest_bid: Optional[int]
    winners: List[str]
    second_highest_bid: Optional[int]
    third_highest_bid: Optional[int]
    payments: Dict[str, int]
    credits: Dict[str, Fraction]
    game_complete: bool = False


def rank_bids(bids: Mapping[str, int]) -> BidRanking:
    """
    計算最高 / 第二高 / 第三高下注

    規則：
    - 最高下注者：所有下注等於最高金額的玩家（依下注順序）
    - 第二高：嚴格小於最高金額的最大下注；全部一樣則為 None
    - 第三高：只有最高金額平手時才計算，
      取「不在最高下注者之中」的最大下注；沒有則為 None

    範例：
        {a: 50, b: 30, c: 10} -> highest=50, bidders=[a], second=30, third=None
        {a: 40, b: 40, c: 20} -> highest=40, bidders=[a, b], second=20, third=20
        {a: 40, b: 40}        -> highest=40, bidders=[a, b], second=None, third=None
    """
    if not bids:
        return BidRanking()

    highest = max(bids.values())
    highest_bidders = [pid for pid, amount in bids.items() if amount == highest]
    lower = [amount for amount in bids.values() if amount < highest]
    second = max(lower) if lower else None

    third = None
    if len(highest_bidders) > 1:
        others = [amount for pid, amount in bids.items() if pid not in highest_bidders]
        third = max(others) if others else None

    return BidRanking(
        highest_bid=highest,
        highest_bidders=highest_bidders,
        second_highest_bid=second,
        third_highest_bid=third,
    )


def win_credit(winner_count: int) -> Fraction:
    """
    每位贏家可得的勝場

    1 人 -> 1、2 人 -> 0.5、3 人 -> 0.4、4 人 -> 0.3、5 人以上 -> 0.2

    注意：3 人以上平手時總和不等於 1，這是遊戲規則本身的設計
    """
    if winner_count <= 0:
        return Fraction(0)
    if winner_count <= len(WIN_CREDIT_TABLE):
        return WIN_CREDIT_TABLE[winner_count - 1]
    return CREDIT_CAP


class AuctionRule(ABC):
    """拍賣模式的付款 / 勝場規則"""

    mode: AuctionMode

    @abstractmethod
    def compute_payments(self, bids: Mapping[str, int], ranking: BidRanking) -> Dict[str, int]:
        """回傳 player_id -> 實際付款（只列出需要付款的玩家）"""

    def compute_credit(self, ranking: BidRanking) -> Dict[str, Fraction]:
        credit = win_credit(len(ranking.highest_bidders))
        return {pid: credit for pid in ranking.highest_bidders}


class AllPayRule(AuctionRule):
    mode = AuctionMode.ALL_PAY

    def compute_payments(self, bids, ranking):
        # 不論輸贏，每個人都付自己的下注
        return dict(bids)


class StandardRule(AuctionRule):
    mode = AuctionMode.STANDARD

    def compute_payments(self, bids, ranking):
        return {pid: bids[pid] for pid in ranking.highest_bidders}


class VickreyRule(AuctionRule):
    mode = AuctionMode.VICKREY

    def compute_payments(self, bids, ranking):
        if ranking.is_tie and ranking.third_highest_bid is not None:
            price = ranking.third_highest_bid
        elif ranking.second_highest_bid is not None:
            price = ranking.second_highest_bid
        else:
            price = 0
        return {pid: price for pid in ranking.highest_bidders}


AUCTION_RULES: Dict[AuctionMode, AuctionRule] = {
    rule.mode: rule for rule in (AllPayRule(), StandardRule(), VickreyRule())
}


def get_auction_rule(mode: AuctionMode) -> AuctionRule:
    return AUCTION_RULES[AuctionMode(mode)]


def settle_round(
    players: Sequence[Player],
    bids: Mapping[str, int],
    mode: AuctionMode,
    round_number: int = 0,
) -> SettlementResult:
    """
    結算一個回合

    流程：
    1. 排名（最高 / 第二高 / 第三高）
    2. 依模式計算付款與勝場
    3. 扣款、加勝場

    參數：
        players: 遊戲內所有玩家
        bids: 已關閉的下注帳本（player_id -> 金額），可以是空的
        mode: 拍賣模式
        round_number: 回合數（只用於記錄）

    返回：
        SettlementResult

    副作用：
        更新 Player.money 和 Player.rounds_won

    注意：
        - 下注在提交時已檢查 <= 餘額，付款一定 <= 自己的下注，所以餘額不會變負
        - 空帳本：沒有贏家、沒有付款，回合照常結束
    """
    ranking = rank_bids(bids)
    rule = get_auction_rule(mode)

    if ranking.highest_bid is None:
        payments: Dict[str, int] = {}
        credits: Dict[str, Fraction] = {}
    else:
        payments = rule.compute_payments(bids, ranking)
        credits = rule.compute_credit(ranking)

    actual_payments: Dict[str, int] = {}
    for player in players:
        paid = payments.get(player.id, 0)
        player.money -= paid
        player.rounds_won += credits.get(player.id, Fraction(0))
        actual_payments[player.id] = paid

    logger.info(
        f"Settled round {round_number} ({rule.mode.value}): highest={ranking.highest_bid} "
        f"winners={ranking.highest_bidders} payments={actual_payments}"
    )

    return SettlementResult(
        round_number=round_number,
        bids=dict(bids),
        highest_bid=ranking.highest_bid,
        winners=list(ranking.highest_bidders),
        second_highest_bid=ranking.second_highest_bid,
        third_highest_bid=ranking.third_highest_bid,
        payments=actual_payments,
        credits=credits,
    )
