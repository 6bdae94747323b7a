"""
資料模型：Game / Player 以及狀態 enum

所有遊戲只存在記憶體中（由 GameRegistry 持有），
所以這裡用 dataclass，而不是 ORM model。
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, List, Optional

from services.bid_ledger import BidLedger

if TYPE_CHECKING:
    from services.settlement_service import SettlementResult

STARTING_MONEY = 100
ROUNDS_TO_WIN = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameStatus(str, Enum):
    WAITING = "waiting"
    BETTING = "betting"
    ROUND_COMPLETE = "roundComplete"
    GAME_COMPLETE = "gameComplete"


class AuctionMode(str, Enum):
    ALL_PAY = "all-pay"
    STANDARD = "standard"
    VICKREY = "vickrey"


@dataclass
class Player:
    id: str
    name: str
    is_host: bool = False
    money: int = STARTING_MONEY
    rounds_won: Fraction = field(default_factory=Fraction)

    def reset(self) -> None:
        self.money = STARTING_MONEY
        self.rounds_won = Fraction(0)


@dataclass
class Game:
    id: str
    auction_mode: AuctionMode = AuctionMode.ALL_PAY
    players: List[Player] = field(default_factory=list)
    status: GameStatus = GameStatus.WAITING
    current_round: int = 0
    total_rounds: int = 0
    rounds_to_win: int = ROUNDS_TO_WIN
    ledger: BidLedger = field(default_factory=BidLedger)
    last_settlement: Optional["SettlementResult"] = None
    show_round_results: bool = False
    results_shown_at: Optional[datetime] = None
    overall_winner: Optional[Player] = None
    state_version: int = 0
    created_at: datetime = field(default_factory=utcnow)
    last_active_at: datetime = field(default_factory=utcnow)

    @property
    def host(self) -> Player:
        return self.players[0]

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_player_by_name(self, name: str) -> Optional[Player]:
        for player in self.players:
            if player.name == name:
                return player
        return None

    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def touch(self) -> None:
        """每次狀態改變：提升 state_version、更新最後活動時間"""
        self.state_version += 1
        self.last_active_at = utcnow()
