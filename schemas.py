"""
Request / Response schemas（pydantic）
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models import AuctionMode


# ============ Requests ============

class GameCreate(BaseModel):
    host_name: str
    mode: str = AuctionMode.ALL_PAY.value


class PlayerJoin(BaseModel):
    player_name: str


class PlayerAction(BaseModel):
    player_id: str


class BidSubmit(BaseModel):
    player_id: str
    amount: int


# ============ Responses ============

class GameCreatedResponse(BaseModel):
    game_id: str
    player_id: str
    auction_mode: AuctionMode


class PlayerResponse(BaseModel):
    game_id: str
    player_id: str
    name: str


class ActionResponse(BaseModel):
    status: str = "ok"


class BidResponse(BaseModel):
    status: str = "ok"
    round_complete: bool = False
    game_complete: bool = False


class AdvanceResponse(BaseModel):
    status: str = "ok"
    game_complete: bool = False


class PlayerState(BaseModel):
    id: str
    name: str
    money: int
    rounds_won: float
    is_host: bool
    has_bid: bool


class PlayerRef(BaseModel):
    id: str
    name: str
    rounds_won: float
    money: int


class LastRoundState(BaseModel):
    round_number: int
    bids: Dict[str, int]
    payments: Dict[str, int]
    winners: List[str]
    highest_bid: Optional[int] = None
    second_highest_bid: Optional[int] = None
    third_highest_bid: Optional[int] = None
    credits: Dict[str, float]


class GameStateResponse(BaseModel):
    game_id: str
    auction_mode: AuctionMode
    players: List[PlayerState]
    current_round: int
    total_rounds: int
    rounds_to_win: int
    status: str
    round_winners: List[PlayerRef] = Field(default_factory=list)
    overall_winner: Optional[PlayerRef] = None
    my_bid: Optional[int] = None
    is_my_turn: bool
    am_host: bool
    last_round: Optional[LastRoundState] = None
    show_round_results: bool
    state_version: int
