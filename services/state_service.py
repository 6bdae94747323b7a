"""
Game state snapshot service.

Builds the per-player state payload that polling clients render, and owns
the state_version counter they use to detect changes cheaply.
"""
from typing import Any, Dict, Optional
import logging

from models import Game, GameStatus, Player

logger = logging.getLogger(__name__)


def bump_state_version(game: Game, reason: str = "") -> int:
    """Mark the game as changed; returns the new version."""
    game.touch()
    logger.debug("Game %s state_version -> %s (%s)", game.id, game.state_version, reason)
    return game.state_version


def _player_ref(player: Optional[Player]) -> Optional[Dict[str, Any]]:
    if player is None:
        return None
    return {
        "id": player.id,
        "name": player.name,
        "rounds_won": float(player.rounds_won),
        "money": player.money,
    }


def build_state_snapshot(game: Game, player: Player) -> Dict[str, Any]:
    """
    Return a read-only view of the game for one requesting player.

    Other players' bids for the round in progress are never exposed, only
    whether they have bid. The last settled round is included in full.
    """
    ledger = game.ledger
    settlement = game.last_settlement

    last_round: Optional[Dict[str, Any]] = None
    round_winners = []
    if settlement is not None:
        round_winners = [
            _player_ref(game.find_player(pid)) for pid in settlement.winners
            if game.find_player(pid) is not None
        ]
        last_round = {
            "round_number": settlement.round_number,
            "bids": dict(settlement.bids),
            "payments": dict(settlement.payments),
            "winners": list(settlement.winners),
            "highest_bid": settlement.highest_bid,
            "second_highest_bid": settlement.second_highest_bid,
            "third_highest_bid": settlement.third_highest_bid,
            "credits": {pid: float(c) for pid, c in settlement.credits.items()},
        }

    return {
        "game_id": game.id,
        "auction_mode": game.auction_mode.value,
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "money": p.money,
                "rounds_won": float(p.rounds_won),
                "is_host": p.is_host,
                "has_bid": ledger.has_bid(p.id),
            }
            for p in game.players
        ],
        "current_round": game.current_round,
        "total_rounds": game.total_rounds,
        "rounds_to_win": game.rounds_to_win,
        "status": game.status.value,
        "round_winners": round_winners,
        "overall_winner": _player_ref(game.overall_winner),
        "my_bid": ledger.get(player.id),
        "is_my_turn": game.status == GameStatus.BETTING and not ledger.has_bid(player.id),
        "am_host": player.is_host,
        "last_round": last_round,
        "show_round_results": game.show_round_results,
        "state_version": game.state_version,
    }
