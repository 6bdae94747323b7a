"""
Overall winner service.

Picks the champion once the game reaches gameComplete.
"""
from typing import Optional

from models import AuctionMode, Game, Player


def resolve_overall_winner(game: Game) -> Optional[Player]:
    """
    Return the overall winner of a finished game.

    All-Pay: the first player (join order) holding rounds_to_win or more
    wins outright. Otherwise, in every mode, the most rounds won wins;
    ties go to the most money, and a tie on money goes to the player who
    joined first.

    Returns None only when the game has no players.
    """
    if not game.players:
        return None

    if game.auction_mode == AuctionMode.ALL_PAY:
        for player in game.players:
            if player.rounds_won >= game.rounds_to_win:
                return player

    max_wins = max(p.rounds_won for p in game.players)
    leaders = [p for p in game.players if p.rounds_won == max_wins]
    if len(leaders) == 1:
        return leaders[0]

    # max() keeps the first of equal elements, i.e. join order
    return max(leaders, key=lambda p: p.money)
