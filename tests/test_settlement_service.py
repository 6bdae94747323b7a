from fractions import Fraction

import pytest

from models import AuctionMode
from services.settlement_service import (
    AllPayRule,
    StandardRule,
    VickreyRule,
    get_auction_rule,
    rank_bids,
    settle_round,
    win_credit,
)


class TestRankBids:
    def test_single_highest(self):
        ranking = rank_bids({"a": 50, "b": 30, "c": 10})
        assert ranking.highest_bid == 50
        assert ranking.highest_bidders == ["a"]
        assert ranking.second_highest_bid == 30
        assert ranking.third_highest_bid is None
        assert not ranking.is_tie

    def test_tie_with_third_tier(self):
        ranking = rank_bids({"a": 40, "b": 40, "c": 20})
        assert ranking.highest_bidders == ["a", "b"]
        assert ranking.second_highest_bid == 20
        assert ranking.third_highest_bid == 20
        assert ranking.is_tie

    def test_all_equal(self):
        ranking = rank_bids({"a": 40, "b": 40})
        assert ranking.highest_bid == 40
        assert ranking.second_highest_bid is None
        assert ranking.third_highest_bid is None

    def test_empty(self):
        ranking = rank_bids({})
        assert ranking.highest_bid is None
        assert ranking.highest_bidders == []

    def test_zero_bids_are_ranked(self):
        ranking = rank_bids({"a": 0, "b": 0, "c": 0})
        assert ranking.highest_bid == 0
        assert ranking.highest_bidders == ["a", "b", "c"]


class TestWinCredit:
    @pytest.mark.parametrize("count, expected", [
        (1, Fraction(1)),
        (2, Fraction(1, 2)),
        (3, Fraction(2, 5)),
        (4, Fraction(3, 10)),
        (5, Fraction(1, 5)),
        (9, Fraction(1, 5)),
    ])
    def test_table(self, count, expected):
        assert win_credit(count) == expected

    def test_no_winners(self):
        assert win_credit(0) == 0

    def test_monotonically_decreasing(self):
        credits = [win_credit(n) for n in range(1, 8)]
        assert credits == sorted(credits, reverse=True)


class TestRules:
    def test_dispatch_by_mode(self):
        assert isinstance(get_auction_rule(AuctionMode.ALL_PAY), AllPayRule)
        assert isinstance(get_auction_rule(AuctionMode.STANDARD), StandardRule)
        assert isinstance(get_auction_rule("vickrey"), VickreyRule)

    def test_credit_is_shared_across_modes(self):
        ranking = rank_bids({"a": 40, "b": 40, "c": 20})
        for mode in AuctionMode:
            assert get_auction_rule(mode).compute_credit(ranking) == {
                "a": Fraction(1, 2), "b": Fraction(1, 2)
            }


class TestSettleRound:
    def test_all_pay_everyone_pays_own_bid(self, make_players):
        players = make_players("a", "b", "c")
        result = settle_round(players, {"a": 50, "b": 30, "c": 10}, AuctionMode.ALL_PAY, 1)

        assert [p.money for p in players] == [50, 70, 90]
        assert [p.rounds_won for p in players] == [1, 0, 0]
        assert result.winners == ["a"]
        assert result.payments == {"a": 50, "b": 30, "c": 10}

    def test_standard_only_winner_pays(self, make_players):
        players = make_players("a", "b", "c")
        result = settle_round(players, {"a": 50, "b": 30, "c": 10}, AuctionMode.STANDARD, 1)

        assert [p.money for p in players] == [50, 100, 100]
        assert result.payments == {"a": 50, "b": 0, "c": 0}

    def test_standard_tie_each_pays_full_bid(self, make_players):
        players = make_players("a", "b", "c")
        settle_round(players, {"a": 40, "b": 40, "c": 20}, AuctionMode.STANDARD, 1)

        assert [p.money for p in players] == [60, 60, 100]
        assert [p.rounds_won for p in players] == [Fraction(1, 2), Fraction(1, 2), 0]

    def test_vickrey_single_winner_pays_second_highest(self, make_players):
        players = make_players("a", "b", "c")
        result = settle_round(players, {"a": 50, "b": 30, "c": 10}, AuctionMode.VICKREY, 1)

        assert players[0].money == 70
        assert players[1].money == 100
        assert result.payments["a"] == 30

    def test_vickrey_tie_pays_third_highest(self, make_players):
        players = make_players("a", "b", "c")
        result = settle_round(players, {"a": 40, "b": 40, "c": 20}, AuctionMode.VICKREY, 1)

        assert [p.money for p in players] == [80, 80, 100]
        assert result.third_highest_bid == 20

    def test_vickrey_tie_without_lower_bids_pays_nothing(self, make_players):
        players = make_players("a", "b")
        result = settle_round(players, {"a": 40, "b": 40}, AuctionMode.VICKREY, 1)

        assert [p.money for p in players] == [100, 100]
        assert result.payments == {"a": 0, "b": 0}
        assert [p.rounds_won for p in players] == [Fraction(1, 2), Fraction(1, 2)]

    def test_vickrey_lone_bidder_pays_nothing(self, make_players):
        players = make_players("a")
        settle_round(players, {"a": 25}, AuctionMode.VICKREY, 1)
        assert players[0].money == 100
        assert players[0].rounds_won == 1

    def test_three_way_tie_credit(self, make_players):
        players = make_players("a", "b", "c", "d")
        result = settle_round(
            players, {"a": 10, "b": 10, "c": 10, "d": 5}, AuctionMode.ALL_PAY, 2
        )

        assert result.credits == {pid: Fraction(2, 5) for pid in ("a", "b", "c")}
        assert players[3].rounds_won == 0
        assert [p.money for p in players] == [90, 90, 90, 95]

    def test_empty_ledger(self, make_players):
        players = make_players("a", "b")
        result = settle_round(players, {}, AuctionMode.ALL_PAY, 3)

        assert result.winners == []
        assert result.highest_bid is None
        assert [p.money for p in players] == [100, 100]
        assert [p.rounds_won for p in players] == [0, 0]

    def test_money_never_negative(self, make_players):
        players = make_players("a", "b")
        for mode in AuctionMode:
            for p in players:
                p.reset()
            settle_round(players, {"a": 100, "b": 100}, mode, 1)
            assert all(p.money >= 0 for p in players)
