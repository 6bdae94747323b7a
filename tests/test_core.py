from datetime import timedelta

import pytest

from config import Settings
from core.exceptions import GameNotFound, InvalidStateTransition
from core.game_registry import GameRegistry
from core.scheduler import run_housekeeping_tick
from core.state_machine import GameStateMachine
from models import Game, GameStatus, utcnow


class TestGameStateMachine:
    @pytest.mark.parametrize("current, target", [
        (GameStatus.WAITING, GameStatus.BETTING),
        (GameStatus.BETTING, GameStatus.ROUND_COMPLETE),
        (GameStatus.BETTING, GameStatus.GAME_COMPLETE),
        (GameStatus.ROUND_COMPLETE, GameStatus.BETTING),
        (GameStatus.ROUND_COMPLETE, GameStatus.GAME_COMPLETE),
        (GameStatus.GAME_COMPLETE, GameStatus.WAITING),
        (GameStatus.BETTING, GameStatus.WAITING),
    ])
    def test_allowed(self, current, target):
        game = Game(id="ABC123", status=current)
        GameStateMachine.transition(game, target)
        assert game.status == target

    @pytest.mark.parametrize("current, target", [
        (GameStatus.WAITING, GameStatus.ROUND_COMPLETE),
        (GameStatus.WAITING, GameStatus.GAME_COMPLETE),
        (GameStatus.GAME_COMPLETE, GameStatus.BETTING),
        (GameStatus.GAME_COMPLETE, GameStatus.ROUND_COMPLETE),
    ])
    def test_rejected(self, current, target):
        game = Game(id="ABC123", status=current)
        with pytest.raises(InvalidStateTransition):
            GameStateMachine.transition(game, target)
        assert game.status == current


class TestGameRegistry:
    def test_create_and_get(self):
        registry = GameRegistry()
        game = registry.create(lambda code: Game(id=code))

        assert registry.get(game.id) is game
        assert registry.get(game.id.lower()) is game
        assert game.id in registry
        assert len(registry) == 1

    def test_unknown_game(self):
        with pytest.raises(GameNotFound):
            GameRegistry().get("ZZZZZZ")

    def test_codes_are_unique(self):
        registry = GameRegistry()
        ids = {registry.create(lambda code: Game(id=code)).id for _ in range(200)}
        assert len(ids) == 200

    def test_remove(self):
        registry = GameRegistry()
        game = registry.create(lambda code: Game(id=code))
        assert registry.remove(game.id)
        assert not registry.remove(game.id)
        assert game.id not in registry

    def test_evict_inactive(self):
        registry = GameRegistry()
        stale = registry.create(lambda code: Game(id=code))
        active = registry.create(lambda code: Game(id=code))
        now = utcnow()
        stale.last_active_at = now - timedelta(hours=2)

        assert registry.evict_inactive(now, timedelta(hours=1)) == [stale.id]
        assert registry.game_ids() == [active.id]


class TestHousekeeping:
    def test_tick_hides_results_and_sweeps(self, game_factory, manager):
        settings = Settings(results_display_seconds=5, game_retention_hours=1, sweep_interval_seconds=60)
        game, players = game_factory(["Host", "Ann"])
        for player in players:
            manager.place_bid(game.id, player.id, 1)

        now = game.results_shown_at + timedelta(seconds=10)
        last_sweep = run_housekeeping_tick(manager, settings, now, None)

        assert last_sweep == now
        assert not game.show_round_results
        assert game.id in manager.registry

    def test_sweep_waits_for_interval(self, game_factory, manager):
        settings = Settings(game_retention_hours=1, sweep_interval_seconds=60)
        game, _ = game_factory(["Host", "Ann"], start=False)
        now = utcnow()
        game.last_active_at = now - timedelta(hours=2)

        previous = now - timedelta(seconds=30)
        assert run_housekeeping_tick(manager, settings, now, previous) == previous
        assert game.id in manager.registry

        assert run_housekeeping_tick(manager, settings, now + timedelta(seconds=30), previous) != previous
        assert game.id not in manager.registry
