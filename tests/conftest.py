import pytest

from core.game_manager import GameManager
from core.game_registry import GameRegistry
from models import Player


@pytest.fixture
def manager():
    return GameManager(GameRegistry())


@pytest.fixture
def game_factory(manager):
    """
    建立一場遊戲：第一個名字是 Host，其餘依序加入

    返回：
        (game, [players...])，players 依加入順序
    """
    def _make(names, mode="all-pay", start=True):
        game, host = manager.create_game(names[0], mode)
        players = [host]
        for name in names[1:]:
            players.append(manager.join_game(game.id, name))
        if start:
            manager.start_game(game.id, host.id)
        return game, players

    return _make


@pytest.fixture
def make_players():
    def _make(*names):
        return [Player(id=name, name=name) for name in names]

    return _make
