"""
狀態機：集中管理 Game 的所有狀態轉換

waiting -> betting -> roundComplete -> betting -> ... -> gameComplete
                  \\-> gameComplete（最後一個下注觸發結算且遊戲結束）

任何狀態都可以被 Host 重置回 waiting。
"""
from typing import Dict, FrozenSet
import logging

from models import Game, GameStatus
from core.exceptions import InvalidStateTransition

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: Dict[GameStatus, FrozenSet[GameStatus]] = {
    GameStatus.WAITING: frozenset({GameStatus.BETTING, GameStatus.WAITING}),
    GameStatus.BETTING: frozenset({
        GameStatus.ROUND_COMPLETE, GameStatus.GAME_COMPLETE, GameStatus.WAITING
    }),
    GameStatus.ROUND_COMPLETE: frozenset({
        GameStatus.BETTING, GameStatus.GAME_COMPLETE, GameStatus.WAITING
    }),
    GameStatus.GAME_COMPLETE: frozenset({GameStatus.WAITING}),
}


class GameStateMachine:
    """Game 狀態轉換"""

    @staticmethod
    def can_transition(current: GameStatus, target: GameStatus) -> bool:
        return target in ALLOWED_TRANSITIONS.get(current, frozenset())

    @staticmethod
    def transition(game: Game, target: GameStatus) -> Game:
        """
        轉換 Game 狀態

        參數：
            game: 已經在 with_game_lock 內取得的 Game
            target: 目標狀態

        返回：
            更新後的 Game

        異常：
            InvalidStateTransition: 目前狀態不能轉換到 target
        """
        current = game.status
        if not GameStateMachine.can_transition(current, target):
            raise InvalidStateTransition(
                f"Cannot transition game {game.id} from {current.value} to {target.value}"
            )

        game.status = target
        logger.info(f"Game {game.id}: {current.value} -> {target.value}")
        return game
