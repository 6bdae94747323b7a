"""
Game Registry：持有所有進行中的遊戲

單一 process、純記憶體（重啟後遊戲消失）。
只負責存取與代碼生成，不做遊戲規則判斷。
"""
from datetime import datetime, timedelta
from typing import Callable, Dict, List
import logging
import threading

from models import Game
from core.exceptions import GameNotFound
from core.locks import GameLockTable
from services.naming_service import generate_game_code, normalize_game_code

logger = logging.getLogger(__name__)


class GameRegistry:
    """game_id -> Game"""

    def __init__(self):
        self._games: Dict[str, Game] = {}
        self._guard = threading.Lock()
        self.locks = GameLockTable()

    def create(self, factory: Callable[[str], Game]) -> Game:
        """
        以唯一的遊戲代碼建立並登記一場遊戲

        參數：
            factory: 接收新代碼、回傳 Game

        注意：
            - 代碼生成與登記在同一把鎖內完成，碰撞時重新生成
        """
        with self._guard:
            code = generate_game_code()
            while code in self._games:
                logger.warning(f"Game code collision detected, regenerating: {code}")
                code = generate_game_code()
            game = factory(code)
            self._games[code] = game
        return game

    def get(self, game_id: str) -> Game:
        """
        取得遊戲（代碼不分大小寫）

        異常：
            GameNotFound: 遊戲不存在
        """
        code = normalize_game_code(game_id or "")
        with self._guard:
            game = self._games.get(code)
        if game is None:
            raise GameNotFound(code)
        return game

    def remove(self, game_id: str) -> bool:
        code = normalize_game_code(game_id)
        with self._guard:
            removed = self._games.pop(code, None) is not None
        self.locks.discard(code)
        return removed

    def game_ids(self) -> List[str]:
        with self._guard:
            return list(self._games)

    def evict_inactive(self, now: datetime, retention: timedelta) -> List[str]:
        """
        移除超過保留時間沒有任何活動的遊戲

        參數：
            now: 目前時間（UTC）
            retention: 保留時間

        返回：
            被移除的 game_id 列表
        """
        with self._guard:
            expired = [
                game_id for game_id, game in self._games.items()
                if now - game.last_active_at > retention
            ]
            for game_id in expired:
                del self._games[game_id]

        for game_id in expired:
            self.locks.discard(game_id)

        if expired:
            logger.info(f"Cleaned up {len(expired)} inactive games")
        return expired

    def __len__(self) -> int:
        with self._guard:
            return len(self._games)

    def __contains__(self, game_id: str) -> bool:
        with self._guard:
            return normalize_game_code(game_id) in self._games
