"""
並發控制工具

FastAPI 的同步 endpoint 跑在 threadpool 裡，同一場遊戲可能同時收到多個請求。
每場遊戲一把鎖，確保「讀取 -> 驗證 -> 修改」整段不會被其他請求插隊，
尤其是「最後一個下注觸發結算」只能發生一次。
"""
from contextlib import contextmanager
from typing import Dict, Iterator
import threading


class GameLockTable:
    """game_id -> threading.Lock"""

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, game_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[game_id] = lock
            return lock

    def discard(self, game_id: str) -> None:
        with self._guard:
            self._locks.pop(game_id, None)


@contextmanager
def with_game_lock(game_id: str, locks: GameLockTable) -> Iterator[None]:
    """
    鎖定一場遊戲

    使用場景：
    - 任何修改遊戲狀態的操作（開始、下注、下一回合、重置）
    - 讀取狀態快照時（避免看到結算到一半的狀態）

    範例：
        with with_game_lock(game_id, locks):
            game = registry.get(game_id)
            game.status = GameStatus.BETTING

    注意：
        - 等待鎖（不設 timeout），一次只鎖一場遊戲，不會 deadlock
    """
    lock = locks.lock_for(game_id)
    with lock:
        yield
