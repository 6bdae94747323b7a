"""
背景排程：與請求流程分開的定時工作

- 每個 tick：隱藏已經顯示超過 results_display_seconds 的回合結果
- 每隔 sweep_interval_seconds：清除超過保留時間沒有活動的遊戲

兩個工作都只對 GameManager 發出冪等指令，重複執行沒有副作用。
"""
from datetime import datetime
from typing import Optional
import asyncio
import logging

from config import Settings
from core.game_manager import GameManager
from models import utcnow

logger = logging.getLogger(__name__)


def run_housekeeping_tick(
    manager: GameManager,
    settings: Settings,
    now: datetime,
    last_sweep: Optional[datetime],
) -> Optional[datetime]:
    """
    執行一次排程工作

    返回：
        最後一次清除遊戲的時間（這次有清除就是 now）
    """
    manager.hide_expired_results(now, settings.results_display)

    if last_sweep is None or (now - last_sweep).total_seconds() >= settings.sweep_interval_seconds:
        manager.evict_inactive_games(now, settings.game_retention)
        return now
    return last_sweep


async def run_housekeeping(manager: GameManager, settings: Settings) -> None:
    """
    背景迴圈，由 FastAPI lifespan 啟動、關閉時 cancel

    單次失敗只記錄錯誤，不會中斷迴圈
    """
    logger.info("Housekeeping loop started")
    last_sweep = utcnow()
    while True:
        await asyncio.sleep(settings.housekeeping_interval_seconds)
        try:
            last_sweep = run_housekeeping_tick(manager, settings, utcnow(), last_sweep)
        except Exception as e:
            logger.error(f"Housekeeping tick failed: {e}", exc_info=True)
