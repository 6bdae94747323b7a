from pydantic_settings import BaseSettings
from functools import lru_cache
from datetime import timedelta
from typing import List
import logging


class Settings(BaseSettings):
    # 回合結果顯示幾秒後自動隱藏
    results_display_seconds: float = 5.0
    # 超過這段時間沒有活動的遊戲會被清除
    game_retention_hours: float = 24.0
    sweep_interval_seconds: float = 3600.0
    housekeeping_interval_seconds: float = 1.0

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"

    @property
    def results_display(self) -> timedelta:
        return timedelta(seconds=self.results_display_seconds)

    @property
    def game_retention(self) -> timedelta:
        return timedelta(hours=self.game_retention_hours)


@lru_cache()
def get_settings():
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
