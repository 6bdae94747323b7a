"""
命名服務：生成 Game Code、Player ID，整理玩家名稱

純計算邏輯，不涉及狀態轉換
"""
import random
import string
import uuid

from core.exceptions import InvalidPlayerName

GAME_CODE_LENGTH = 6
GAME_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_game_code() -> str:
    """
    生成隨機的 6 位大寫英數遊戲代碼

    範例：K3F9QZ, 0ABX7M

    注意：
    - 不檢查唯一性（由 GameRegistry 負責）
    - 36^6 約 21 億種可能，碰撞機率極低
    """
    return ''.join(random.choices(GAME_CODE_ALPHABET, k=GAME_CODE_LENGTH))


def normalize_game_code(code: str) -> str:
    """玩家輸入的代碼不分大小寫"""
    return code.strip().upper()


def generate_player_id() -> str:
    return str(uuid.uuid4())


def clean_player_name(name: str) -> str:
    """
    去掉前後空白，空白名稱視為不合法

    異常：
        InvalidPlayerName: 名稱為空
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidPlayerName("Please enter a player name")
    return cleaned
