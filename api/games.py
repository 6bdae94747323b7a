"""
Game API Endpoints

職責：
1. 建立遊戲、加入遊戲
2. 開始遊戲、重置遊戲（Host）
3. 查詢遊戲狀態（短輪詢）
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response
import logging

from schemas import (
    GameCreate,
    GameCreatedResponse,
    PlayerJoin,
    PlayerResponse,
    PlayerAction,
    ActionResponse,
    GameStateResponse,
)
from core.game_manager import GameManager, get_game_manager
from core.exceptions import Forbidden, InvalidInput, InvalidState, NotFound

router = APIRouter(prefix="/api/games", tags=["games"])
logger = logging.getLogger(__name__)


@router.post("", response_model=GameCreatedResponse)
def create_game(data: GameCreate, manager: GameManager = Depends(get_game_manager)):
    """
    建立遊戲（Host endpoint）

    返回：
        - game_id: 6 位遊戲代碼（分享給其他玩家）
        - player_id: Host 的玩家 ID
    """
    try:
        game, host = manager.create_game(data.host_name, data.mode)
        return GameCreatedResponse(
            game_id=game.id,
            player_id=host.id,
            auction_mode=game.auction_mode
        )

    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/join", response_model=PlayerResponse)
def join_game(game_id: str, data: PlayerJoin, manager: GameManager = Depends(get_game_manager)):
    """
    加入遊戲（玩家 endpoint）

    前置條件：
    - 遊戲必須存在，且尚未開始
    - 名稱不可與其他玩家重複
    """
    try:
        player = manager.join_game(game_id, data.player_name)
        return PlayerResponse(
            game_id=game_id.strip().upper(),
            player_id=player.id,
            name=player.name
        )

    except NotFound:
        raise HTTPException(status_code=404, detail="Game not found")
    except (InvalidState, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to join game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/start", response_model=ActionResponse)
def start_game(game_id: str, data: PlayerAction, manager: GameManager = Depends(get_game_manager)):
    """
    開始遊戲（Host endpoint）

    前置條件：
    - 至少 2 位玩家，狀態為 waiting
    """
    try:
        manager.start_game(game_id, data.player_id)
        return ActionResponse(status="ok")

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except (InvalidState, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to start game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/reset", response_model=ActionResponse)
def reset_game(game_id: str, data: PlayerAction, manager: GameManager = Depends(get_game_manager)):
    """
    重置遊戲（Host endpoint）

    效果：
    - 所有玩家回到 100 元、0 勝場，狀態回到 waiting
    """
    try:
        manager.reset_game(game_id, data.player_id)
        return ActionResponse(status="ok")

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to reset game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{game_id}/state", response_model=GameStateResponse)
def get_game_state(
    game_id: str,
    response: Response,
    player_id: str = Query(...),
    manager: GameManager = Depends(get_game_manager)
):
    """
    取得遊戲狀態（短輪詢）

    前端比較 state_version 決定是否重新繪製畫面
    """
    try:
        snapshot = manager.get_state(game_id, player_id)

        response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        return GameStateResponse(**snapshot)

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to get game state: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
