"""
Round API Endpoints - 短輪詢版

重點：
1. 最後一個下注會在同一個請求內觸發結算
2. 所有業務邏輯集中在 GameManager
3. 前端靠 /state 的 state_version 獲取更新
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from models import GameStatus
from schemas import BidSubmit, BidResponse, PlayerAction, AdvanceResponse
from core.game_manager import GameManager, get_game_manager
from core.exceptions import Forbidden, InvalidInput, InvalidState, NotFound

router = APIRouter(prefix="/api/games", tags=["rounds"])
logger = logging.getLogger(__name__)


@router.post("/{game_id}/bids", response_model=BidResponse)
def place_bid(game_id: str, data: BidSubmit, manager: GameManager = Depends(get_game_manager)):
    """
    下注

    前置條件：
    - 狀態為 betting，本回合尚未下注
    - 0 <= amount <= 目前餘額

    返回：
        - round_complete: 這個下注是否關閉了回合
        - game_complete: 結算後遊戲是否結束
    """
    try:
        result = manager.place_bid(game_id, data.player_id, data.amount)
        if result is None:
            return BidResponse(status="ok")

        return BidResponse(
            status="ok",
            round_complete=True,
            game_complete=result.game_complete
        )

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidState, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to place bid: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/rounds/next", response_model=AdvanceResponse)
def advance_round(game_id: str, data: PlayerAction, manager: GameManager = Depends(get_game_manager)):
    """
    進入下一回合（Host endpoint）

    前置條件：
    - 狀態為 roundComplete

    效果：
    - 如果已經達到結束條件，直接進入 gameComplete
    """
    try:
        game = manager.advance_round(game_id, data.player_id)
        return AdvanceResponse(
            status="ok",
            game_complete=game.status == GameStatus.GAME_COMPLETE
        )

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except (InvalidState, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to advance round: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
