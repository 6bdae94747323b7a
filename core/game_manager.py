"""
Game Manager：管理 Game 的完整生命週期

職責：
1. 建立遊戲（含 Host player）、加入遊戲
2. 開始遊戲、下注、進入下一回合、重置
3. 最後一個下注觸發結算，並判斷遊戲是否結束
4. 提供狀態快照給輪詢的客戶端

原則：
- 所有狀態變更經過 GameStateMachine
- 每個操作都在 with_game_lock 內完成（讀取 -> 驗證 -> 修改）
- 先驗證全部條件再修改，被拒絕的操作不會改變任何狀態
"""
from contextlib import contextmanager
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging

from models import AuctionMode, Game, GameStatus, Player, utcnow
from core.exceptions import (
    GameNotFound,
    PlayerNotFound,
    NotHost,
    GameNotAcceptingPlayers,
    InvalidPlayerCount,
    InvalidAuctionMode,
    InvalidStateTransition,
    PlayerNameTaken,
    BiddingClosed,
    BidAlreadyPlaced,
    InvalidBidAmount,
)
from core.game_registry import GameRegistry
from core.locks import with_game_lock
from core.state_machine import GameStateMachine
from services.naming_service import clean_player_name, generate_player_id
from services.round_policy_service import is_game_over, total_rounds_for
from services.settlement_service import SettlementResult, settle_round
from services.state_service import build_state_snapshot, bump_state_version
from services.winner_service import resolve_overall_winner

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2


class GameManager:
    """Game 生命週期管理器"""

    def __init__(self, registry: Optional[GameRegistry] = None):
        self.registry = registry if registry is not None else GameRegistry()

    @contextmanager
    def _locked_game(self, game_id: str) -> Iterator[Game]:
        game = self.registry.get(game_id)
        with with_game_lock(game.id, self.registry.locks):
            yield game

    @staticmethod
    def _require_player(game: Game, player_id: str) -> Player:
        player = game.find_player(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        return player

    @staticmethod
    def _require_host(game: Game, player_id: str, action: str) -> Player:
        player = GameManager._require_player(game, player_id)
        if not player.is_host:
            logger.warning(f"Player {player_id} is not host when trying to {action} game {game.id}")
            raise NotHost(f"Only the host can {action} the game")
        return player

    @staticmethod
    def _parse_mode(mode) -> AuctionMode:
        if mode is None or mode == "":
            return AuctionMode.ALL_PAY
        try:
            return AuctionMode(mode)
        except ValueError:
            raise InvalidAuctionMode(mode)

    def create_game(self, host_name: str, mode=AuctionMode.ALL_PAY) -> Tuple[Game, Player]:
        """
        建立新遊戲（含 Host 玩家）

        參數：
            host_name: Host 的名稱
            mode: all-pay / standard / vickrey，預設 all-pay

        返回：
            (Game, Host Player) tuple

        異常：
            InvalidPlayerName: 名稱為空
            InvalidAuctionMode: 不支援的模式
        """
        name = clean_player_name(host_name)
        auction_mode = self._parse_mode(mode)

        host = Player(id=generate_player_id(), name=name, is_host=True)
        game = self.registry.create(
            lambda code: Game(id=code, auction_mode=auction_mode, players=[host])
        )
        bump_state_version(game, reason="game_created")

        logger.info(f"Created game {game.id} ({auction_mode.value}) for host {name}")
        return game, host

    def join_game(self, game_id: str, player_name: str) -> Player:
        """
        加入遊戲

        前置條件：
        1. 遊戲必須存在
        2. 遊戲狀態必須是 waiting（尚未開始）
        3. 名稱不可空白、不可與同場玩家重複

        返回：
            新的 Player

        異常：
            GameNotFound, GameNotAcceptingPlayers, InvalidPlayerName, PlayerNameTaken
        """
        with self._locked_game(game_id) as game:
            if game.status != GameStatus.WAITING:
                raise GameNotAcceptingPlayers(
                    f"Game {game.id} is not accepting players (status: {game.status.value})"
                )

            name = clean_player_name(player_name)
            if game.find_player_by_name(name) is not None:
                logger.warning(f"Name {name} already taken in game {game.id}")
                raise PlayerNameTaken(name)

            player = Player(id=generate_player_id(), name=name)
            game.players.append(player)
            bump_state_version(game, reason="player_joined")

            logger.info(f"Player {player.id} ({name}) joined game {game.id}")
            return player

    def start_game(self, game_id: str, player_id: str) -> Game:
        """
        開始遊戲（waiting -> betting）

        前置條件：
        1. 呼叫者必須是 Host
        2. 玩家數量 >= 2
        3. 狀態必須是 waiting

        效果：
            current_round = 1，依目前人數固定 total_rounds，清空帳本
        """
        with self._locked_game(game_id) as game:
            self._require_host(game, player_id, "start")

            player_count = len(game.players)
            if player_count < MIN_PLAYERS:
                raise InvalidPlayerCount(
                    f"Need at least {MIN_PLAYERS} players to start game, got {player_count}"
                )
            if game.status != GameStatus.WAITING:
                raise InvalidStateTransition(f"Game {game.id} has already started")

            game.total_rounds = total_rounds_for(player_count)
            game.current_round = 1
            game.ledger.clear()
            GameStateMachine.transition(game, GameStatus.BETTING)
            bump_state_version(game, reason="game_started")

            logger.info(
                f"Game {game.id} started with {player_count} players, "
                f"{game.total_rounds} rounds"
            )
            return game

    def place_bid(self, game_id: str, player_id: str, amount: int) -> Optional[SettlementResult]:
        """
        下注

        前置條件：
        1. 呼叫者是這場遊戲的玩家
        2. 狀態必須是 betting
        3. 本回合尚未下注
        4. 0 <= amount <= 目前餘額

        流程：
        1. 驗證
        2. 記錄下注
        3. 如果所有人都下注了，立即結算（只會發生一次）

        返回：
            這個下注關閉了回合時回傳 SettlementResult，否則 None
        """
        with self._locked_game(game_id) as game:
            player = self._require_player(game, player_id)

            if game.status != GameStatus.BETTING:
                raise BiddingClosed(
                    f"It is not betting time (status: {game.status.value})"
                )

            if game.ledger.has_bid(player.id):
                logger.warning(f"Player {player.name} already bid in round {game.current_round}")
                raise BidAlreadyPlaced(player.id)

            if isinstance(amount, bool) or not isinstance(amount, int):
                raise InvalidBidAmount(f"Bid must be a whole number, got {amount!r}")
            if amount < 0 or amount > player.money:
                logger.warning(f"Invalid bid amount {amount} from player {player.name}")
                raise InvalidBidAmount(
                    f"Bid must be between 0 and {player.money}, got {amount}"
                )

            game.ledger.place(player.id, amount)
            bump_state_version(game, reason="bid_placed")
            logger.info(
                f"Player {player.name} bid {amount} in game {game.id} "
                f"round {game.current_round}"
            )

            if game.ledger.is_complete(game.player_ids()):
                return self._complete_round(game)
            return None

    def _complete_round(self, game: Game) -> SettlementResult:
        """
        結算回合（betting -> roundComplete，必要時 -> gameComplete）

        注意：
            - 呼叫者必須持有遊戲鎖
        """
        logger.info(f"All players have bid in game {game.id}, completing round {game.current_round}")

        game.ledger.close()
        result = settle_round(
            game.players,
            game.ledger.as_dict(),
            game.auction_mode,
            round_number=game.current_round,
        )
        game.last_settlement = result
        game.show_round_results = True
        game.results_shown_at = utcnow()

        GameStateMachine.transition(game, GameStatus.ROUND_COMPLETE)
        if is_game_over(game):
            self._finish_game(game)
            result.game_complete = True

        bump_state_version(game, reason="round_completed")
        return result

    def _finish_game(self, game: Game) -> None:
        GameStateMachine.transition(game, GameStatus.GAME_COMPLETE)
        game.overall_winner = resolve_overall_winner(game)

        winner = game.overall_winner
        if winner is not None:
            logger.info(
                f"Game {game.id} complete after {game.current_round} rounds: "
                f"{winner.name} won with {float(winner.rounds_won)} wins and {winner.money}"
            )

    def advance_round(self, game_id: str, player_id: str) -> Game:
        """
        進入下一回合（roundComplete -> betting）

        前置條件：
        1. 呼叫者必須是 Host
        2. 狀態必須是 roundComplete

        注意：
            - 先再檢查一次結束條件；已滿足就直接進入 gameComplete
        """
        with self._locked_game(game_id) as game:
            self._require_host(game, player_id, "advance")

            if game.status != GameStatus.ROUND_COMPLETE:
                raise InvalidStateTransition(
                    f"Cannot start next round yet (status: {game.status.value})"
                )

            if is_game_over(game):
                self._finish_game(game)
                bump_state_version(game, reason="game_completed")
                return game

            game.current_round += 1
            game.ledger.clear()
            game.show_round_results = False
            game.results_shown_at = None
            GameStateMachine.transition(game, GameStatus.BETTING)
            bump_state_version(game, reason="round_advanced")

            logger.info(f"Game {game.id} advanced to round {game.current_round}")
            return game

    def reset_game(self, game_id: str, player_id: str) -> Game:
        """
        重置遊戲（任何狀態 -> waiting）

        效果：
            - 每位玩家的餘額回到 100、勝場歸零
            - 玩家 ID、名稱和加入順序不變
            - 清空回合數、帳本、上一回合結果和總冠軍
        """
        with self._locked_game(game_id) as game:
            self._require_host(game, player_id, "reset")

            for player in game.players:
                player.reset()

            game.current_round = 0
            game.total_rounds = 0
            game.ledger.clear()
            game.last_settlement = None
            game.show_round_results = False
            game.results_shown_at = None
            game.overall_winner = None
            GameStateMachine.transition(game, GameStatus.WAITING)
            bump_state_version(game, reason="game_reset")

            logger.info(f"Game {game.id} reset successfully")
            return game

    def get_state(self, game_id: str, player_id: str) -> Dict[str, Any]:
        """取得某位玩家視角的狀態快照（唯讀）"""
        with self._locked_game(game_id) as game:
            player = self._require_player(game, player_id)
            return build_state_snapshot(game, player)

    # ============ 排程指令（冪等） ============

    def hide_round_results(self, game_id: str, round_number: int) -> bool:
        """
        隱藏某回合的結果顯示

        冪等：遊戲已不存在、已隱藏或已經是別的回合時不做任何事

        返回：
            True 如果這次呼叫真的隱藏了結果
        """
        try:
            with self._locked_game(game_id) as game:
                return self._hide_results_locked(game, round_number)
        except GameNotFound:
            return False

    @staticmethod
    def _hide_results_locked(game: Game, round_number: int) -> bool:
        settlement = game.last_settlement
        if not game.show_round_results or settlement is None:
            return False
        if settlement.round_number != round_number:
            return False

        game.show_round_results = False
        bump_state_version(game, reason="round_results_hidden")
        logger.info(f"Round results hidden for game {game.id}")
        return True

    def hide_expired_results(self, now: datetime, display_for: timedelta) -> List[str]:
        """
        隱藏已經顯示超過 display_for 的回合結果

        返回：
            被隱藏結果的 game_id 列表
        """
        hidden = []
        for game_id in self.registry.game_ids():
            try:
                with self._locked_game(game_id) as game:
                    shown_at = game.results_shown_at
                    if shown_at is None or now - shown_at < display_for:
                        continue
                    game.results_shown_at = None
                    if game.last_settlement is not None and self._hide_results_locked(
                        game, game.last_settlement.round_number
                    ):
                        hidden.append(game.id)
            except GameNotFound:
                continue
        return hidden

    def evict_inactive_games(self, now: datetime, retention: timedelta) -> List[str]:
        return self.registry.evict_inactive(now, retention)


@lru_cache()
def get_game_manager() -> GameManager:
    """
    FastAPI dependency：整個 process 共用一個 GameManager

    測試時用 app.dependency_overrides 替換
    """
    return GameManager()
