from __future__ import annotations

import warnings
from typing import Optional

from quoridor_ai.core import (
    PLAYERS,
    Action,
    PositionState,
    distance_to_goal,
    is_legal_action,
)

from .config import Difficulty, SearchConfig, select_search_depth
from .greedy import greedy_action, winning_advance
from .minimax import AlphaBetaSearch, SearchStats
from .transposition import TranspositionStore


class SearchDegenerateWarning(RuntimeWarning):
    """The deep search produced no move and the greedy strategy was used."""


class Agent:
    """Anything that picks an action for the player to move."""

    def get_action(self, state: PositionState) -> Action:
        raise NotImplementedError


class SearchEngine(Agent):
    """Automated opponent: greedy or adaptive-depth alpha-beta.

    The transposition store is injected so callers decide when it is loaded
    and persisted; the engine only reads and writes its tables.
    """

    def __init__(self, config: Optional[SearchConfig] = None, *, store: Optional[TranspositionStore] = None) -> None:
        self.config = config or SearchConfig()
        self.store = store if store is not None else TranspositionStore()
        self.alphabeta = AlphaBetaSearch(
            self.store,
            barrier_candidate_limit=self.config.barrier_candidate_limit,
            use_visited_table=self.config.use_visited_table,
        )
        self.last_depth: Optional[int] = None

    @property
    def stats(self) -> SearchStats:
        return self.alphabeta.stats

    def get_action(self, state: PositionState) -> Action:
        if self.config.difficulty is Difficulty.GREEDY:
            return greedy_action(state)
        return self._deep_action(state)

    def search_depth(self, state: PositionState) -> int:
        cfg = self.config
        budgets = tuple(state.remaining_barriers(player) for player in PLAYERS)
        distances = tuple(distance_to_goal(state.token(player), state) for player in PLAYERS)
        return select_search_depth(
            budgets,
            distances,
            shallow=cfg.shallow_depth,
            medium=cfg.medium_depth,
            deep=cfg.deep_depth,
        )

    # ------------------------------------------------------------------
    def _deep_action(self, state: PositionState) -> Action:
        player = state.current_player
        self.last_depth = None
        if state.remaining_barriers(player) <= 0:
            return greedy_action(state, player, allow_barriers=False)

        winning = winning_advance(state, player)
        if winning is not None:
            return winning

        key = state.fingerprint()
        cached = self.store.lookup_optimal_action(key)
        if cached is not None and is_legal_action(state, cached):
            return cached

        depth = self.search_depth(state)
        self.last_depth = depth
        action, _ = self.alphabeta.search(state, depth)
        if action is None:
            warnings.warn(
                f"Search at depth {depth} produced no move for player {player}; using greedy strategy.",
                SearchDegenerateWarning,
                stacklevel=2,
            )
            return greedy_action(state, player)

        self.store.record_optimal_action(key, action)
        return action
