"""Depth-bounded minimax with alpha-beta pruning over in-place mutation.

Root children are explored on copies of the position; everything below the
root mutates a single state and undoes each move on the way back up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from quoridor_ai.core import (
    Action,
    Advance,
    Fingerprint,
    PlaceBarrier,
    PositionState,
    action_sort_key,
    apply_action_inplace,
    distance_to_goal,
    goal_distance_map,
    legal_advances,
    legal_barriers,
    rank_squares_by_distance,
    undo_action_inplace,
    winner,
)

from .transposition import TranspositionStore

VisitedTable = Dict[Tuple[Fingerprint, int], float]


@dataclass
class SearchStats:
    depth: int = 0
    nodes: int = 0
    leaf_evaluations: int = 0
    cache_hits: int = 0
    cutoffs: int = 0
    transpositions: int = 0


def ordered_children(state: PositionState) -> Tuple[Action, ...]:
    """Every legal action for the mover, most promising first.

    Advances come first, nearest-to-goal first. Barrier placements follow,
    ordered by how close their anchor square is to the opponent token.
    """
    player = state.current_player
    goal_map = goal_distance_map(player, state)
    advances = sorted(
        legal_advances(state, player),
        key=lambda cell: (int(goal_map[cell[0], cell[1]]), cell),
    )
    barriers = legal_barriers(state, player)
    if not barriers:
        return tuple(Advance(x, y) for x, y in advances)

    rank = {cell: idx for idx, cell in enumerate(rank_squares_by_distance(state.opponent_token(player), state))}
    placements = sorted(
        (PlaceBarrier.from_barrier(barrier) for barrier in barriers),
        key=lambda action: (rank[(action.x, action.y)], action_sort_key(action)),
    )
    return tuple(Advance(x, y) for x, y in advances) + tuple(placements)


class AlphaBetaSearch:
    def __init__(
        self,
        store: TranspositionStore,
        *,
        barrier_candidate_limit: Optional[int] = None,
        use_visited_table: bool = True,
    ) -> None:
        self.store = store
        self.barrier_candidate_limit = barrier_candidate_limit
        self.use_visited_table = use_visited_table
        self.stats = SearchStats()

    # ------------------------------------------------------------------
    def search(self, state: PositionState, depth: int, *, prune: bool = True) -> Tuple[Optional[Action], float]:
        """Return the best action for the player to move and its value.

        With ``prune=False`` every node is expanded; used as a reference.
        """
        if depth < 1:
            raise ValueError("Search depth must be at least 1.")
        self.stats = SearchStats(depth=depth)
        root_player = state.current_player
        visited: VisitedTable = {}

        best_action: Optional[Action] = None
        best_value = -math.inf
        for action in self.children(state):
            branch = state.deep_copy()
            apply_action_inplace(branch, action)
            if prune:
                value = self._alphabeta(branch, depth - 1, best_value, math.inf, root_player, visited)
            else:
                value = self._minimax(branch, depth - 1, root_player)
            if value > best_value:
                best_action, best_value = action, value
        return best_action, best_value

    def children(self, state: PositionState) -> List[Action]:
        key = state.fingerprint()
        actions = self.store.lookup_children(key)
        if actions is None:
            actions = ordered_children(state)
            self.store.record_children(key, actions)
        else:
            self.stats.cache_hits += 1
        limit = self.barrier_candidate_limit
        if limit is None:
            return list(actions)
        advances = [a for a in actions if isinstance(a, Advance)]
        placements = [a for a in actions if isinstance(a, PlaceBarrier)]
        return advances + placements[:limit]

    def evaluate(self, state: PositionState, root_player: int) -> float:
        """Score a leaf for ``root_player``: opponent distance minus own distance.

        Finished positions use the same differential; the winner stands at
        distance 0.
        """
        self.stats.leaf_evaluations += 1
        key = state.fingerprint()
        value = self.store.lookup_evaluation(key)
        if value is None:
            # Stored from player 1's side so the entry is perspective free.
            value = float(distance_to_goal(state.token(2), state) - distance_to_goal(state.token(1), state))
            self.store.record_evaluation(key, value)
        else:
            self.stats.cache_hits += 1
        return value if root_player == 1 else -value

    # ------------------------------------------------------------------
    def _alphabeta(
        self,
        state: PositionState,
        depth: int,
        alpha: float,
        beta: float,
        root_player: int,
        visited: VisitedTable,
    ) -> float:
        self.stats.nodes += 1
        if depth == 0 or winner(state) is not None:
            return self.evaluate(state, root_player)

        key = (state.fingerprint(), depth)
        if self.use_visited_table and key in visited:
            self.stats.transpositions += 1
            return visited[key]

        children = self.children(state)
        if not children:
            return self.evaluate(state, root_player)

        maximizing = state.current_player == root_player
        window = (alpha, beta)
        best = -math.inf if maximizing else math.inf
        for action in children:
            undo = apply_action_inplace(state, action)
            value = self._alphabeta(state, depth - 1, alpha, beta, root_player, visited)
            undo_action_inplace(state, undo)
            if maximizing:
                best = max(best, value)
                alpha = max(alpha, best)
            else:
                best = min(best, value)
                beta = min(beta, best)
            if alpha >= beta:
                self.stats.cutoffs += 1
                break

        # Only values strictly inside the entry window are exact.
        if self.use_visited_table and window[0] < best < window[1]:
            visited[key] = best
        return best

    def _minimax(self, state: PositionState, depth: int, root_player: int) -> float:
        self.stats.nodes += 1
        if depth == 0 or winner(state) is not None:
            return self.evaluate(state, root_player)
        children = self.children(state)
        if not children:
            return self.evaluate(state, root_player)

        maximizing = state.current_player == root_player
        values = []
        for action in children:
            undo = apply_action_inplace(state, action)
            values.append(self._minimax(state, depth - 1, root_player))
            undo_action_inplace(state, undo)
        return max(values) if maximizing else min(values)


def minimax_value(
    state: PositionState,
    depth: int,
    store: Optional[TranspositionStore] = None,
    *,
    barrier_candidate_limit: Optional[int] = None,
) -> Tuple[Optional[Action], float]:
    """Exhaustive minimax over the same move generator, without pruning."""
    search = AlphaBetaSearch(
        store if store is not None else TranspositionStore(),
        barrier_candidate_limit=barrier_candidate_limit,
        use_visited_table=False,
    )
    return search.search(state, depth, prune=False)
