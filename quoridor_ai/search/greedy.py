"""One-ply greedy strategy: race, or block when blocking pays enough."""

from __future__ import annotations

from typing import Optional, Tuple

from quoridor_ai.core import (
    Action,
    Advance,
    Barrier,
    PlaceBarrier,
    PositionState,
    distance_to_goal,
    goal_distance_map,
    legal_advances,
    legal_barriers,
    shortest_path_edges,
)

from .config import wall_difference_threshold


def winning_advance(state: PositionState, player: int) -> Optional[Advance]:
    """Return an advance that lands on the goal row, if one is legal."""
    goal = state.token(player).goal_row
    for x, y in sorted(legal_advances(state, player)):
        if y == goal:
            return Advance(x, y)
    return None


def best_advance(state: PositionState, player: int) -> Tuple[Optional[Advance], int]:
    """The advance with the largest reduction in own distance to goal."""
    current = distance_to_goal(state.token(player), state)
    goal_map = goal_distance_map(player, state)
    best: Optional[Advance] = None
    best_gain = 0
    for x, y in sorted(legal_advances(state, player)):
        gain = current - int(goal_map[x, y])
        if best is None or gain > best_gain:
            best, best_gain = Advance(x, y), gain
    return best, best_gain


def best_barrier(state: PositionState, player: int) -> Tuple[Optional[Barrier], int]:
    """The legal barrier that increases the opponent's distance the most."""
    enemy = state.opponent_token(player)
    current = distance_to_goal(enemy, state)
    enemy_path = shortest_path_edges(enemy, state)
    best: Optional[Barrier] = None
    best_gain = 0
    for barrier in sorted(legal_barriers(state, player)):
        if enemy_path is not None and not any(edge in enemy_path for edge in barrier.blocked_edges()):
            gain = 0
        else:
            state.apply_barrier_provisional(barrier)
            gain = distance_to_goal(enemy, state) - current
            state.remove_barrier_provisional(barrier)
        if best is None or gain > best_gain:
            best, best_gain = barrier, gain
    return best, best_gain


def greedy_action(
    state: PositionState,
    player: Optional[int] = None,
    *,
    allow_barriers: bool = True,
) -> Action:
    if player is None:
        player = state.current_player

    winning = winning_advance(state, player)
    if winning is not None:
        return winning

    advance, reduction = best_advance(state, player)
    budget = state.remaining_barriers(player)
    if not allow_barriers or budget <= 0:
        if advance is None:
            raise RuntimeError(f"Player {player} has no legal action.")
        return advance

    barrier, increase = best_barrier(state, player)
    if barrier is not None:
        if advance is None or (increase >= reduction and increase >= wall_difference_threshold(budget)):
            return PlaceBarrier.from_barrier(barrier)
    if advance is None:
        raise RuntimeError(f"Player {player} has no legal action.")
    return advance
