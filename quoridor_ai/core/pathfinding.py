"""Breadth-first distance queries over the barrier-cut grid.

Tokens never block these searches; only barriers remove edges. Every query
depends only on the start cell(s), the barrier set and the goal row.
"""

from __future__ import annotations

import heapq
from collections import deque
from typing import FrozenSet, Iterable, List, Optional, Tuple

import numpy as np

from .state import BOARD_SIZE, DIRECTIONS, Coord, PositionState, Token, goal_row_for

UNREACHABLE = BOARD_SIZE * BOARD_SIZE  # larger than any real path length

PathEdges = FrozenSet[Tuple[Coord, int]]


def _bfs(state: PositionState, sources: Iterable[Coord]) -> List[List[int]]:
    blocked = state.edge_blocks.tolist()
    dist = [[UNREACHABLE] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    queue = deque()
    for x, y in sources:
        dist[x][y] = 0
        queue.append((x, y))
    while queue:
        x, y = queue.popleft()
        next_dist = dist[x][y] + 1
        edges = blocked[x][y]
        for direction, (dx, dy) in enumerate(DIRECTIONS):
            if edges[direction]:
                continue
            nx, ny = x + dx, y + dy
            if 0 <= nx < BOARD_SIZE and 0 <= ny < BOARD_SIZE and dist[nx][ny] > next_dist:
                dist[nx][ny] = next_dist
                queue.append((nx, ny))
    return dist


def distance_map(cell: Coord, state: PositionState) -> np.ndarray:
    """Distances from ``cell`` to every square, indexed ``[x, y]``."""
    return np.array(_bfs(state, [cell]), dtype=np.int16)


def goal_distance_map(player: int, state: PositionState) -> np.ndarray:
    """Distance from every square to ``player``'s goal row, indexed ``[x, y]``."""
    goal = goal_row_for(player)
    return np.array(_bfs(state, [(x, goal) for x in range(BOARD_SIZE)]), dtype=np.int16)


def distance_to_goal(token: Token, state: PositionState) -> int:
    """Shortest number of steps from the token to its goal row, or ``UNREACHABLE``."""
    goal = token.goal_row
    if token.y == goal:
        return 0
    blocked = state.edge_blocks.tolist()
    seen = [[False] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    seen[token.x][token.y] = True
    frontier = [token.cell]
    steps = 0
    while frontier:
        steps += 1
        next_frontier = []
        for x, y in frontier:
            edges = blocked[x][y]
            for direction, (dx, dy) in enumerate(DIRECTIONS):
                if edges[direction]:
                    continue
                nx, ny = x + dx, y + dy
                if not (0 <= nx < BOARD_SIZE and 0 <= ny < BOARD_SIZE) or seen[nx][ny]:
                    continue
                if ny == goal:
                    return steps
                seen[nx][ny] = True
                next_frontier.append((nx, ny))
        frontier = next_frontier
    return UNREACHABLE


def is_goal_reachable(token: Token, state: PositionState) -> bool:
    return distance_to_goal(token, state) < UNREACHABLE


def shortest_path_edges(token: Token, state: PositionState) -> Optional[PathEdges]:
    """Return the ``(cell, direction)`` steps of one shortest path to goal.

    ``None`` means the goal is unreachable. A barrier that closes none of
    these edges leaves the token's distance unchanged.
    """
    goal = token.goal_row
    if token.y == goal:
        return frozenset()
    blocked = state.edge_blocks.tolist()
    parent = {token.cell: None}
    queue = deque([token.cell])
    while queue:
        x, y = queue.popleft()
        edges = blocked[x][y]
        for direction, (dx, dy) in enumerate(DIRECTIONS):
            if edges[direction]:
                continue
            nxt = (x + dx, y + dy)
            if not (0 <= nxt[0] < BOARD_SIZE and 0 <= nxt[1] < BOARD_SIZE) or nxt in parent:
                continue
            parent[nxt] = ((x, y), direction)
            if nxt[1] == goal:
                path = []
                step = parent[nxt]
                while step is not None:
                    path.append(step)
                    step = parent[step[0]]
                return frozenset(path)
            queue.append(nxt)
    return None


def rank_squares_by_distance(token: Token, state: PositionState) -> List[Coord]:
    """All 81 squares ordered by ascending distance from the token."""
    dist = _bfs(state, [token.cell])
    heap: List[Tuple[int, int, int]] = []
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            heapq.heappush(heap, (dist[x][y], x, y))
    ranked = []
    while heap:
        _, x, y = heapq.heappop(heap)
        ranked.append((x, y))
    return ranked
