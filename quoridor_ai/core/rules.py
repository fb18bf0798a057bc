from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .pathfinding import UNREACHABLE, PathEdges, distance_to_goal, shortest_path_edges
from .state import (
    BOARD_SIZE,
    DIRECTIONS,
    EAST,
    MAX_BARRIERS,
    NORTH,
    PLAYERS,
    SOUTH,
    WEST,
    Action,
    Advance,
    Barrier,
    Coord,
    PlaceBarrier,
    PositionState,
    Token,
)

START_CELLS = {1: (4, 0), 2: (4, BOARD_SIZE - 1)}
ANCHOR_SPAN = BOARD_SIZE - 1
BARRIER_ANCHORS: Tuple[Coord, ...] = tuple(
    (x, y) for x in range(ANCHOR_SPAN) for y in range(1, BOARD_SIZE)
)
ADVANCE_ACTION_COUNT = BOARD_SIZE * BOARD_SIZE
ACTION_VECTOR_SIZE = ADVANCE_ACTION_COUNT + len(BARRIER_ANCHORS) * 2

_SIDESTEPS = {
    NORTH: (EAST, WEST),
    SOUTH: (EAST, WEST),
    EAST: (NORTH, SOUTH),
    WEST: (NORTH, SOUTH),
}


def initialize_game_state(human_players: Sequence[int] = (1,), first: int = 1) -> PositionState:
    tokens = {
        player: Token(player, *START_CELLS[player], human=player in human_players)
        for player in PLAYERS
    }
    return PositionState(
        tokens=tokens,
        barriers=set(),
        remaining={player: MAX_BARRIERS for player in PLAYERS},
        current_player=first,
    )


# ----------------------------------------------------------------------
# Geometry
# ----------------------------------------------------------------------
def in_bounds(cell: Coord) -> bool:
    return 0 <= cell[0] < BOARD_SIZE and 0 <= cell[1] < BOARD_SIZE


def step(cell: Coord, direction: int) -> Coord:
    dx, dy = DIRECTIONS[direction]
    return (cell[0] + dx, cell[1] + dy)


def is_blocked(state: PositionState, cell: Coord, direction: int) -> bool:
    """Whether a barrier closes the edge leaving ``cell`` in ``direction``."""
    return bool(state.edge_blocks[cell[0], cell[1], direction])


def is_valid_anchor(x: int, y: int) -> bool:
    return 0 <= x < ANCHOR_SPAN and 1 <= y < BOARD_SIZE


def barriers_conflict(first: Barrier, second: Barrier) -> bool:
    """Overlap rule, independent of owners.

    Parallel barriers conflict on the same anchor or when offset by one cell
    along their span; perpendicular barriers only on the same anchor.
    """
    if first.anchor == second.anchor:
        return True
    if first.vertical != second.vertical:
        return False
    if first.vertical:
        return first.x == second.x and abs(first.y - second.y) == 1
    return first.y == second.y and abs(first.x - second.x) == 1


def _conflicting_keys(barrier: Barrier) -> List[Tuple[int, int, bool]]:
    x, y = barrier.x, barrier.y
    keys = [(x, y, True), (x, y, False)]
    if barrier.vertical:
        keys.extend([(x, y - 1, True), (x, y + 1, True)])
    else:
        keys.extend([(x - 1, y, False), (x + 1, y, False)])
    return keys


def occupied_barrier_keys(barriers: Iterable[Barrier]) -> Set[Tuple[int, int, bool]]:
    """``(x, y, vertical)`` keys that conflict with at least one barrier."""
    keys: Set[Tuple[int, int, bool]] = set()
    for barrier in barriers:
        keys.update(_conflicting_keys(barrier))
    return keys


# ----------------------------------------------------------------------
# Move generation
# ----------------------------------------------------------------------
def legal_advances(state: PositionState, player: Optional[int] = None) -> Set[Coord]:
    if player is None:
        player = state.current_player
    origin = state.token(player).cell
    other = state.opponent_token(player).cell

    moves: Set[Coord] = set()
    for direction in range(len(DIRECTIONS)):
        if is_blocked(state, origin, direction):
            continue
        target = step(origin, direction)
        if not in_bounds(target):
            continue
        if target != other:
            moves.add(target)
            continue
        hop = step(other, direction)
        if in_bounds(hop) and not is_blocked(state, other, direction):
            moves.add(hop)
            continue
        for side in _SIDESTEPS[direction]:
            diagonal = step(other, side)
            if in_bounds(diagonal) and not is_blocked(state, other, side):
                moves.add(diagonal)
    return moves


def _keeps_goals_reachable(
    state: PositionState,
    barrier: Barrier,
    paths: Sequence[Optional[PathEdges]],
) -> bool:
    edges = barrier.blocked_edges()
    if all(path is not None and not any(edge in path for edge in edges) for path in paths):
        return True
    state.apply_barrier_provisional(barrier)
    reachable = all(distance_to_goal(state.token(player), state) < UNREACHABLE for player in PLAYERS)
    state.remove_barrier_provisional(barrier)
    return reachable


def legal_barriers(state: PositionState, player: Optional[int] = None) -> Set[Barrier]:
    if player is None:
        player = state.current_player
    if state.remaining_barriers(player) <= 0:
        return set()

    taken = occupied_barrier_keys(state.barriers)
    paths = [shortest_path_edges(state.token(p), state) for p in PLAYERS]
    legal: Set[Barrier] = set()
    for x, y in BARRIER_ANCHORS:
        for vertical in (True, False):
            if (x, y, vertical) in taken:
                continue
            barrier = Barrier(player, x, y, vertical)
            if _keeps_goals_reachable(state, barrier, paths):
                legal.add(barrier)
    return legal


def action_sort_key(action: Action) -> Tuple:
    if isinstance(action, Advance):
        return (0, action.x, action.y, False)
    return (1, action.x, action.y, action.vertical)


def legal_actions(state: PositionState, player: Optional[int] = None) -> List[Action]:
    """Advances then barrier placements, each in coordinate order."""
    if player is None:
        player = state.current_player
    advances = [Advance(x, y) for x, y in sorted(legal_advances(state, player))]
    barriers = [PlaceBarrier.from_barrier(b) for b in sorted(legal_barriers(state, player))]
    return advances + barriers


def is_legal_barrier(state: PositionState, barrier: Barrier) -> bool:
    if state.remaining_barriers(barrier.owner) <= 0:
        return False
    if not is_valid_anchor(barrier.x, barrier.y):
        return False
    if any(barriers_conflict(barrier, existing) for existing in state.barriers):
        return False
    return _keeps_goals_reachable(state, barrier, (None, None))


def is_legal_action(state: PositionState, action: Action) -> bool:
    if is_terminal(state):
        return False
    player = state.current_player
    if isinstance(action, Advance):
        return action.cell in legal_advances(state, player)
    if isinstance(action, PlaceBarrier):
        return is_legal_barrier(state, action.to_barrier(player))
    return False


def apply_action(state: PositionState, action: Action) -> bool:
    """Apply a move for the player to act.

    Returns ``False`` and leaves the state untouched when the action is not
    legal; otherwise applies it permanently and passes the turn.
    """
    if not is_legal_action(state, action):
        return False
    player = state.current_player
    if isinstance(action, Advance):
        state.apply_advance(player, action.cell)
    else:
        state.apply_barrier(action.to_barrier(player))
    state.advance_turn()
    return True


def winner(state: PositionState) -> Optional[int]:
    for player in PLAYERS:
        if state.token(player).at_goal():
            return player
    return None


def is_terminal(state: PositionState) -> bool:
    return winner(state) is not None


# ----------------------------------------------------------------------
# In-place search primitives
# ----------------------------------------------------------------------
@dataclass
class UndoRecord:
    player: int
    action: Action
    previous_cell: Optional[Coord] = None
    barrier: Optional[Barrier] = None


def apply_action_inplace(state: PositionState, action: Action) -> UndoRecord:
    """Apply without legality checks, returning what is needed to undo."""
    player = state.current_player
    if isinstance(action, Advance):
        previous = state.apply_advance_provisional(player, action.cell)
        record = UndoRecord(player=player, action=action, previous_cell=previous)
    else:
        barrier = action.to_barrier(player)
        state.apply_barrier(barrier)
        record = UndoRecord(player=player, action=action, barrier=barrier)
    state.advance_turn()
    return record


def undo_action_inplace(state: PositionState, undo: UndoRecord) -> None:
    """Revert a prior call to :func:`apply_action_inplace`."""
    state.current_player = undo.player
    if undo.barrier is not None:
        state.undo_barrier(undo.barrier)
    else:
        state.undo_advance_provisional(undo.player, undo.previous_cell)


# ----------------------------------------------------------------------
# Dense action indices
# ----------------------------------------------------------------------
def encode_action(action: Action) -> int:
    if isinstance(action, Advance):
        return action.x * BOARD_SIZE + action.y
    if not is_valid_anchor(action.x, action.y):
        raise ValueError(f"Barrier anchor {(action.x, action.y)} is off the board.")
    anchor_index = action.x * ANCHOR_SPAN + (action.y - 1)
    return ADVANCE_ACTION_COUNT + anchor_index * 2 + int(action.vertical)


def decode_action(index: int) -> Action:
    if not 0 <= index < ACTION_VECTOR_SIZE:
        raise ValueError("Action index out of range.")
    if index < ADVANCE_ACTION_COUNT:
        return Advance(index // BOARD_SIZE, index % BOARD_SIZE)
    index -= ADVANCE_ACTION_COUNT
    vertical = bool(index % 2)
    anchor_index = index // 2
    return PlaceBarrier(anchor_index // ANCHOR_SPAN, anchor_index % ANCHOR_SPAN + 1, vertical)
