"""Core game logic for Quoridor AI."""

from .state import (
    BOARD_SIZE,
    MAX_BARRIERS,
    PLAYERS,
    Action,
    Advance,
    Barrier,
    Coord,
    Fingerprint,
    PlaceBarrier,
    PositionState,
    Token,
    opponent_of,
)
from .pathfinding import (
    UNREACHABLE,
    distance_map,
    distance_to_goal,
    goal_distance_map,
    is_goal_reachable,
    rank_squares_by_distance,
    shortest_path_edges,
)
from .rules import (
    ACTION_VECTOR_SIZE,
    START_CELLS,
    UndoRecord,
    action_sort_key,
    apply_action,
    apply_action_inplace,
    barriers_conflict,
    decode_action,
    encode_action,
    initialize_game_state,
    is_legal_action,
    is_terminal,
    legal_actions,
    legal_advances,
    legal_barriers,
    undo_action_inplace,
    winner,
)

__all__ = [
    "ACTION_VECTOR_SIZE",
    "BOARD_SIZE",
    "MAX_BARRIERS",
    "PLAYERS",
    "START_CELLS",
    "UNREACHABLE",
    "Action",
    "Advance",
    "Barrier",
    "Coord",
    "Fingerprint",
    "PlaceBarrier",
    "PositionState",
    "Token",
    "UndoRecord",
    "action_sort_key",
    "apply_action",
    "apply_action_inplace",
    "barriers_conflict",
    "decode_action",
    "distance_map",
    "distance_to_goal",
    "encode_action",
    "goal_distance_map",
    "initialize_game_state",
    "is_goal_reachable",
    "is_legal_action",
    "is_terminal",
    "legal_actions",
    "legal_advances",
    "legal_barriers",
    "opponent_of",
    "rank_squares_by_distance",
    "shortest_path_edges",
    "undo_action_inplace",
    "winner",
]
