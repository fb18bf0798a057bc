import numpy as np

from quoridor_ai.core import (
    UNREACHABLE,
    Barrier,
    PositionState,
    Token,
    distance_map,
    distance_to_goal,
    goal_distance_map,
    initialize_game_state,
    is_goal_reachable,
    rank_squares_by_distance,
    shortest_path_edges,
)


def position(one, two, barriers=(), current_player=1) -> PositionState:
    return PositionState.from_components(Token(1, *one), Token(2, *two), barriers, current_player)


def test_empty_board_distance_is_eight() -> None:
    state = initialize_game_state()
    assert distance_to_goal(state.token(1), state) == 8
    assert distance_to_goal(state.token(2), state) == 8


def test_distance_at_goal_is_zero() -> None:
    state = position((4, 8), (0, 0))
    assert distance_to_goal(state.token(1), state) == 0
    assert distance_to_goal(state.token(2), state) == 0


def test_barrier_line_forces_detour() -> None:
    # Horizontal barriers cover columns 0-7 between rows 3 and 4.
    wall = [Barrier(1, x, 4, False) for x in (0, 2, 4, 6)]
    state = position((4, 0), (4, 8), wall)
    assert distance_to_goal(state.token(1), state) == 12
    assert distance_to_goal(state.token(2), state) == 12


def test_enclosed_token_is_unreachable() -> None:
    pocket = [Barrier(2, 0, 1, False), Barrier(2, 1, 1, True)]
    state = position((0, 0), (4, 8), pocket)
    assert distance_to_goal(state.token(1), state) == UNREACHABLE
    assert not is_goal_reachable(state.token(1), state)
    assert shortest_path_edges(state.token(1), state) is None
    assert is_goal_reachable(state.token(2), state)


def test_tokens_do_not_block_search() -> None:
    state = position((4, 4), (4, 5))
    assert distance_to_goal(state.token(1), state) == 4


def test_distance_map_from_corner() -> None:
    state = initialize_game_state()
    dist = distance_map((4, 0), state)
    assert dist.shape == (9, 9)
    assert dist[4, 0] == 0
    assert dist[4, 8] == 8
    assert dist[0, 0] == 4
    assert dist[8, 8] == 12


def test_goal_distance_map_matches_rows() -> None:
    state = initialize_game_state()
    goal_map = goal_distance_map(1, state)
    expected = np.tile(8 - np.arange(9), (9, 1))
    np.testing.assert_array_equal(goal_map, expected)
    assert goal_distance_map(2, state)[3, 5] == 5


def test_shortest_path_edges_length() -> None:
    state = initialize_game_state()
    path = shortest_path_edges(state.token(1), state)
    assert len(path) == 8
    assert ((4, 0), 0) in path
    assert shortest_path_edges(Token(1, 2, 8), state) == frozenset()


def test_rank_squares_covers_board_in_distance_order() -> None:
    wall = [Barrier(1, x, 4, False) for x in (0, 2, 4, 6)]
    state = position((4, 0), (4, 8), wall)
    ranked = rank_squares_by_distance(state.token(2), state)
    assert len(ranked) == 81
    assert len(set(ranked)) == 81
    assert ranked[0] == (4, 8)
    dist = distance_map((4, 8), state)
    values = [int(dist[x, y]) for x, y in ranked]
    assert values == sorted(values)
