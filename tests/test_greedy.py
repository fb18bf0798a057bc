from quoridor_ai.core import (
    Advance,
    Barrier,
    PlaceBarrier,
    PositionState,
    Token,
    apply_action,
    distance_to_goal,
    initialize_game_state,
)
from quoridor_ai.search import best_advance, best_barrier, greedy_action, winning_advance


def position(one, two, barriers=(), current_player=1) -> PositionState:
    return PositionState.from_components(Token(1, *one), Token(2, *two), barriers, current_player)


def test_immediate_win_takes_precedence() -> None:
    state = position((4, 7), (0, 1))
    assert winning_advance(state, 1) == Advance(4, 8)
    assert greedy_action(state) == Advance(4, 8)

    state.current_player = 2
    assert greedy_action(state) == Advance(0, 0)


def test_best_advance_reduces_distance() -> None:
    state = initialize_game_state()
    assert best_advance(state, 1) == (Advance(4, 1), 1)


def test_best_barrier_lengthens_opponent_path() -> None:
    state = initialize_game_state()
    barrier, gain = best_barrier(state, 1)
    assert gain == 1
    assert barrier.owner == 1
    state.apply_barrier(barrier)
    assert distance_to_goal(state.token(2), state) == 9


def test_full_budget_blocks_when_gain_matches() -> None:
    state = initialize_game_state()
    action = greedy_action(state)
    assert isinstance(action, PlaceBarrier)
    assert apply_action(state, action)
    assert distance_to_goal(state.token(2), state) == 9


def test_lower_budget_raises_blocking_threshold() -> None:
    spent = [Barrier(1, 0, y, True) for y in (1, 3, 5, 7)]
    state = position((4, 0), (4, 8), spent)
    assert state.remaining_barriers(1) == 6
    assert greedy_action(state) == Advance(4, 1)


def test_barriers_disabled_or_exhausted() -> None:
    state = initialize_game_state()
    assert greedy_action(state, allow_barriers=False) == Advance(4, 1)

    spent = [Barrier(2, x, y, True) for x in (0, 2) for y in (1, 3, 5, 7)] + [
        Barrier(2, 6, 1, True),
        Barrier(2, 6, 3, True),
    ]
    state = position((4, 0), (4, 8), spent, current_player=2)
    assert state.remaining_barriers(2) == 0
    assert greedy_action(state) == Advance(4, 7)
