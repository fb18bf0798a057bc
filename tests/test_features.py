import numpy as np

from quoridor_ai.core import Barrier, initialize_game_state
from quoridor_ai.features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor, state_to_numpy


def test_board_tensor_marks_tokens() -> None:
    state = initialize_game_state()
    board = build_board_tensor(state)
    assert board.shape == (BOARD_CHANNELS, 9, 9)
    assert board.dtype == np.float32
    assert board[0, 0, 4] == 1.0
    assert board[1, 8, 4] == 1.0
    assert board[0].sum() == 1.0
    assert board[2:].sum() == 0.0


def test_board_tensor_marks_blocked_edges() -> None:
    state = initialize_game_state()
    state.apply_barrier(Barrier(1, 3, 1, False))
    state.apply_barrier(Barrier(2, 5, 6, True))
    board = build_board_tensor(state)
    # Horizontal barrier closes the north edges of (3, 0) and (4, 0).
    assert board[2, 0, 3] == 1.0
    assert board[2, 0, 4] == 1.0
    assert board[2].sum() == 2.0
    # Vertical barrier closes the east edges of (5, 6) and (5, 5).
    assert board[3, 6, 5] == 1.0
    assert board[3, 5, 5] == 1.0
    assert board[3].sum() == 2.0


def test_aux_vector_encodes_turn_and_budgets() -> None:
    state = initialize_game_state()
    np.testing.assert_allclose(build_aux_vector(state), [1.0, 0.0, 1.0, 1.0])
    state.apply_barrier(Barrier(2, 0, 1, True))
    state.advance_turn()
    aux = build_aux_vector(state)
    assert aux.shape == (AUX_VECTOR_SIZE,)
    np.testing.assert_allclose(aux, [0.0, 1.0, 1.0, 0.9])


def test_state_to_numpy_pairs_both_views() -> None:
    board, aux = state_to_numpy(initialize_game_state())
    assert board.shape == (BOARD_CHANNELS, 9, 9)
    assert aux.shape == (AUX_VECTOR_SIZE,)
