from __future__ import annotations

from typing import Tuple

import numpy as np

from quoridor_ai.core import BOARD_SIZE, MAX_BARRIERS, PositionState
from quoridor_ai.core.state import EAST, NORTH

BOARD_CHANNELS = 4  # token 1, token 2, blocked north edge, blocked east edge
AUX_VECTOR_SIZE = 4  # current player one-hot (2) + remaining barriers (2)


def build_board_tensor(state: PositionState) -> np.ndarray:
    """Return board planes with shape (4, 9, 9), indexed ``[channel, y, x]``."""
    tensor = np.zeros((BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE), dtype=np.float32)
    for channel, player in enumerate((1, 2)):
        x, y = state.token(player).cell
        tensor[channel, y, x] = 1.0
    blocks = state.edge_blocks > 0
    tensor[2] = blocks[:, :, NORTH].T
    tensor[3] = blocks[:, :, EAST].T
    return tensor


def build_aux_vector(state: PositionState) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[state.current_player - 1] = 1.0
    aux[2] = state.remaining_barriers(1) / MAX_BARRIERS
    aux[3] = state.remaining_barriers(2) / MAX_BARRIERS
    return aux


def state_to_numpy(state: PositionState) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(state), build_aux_vector(state)
