from __future__ import annotations

from typing import Dict, Iterable, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from quoridor_ai.core import (
    ACTION_VECTOR_SIZE,
    BOARD_SIZE,
    Coord,
    PositionState,
    apply_action,
    decode_action,
    encode_action,
    initialize_game_state,
    legal_actions,
    winner,
)
from quoridor_ai.features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
)

COLUMN_LABELS = "abcdefghi"
TOKEN_SYMBOLS = {1: "O", 2: "X"}


def render_board(state: PositionState, marks: Iterable[Coord] = ()) -> str:
    """Draw the board with row 9 at the top; ``marks`` are shown as ``~``."""
    width = BOARD_SIZE * 4 - 3
    display = [[" "] * width for _ in range(BOARD_SIZE * 2 - 1)]
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            display[y * 2][x * 4] = "."
    for player, symbol in TOKEN_SYMBOLS.items():
        x, y = state.token(player).cell
        display[y * 2][x * 4] = symbol
    for barrier in state.barriers:
        if barrier.vertical:
            for i in range(3):
                display[(barrier.y - 1) * 2 + i][barrier.x * 4 + 2] = "|"
        else:
            for i in range(5):
                display[(barrier.y - 1) * 2 + 1][barrier.x * 4 + i] = "-"
    for x, y in marks:
        display[y * 2][x * 4] = "~"

    columns = "   " + "   ".join(COLUMN_LABELS[:BOARD_SIZE])
    border = " " + "-" * (width + 4)
    lines = [columns, border]
    for i in range(len(display) - 1, -1, -1):
        label = str(i // 2 + 1) if i % 2 == 0 else " "
        lines.append(f"{label}| {''.join(display[i])} |{label.strip()}")
    lines.extend([border, columns])
    return "\n".join(lines)


class QuoridorEnv(gym.Env):
    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        max_ply: Optional[int] = 400,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._max_ply = max_ply
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode

        board_shape = (BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=board_shape, dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(ACTION_VECTOR_SIZE)

        self._state = initialize_game_state(human_players=())
        self._ply = 0

    @property
    def state(self) -> PositionState:
        return self._state

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if options and "max_ply" in options:
            self._max_ply = options["max_ply"]
        first = options.get("first", 1) if options else 1
        self._state = initialize_game_state(human_players=(), first=first)
        self._ply = 0
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        action = decode_action(int(action_index))
        if not apply_action(self._state, action):
            raise ValueError(f"Action {action} is not legal in the current position.")
        self._ply += 1

        won = winner(self._state)
        terminated = won is not None
        truncated = not terminated and self._max_ply is not None and self._ply >= self._max_ply
        reward = self._compute_reward(won)
        return self._build_observation(), reward, terminated, truncated, self._build_info()

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        if winner(self._state) is not None:
            return mask
        for action in legal_actions(self._state):
            mask[encode_action(action)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return render_board(self._state)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> Dict[str, np.ndarray]:
        board = build_board_tensor(self._state)
        aux = build_aux_vector(self._state)
        return {"board": board, "aux": aux}

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "current_player": self._state.current_player,
            "ply": self._ply,
        }

    def _compute_reward(self, won: Optional[int]) -> float:
        if won == 1:
            return 1.0
        if won == 2:
            return -1.0
        return 0.0
