from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from quoridor_ai.core import Action, PositionState, encode_action, legal_actions, winner
from quoridor_ai.env import QuoridorEnv
from quoridor_ai.search import Agent


@dataclass
class EvaluationResult:
    games_played: int
    player_one_wins: int
    player_two_wins: int
    draws: int
    average_length: float

    def winrate_player_one(self) -> float:
        return self.player_one_wins / max(1, self.games_played)

    def winrate_player_two(self) -> float:
        return self.player_two_wins / max(1, self.games_played)


@dataclass
class GameRecord:
    winner: Optional[int]
    actions: List[Action] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.actions)


class RandomAgent(Agent):
    """Uniformly random legal action; the evaluation baseline."""

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def get_action(self, state: PositionState) -> Action:
        actions = legal_actions(state)
        if not actions:
            raise RuntimeError(f"Player {state.current_player} has no legal action.")
        return actions[int(self.rng.integers(len(actions)))]


def play_game(
    agent_one: Agent,
    agent_two: Agent,
    *,
    max_ply: Optional[int] = 400,
    env_factory: Optional[Callable[..., QuoridorEnv]] = None,
) -> GameRecord:
    """Play one game; ``agent_one`` controls player 1, who moves first."""
    env_factory = env_factory or QuoridorEnv
    env = env_factory(max_ply=max_ply)
    env.reset()
    agents = {1: agent_one, 2: agent_two}
    record = GameRecord(winner=None)

    terminated = truncated = False
    while not (terminated or truncated):
        snapshot = env.state.deep_copy()
        action = agents[snapshot.current_player].get_action(snapshot)
        _, _, terminated, truncated, _ = env.step(encode_action(action))
        record.actions.append(action)

    record.winner = winner(env.state)
    return record


def evaluate_agents(
    agent_one: Agent,
    agent_two: Agent,
    *,
    episodes: int,
    max_ply: Optional[int] = 400,
    env_factory: Optional[Callable[..., QuoridorEnv]] = None,
) -> EvaluationResult:
    player_one_wins = 0
    player_two_wins = 0
    draws = 0
    total_ply = 0

    for _ in range(episodes):
        record = play_game(agent_one, agent_two, max_ply=max_ply, env_factory=env_factory)
        total_ply += record.length
        if record.winner == 1:
            player_one_wins += 1
        elif record.winner == 2:
            player_two_wins += 1
        else:
            draws += 1

    return EvaluationResult(
        games_played=episodes,
        player_one_wins=player_one_wins,
        player_two_wins=player_two_wins,
        draws=draws,
        average_length=total_ply / max(1, episodes),
    )
