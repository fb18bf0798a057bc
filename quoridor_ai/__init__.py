"""Quoridor AI package."""

from . import core, env, evaluation, features, search, validation
from .env import QuoridorEnv
from .evaluation import EvaluationResult, RandomAgent, evaluate_agents, play_game
from .features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor, state_to_numpy
from .search import Difficulty, SearchConfig, SearchEngine, TranspositionStore

__all__ = [
    "core",
    "env",
    "evaluation",
    "features",
    "search",
    "validation",
    "QuoridorEnv",
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "build_aux_vector",
    "build_board_tensor",
    "state_to_numpy",
    "Difficulty",
    "SearchConfig",
    "SearchEngine",
    "TranspositionStore",
    "EvaluationResult",
    "RandomAgent",
    "evaluate_agents",
    "play_game",
]
