"""Evaluation helpers for Quoridor AI."""

from .match import EvaluationResult, GameRecord, RandomAgent, evaluate_agents, play_game

__all__ = ["EvaluationResult", "GameRecord", "RandomAgent", "evaluate_agents", "play_game"]
