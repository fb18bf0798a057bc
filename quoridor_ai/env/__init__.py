"""Gymnasium environment for Quoridor."""

from .gym_env import QuoridorEnv, render_board

__all__ = ["QuoridorEnv", "render_board"]
