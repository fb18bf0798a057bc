"""Move selection for the automated opponent."""

from .config import Difficulty, SearchConfig, load_search_config, select_search_depth, wall_difference_threshold
from .engine import Agent, SearchDegenerateWarning, SearchEngine
from .greedy import best_advance, best_barrier, greedy_action, winning_advance
from .minimax import AlphaBetaSearch, SearchStats, minimax_value, ordered_children
from .transposition import CachePersistenceWarning, TranspositionStore, load_tables, save_tables

__all__ = [
    "Agent",
    "AlphaBetaSearch",
    "CachePersistenceWarning",
    "Difficulty",
    "SearchConfig",
    "SearchDegenerateWarning",
    "SearchEngine",
    "SearchStats",
    "TranspositionStore",
    "best_advance",
    "best_barrier",
    "greedy_action",
    "load_search_config",
    "load_tables",
    "minimax_value",
    "ordered_children",
    "save_tables",
    "select_search_depth",
    "wall_difference_threshold",
    "winning_advance",
]
