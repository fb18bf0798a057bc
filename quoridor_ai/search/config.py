from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import yaml


class Difficulty(Enum):
    GREEDY = "greedy"
    DEEP = "deep"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        aliases = {"easy": cls.GREEDY, "hard": cls.DEEP}
        name = str(value).strip().lower()
        if name in aliases:
            return aliases[name]
        try:
            return cls(name)
        except ValueError as exc:
            raise ValueError(f"Unknown difficulty {value!r}.") from exc


@dataclass
class SearchConfig:
    """Engine settings.

    ``barrier_candidate_limit`` is forward pruning: each node keeps every
    advance but only the first ``barrier_candidate_limit`` barrier placements
    (default 10), so a refutation that needs a lower-ranked barrier is missed.
    It trades playing strength for latency; ``None`` searches full width.
    """

    difficulty: Difficulty = Difficulty.DEEP
    shallow_depth: int = 3
    medium_depth: int = 4
    deep_depth: int = 5
    # Barrier placements considered per node, nearest to the opponent first.
    # None searches every legal placement.
    barrier_candidate_limit: Optional[int] = 10
    use_visited_table: bool = True

    def __post_init__(self) -> None:
        self.difficulty = Difficulty.parse(self.difficulty)
        if min(self.shallow_depth, self.medium_depth, self.deep_depth) < 1:
            raise ValueError("Search depths must be at least 1.")
        if self.barrier_candidate_limit is not None and self.barrier_candidate_limit < 0:
            raise ValueError("barrier_candidate_limit must be non-negative.")


def wall_difference_threshold(budget: int) -> int:
    """Minimum opponent-distance gain before the greedy player spends a barrier."""
    if budget >= 10:
        return 0
    if budget >= 7:
        return 1
    if budget >= 3:
        return 2
    return 3


def select_search_depth(
    budgets: Sequence[int],
    distances: Sequence[int],
    *,
    shallow: int = 3,
    medium: int = 4,
    deep: int = 5,
) -> int:
    """Pick a search depth from barriers left and distances to goal.

    Few barriers or a token close to its goal means an endgame, where deeper
    search is both affordable and decisive.
    """
    total_remaining = sum(budgets)
    closest = min(distances)
    if total_remaining <= 2 or closest <= 2:
        return deep
    if total_remaining <= 6 or closest <= 4:
        return medium
    return shallow


def load_yaml_config(path: Union[str, Path, None]) -> Dict:
    if path is None:
        return {}
    cfg_path = Path(path)
    if not cfg_path.exists():
        return {}
    return yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}


def load_search_config(path: Union[str, Path, None], **overrides) -> SearchConfig:
    """Build a :class:`SearchConfig` from the ``search`` section of a YAML file.

    Keyword overrides that are not ``None`` win over file values.
    """
    cfg = dict(load_yaml_config(path).get("search", {}) or {})
    known = {f.name for f in fields(SearchConfig)}
    unknown = set(cfg) - known
    if unknown:
        raise ValueError(f"Unknown search config keys: {sorted(unknown)}")
    for key, value in overrides.items():
        if value is not None:
            cfg[key] = value
    return SearchConfig(**cfg)
