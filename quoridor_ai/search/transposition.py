from __future__ import annotations

import pickle
import warnings
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

from quoridor_ai.core import Action, Fingerprint
from quoridor_ai.validation import CACHE_FORMAT_VERSION, TranspositionDataError, validate_tables

PathLike = Union[str, Path]
ChildrenTable = Dict[Fingerprint, Tuple[Action, ...]]
EvaluationTable = Dict[Fingerprint, float]
OptimalTable = Dict[Fingerprint, Action]


class CachePersistenceWarning(RuntimeWarning):
    """The transposition cache could not be read or written."""


class TranspositionStore:
    """Search results keyed by position fingerprint, reusable across runs."""

    def __init__(
        self,
        children: Optional[Mapping[Fingerprint, Tuple[Action, ...]]] = None,
        evaluations: Optional[Mapping[Fingerprint, float]] = None,
        optimal_actions: Optional[Mapping[Fingerprint, Action]] = None,
    ) -> None:
        self.children: ChildrenTable = dict(children or {})
        self.evaluations: EvaluationTable = dict(evaluations or {})
        self.optimal_actions: OptimalTable = dict(optimal_actions or {})
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self.children) + len(self.evaluations) + len(self.optimal_actions)

    def clear(self) -> None:
        self.children.clear()
        self.evaluations.clear()
        self.optimal_actions.clear()

    # ------------------------------------------------------------------
    def lookup_children(self, key: Fingerprint) -> Optional[Tuple[Action, ...]]:
        return self._lookup(self.children, key)

    def record_children(self, key: Fingerprint, actions: Tuple[Action, ...]) -> None:
        self.children[key] = tuple(actions)

    def lookup_evaluation(self, key: Fingerprint) -> Optional[float]:
        return self._lookup(self.evaluations, key)

    def record_evaluation(self, key: Fingerprint, value: float) -> None:
        self.evaluations[key] = float(value)

    def lookup_optimal_action(self, key: Fingerprint) -> Optional[Action]:
        return self._lookup(self.optimal_actions, key)

    def record_optimal_action(self, key: Fingerprint, action: Action) -> None:
        self.optimal_actions[key] = action

    def _lookup(self, table: Dict, key: Fingerprint):
        value = table.get(key)
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    # ------------------------------------------------------------------
    def to_state(self) -> dict:
        return _payload(self.children, self.evaluations, self.optimal_actions)

    def load_state(self, state: dict) -> None:
        children, evaluations, optimal_actions = validate_tables(state)
        self.children = dict(children)
        self.evaluations = dict(evaluations)
        self.optimal_actions = dict(optimal_actions)

    def save(self, path: PathLike) -> bool:
        return save_tables(path, self.children, self.evaluations, self.optimal_actions)

    @classmethod
    def load(cls, path: PathLike) -> "TranspositionStore":
        children, evaluations, optimal_actions = load_tables(path)
        return cls(children, evaluations, optimal_actions)


def _payload(children: Mapping, evaluations: Mapping, optimal_actions: Mapping) -> dict:
    return {
        "version": CACHE_FORMAT_VERSION,
        "children": dict(children),
        "evaluations": dict(evaluations),
        "optimal_actions": dict(optimal_actions),
    }


def load_tables(path: PathLike) -> Tuple[ChildrenTable, EvaluationTable, OptimalTable]:
    """Read the three tables, falling back to empty ones on any problem."""
    try:
        with open(path, "rb") as fh:
            payload = pickle.load(fh)
        children, evaluations, optimal_actions = validate_tables(payload)
    except FileNotFoundError:
        warnings.warn(
            f"Transposition cache {path} not found; starting with an empty cache.",
            CachePersistenceWarning,
            stacklevel=2,
        )
        return {}, {}, {}
    except TranspositionDataError as exc:
        warnings.warn(
            f"Transposition cache {path} is invalid ({exc}); starting with an empty cache.",
            CachePersistenceWarning,
            stacklevel=2,
        )
        return {}, {}, {}
    except Exception as exc:
        # Unpickling damaged bytes can raise nearly anything (OverflowError, MemoryError, ...).
        warnings.warn(
            f"Transposition cache {path} could not be read ({exc!r}); starting with an empty cache.",
            CachePersistenceWarning,
            stacklevel=2,
        )
        return {}, {}, {}
    return dict(children), dict(evaluations), dict(optimal_actions)


def save_tables(
    path: PathLike,
    children: Mapping[Fingerprint, Tuple[Action, ...]],
    evaluations: Mapping[Fingerprint, float],
    optimal_actions: Mapping[Fingerprint, Action],
) -> bool:
    """Write the three tables; returns ``False`` when the write was discarded."""
    payload = _payload(children, evaluations, optimal_actions)
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as fh:
            pickle.dump(payload, fh, protocol=pickle.HIGHEST_PROTOCOL)
    except (OSError, pickle.PicklingError) as exc:
        warnings.warn(
            f"Transposition cache could not be written to {path} ({exc!r}); discarding this run's updates.",
            CachePersistenceWarning,
            stacklevel=2,
        )
        return False
    return True
