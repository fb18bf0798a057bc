from __future__ import annotations

from typing import Dict, Tuple

import numpy as np

from quoridor_ai.core import Advance, Fingerprint, PlaceBarrier

CACHE_FORMAT_VERSION = 1
TABLE_NAMES = ("children", "evaluations", "optimal_actions")

Tables = Tuple[Dict, Dict, Dict]


class TranspositionDataError(ValueError):
    pass


def _is_action(value: object) -> bool:
    return isinstance(value, (Advance, PlaceBarrier))


def validate_tables(payload: object) -> Tables:
    """Check a loaded cache payload and return its three tables."""
    if not isinstance(payload, dict):
        raise TranspositionDataError("cache payload must be a dict")
    version = payload.get("version")
    if version != CACHE_FORMAT_VERSION:
        raise TranspositionDataError(f"unsupported cache format version {version!r}")
    for name in TABLE_NAMES:
        if not isinstance(payload.get(name), dict):
            raise TranspositionDataError(f"{name} table missing or not a dict")

    children, evaluations, optimal_actions = (payload[name] for name in TABLE_NAMES)
    for key, actions in children.items():
        if not isinstance(key, Fingerprint):
            raise TranspositionDataError("children keys must be fingerprints")
        if not isinstance(actions, tuple) or not all(_is_action(a) for a in actions):
            raise TranspositionDataError("children values must be tuples of actions")
    for key, value in evaluations.items():
        if not isinstance(key, Fingerprint):
            raise TranspositionDataError("evaluation keys must be fingerprints")
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not np.isfinite(value):
            raise TranspositionDataError("evaluations must be finite numbers")
    for key, action in optimal_actions.items():
        if not isinstance(key, Fingerprint):
            raise TranspositionDataError("optimal action keys must be fingerprints")
        if not _is_action(action):
            raise TranspositionDataError("optimal actions must be actions")
    return children, evaluations, optimal_actions
