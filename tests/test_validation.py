import math

import pytest

from quoridor_ai.core import Advance, PlaceBarrier, initialize_game_state
from quoridor_ai.validation import CACHE_FORMAT_VERSION, TranspositionDataError, validate_tables


def payload(**tables):
    data = {"version": CACHE_FORMAT_VERSION, "children": {}, "evaluations": {}, "optimal_actions": {}}
    data.update(tables)
    return data


def test_valid_payload_passes() -> None:
    key = initialize_game_state().fingerprint()
    children, evaluations, optimal = validate_tables(
        payload(
            children={key: (Advance(4, 1), PlaceBarrier(0, 1, True))},
            evaluations={key: 1.5},
            optimal_actions={key: Advance(4, 1)},
        )
    )
    assert evaluations[key] == 1.5
    assert optimal[key] == Advance(4, 1)
    assert len(children[key]) == 2


@pytest.mark.parametrize(
    "bad",
    [
        [],
        {"children": {}, "evaluations": {}, "optimal_actions": {}},
        payload(version=CACHE_FORMAT_VERSION + 1),
        payload(evaluations=None),
        payload(children={"key": ()}),
    ],
)
def test_structural_problems_rejected(bad) -> None:
    with pytest.raises(TranspositionDataError):
        validate_tables(bad)


@pytest.mark.parametrize("value", [math.nan, math.inf, True, "1.0"])
def test_non_finite_or_non_numeric_evaluations_rejected(value) -> None:
    key = initialize_game_state().fingerprint()
    with pytest.raises(TranspositionDataError):
        validate_tables(payload(evaluations={key: value}))


def test_non_action_entries_rejected() -> None:
    key = initialize_game_state().fingerprint()
    with pytest.raises(TranspositionDataError):
        validate_tables(payload(optimal_actions={key: (4, 1)}))
    with pytest.raises(TranspositionDataError):
        validate_tables(payload(children={key: [Advance(4, 1)]}))


def test_error_is_a_value_error() -> None:
    assert issubclass(TranspositionDataError, ValueError)
