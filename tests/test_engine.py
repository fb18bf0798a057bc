import pytest

from quoridor_ai.core import (
    Advance,
    Barrier,
    PositionState,
    Token,
    initialize_game_state,
    is_legal_action,
)
from quoridor_ai.search import (
    Difficulty,
    SearchConfig,
    SearchDegenerateWarning,
    SearchEngine,
    TranspositionStore,
    greedy_action,
)


def position(one, two, barriers=(), current_player=1) -> PositionState:
    return PositionState.from_components(Token(1, *one), Token(2, *two), barriers, current_player)


def quick_config(**overrides) -> SearchConfig:
    params = dict(shallow_depth=1, medium_depth=1, deep_depth=2, barrier_candidate_limit=2)
    params.update(overrides)
    return SearchConfig(**params)


def test_greedy_difficulty_delegates_to_greedy() -> None:
    state = initialize_game_state()
    engine = SearchEngine(quick_config(difficulty=Difficulty.GREEDY))
    assert engine.get_action(state) == greedy_action(state)


@pytest.mark.parametrize("difficulty", ["greedy", "deep"])
def test_immediate_win_for_both_difficulties(difficulty) -> None:
    state = position((2, 1), (4, 1), current_player=2)
    engine = SearchEngine(quick_config(difficulty=difficulty))
    assert engine.get_action(state) == Advance(4, 0)


def test_deep_search_records_optimal_action() -> None:
    store = TranspositionStore()
    engine = SearchEngine(quick_config(), store=store)
    state = initialize_game_state()
    before = state.fingerprint()

    action = engine.get_action(state)

    assert is_legal_action(state, action)
    assert state.fingerprint() == before
    assert store.optimal_actions[before] == action
    assert engine.last_depth == 1
    assert engine.stats.nodes > 0


def test_cached_optimal_action_skips_search(monkeypatch) -> None:
    store = TranspositionStore()
    engine = SearchEngine(quick_config(), store=store)
    state = initialize_game_state()
    first = engine.get_action(state)

    def fail(*args, **kwargs):
        raise AssertionError("search should not run on a cache hit")

    monkeypatch.setattr(engine.alphabeta, "search", fail)
    assert engine.get_action(state) == first

    reloaded = SearchEngine(quick_config(), store=TranspositionStore(optimal_actions=store.optimal_actions))
    monkeypatch.setattr(reloaded.alphabeta, "search", fail)
    assert reloaded.get_action(state) == first


def test_stale_cached_action_is_ignored() -> None:
    store = TranspositionStore()
    state = initialize_game_state()
    store.record_optimal_action(state.fingerprint(), Advance(4, 5))
    action = SearchEngine(quick_config(), store=store).get_action(state)
    assert action != Advance(4, 5)
    assert is_legal_action(state, action)


def test_zero_budget_degrades_to_greedy_advance(monkeypatch) -> None:
    spent = [Barrier(1, x, y, True) for x in (0, 2) for y in (1, 3, 5, 7)] + [
        Barrier(1, 4, 1, True),
        Barrier(1, 4, 3, True),
    ]
    state = position((4, 0), (4, 8), spent)
    engine = SearchEngine(quick_config())

    def fail(*args, **kwargs):
        raise AssertionError("search should not run without barriers left")

    monkeypatch.setattr(engine.alphabeta, "search", fail)
    assert engine.get_action(state) == Advance(4, 1)


def test_degenerate_search_warns_and_falls_back(monkeypatch) -> None:
    store = TranspositionStore()
    engine = SearchEngine(quick_config(), store=store)
    state = initialize_game_state()
    monkeypatch.setattr(engine.alphabeta, "search", lambda *args, **kwargs: (None, float("-inf")))

    with pytest.warns(SearchDegenerateWarning):
        action = engine.get_action(state)

    assert action == greedy_action(state)
    assert store.optimal_actions == {}


def test_search_depth_follows_game_phase() -> None:
    engine = SearchEngine(SearchConfig())
    assert engine.search_depth(initialize_game_state()) == 3
    assert engine.search_depth(position((4, 6), (4, 8))) == 5
    assert engine.search_depth(position((4, 4), (4, 8))) == 4
