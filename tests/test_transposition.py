import pickle

import pytest

from quoridor_ai.core import Advance, PlaceBarrier, initialize_game_state
from quoridor_ai.search import CachePersistenceWarning, TranspositionStore, load_tables, save_tables


def populated_store() -> TranspositionStore:
    state = initialize_game_state()
    key = state.fingerprint()
    store = TranspositionStore()
    store.record_children(key, (Advance(4, 1), PlaceBarrier(3, 8, False)))
    store.record_evaluation(key, 0.0)
    store.record_optimal_action(key, Advance(4, 1))
    state.advance_turn()
    store.record_evaluation(state.fingerprint(), -2.5)
    return store


def test_save_then_load_round_trip(tmp_path) -> None:
    store = populated_store()
    path = tmp_path / "cache" / "tables.pkl"
    assert store.save(path)
    loaded = TranspositionStore.load(path)
    assert loaded.children == store.children
    assert loaded.evaluations == store.evaluations
    assert loaded.optimal_actions == store.optimal_actions
    assert len(loaded) == 4


def test_missing_file_yields_empty_tables(tmp_path) -> None:
    with pytest.warns(CachePersistenceWarning):
        tables = load_tables(tmp_path / "absent.pkl")
    assert tables == ({}, {}, {})


def test_corrupt_file_yields_empty_tables(tmp_path) -> None:
    path = tmp_path / "tables.pkl"
    path.write_bytes(b"\x80\x05not a pickle")
    with pytest.warns(CachePersistenceWarning):
        store = TranspositionStore.load(path)
    assert len(store) == 0


def test_truncated_file_yields_empty_tables(tmp_path) -> None:
    path = tmp_path / "tables.pkl"
    assert populated_store().save(path)
    path.write_bytes(path.read_bytes()[:20])
    with pytest.warns(CachePersistenceWarning):
        assert load_tables(path) == ({}, {}, {})


@pytest.mark.parametrize(
    "blob",
    [
        b"\x80\x05\x8d" + b"\xff" * 8 + b"...",  # BINUNICODE8 with an impossible length
        b"\x80\x05\x96" + b"\xff" * 8 + b"...",  # BYTEARRAY8 with an impossible length
    ],
)
def test_oversized_length_prefix_yields_empty_tables(tmp_path, blob) -> None:
    path = tmp_path / "tables.pkl"
    path.write_bytes(blob)
    with pytest.warns(CachePersistenceWarning):
        assert load_tables(path) == ({}, {}, {})


def test_structurally_invalid_payload_yields_empty_tables(tmp_path) -> None:
    path = tmp_path / "tables.pkl"
    path.write_bytes(pickle.dumps({"version": 1, "children": [], "evaluations": {}, "optimal_actions": {}}))
    with pytest.warns(CachePersistenceWarning):
        assert load_tables(path) == ({}, {}, {})


def test_unwritable_destination_discards_updates(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.warns(CachePersistenceWarning):
        assert save_tables(blocker / "tables.pkl", {}, {}, {}) is False


def test_lookups_count_hits_and_misses() -> None:
    store = populated_store()
    key = initialize_game_state().fingerprint()
    assert store.lookup_optimal_action(key) == Advance(4, 1)
    other = initialize_game_state(first=2).fingerprint()
    assert store.lookup_children(other) is None
    assert (store.hits, store.misses) == (1, 1)


def test_state_round_trip_and_clear() -> None:
    store = populated_store()
    copy = TranspositionStore()
    copy.load_state(store.to_state())
    assert copy.evaluations == store.evaluations
    copy.clear()
    assert len(copy) == 0
    assert len(store) == 4
