#!/usr/bin/env python3
"""Play Quoridor against the search engine via the console, with optional logging & replay."""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from quoridor_ai.core import (
    BOARD_SIZE,
    Action,
    Advance,
    Coord,
    PlaceBarrier,
    PositionState,
    apply_action,
    initialize_game_state,
    legal_advances,
    winner,
)
from quoridor_ai.env import render_board
from quoridor_ai.search import SearchEngine, TranspositionStore, load_search_config

COLUMNS = "abcdefghi"
HORIZONTAL_MARKS = ("-", "–")
DEFAULT_CONFIG = "configs/engine.yaml"
DEFAULT_CACHE = "cache/transpositions.pkl"


def parse_square(text: str) -> Coord:
    text = text.strip().lower()
    if len(text) != 2 or text[0] not in COLUMNS or not text[1].isdigit() or text[1] == "0":
        raise ValueError(f"Invalid square {text!r}; expected a column a-i and a row 1-9.")
    return COLUMNS.index(text[0]), int(text[1]) - 1


def format_square(cell: Coord) -> str:
    return f"{COLUMNS[cell[0]]}{cell[1] + 1}"


def parse_action(text: str) -> Action:
    """``e2`` moves the token; ``|e5`` and ``-e5`` place vertical and horizontal barriers."""
    text = text.strip()
    if not text:
        raise ValueError("Empty move.")
    if text[0] == "|" or text[0] in HORIZONTAL_MARKS:
        x, y = parse_square(text[1:])
        if not 1 <= y < BOARD_SIZE or x >= BOARD_SIZE - 1:
            raise ValueError(f"Barriers cannot be anchored at {text[1:].strip()}.")
        return PlaceBarrier(x, y, text[0] == "|")
    return Advance(*parse_square(text))


def format_action(action: Action) -> str:
    if isinstance(action, Advance):
        return format_square(action.cell)
    mark = "|" if action.vertical else "-"
    return mark + format_square((action.x, action.y))


def action_to_json(action: Action) -> Dict[str, object]:
    if isinstance(action, Advance):
        return {"type": "advance", "x": action.x, "y": action.y}
    return {"type": "barrier", "x": action.x, "y": action.y, "vertical": action.vertical}


def action_from_json(data: Dict[str, object]) -> Action:
    if data["type"] == "advance":
        return Advance(int(data["x"]), int(data["y"]))
    return PlaceBarrier(int(data["x"]), int(data["y"]), bool(data["vertical"]))


def format_board(state: PositionState, *, show_moves: bool = False) -> str:
    marks = legal_advances(state) if show_moves else ()
    return render_board(state, marks)


def prompt_human_move(state: PositionState) -> Action:
    player = state.current_player
    print(f"Barriers left: {state.remaining_barriers(player)}")
    while True:
        raw = input("Your move (e.g. e2, |e5, -e5; q to quit): ").strip()
        if raw.lower() in {"q", "quit", "exit"}:
            raise KeyboardInterrupt
        try:
            action = parse_action(raw)
        except ValueError as exc:
            print(exc)
            continue
        probe = state.deep_copy()
        if apply_action(probe, action):
            return action
        print("Illegal move. Try again.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    print(f"Saved game log to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    moves = data.get("moves", [])
    state = initialize_game_state(human_players=())
    if verbose:
        print("Replaying logged game.")
        print(format_board(state))
    for entry in moves:
        action = action_from_json(entry["action"])
        player = state.current_player
        if not apply_action(state, action):
            raise ValueError(f"Logged move {entry.get('move_index')} ({format_action(action)}) is illegal.")
        if verbose:
            actor = entry.get("actor", "unknown")
            print(f"{actor} (player {player}): {format_action(action)}")
            print(format_board(state))
    summary = {
        "winner": winner(state),
        "moves": len(moves),
        "tokens": {str(p): list(state.token(p).cell) for p in (1, 2)},
        "remaining_barriers": {str(p): state.remaining_barriers(p) for p in (1, 2)},
    }
    if verbose:
        print("Replay finished.")
        print(f"Winner: {summary['winner']}")
    return summary


def play_interactive(args: argparse.Namespace) -> None:
    config = load_search_config(
        args.config,
        difficulty=args.difficulty,
        barrier_candidate_limit=args.barrier_candidate_limit,
    )
    store = TranspositionStore.load(args.cache) if args.cache else TranspositionStore()
    engine = SearchEngine(config, store=store)

    humans = () if args.watch else (args.human_player,)
    state = initialize_game_state(human_players=humans, first=args.first)
    log_records: List[Dict] = []
    move_index = 0
    try:
        while winner(state) is None and move_index < args.max_ply:
            player = state.current_player
            human = state.token(player).human
            print()
            print(format_board(state, show_moves=human))
            print(f"To move: player {player}")

            if human:
                action = prompt_human_move(state)
                actor = "human"
            else:
                action = engine.get_action(state.deep_copy())
                actor = "ai"
                print(f"AI (player {player}) plays {format_action(action)}")

            if not apply_action(state, action):
                raise RuntimeError(f"Engine produced illegal move {format_action(action)}.")
            log_records.append(
                {
                    "move_index": move_index,
                    "actor": actor,
                    "player": player,
                    "notation": format_action(action),
                    "action": action_to_json(action),
                }
            )
            move_index += 1
    except KeyboardInterrupt:
        print("\nGame abandoned.")
    finally:
        if args.cache:
            store.save(args.cache)

    print("\nFinal position:")
    print(format_board(state))
    result = winner(state)
    print(f"Player {result} wins!" if result is not None else "No winner.")

    if args.log_file:
        metadata = {
            "difficulty": config.difficulty.value,
            "human_players": list(humans),
            "first": args.first,
            "winner": result,
        }
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Quoridor in the console against the engine.")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG)
    parser.add_argument("--difficulty", choices=["greedy", "deep", "easy", "hard"])
    parser.add_argument("--barrier-candidate-limit", type=int)
    parser.add_argument("--cache", type=str, default=DEFAULT_CACHE, help="Transposition cache file ('' to disable)")
    parser.add_argument("--human-player", type=int, choices=[1, 2], default=1)
    parser.add_argument("--first", type=int, choices=[1, 2], default=1)
    parser.add_argument("--watch", action="store_true", help="Engine plays both sides")
    parser.add_argument("--max-ply", type=int, default=400)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.replay_log:
        try:
            replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        except ValueError as exc:
            print(exc, file=sys.stderr)
            sys.exit(1)
        return

    play_interactive(args)


if __name__ == "__main__":
    main()
