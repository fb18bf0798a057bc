#!/usr/bin/env python3
"""Pit two agents (engine difficulties or random) against each other."""

import argparse
import json

import numpy as np

from quoridor_ai.evaluation import RandomAgent, evaluate_agents
from quoridor_ai.search import Agent, SearchEngine, TranspositionStore, load_search_config

AGENT_CHOICES = ["greedy", "deep", "random"]


def build_agent(kind: str, args: argparse.Namespace, store: TranspositionStore, seed: int) -> Agent:
    if kind == "random":
        return RandomAgent(np.random.default_rng(seed))
    config = load_search_config(
        args.config,
        difficulty=kind,
        barrier_candidate_limit=args.barrier_candidate_limit,
    )
    return SearchEngine(config, store=store)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--player-one", choices=AGENT_CHOICES, default="deep")
    parser.add_argument("--player-two", choices=AGENT_CHOICES, default="greedy")
    parser.add_argument("--episodes", type=int, default=4)
    parser.add_argument("--max-ply", type=int, default=200)
    parser.add_argument("--config", type=str, default="configs/engine.yaml")
    parser.add_argument("--barrier-candidate-limit", type=int)
    parser.add_argument("--cache", type=str, help="Transposition cache file shared by both engines")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    store = TranspositionStore.load(args.cache) if args.cache else TranspositionStore()
    try:
        agent_one = build_agent(args.player_one, args, store, args.seed)
        agent_two = build_agent(args.player_two, args, store, args.seed + 1)
        result = evaluate_agents(agent_one, agent_two, episodes=args.episodes, max_ply=args.max_ply)
    finally:
        if args.cache:
            store.save(args.cache)

    output = {
        "player_one": args.player_one,
        "player_two": args.player_two,
        "games": result.games_played,
        "player_one_wins": result.player_one_wins,
        "player_two_wins": result.player_two_wins,
        "draws": result.draws,
        "average_length": result.average_length,
        "player_one_winrate": result.winrate_player_one(),
        "player_two_winrate": result.winrate_player_two(),
        "cache_entries": len(store),
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
