from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

import numpy as np
from numpy.typing import NDArray

BOARD_SIZE = 9
MAX_BARRIERS = 10
PLAYERS: Tuple[int, int] = (1, 2)

Coord = Tuple[int, int]
EdgeArray = NDArray[np.int8]  # shape (9, 9, 4): barriers blocking each (x, y, direction)

# Directions are indexed N, E, S, W. North is +y.
NORTH, EAST, SOUTH, WEST = 0, 1, 2, 3
DIRECTIONS: Tuple[Coord, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


def opponent_of(player: int) -> int:
    return 2 if player == 1 else 1


def goal_row_for(player: int) -> int:
    return BOARD_SIZE - 1 if player == 1 else 0


@dataclass(frozen=True, order=True)
class Barrier:
    """A two-edge wall anchored at the north-west cell of the span it blocks."""

    owner: int
    x: int
    y: int
    vertical: bool

    @property
    def anchor(self) -> Coord:
        return (self.x, self.y)

    def blocked_edges(self) -> Tuple[Tuple[Coord, int], ...]:
        """Return every ``(cell, direction)`` crossing this barrier closes."""
        x, y = self.x, self.y
        if self.vertical:
            return (
                ((x, y), EAST),
                ((x, y - 1), EAST),
                ((x + 1, y), WEST),
                ((x + 1, y - 1), WEST),
            )
        return (
            ((x, y), SOUTH),
            ((x + 1, y), SOUTH),
            ((x, y - 1), NORTH),
            ((x + 1, y - 1), NORTH),
        )

    def as_tuple(self) -> Tuple[int, int, int, bool]:
        return (self.owner, self.x, self.y, self.vertical)


@dataclass(frozen=True)
class Advance:
    x: int
    y: int

    @property
    def cell(self) -> Coord:
        return (self.x, self.y)


@dataclass(frozen=True)
class PlaceBarrier:
    x: int
    y: int
    vertical: bool

    def to_barrier(self, owner: int) -> Barrier:
        return Barrier(owner, self.x, self.y, self.vertical)

    @staticmethod
    def from_barrier(barrier: Barrier) -> "PlaceBarrier":
        return PlaceBarrier(barrier.x, barrier.y, barrier.vertical)


Action = Union[Advance, PlaceBarrier]


@dataclass(frozen=True)
class Fingerprint:
    """Cache key for a position.

    Two positions share a fingerprint when both token cells, the player to
    move and the (unordered) barrier set agree. Remaining budgets follow from
    barrier ownership, so they are not stored separately.
    """

    token_cells: Tuple[Coord, Coord]
    current_player: int
    barriers: Tuple[Tuple[int, int, int, bool], ...]


@dataclass
class Token:
    player: int
    x: int
    y: int
    human: bool = False
    history: List[Coord] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append((self.x, self.y))

    @property
    def cell(self) -> Coord:
        return (self.x, self.y)

    @property
    def goal_row(self) -> int:
        return goal_row_for(self.player)

    def at_goal(self) -> bool:
        return self.y == self.goal_row

    def move(self, cell: Coord) -> None:
        """Move and record the new cell in the history."""
        self.history.append((cell[0], cell[1]))
        self.x, self.y = cell

    def move_temp(self, cell: Coord) -> None:
        """Move without touching the history."""
        self.x, self.y = cell

    def move_back_temp(self) -> None:
        """Return to the last recorded cell."""
        self.x, self.y = self.history[-1]

    def copy(self) -> "Token":
        return Token(self.player, self.x, self.y, self.human, list(self.history))


def build_edge_blocks(barriers: Iterable[Barrier]) -> EdgeArray:
    blocks = np.zeros((BOARD_SIZE, BOARD_SIZE, len(DIRECTIONS)), dtype=np.int8)
    for barrier in barriers:
        for (x, y), direction in barrier.blocked_edges():
            blocks[x, y, direction] += 1
    return blocks


@dataclass
class PositionState:
    tokens: Dict[int, Token]
    barriers: Set[Barrier]
    remaining: Dict[int, int]
    current_player: int = 1
    edge_blocks: Optional[EdgeArray] = field(default=None, repr=False, compare=False)
    _fingerprint_cache: Optional[Fingerprint] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.edge_blocks is None:
            self.edge_blocks = build_edge_blocks(self.barriers)

    @classmethod
    def from_components(
        cls,
        token_one: Token,
        token_two: Token,
        barriers: Iterable[Barrier] = (),
        current_player: int = 1,
    ) -> "PositionState":
        """Rebuild a position, deriving budgets from barrier ownership."""
        barrier_set = set(barriers)
        remaining = {}
        for player in PLAYERS:
            placed = sum(1 for barrier in barrier_set if barrier.owner == player)
            if placed > MAX_BARRIERS:
                raise ValueError(f"Player {player} owns {placed} barriers; at most {MAX_BARRIERS} allowed.")
            remaining[player] = MAX_BARRIERS - placed
        if current_player not in PLAYERS:
            raise ValueError(f"Unknown player {current_player}.")
        return cls(
            tokens={1: token_one.copy(), 2: token_two.copy()},
            barriers=barrier_set,
            remaining=remaining,
            current_player=current_player,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def token(self, player: int) -> Token:
        return self.tokens[player]

    def opponent_token(self, player: int) -> Token:
        return self.tokens[opponent_of(player)]

    def current_token(self) -> Token:
        return self.tokens[self.current_player]

    def remaining_barriers(self, player: int) -> int:
        return self.remaining[player]

    def placed_barriers(self, player: int) -> int:
        return sum(1 for barrier in self.barriers if barrier.owner == player)

    def fingerprint(self) -> Fingerprint:
        if self._fingerprint_cache is None:
            self._fingerprint_cache = Fingerprint(
                token_cells=(self.tokens[1].cell, self.tokens[2].cell),
                current_player=self.current_player,
                barriers=tuple(sorted(barrier.as_tuple() for barrier in self.barriers)),
            )
        return self._fingerprint_cache

    # ------------------------------------------------------------------
    # Mutation (no legality checks)
    # ------------------------------------------------------------------
    def apply_advance(self, player: int, cell: Coord) -> None:
        self.tokens[player].move(cell)
        self._fingerprint_cache = None

    def apply_advance_provisional(self, player: int, cell: Coord) -> Coord:
        """Move a token without recording history; returns the cell it left."""
        token = self.tokens[player]
        previous = token.cell
        token.move_temp(cell)
        self._fingerprint_cache = None
        return previous

    def undo_advance_provisional(self, player: int, previous: Optional[Coord] = None) -> None:
        token = self.tokens[player]
        if previous is None:
            token.move_back_temp()
        else:
            token.move_temp(previous)
        self._fingerprint_cache = None

    def apply_barrier(self, barrier: Barrier) -> None:
        self._add_barrier(barrier)
        self.remaining[barrier.owner] -= 1

    def undo_barrier(self, barrier: Barrier) -> None:
        self._remove_barrier(barrier)
        self.remaining[barrier.owner] += 1

    def apply_barrier_provisional(self, barrier: Barrier) -> None:
        self._add_barrier(barrier)

    def remove_barrier_provisional(self, barrier: Barrier) -> None:
        self._remove_barrier(barrier)

    def advance_turn(self) -> None:
        self.current_player = opponent_of(self.current_player)
        self._fingerprint_cache = None

    def deep_copy(self) -> "PositionState":
        clone = PositionState(
            tokens={player: token.copy() for player, token in self.tokens.items()},
            barriers=set(self.barriers),
            remaining=dict(self.remaining),
            current_player=self.current_player,
            edge_blocks=self.edge_blocks.copy(),
        )
        clone._fingerprint_cache = self._fingerprint_cache
        return clone

    # ------------------------------------------------------------------
    def _add_barrier(self, barrier: Barrier) -> None:
        self.barriers.add(barrier)
        for (x, y), direction in barrier.blocked_edges():
            self.edge_blocks[x, y, direction] += 1
        self._fingerprint_cache = None

    def _remove_barrier(self, barrier: Barrier) -> None:
        self.barriers.remove(barrier)
        for (x, y), direction in barrier.blocked_edges():
            self.edge_blocks[x, y, direction] -= 1
        self._fingerprint_cache = None

    def __repr__(self) -> str:
        one, two = self.tokens[1], self.tokens[2]
        return (
            f"PositionState(current={self.current_player}, p1={one.cell}, p2={two.cell}, "
            f"barriers={len(self.barriers)}, remaining={self.remaining})"
        )
