"""Tile contents, directions and grid geometry helpers."""

from dataclasses import dataclass
from enum import Enum


class ContentKind(Enum):
    COIN = "coin"
    ROCK = "rock"
    GARBAGE = "garbage"
    TREE = "tree"
    FISH = "fish"
    BANK = "bank"
    NONE = "none"


# Content that stops the agent from stepping onto a tile
SOLID_CONTENT = {ContentKind.ROCK, ContentKind.TREE, ContentKind.BANK}

# Symbols for the console map (python -m saverbot --map)
CONTENT_SYMBOLS = {
    ContentKind.COIN: "$",
    ContentKind.ROCK: "o",
    ContentKind.GARBAGE: "g",
    ContentKind.TREE: "T",
    ContentKind.FISH: "~",
    ContentKind.BANK: "B",
    ContentKind.NONE: ".",
}

# What each state forages for
COIN_LOOKING_FOR = (ContentKind.COIN, ContentKind.ROCK, ContentKind.GARBAGE, ContentKind.TREE)
ROCK_LOOKING_FOR = (ContentKind.ROCK,)
BANK_LOOKING_FOR = (ContentKind.BANK,)

# Slots the Trading state converts into coins
TRADEABLE = (ContentKind.GARBAGE, ContentKind.ROCK, ContentKind.TREE)


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def offset(self) -> tuple:
        return self.value

    def apply(self, coord: tuple) -> tuple:
        dr, dc = self.value
        return (coord[0] + dr, coord[1] + dc)


CARDINALS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class Quadrant(Enum):
    """Diagonal search sectors, valued by the sign of (row, col) offsets."""
    TOP_LEFT = (-1, -1)
    TOP_RIGHT = (-1, 1)
    BOTTOM_LEFT = (1, -1)
    BOTTOM_RIGHT = (1, 1)

    def probe_point(self, coord: tuple, reach: int = 2) -> tuple:
        dr, dc = self.value
        return (coord[0] + dr * reach, coord[1] + dc * reach)


@dataclass
class Tile:
    """A sensed tile. Banks carry no payload beyond their kind."""
    content: ContentKind = ContentKind.NONE
    quantity: int = 0

    @property
    def walkable(self) -> bool:
        return self.content not in SOLID_CONTENT


def manhattan(a: tuple, b: tuple) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def chebyshev(a: tuple, b: tuple) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def direction_toward(origin: tuple, target: tuple) -> Direction | None:
    """Cardinal direction from origin to an orthogonally adjacent target."""
    delta = (target[0] - origin[0], target[1] - origin[1])
    for d in CARDINALS:
        if d.value == delta:
            return d
    return None
