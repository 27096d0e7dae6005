"""SaverWorld: an in-memory host grid implementing the Environment surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ..errors import (
    BuildFailed,
    ConversionFailed,
    DepositRejected,
    InsufficientEnergy,
    InsufficientInventory,
    InteractionError,
    InventoryEmpty,
    MovementBlocked,
    SearchExhausted,
)
from .interface import Environment, Project, Window
from .objects import CONTENT_SYMBOLS, ContentKind, Direction, Quadrant, Tile

# Energy charged by the host per action
STEP_COST = 3
DESTROY_COST = 3
PUT_COST = 3
SEARCH_COST = 20
CONVERT_COST = 5
BUILD_COST_PER_TILE = 10

MAX_ENERGY = 1000
BACKPACK_SIZE = 40

# Coins gained per recycled item
CONVERSION_RATES = {
    ContentKind.GARBAGE: 1,
    ContentKind.ROCK: 2,
    ContentKind.TREE: 3,
}


@dataclass
class BankNode:
    """Deposit sink with limited capacity."""
    position: tuple
    capacity: int
    stored: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.capacity - self.stored)


class SaverWorld(Environment):
    """
    A square grid of tiles with banks, resources and a single agent body.

    Serves as the host simulation for the command line runner and the tests.
    Layouts are either scattered from a seeded RNG or placed by hand with
    ``SaverWorld.empty(...)`` followed by ``place(...)``.
    """

    def __init__(self, size: int = 30, seed: int | None = None,
                 energy: int = MAX_ENERGY, window: int = 3, populate: bool = True):
        self.size = size
        self.rng = np.random.RandomState(seed)
        self.window = window

        # position -> Tile (absent means empty ground)
        self.tiles: dict[tuple, Tile] = {}
        self.banks: dict[tuple, BankNode] = {}
        # Tiles covered by applied construction projects
        self.paved: set[tuple] = set()

        # Agent body
        self.pos = (size // 2, size // 2)
        self._energy = energy
        self.max_energy = MAX_ENERGY
        self.backpack: dict[ContentKind, int] = {
            k: 0 for k in ContentKind if k not in (ContentKind.BANK, ContentKind.NONE)
        }

        self.tick_count = 0
        self.events: list[dict] = []

        if populate:
            self._spawn_initial_objects()

    @classmethod
    def empty(cls, size: int = 20, pos: tuple | None = None,
              energy: int = MAX_ENERGY, seed: int | None = 0) -> "SaverWorld":
        world = cls(size=size, seed=seed, energy=energy, populate=False)
        if pos is not None:
            world.pos = tuple(pos)
        return world

    # ------------------------------------------------------------------ #
    #  Layout                                                              #
    # ------------------------------------------------------------------ #
    def _spawn_initial_objects(self):
        """Scatter content with rough coverage ratios; banks get random capacity."""
        n = self.size * self.size
        for _ in range(max(2, int(n * 0.006))):
            pos = self._random_pos()
            if pos not in self.tiles and pos != self.pos:
                self.place(pos, ContentKind.BANK, capacity=int(self.rng.randint(10, 40)))

        coverage = [
            (ContentKind.COIN, 0.08),
            (ContentKind.GARBAGE, 0.05),
            (ContentKind.ROCK, 0.06),
            (ContentKind.TREE, 0.04),
            (ContentKind.FISH, 0.02),
        ]
        for kind, share in coverage:
            for _ in range(int(n * share)):
                pos = self._random_pos()
                if pos not in self.tiles and pos != self.pos:
                    self.place(pos, kind, quantity=int(self.rng.randint(1, 4)))

    def _random_pos(self) -> tuple:
        return (int(self.rng.randint(self.size)), int(self.rng.randint(self.size)))

    def place(self, pos: tuple, kind: ContentKind, quantity: int = 1,
              capacity: int = 20):
        pos = tuple(pos)
        if kind == ContentKind.NONE:
            self.tiles.pop(pos, None)
            self.banks.pop(pos, None)
            return
        self.tiles[pos] = Tile(kind, quantity)
        if kind == ContentKind.BANK:
            self.banks[pos] = BankNode(pos, capacity)

    def in_bounds(self, pos: tuple) -> bool:
        return 0 <= pos[0] < self.size and 0 <= pos[1] < self.size

    def content_at(self, pos: tuple) -> ContentKind:
        tile = self.tiles.get(tuple(pos))
        return tile.content if tile else ContentKind.NONE

    # ------------------------------------------------------------------ #
    #  Host clock                                                          #
    # ------------------------------------------------------------------ #
    def tick(self):
        self.tick_count += 1
        self.events.clear()

    def recharge(self, amount: int):
        before = self._energy
        self._energy = min(self.max_energy, self._energy + amount)
        if self._energy != before:
            self.events.append({"type": "recharge", "amount": self._energy - before})

    def _spend(self, cost: int):
        if self._energy < cost:
            raise InsufficientEnergy(f"need {cost}, have {self._energy}")
        self._energy -= cost

    # ------------------------------------------------------------------ #
    #  Environment: readers                                                #
    # ------------------------------------------------------------------ #
    def observe_vicinity(self) -> tuple[Window, tuple]:
        half = self.window // 2
        r, c = self.pos
        grid: Window = []
        for i in range(self.window):
            row = []
            for j in range(self.window):
                p = (r + i - half, c + j - half)
                if not self.in_bounds(p):
                    row.append(None)
                else:
                    tile = self.tiles.get(p)
                    row.append(Tile(tile.content, tile.quantity) if tile else Tile())
            grid.append(row)
        return grid, self.pos

    def energy(self) -> int:
        return self._energy

    def inventory(self) -> dict[ContentKind, int]:
        return dict(self.backpack)

    def position(self) -> tuple:
        return self.pos

    # ------------------------------------------------------------------ #
    #  Environment: actions                                                #
    # ------------------------------------------------------------------ #
    def step(self, direction: Direction) -> tuple:
        target = direction.apply(self.pos)
        if not self.in_bounds(target):
            raise MovementBlocked(f"{target} is outside the world")
        tile = self.tiles.get(target)
        if tile is not None and not tile.walkable:
            raise MovementBlocked(f"{target} holds {tile.content.value}")
        self._spend(STEP_COST)
        self.pos = target
        return self.pos

    def _collect(self, pos: tuple) -> int:
        tile = self.tiles.get(pos)
        if tile is None:
            raise InteractionError(f"nothing to destroy at {pos}")
        if tile.content == ContentKind.BANK:
            raise InteractionError(f"refusing to destroy bank at {pos}")
        room = BACKPACK_SIZE - sum(self.backpack.values())
        if room <= 0:
            raise InteractionError("backpack full")
        taken = min(room, tile.quantity)
        self._spend(DESTROY_COST)
        self.backpack[tile.content] += taken
        tile.quantity -= taken
        if tile.quantity <= 0:
            del self.tiles[pos]
        return taken

    def destroy(self, direction: Direction) -> int:
        target = direction.apply(self.pos)
        if not self.in_bounds(target):
            raise InteractionError(f"{target} is outside the world")
        return self._collect(target)

    def destroy_zone(self, kind: ContentKind) -> tuple[int, int]:
        if kind == ContentKind.BANK:
            raise InteractionError("banks cannot be destroyed")
        r, c = self.pos
        matches = [
            (r + dr, c + dc)
            for dr in (-1, 0, 1) for dc in (-1, 0, 1)
            if self.content_at((r + dr, c + dc)) == kind
        ]
        destroyed = 0
        for pos in matches:
            try:
                destroyed += self._collect(pos)
            except InteractionError:
                break
        return destroyed, len(matches)

    def put(self, kind: ContentKind, quantity: int, direction: Direction) -> int:
        target = direction.apply(self.pos)
        bank = self.banks.get(target)
        if bank is None:
            raise DepositRejected(f"no bank at {target}")
        if kind != ContentKind.COIN:
            raise DepositRejected(f"banks only accept coins, not {kind.value}")
        held = self.backpack.get(kind, 0)
        if held <= 0:
            raise InventoryEmpty("no coins to deposit")
        self._spend(PUT_COST)
        accepted = min(quantity, held, bank.remaining)
        bank.stored += accepted
        self.backpack[kind] -= accepted
        self.events.append({"type": "deposit", "position": target, "accepted": accepted})
        return accepted

    def search(self, kinds, depth: int, quadrant: Quadrant) -> Iterator[tuple]:
        wanted = set(kinds)
        if not wanted:
            raise SearchExhausted("nothing to search for")
        self._spend(SEARCH_COST)
        origin = self.pos
        sr, sc = quadrant.value

        def _scan():
            for ring in range(1, depth + 1):
                for i in range(ring + 1):
                    for j in range(ring + 1):
                        if max(i, j) != ring:
                            continue
                        p = (origin[0] + sr * i, origin[1] + sc * j)
                        kind = self.content_at(p)
                        if kind in wanted:
                            yield kind, p

        return _scan()

    def convert(self, kind: ContentKind) -> int:
        rate = CONVERSION_RATES.get(kind)
        if rate is None:
            raise ConversionFailed(f"{kind.value} cannot be recycled")
        held = self.backpack.get(kind, 0)
        if held <= 0:
            raise InsufficientInventory(f"no {kind.value} to recycle")
        self._spend(CONVERT_COST)
        coins = held * rate
        room = BACKPACK_SIZE - sum(self.backpack.values()) + held
        coins = min(coins, room)
        self.backpack[kind] = 0
        self.backpack[ContentKind.COIN] += coins
        return coins

    def design_project(self, shape: list[tuple]) -> Project:
        tiles = []
        for pos in shape:
            pos = tuple(pos)
            if not self.in_bounds(pos):
                continue
            if self.content_at(pos) == ContentKind.BANK or pos in self.paved:
                continue
            tiles.append(pos)
        if not tiles:
            raise BuildFailed("nothing left to build in this shape")
        return Project(
            tiles=tiles,
            material=ContentKind.ROCK,
            material_cost=len(tiles),
            energy_cost=len(tiles) * BUILD_COST_PER_TILE,
        )

    def apply(self, project: Project) -> None:
        held = self.backpack.get(project.material, 0)
        if held < project.material_cost:
            raise BuildFailed(
                f"need {project.material_cost} {project.material.value}, have {held}")
        self._spend(project.energy_cost)
        self.backpack[project.material] -= project.material_cost
        for pos in project.tiles:
            # Construction clears whatever was on the tile
            if self.content_at(pos) != ContentKind.BANK:
                self.tiles.pop(pos, None)
            self.paved.add(pos)
        self.events.append({"type": "build", "tiles": len(project.tiles)})

    # ------------------------------------------------------------------ #
    #  Console map                                                         #
    # ------------------------------------------------------------------ #
    def render_ascii(self) -> str:
        rows = []
        for r in range(self.size):
            line = []
            for c in range(self.size):
                if (r, c) == self.pos:
                    line.append("@")
                elif (r, c) in self.paved:
                    line.append("#")
                else:
                    line.append(CONTENT_SYMBOLS[self.content_at((r, c))])
            rows.append("".join(line))
        return "\n".join(rows)
