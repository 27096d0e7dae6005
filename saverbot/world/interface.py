"""Environment: the collaborator surface the agent core calls into.

Every method that can fail raises a subclass of
:class:`saverbot.errors.SaverBotError`. The agent components catch those
locally; nothing here is allowed to abort a tick.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .objects import ContentKind, Direction, Quadrant, Tile

Window = list[list[Optional[Tile]]]


@dataclass
class Project:
    """A construction plan produced by ``design_project``."""
    tiles: list[tuple]
    material: ContentKind = ContentKind.ROCK
    material_cost: int = 0
    energy_cost: int = 0
    metadata: dict = field(default_factory=dict)


class Environment(ABC):
    """The agent's embodiment plus the world services it may use."""

    # ---- sensing / embodiment readers ---------------------------------- #
    @abstractmethod
    def observe_vicinity(self) -> tuple[Window, tuple]:
        """Return the NxN window centred on the agent and its coordinate."""

    @abstractmethod
    def energy(self) -> int:
        ...

    @abstractmethod
    def inventory(self) -> dict[ContentKind, int]:
        ...

    @abstractmethod
    def position(self) -> tuple:
        ...

    # ---- actions -------------------------------------------------------- #
    @abstractmethod
    def step(self, direction: Direction) -> tuple:
        """Move one tile. Returns the new coordinate."""

    @abstractmethod
    def destroy(self, direction: Direction) -> int:
        """Destroy the adjacent tile's content and collect it."""

    @abstractmethod
    def destroy_zone(self, kind: ContentKind) -> tuple[int, int]:
        """Destroy every ``kind`` tile on and around the agent: (destroyed, total)."""

    @abstractmethod
    def put(self, kind: ContentKind, quantity: int, direction: Direction) -> int:
        """Deposit into the adjacent tile. Returns the accepted quantity."""

    @abstractmethod
    def search(self, kinds, depth: int, quadrant: Quadrant) -> Iterator[tuple]:
        """Lazy, single-use iterator of (kind, coordinate) matches."""

    @abstractmethod
    def convert(self, kind: ContentKind) -> int:
        """Recycle an inventory slot. Returns coins gained."""

    @abstractmethod
    def design_project(self, shape: list[tuple]) -> Project:
        ...

    @abstractmethod
    def apply(self, project: Project) -> None:
        ...
