"""Opportunistic harvesting around the agent, careful next to banks."""

from __future__ import annotations

import logging

from ..errors import SaverBotError
from ..world.interface import Environment
from ..world.objects import ContentKind, chebyshev, direction_toward
from .energy import CostClass, EnergyGovernor
from .memory import SpatialMemory

logger = logging.getLogger("saverbot.forager")


class Forager:
    def __init__(self, env: Environment, memory: SpatialMemory, governor: EnergyGovernor):
        self.env = env
        self.memory = memory
        self.governor = governor

    def landmark_adjacent(self) -> bool:
        """True if any known bank sits on one of the eight tiles around the agent."""
        here = self.env.position()
        return any(
            chebyshev(here, coord) == 1
            for coord in self.memory.free() + self.memory.filled()
        )

    def harvest_vicinity(self, wanted) -> int:
        wanted = [k for k in wanted if k != ContentKind.BANK]
        if not wanted:
            return 0
        if self.landmark_adjacent():
            return self._harvest_around_bank(wanted)
        return self._harvest_zone(wanted)

    def _harvest_zone(self, wanted) -> int:
        destroyed = 0
        for kind in wanted:
            if not self.governor.allows(CostClass.MOVE):
                break
            try:
                d, total = self.env.destroy_zone(kind)
            except SaverBotError as e:
                logger.debug(f"destroy zone {kind.value} failed: {e}")
                continue
            if total:
                logger.debug(f"destroyed {d} {kind.value} on a total of {total}")
            destroyed += d
        return destroyed

    def _harvest_around_bank(self, wanted) -> int:
        # Only orthogonal neighbours: a cardinal destroy aimed at a diagonal
        # tile would land on a different tile, possibly the bank itself.
        window, here = self.env.observe_vicinity()
        half = len(window) // 2
        destroyed = 0
        for i, tiles in enumerate(window):
            for j, tile in enumerate(tiles):
                if tile is None or tile.content not in wanted:
                    continue
                coord = (here[0] + i - half, here[1] + j - half)
                direction = direction_toward(here, coord)
                if direction is None:
                    continue
                if not self.governor.allows(CostClass.MOVE):
                    return destroyed
                try:
                    destroyed += self.env.destroy(direction)
                except SaverBotError as e:
                    logger.debug(f"destroy {direction.name} failed: {e}")
        return destroyed
