"""Quadrant probing when nothing useful is in sight."""

from __future__ import annotations

import heapq
import logging

import numpy as np

from ..errors import SaverBotError
from ..world.interface import Environment
from ..world.objects import CARDINALS, ContentKind, Quadrant, manhattan
from .energy import CostClass, EnergyGovernor
from .forager import Forager
from .memory import PerceptionMerger, SpatialMemory
from .navigator import Navigator

logger = logging.getLogger("saverbot.searcher")

QUADRANTS = (Quadrant.TOP_LEFT, Quadrant.TOP_RIGHT, Quadrant.BOTTOM_LEFT, Quadrant.BOTTOM_RIGHT)


class Searcher:
    def __init__(self, env: Environment, memory: SpatialMemory, governor: EnergyGovernor,
                 navigator: Navigator, forager: Forager, rng: np.random.RandomState,
                 depth: int = 6, wander_steps: int = 3):
        self.env = env
        self.memory = memory
        self.governor = governor
        self.navigator = navigator
        self.forager = forager
        self.rng = rng
        self.depth = depth
        self.wander_steps = wander_steps
        self.perception = PerceptionMerger(memory)

    def eligible_quadrants(self) -> list[Quadrant]:
        """Quadrants whose probe point is still unseen; all four once every one is seen."""
        here = self.env.position()
        unseen = [q for q in QUADRANTS if not self.memory.has_been_seen(q.probe_point(here))]
        return unseen or list(QUADRANTS)

    def choose_quadrant(self) -> Quadrant:
        options = self.eligible_quadrants()
        return options[int(self.rng.randint(len(options)))]

    def probe(self, wanted) -> list[tuple]:
        self.forager.harvest_vicinity(wanted)

        quadrant = self.choose_quadrant()
        try:
            results = self.env.search(list(wanted), self.depth, quadrant)
            found = [(kind, tuple(coord)) for kind, coord in results]
        except SaverBotError as e:
            logger.debug(f"search {quadrant.name} failed: {e}")
            self.wander()
            return []

        here = self.env.position()
        queue = []
        for order, (kind, coord) in enumerate(found):
            if kind == ContentKind.BANK:
                self.memory.record_landmark(coord)
            else:
                heapq.heappush(queue, (manhattan(here, coord), order, coord))

        logger.debug(f"probe {quadrant.name}: {len(found)} hits, {len(queue)} to visit")

        while queue and self.governor.allows(CostClass.SEARCH):
            _, _, coord = heapq.heappop(queue)
            self.navigator.move_to(coord)
            # Banks around the new spot must be known before harvesting there
            self.perception.merge(*self.env.observe_vicinity())
            self.forager.harvest_vicinity(wanted)

        self.wander()
        return [coord for _, coord in found]

    def wander(self) -> int:
        """A few random single steps so next tick senses new ground."""
        moved = 0
        for _ in range(self.wander_steps):
            direction = CARDINALS[int(self.rng.randint(len(CARDINALS)))]
            if self.navigator.step(direction):
                moved += 1
        return moved
