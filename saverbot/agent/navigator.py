"""Energy-budgeted two-phase Manhattan walk."""

from __future__ import annotations

import logging

from ..errors import SaverBotError
from ..world.interface import Environment
from ..world.objects import Direction
from .energy import CostClass, EnergyGovernor

logger = logging.getLogger("saverbot.navigator")


class Navigator:
    """
    Walks rows first, then columns, one gated step at a time.

    Not obstacle-aware: a blocked step ends the current phase and the walk
    carries on with the next one. Running out of MOVE energy ends the walk.
    """

    def __init__(self, env: Environment, governor: EnergyGovernor, max_steps: int = 200):
        self.env = env
        self.governor = governor
        self.max_steps = max_steps
        self.steps_taken = 0

    def step(self, direction: Direction) -> bool:
        """Take one step if MOVE energy allows. True on success."""
        if not self.governor.allows(CostClass.MOVE):
            return False
        try:
            self.env.step(direction)
        except SaverBotError as e:
            logger.debug(f"step {direction.name} failed: {e}")
            return False
        self.steps_taken += 1
        return True

    def move_to(self, target: tuple) -> bool:
        target = tuple(target)
        budget = self.max_steps

        phases = (
            (0, Direction.DOWN, Direction.UP),
            (1, Direction.RIGHT, Direction.LEFT),
        )
        for axis, forward, backward in phases:
            while budget > 0:
                here = self.env.position()
                if here[axis] == target[axis]:
                    break
                if not self.governor.allows(CostClass.MOVE):
                    logger.debug(f"out of move energy on the way to {target}")
                    return self.env.position() == target
                direction = forward if here[axis] < target[axis] else backward
                budget -= 1
                if not self.step(direction):
                    logger.debug(f"blocked moving {direction.name} toward {target} at {here}")
                    break

        return self.env.position() == target
