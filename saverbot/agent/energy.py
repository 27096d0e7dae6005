"""Energy gating by cost class."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..world.interface import Environment


class CostClass(Enum):
    TICK = "tick"
    MOVE = "move"
    SEARCH = "search"
    CONSTRUCTION = "construction"
    FINISHING = "finishing"


class EnergyGovernor:
    """Stateless gate: may an action of this cost class be attempted?"""

    def __init__(self, thresholds: dict, env: Environment | None = None):
        self.thresholds = dict(thresholds)
        self.env = env

    def threshold(self, cost_class: CostClass) -> int:
        return self.thresholds[cost_class.value]

    def can_act(self, energy: int, cost_class: CostClass) -> bool:
        return energy >= self.threshold(cost_class)

    def allows(self, cost_class: CostClass) -> bool:
        """can_act() against the bound environment's current energy."""
        return self.can_act(self.env.energy(), cost_class)
