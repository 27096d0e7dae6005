"""Depositing coins at known banks and keeping the ledger."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from ..errors import SaverBotError
from ..logging_config import log_deposit
from ..world.interface import Environment
from ..world.objects import CARDINALS, ContentKind, Direction, chebyshev, direction_toward
from .energy import CostClass, EnergyGovernor
from .memory import LandmarkStatus, SpatialMemory
from .navigator import Navigator

logger = logging.getLogger("saverbot.bank")


class DepositOutcome(Enum):
    ACCEPTED = "accepted"        # some coins banked
    REJECTED = "rejected"        # bank returned 0, now marked filled
    FAILED = "failed"            # put() raised
    NO_BANK = "no_bank"          # no free bank known
    UNREACHABLE = "unreachable"  # could not get next to a free bank
    WAITING = "waiting"          # stopped for lack of move energy


class BankTransactor:
    def __init__(self, env: Environment, memory: SpatialMemory, governor: EnergyGovernor,
                 navigator: Navigator, clock: Callable[[], int] = lambda: 0):
        self.env = env
        self.memory = memory
        self.governor = governor
        self.navigator = navigator
        self.clock = clock
        self.total_saved = 0
        self.last_bank: tuple | None = None
        # Free banks the last walk could not get next to; skipped until readmitted
        self.unreachable: set[tuple] = set()

    def next_target(self) -> tuple | None:
        """Nearest free bank that has not just proven unreachable."""
        return self.memory.nearest_free(self.env.position(), exclude=self.unreachable)

    def readmit_nearby(self, radius: int = 1) -> int:
        """Give banks within `radius` of the agent another chance."""
        here = self.env.position()
        nearby = {c for c in self.unreachable if chebyshev(here, c) <= radius}
        self.unreachable -= nearby
        return len(nearby)

    def deposit_direction(self, target: tuple) -> tuple[Direction, tuple] | None:
        """Direction to deposit in, preferring the target bank itself."""
        here = self.env.position()
        direction = direction_toward(here, target)
        if direction is not None:
            return direction, tuple(target)

        # Fallback: any free (or not yet known) bank on a cardinal neighbour
        window, here = self.env.observe_vicinity()
        half = len(window) // 2
        for d in CARDINALS:
            dr, dc = d.offset
            tile = window[half + dr][half + dc]
            if tile is None or tile.content != ContentKind.BANK:
                continue
            coord = d.apply(here)
            if self.memory.status_of(coord) == LandmarkStatus.FILLED:
                continue
            self.memory.record_landmark(coord)
            return d, coord
        return None

    def deposit_coins(self) -> DepositOutcome:
        target = self.next_target()
        if target is None:
            return DepositOutcome.NO_BANK

        self.navigator.move_to(target)
        resolved = self.deposit_direction(target)
        if resolved is None:
            if not self.governor.allows(CostClass.MOVE):
                return DepositOutcome.WAITING
            logger.info(f"cannot reach bank at {target} from {self.env.position()}")
            self.unreachable.add(target)
            return DepositOutcome.UNREACHABLE

        direction, bank = resolved
        coins = self.env.inventory().get(ContentKind.COIN, 0)
        self.last_bank = bank
        try:
            accepted = self.env.put(ContentKind.COIN, coins, direction)
        except SaverBotError as e:
            logger.warning(f"While saving there has been an issue: {e}")
            self.memory.credit(bank, 0)
            return DepositOutcome.FAILED

        log_deposit(self.clock(), bank, coins, accepted, self.total_saved + accepted)
        if accepted <= 0:
            self.memory.mark_filled(bank)
            return DepositOutcome.REJECTED

        self.total_saved += accepted
        self.memory.credit(bank, accepted)
        self.unreachable.clear()
        return DepositOutcome.ACCEPTED
