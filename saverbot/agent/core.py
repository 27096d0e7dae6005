"""SaverAgent: the per-tick state machine that forages, trades and banks coins."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

import numpy as np

from ..config import SaverConfig
from ..errors import BuildFailed, SaverBotError
from ..logging_config import log_state_change
from ..world.interface import Environment
from ..world.objects import (
    BANK_LOOKING_FOR,
    COIN_LOOKING_FOR,
    ROCK_LOOKING_FOR,
    TRADEABLE,
    ContentKind,
    chebyshev,
    manhattan,
)
from .bank import BankTransactor, DepositOutcome
from .energy import CostClass, EnergyGovernor
from .forager import Forager
from .memory import PerceptionMerger, SpatialMemory
from .navigator import Navigator
from .searcher import Searcher

logger = logging.getLogger("saverbot.agent")


class AgentState(Enum):
    COIN_COLLECTING = "coin_collecting"
    ROCK_COLLECTING = "rock_collecting"
    TRADING = "trading"
    SAVING = "saving"
    BANK_SEARCHING = "bank_searching"
    FINISHING = "finishing"
    ENJOYING = "enjoying"


# The eight tiles around a bank that the finishing structure covers
RING = [(dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)]


class SaverAgent:
    """
    A forager that saves coins in banks it discovers.

    - Collects coins (and tradeable junk) until it has enough to bank
    - Recycles junk into coins when it piles up
    - Deposits at the nearest free bank, searching for one if none is known
    - Once the goal is met, gathers rocks and builds around its best bank

    Call ``tick()`` exactly once per simulation tick. It never raises for a
    failed action; the next tick re-evaluates instead.
    """

    def __init__(self, env: Environment, config: SaverConfig | None = None,
                 rng: np.random.RandomState | None = None,
                 event_sink: Callable[[dict], None] | None = None):
        self.env = env
        self.config = (config or SaverConfig()).validate()
        self.rng = rng if rng is not None else np.random.RandomState(self.config.seed)
        self.event_sink = event_sink

        self.state = AgentState.COIN_COLLECTING
        self.total_ticks = 0

        # Owned memory and the components working on it
        self.memory = SpatialMemory()
        self.governor = EnergyGovernor(self.config.energy_thresholds, env)
        self.perception = PerceptionMerger(self.memory)
        self.navigator = Navigator(env, self.governor, self.config.max_walk_steps)
        self.forager = Forager(env, self.memory, self.governor)
        self.searcher = Searcher(
            env, self.memory, self.governor, self.navigator, self.forager, self.rng,
            depth=self.config.search_depth, wander_steps=self.config.wander_steps,
        )
        self.bank = BankTransactor(
            env, self.memory, self.governor, self.navigator, clock=lambda: self.total_ticks,
        )

        self.last_outcome: str = ""
        self.built_around: Optional[tuple] = None

    # ------------------------------------------------------------------ #
    #  Read-only views                                                     #
    # ------------------------------------------------------------------ #
    @property
    def goal(self) -> Optional[int]:
        return self.config.goal

    @property
    def saved(self) -> int:
        return self.bank.total_saved

    def held(self, kind: ContentKind) -> int:
        return self.env.inventory().get(kind, 0)

    def goal_met(self) -> bool:
        return self.goal is not None and self.saved >= self.goal

    def goal_reachable(self) -> bool:
        """Banking what is held right now would reach the goal."""
        coins = self.held(ContentKind.COIN)
        return self.goal is not None and coins > 0 and self.saved + coins >= self.goal

    # ------------------------------------------------------------------ #
    #  Tick                                                                #
    # ------------------------------------------------------------------ #
    def tick(self) -> dict:
        self.total_ticks += 1
        self.last_outcome = ""

        window, here = self.env.observe_vicinity()
        self.perception.merge(window, here)

        if self.state != AgentState.ENJOYING:
            self.forager.harvest_vicinity(self._wanted())

        admitted = self.governor.allows(CostClass.TICK)
        if not admitted:
            logger.debug(f"t={self.total_ticks} waiting for recharge ({self.env.energy()})")
        else:
            handler = {
                AgentState.COIN_COLLECTING: self._coin_collect,
                AgentState.ROCK_COLLECTING: self._rock_collect,
                AgentState.TRADING: self._trade,
                AgentState.SAVING: self._save,
                AgentState.BANK_SEARCHING: self._search_for_bank,
                AgentState.FINISHING: self._finish,
                AgentState.ENJOYING: self._enjoy,
            }[self.state]
            handler()

        event = self.get_state()
        event["admitted"] = admitted
        if self.event_sink is not None:
            self.event_sink(event)
        return event

    def handle_event(self, event: dict):
        """Host-side notifications (recharge, deposits, builds)."""
        logger.debug(f"event t={self.total_ticks}: {event}")

    def _wanted(self) -> tuple:
        if self.state in (AgentState.ROCK_COLLECTING, AgentState.FINISHING):
            return ROCK_LOOKING_FOR
        return COIN_LOOKING_FOR

    def set_state(self, state: AgentState, reason: str = ""):
        if state != self.state:
            log_state_change(self.total_ticks, self.state.name, state.name, reason)
            self.state = state

    # ------------------------------------------------------------------ #
    #  State handlers                                                      #
    # ------------------------------------------------------------------ #
    def _coin_collect(self):
        self.searcher.probe(COIN_LOOKING_FOR)
        self.set_state(self.next_from_coin_collecting())

    def next_from_coin_collecting(self) -> AgentState:
        """Exit condition of CoinCollecting for the current inventory."""
        cfg = self.config
        if self.held(ContentKind.COIN) >= cfg.COIN_SAVE_THRESHOLD:
            return AgentState.SAVING
        if self.goal_met():
            return AgentState.ROCK_COLLECTING
        if (self.held(ContentKind.GARBAGE) >= cfg.GARBAGE_TRADE_THRESHOLD
                or self.held(ContentKind.ROCK) >= cfg.ROCK_TRADE_THRESHOLD):
            return AgentState.TRADING
        if self.goal_reachable():
            return AgentState.SAVING
        return AgentState.COIN_COLLECTING

    def _rock_collect(self):
        self.searcher.probe(ROCK_LOOKING_FOR)
        if self.held(ContentKind.ROCK) >= self.config.ROCK_FINISH_THRESHOLD:
            self.set_state(AgentState.FINISHING, "enough rocks")
        elif self.held(ContentKind.COIN) >= self.config.COIN_SAVE_THRESHOLD:
            self.set_state(AgentState.SAVING, "banking surplus coins")

    def _trade(self):
        for kind in TRADEABLE:
            if self.held(kind) <= 0:
                continue
            try:
                coins = self.env.convert(kind)
                logger.info(f"You traded {kind.value} for {coins} coins")
            except SaverBotError as e:
                logger.warning(f"While trading {kind.value} there has been an issue: {e}")

        if self.held(ContentKind.COIN) >= self.config.COIN_SAVE_THRESHOLD:
            self.set_state(AgentState.SAVING)
        else:
            self.set_state(AgentState.COIN_COLLECTING)

    def _save(self):
        outcome = self.bank.deposit_coins()
        self.last_outcome = outcome.value
        coins = self.held(ContentKind.COIN)

        if outcome == DepositOutcome.ACCEPTED:
            if self.goal_met():
                self.set_state(AgentState.ROCK_COLLECTING, f"goal {self.goal} met")
            else:
                self.set_state(AgentState.COIN_COLLECTING, f"saved {self.saved}")
        elif outcome == DepositOutcome.NO_BANK:
            self.set_state(AgentState.BANK_SEARCHING, "no free bank known")
        elif outcome == DepositOutcome.UNREACHABLE:
            if coins <= self.config.COIN_GIVE_UP_THRESHOLD:
                self.set_state(AgentState.COIN_COLLECTING, "bank unreachable")
            else:
                self.set_state(AgentState.BANK_SEARCHING, "bank unreachable")
        elif outcome in (DepositOutcome.REJECTED, DepositOutcome.FAILED):
            # Nothing left to bank: go back to collecting rather than retrying
            if coins <= 0:
                self.set_state(AgentState.COIN_COLLECTING, "no coins to deposit")

    def _search_for_bank(self):
        # Unreachable banks back in view get another try
        reach = self.config.vicinity_size // 2
        self.bank.readmit_nearby(reach)
        if self.bank.next_target() is None:
            self.searcher.probe(BANK_LOOKING_FOR)
            window, here = self.env.observe_vicinity()
            self.perception.merge(window, here)
            self.bank.readmit_nearby(reach)
        if self.bank.next_target() is not None:
            self.set_state(AgentState.SAVING, "free bank known")

    def _finish(self):
        target = self._finishing_target()
        if target is None:
            self.set_state(AgentState.ENJOYING, "no bank known to build around")
            return

        here = self.env.position()
        if chebyshev(here, target) != 1:
            if not self.governor.allows(CostClass.FINISHING):
                return
            self.navigator.move_to(target)
            if chebyshev(self.env.position(), target) != 1:
                return

        if not self.governor.allows(CostClass.CONSTRUCTION):
            return

        shape = [(target[0] + dr, target[1] + dc) for dr, dc in RING]
        try:
            project = self.env.design_project(shape)
        except BuildFailed as e:
            # Every ring tile is already built over
            logger.info(f"nothing left to build around {target}: {e}")
            self.built_around = target
            self.set_state(AgentState.ENJOYING, "bank already surrounded")
            return

        try:
            self.env.apply(project)
        except BuildFailed as e:
            logger.warning(f"build around {target} failed: {e}")
            self.set_state(AgentState.ROCK_COLLECTING, "need more material")
            return
        except SaverBotError as e:
            logger.warning(f"build around {target} postponed: {e}")
            return

        self.built_around = target
        logger.info(f"Surrounded bank at {target} with {len(project.tiles)} tiles")
        self.set_state(AgentState.ENJOYING, f"built around {target}")

    def _finishing_target(self) -> Optional[tuple]:
        best = self.memory.best_earning()
        if best is not None:
            return best.coordinate
        here = self.env.position()
        known = [r.coordinate for r in self.memory.landmarks()]
        if not known:
            return None
        return min(known, key=lambda c: manhattan(here, c))

    def _enjoy(self):
        logger.debug("Enjoying")

    # ------------------------------------------------------------------ #
    #  State for the event sink / persistence                              #
    # ------------------------------------------------------------------ #
    def get_state(self) -> dict:
        return {
            "tick": self.total_ticks,
            "state": self.state.value,
            "energy": self.env.energy(),
            "pos": self.env.position(),
            "saved": self.saved,
            "goal": self.goal,
            "inventory": {k.value: v for k, v in self.env.inventory().items() if v},
            "free_banks": len(self.memory.free()),
            "filled_banks": len(self.memory.filled()),
            "seen_tiles": self.memory.seen_count,
            "steps": self.navigator.steps_taken,
            "outcome": self.last_outcome,
        }
