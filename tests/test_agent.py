"""
Tests for the SaverAgent state machine.
"""

import pytest

from saverbot.agent.core import AgentState, SaverAgent
from saverbot.config import SaverConfig
from saverbot.world.grid import SaverWorld
from saverbot.world.objects import ContentKind


def make_agent(world, goal=None, **overrides):
    config = SaverConfig(goal=goal, seed=1, **overrides)
    return SaverAgent(world, config)


def hold(world, **counts):
    for name, n in counts.items():
        world.backpack[ContentKind(name)] = n


class TestCoinCollectingExit:
    """Tests for the CoinCollecting exit condition."""

    @pytest.mark.parametrize("coins,garbage,rock", [
        (12, 0, 0), (13, 9, 0), (40, 0, 7), (12, 5, 3),
    ])
    def test_twelve_or_more_coins_saves(self, world, coins, garbage, rock):
        """Any inventory with at least 12 coins heads to Saving."""
        agent = make_agent(world)
        hold(world, coin=coins, garbage=garbage, rock=rock)
        assert agent.next_from_coin_collecting() == AgentState.SAVING

    @pytest.mark.parametrize("garbage,rock", [(5, 0), (0, 3), (9, 9)])
    def test_junk_triggers_trading(self, world, garbage, rock):
        agent = make_agent(world)
        hold(world, coin=2, garbage=garbage, rock=rock)
        assert agent.next_from_coin_collecting() == AgentState.TRADING

    def test_goal_already_met_stops_collecting(self, world):
        """A goal of zero is met before any coin is banked."""
        agent = make_agent(world, goal=0)
        assert agent.next_from_coin_collecting() == AgentState.ROCK_COLLECTING
        agent.tick()
        assert agent.state == AgentState.ROCK_COLLECTING

    def test_keeps_collecting(self, world):
        agent = make_agent(world)
        hold(world, coin=11, garbage=4, rock=2)
        assert agent.next_from_coin_collecting() == AgentState.COIN_COLLECTING

    def test_goal_within_reach_saves(self, world):
        """Held coins that would finish the goal are banked early."""
        agent = make_agent(world, goal=10)
        hold(world, coin=10)
        assert agent.next_from_coin_collecting() == AgentState.SAVING

    def test_goal_scenario_transitions_in_one_tick(self):
        """goal=50, nothing saved, 12 coins held: Saving after one tick."""
        world = SaverWorld.empty(size=20, pos=(10, 10))
        agent = make_agent(world, goal=50)
        hold(world, coin=12)
        agent.tick()
        assert agent.state == AgentState.SAVING


class TestTickSequence:
    """Tests for the per-tick ordering and admission gate."""

    def test_low_energy_skips_handler(self, world):
        """Under the admission threshold the state handler does not run."""
        agent = make_agent(world)
        hold(world, coin=12)
        world._energy = 100
        result = agent.tick()
        assert result["admitted"] is False
        assert agent.state == AgentState.COIN_COLLECTING

    def test_perception_runs_without_energy(self, world):
        """Banks in view are remembered even when the tick is not admitted."""
        world.place((4, 6), ContentKind.BANK)
        world._energy = 0
        agent = make_agent(world)
        agent.tick()
        assert agent.memory.free() == [(4, 6)]

    def test_event_sink_called_each_tick(self, world):
        events = []
        agent = SaverAgent(world, SaverConfig(seed=1), event_sink=events.append)
        agent.tick()
        agent.tick()
        assert [e["tick"] for e in events] == [1, 2]
        assert events[0]["state"] in {s.value for s in AgentState}


class TestSaving:
    """Tests for the Saving and BankSearching states."""

    def _saving_agent(self, world, goal=None, capacity=100):
        world.place((5, 7), ContentKind.BANK, capacity=capacity)
        agent = make_agent(world, goal=goal)
        agent.memory.record_landmark((5, 7))
        agent.state = AgentState.SAVING
        hold(world, coin=12)
        return agent

    def test_deposit_returns_to_collecting(self, world):
        agent = self._saving_agent(world)
        agent.tick()
        assert agent.saved == 12
        assert agent.state == AgentState.COIN_COLLECTING

    def test_goal_met_starts_rock_collecting(self, world):
        agent = self._saving_agent(world, goal=12)
        agent.tick()
        assert agent.state == AgentState.ROCK_COLLECTING

    def test_full_bank_marked_filled(self, world):
        """A zero deposit fills the bank; the next tick goes searching."""
        agent = self._saving_agent(world, capacity=0)
        agent.tick()
        assert agent.memory.filled() == [(5, 7)]
        assert agent.saved == 0
        assert agent.state == AgentState.SAVING
        agent.tick()
        assert agent.state == AgentState.BANK_SEARCHING

    def test_no_bank_known_searches(self, world):
        agent = make_agent(world)
        agent.state = AgentState.SAVING
        hold(world, coin=12)
        agent.tick()
        assert agent.state == AgentState.BANK_SEARCHING

    def test_bank_in_view_ends_search(self, world):
        """A free bank sensed while searching sends the agent back to Saving."""
        world.place((4, 6), ContentKind.BANK)
        agent = make_agent(world)
        agent.state = AgentState.BANK_SEARCHING
        agent.tick()
        assert agent.state == AgentState.SAVING
        assert world.position() == (5, 5)


def walled_off_bank(with_spare=True):
    """Agent at (5, 5); a row of full banks at row 7 hides a free bank at (9, 5)."""
    world = SaverWorld.empty(size=20, pos=(5, 5))
    agent = make_agent(world)
    for col in range(20):
        world.place((7, col), ContentKind.BANK, capacity=0)
        agent.memory.record_landmark((7, col))
        agent.memory.mark_filled((7, col))
    world.place((9, 5), ContentKind.BANK, capacity=50)
    agent.memory.record_landmark((9, 5))
    if with_spare:
        world.place((2, 15), ContentKind.BANK, capacity=50)
        agent.memory.record_landmark((2, 15))
    agent.state = AgentState.SAVING
    return world, agent


class TestUnreachableBank:
    """Tests for Saving when the nearest free bank cannot be reached."""

    def test_falls_through_to_reachable_bank(self):
        """The walled-off bank is skipped and the other free bank gets the coins."""
        world, agent = walled_off_bank()
        hold(world, coin=12)
        states = []
        for _ in range(10):
            agent.tick()
            states.append(agent.state)
            if agent.saved:
                break
        assert states[0] == AgentState.BANK_SEARCHING
        assert agent.saved == 12
        assert agent.bank.last_bank == (2, 15)
        assert agent.state == AgentState.COIN_COLLECTING

    def test_few_coins_go_back_to_collecting(self):
        """With three coins or fewer an unreachable bank is not worth chasing."""
        world, agent = walled_off_bank()
        hold(world, coin=3)
        agent.tick()
        assert agent.state == AgentState.COIN_COLLECTING
        assert agent.bank.unreachable == {(9, 5)}

    def test_searching_does_not_bounce_back(self):
        """With no other free bank the agent keeps searching instead of retrying."""
        world, agent = walled_off_bank(with_spare=False)
        hold(world, coin=12)
        agent.tick()
        assert agent.state == AgentState.BANK_SEARCHING
        for _ in range(5):
            agent.tick()
            assert agent.state == AgentState.BANK_SEARCHING
        assert agent.saved == 0


class TestTrading:
    """Tests for the Trading state."""

    def test_trade_then_collect(self, world):
        """5 garbage + 3 rocks recycle into 11 coins: not enough to save."""
        agent = make_agent(world)
        agent.state = AgentState.TRADING
        hold(world, garbage=5, rock=3)
        agent.tick()
        assert world.inventory()[ContentKind.COIN] == 11
        assert world.inventory()[ContentKind.GARBAGE] == 0
        assert agent.state == AgentState.COIN_COLLECTING

    def test_trade_then_save(self, world):
        agent = make_agent(world)
        agent.state = AgentState.TRADING
        hold(world, coin=1, garbage=5, rock=3)
        agent.tick()
        assert agent.state == AgentState.SAVING


class TestFinishing:
    """Tests for RockCollecting, Finishing and Enjoying."""

    def test_rocks_lead_to_finishing(self, world):
        agent = make_agent(world)
        agent.state = AgentState.ROCK_COLLECTING
        hold(world, rock=8)
        agent.tick()
        assert agent.state == AgentState.FINISHING

    def test_surrounds_best_bank(self, world):
        """With rocks and energy the best-earning bank gets a full ring."""
        world.place((5, 7), ContentKind.BANK)
        agent = make_agent(world)
        agent.memory.credit((5, 7), 30)
        agent.state = AgentState.FINISHING
        hold(world, rock=8)
        agent.tick()
        assert agent.state == AgentState.ENJOYING
        assert agent.built_around == (5, 7)
        assert len(world.paved) == 8
        assert world.inventory()[ContentKind.ROCK] == 0

    def test_waits_for_finishing_energy(self, world):
        """Too little energy to set out: stay put and stay Finishing."""
        agent = make_agent(world)
        agent.memory.credit((5, 9), 30)
        agent.state = AgentState.FINISHING
        hold(world, rock=8)
        world._energy = 600
        agent.tick()
        assert agent.state == AgentState.FINISHING
        assert world.position() == (5, 5)

    def test_short_of_material_collects_rocks(self, world):
        world.place((5, 7), ContentKind.BANK)
        agent = make_agent(world)
        agent.memory.credit((5, 7), 30)
        agent.state = AgentState.FINISHING
        hold(world, rock=3)
        agent.tick()
        assert agent.state == AgentState.ROCK_COLLECTING
        assert world.paved == set()

    def test_nothing_to_build_around(self, world):
        agent = make_agent(world)
        agent.state = AgentState.FINISHING
        agent.tick()
        assert agent.state == AgentState.ENJOYING

    def test_enjoying_is_terminal(self, world):
        world.place((5, 6), ContentKind.COIN)
        agent = make_agent(world)
        agent.state = AgentState.ENJOYING
        for _ in range(3):
            agent.tick()
        assert agent.state == AgentState.ENJOYING
        assert world.position() == (5, 5)
        assert world.content_at((5, 6)) == ContentKind.COIN


class TestLongRun:
    """Whole-agent runs on a scattered world."""

    def test_invariants_hold_over_a_run(self):
        """Saved never drops and no bank is both free and filled."""
        world = SaverWorld(size=20, seed=3)
        agent = SaverAgent(world, SaverConfig(goal=30, seed=1))
        last_saved = 0
        for _ in range(300):
            world.tick()
            world.recharge(40)
            for event in world.events:
                agent.handle_event(event)
            agent.tick()
            assert agent.saved >= last_saved
            last_saved = agent.saved
            assert not set(agent.memory.free()) & set(agent.memory.filled())
