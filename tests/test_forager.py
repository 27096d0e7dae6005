"""
Tests for Forager harvesting and its bank-adjacency check.
"""

import pytest

from saverbot.world.objects import COIN_LOOKING_FOR, ContentKind

NEIGHBOUR_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
]


class TestLandmarkAdjacency:
    """Tests for the safety predicate."""

    @pytest.mark.parametrize("offset", NEIGHBOUR_OFFSETS)
    def test_every_neighbour_is_protected(self, world, memory, forager, offset):
        """A bank on any of the eight neighbours is detected."""
        memory.record_landmark((5 + offset[0], 5 + offset[1]))
        assert forager.landmark_adjacent()

    def test_filled_banks_count(self, world, memory, forager):
        """Filled banks still protect their tile."""
        memory.record_landmark((4, 4))
        memory.mark_filled((4, 4))
        assert forager.landmark_adjacent()

    def test_distant_bank_is_not_adjacent(self, world, memory, forager):
        memory.record_landmark((3, 5))
        assert not forager.landmark_adjacent()


class TestHarvestVicinity:
    """Tests for harvest_vicinity."""

    def test_zone_harvest_when_no_bank_near(self, world, forager):
        """Without a bank around, every wanted tile in the zone is taken."""
        world.place((4, 5), ContentKind.COIN)
        world.place((5, 6), ContentKind.COIN)
        world.place((6, 6), ContentKind.GARBAGE)
        world.place((4, 4), ContentKind.FISH)
        assert forager.harvest_vicinity(COIN_LOOKING_FOR) == 3
        inv = world.inventory()
        assert inv[ContentKind.COIN] == 2
        assert inv[ContentKind.GARBAGE] == 1
        assert world.content_at((4, 4)) == ContentKind.FISH

    def test_conservative_harvest_next_to_bank(self, world, memory, forager):
        """Next to a bank only orthogonal wanted tiles are destroyed."""
        world.place((4, 4), ContentKind.BANK)
        world.place((5, 4), ContentKind.COIN)
        world.place((6, 6), ContentKind.COIN)
        memory.record_landmark((4, 4))
        assert forager.harvest_vicinity(COIN_LOOKING_FOR) == 1
        assert world.content_at((5, 4)) == ContentKind.NONE
        assert world.content_at((6, 6)) == ContentKind.COIN
        assert world.content_at((4, 4)) == ContentKind.BANK

    def test_bank_only_wanted_is_noop(self, world, forager):
        """Banks are never harvested."""
        world.place((4, 5), ContentKind.BANK)
        assert forager.harvest_vicinity([ContentKind.BANK]) == 0
        assert world.content_at((4, 5)) == ContentKind.BANK

    def test_no_harvest_without_energy(self, world, forager):
        """Below the move threshold nothing is destroyed."""
        world.place((4, 5), ContentKind.COIN)
        world._energy = 10
        assert forager.harvest_vicinity(COIN_LOOKING_FOR) == 0
        assert world.content_at((4, 5)) == ContentKind.COIN
