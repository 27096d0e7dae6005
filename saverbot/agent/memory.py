"""Spatial memory: known banks with their ledger, plus every tile seen so far."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..world.objects import ContentKind, manhattan

logger = logging.getLogger("saverbot.memory")


class LandmarkStatus(Enum):
    FREE = "free"
    FILLED = "filled"


@dataclass
class LandmarkRecord:
    """A known bank. Status only ever moves FREE -> FILLED."""
    coordinate: tuple
    status: LandmarkStatus = LandmarkStatus.FREE
    deposited: int = 0


class SpatialMemory:
    """
    Landmark records keyed by coordinate, and the seen-tile set.

    Keeping one record per coordinate with a status tag means a bank can
    never be free and filled at the same time. Both structures only grow.
    """

    def __init__(self):
        self._landmarks: dict[tuple, LandmarkRecord] = {}
        self._seen: set[tuple] = set()          # (coord, ContentKind)
        self._seen_coords: set[tuple] = set()

    # ------------------------------------------------------------------ #
    #  Landmarks                                                           #
    # ------------------------------------------------------------------ #
    def record_landmark(self, coord: tuple) -> bool:
        coord = tuple(coord)
        if coord in self._landmarks:
            return False
        self._landmarks[coord] = LandmarkRecord(coord)
        logger.info(f"Discovered bank at {coord}")
        return True

    def mark_filled(self, coord: tuple):
        record = self._landmarks.get(tuple(coord))
        if record is None or record.status != LandmarkStatus.FREE:
            logger.debug(f"[Mem] mark_filled ignored for {coord}: not a free bank")
            return
        record.status = LandmarkStatus.FILLED
        logger.info(f"Bank at {record.coordinate} is full")

    def nearest_free(self, from_coord: tuple, exclude=()) -> Optional[tuple]:
        best = None
        best_dist = None
        for coord, record in self._landmarks.items():
            if record.status != LandmarkStatus.FREE or coord in exclude:
                continue
            dist = manhattan(coord, from_coord)
            if best_dist is None or dist < best_dist:
                best, best_dist = coord, dist
        return best

    def status_of(self, coord: tuple) -> Optional[LandmarkStatus]:
        record = self._landmarks.get(tuple(coord))
        return record.status if record else None

    def credit(self, coord: tuple, amount: int):
        """Add an accepted deposit to the bank's ledger entry."""
        coord = tuple(coord)
        record = self._landmarks.get(coord)
        if record is None:
            record = self._landmarks[coord] = LandmarkRecord(coord)
        record.deposited += amount

    def best_earning(self) -> Optional[LandmarkRecord]:
        best = None
        for record in self._landmarks.values():
            if record.deposited > 0 and (best is None or record.deposited > best.deposited):
                best = record
        return best

    def free(self) -> list[tuple]:
        return [c for c, r in self._landmarks.items() if r.status == LandmarkStatus.FREE]

    def filled(self) -> list[tuple]:
        return [c for c, r in self._landmarks.items() if r.status == LandmarkStatus.FILLED]

    def landmarks(self) -> list[LandmarkRecord]:
        return list(self._landmarks.values())

    # ------------------------------------------------------------------ #
    #  Seen tiles                                                          #
    # ------------------------------------------------------------------ #
    def record_seen(self, coord: tuple, content: ContentKind):
        coord = tuple(coord)
        self._seen.add((coord, content))
        self._seen_coords.add(coord)

    def has_been_seen(self, coord: tuple) -> bool:
        return tuple(coord) in self._seen_coords

    @property
    def seen_count(self) -> int:
        return len(self._seen)

    # ------------------------------------------------------------------ #
    #  Serialization                                                       #
    # ------------------------------------------------------------------ #
    def to_dict(self) -> dict:
        return {
            "landmarks": [
                {"coordinate": list(r.coordinate), "status": r.status.value,
                 "deposited": r.deposited}
                for r in self._landmarks.values()
            ],
            "seen": [[list(coord), kind.value] for coord, kind in self._seen],
        }

    def restore(self, data: dict):
        """Replace the contents with a to_dict() snapshot."""
        self._landmarks.clear()
        self._seen.clear()
        self._seen_coords.clear()
        for d in data.get("landmarks", []):
            coord = tuple(d["coordinate"])
            self._landmarks[coord] = LandmarkRecord(
                coord, LandmarkStatus(d.get("status", "free")), d.get("deposited", 0))
        for coord, kind in data.get("seen", []):
            self.record_seen(tuple(coord), ContentKind(kind))

    @classmethod
    def from_dict(cls, data: dict) -> "SpatialMemory":
        memory = cls()
        memory.restore(data)
        return memory


class PerceptionMerger:
    """Folds a sensed window into spatial memory. No energy, no movement."""

    def __init__(self, memory: SpatialMemory):
        self.memory = memory

    def merge(self, window, self_coord: tuple) -> int:
        half = len(window) // 2
        row, col = self_coord
        found = 0
        for i, tiles in enumerate(window):
            for j, tile in enumerate(tiles):
                if tile is None:
                    continue
                coord = (row + i - half, col + j - half)
                self.memory.record_seen(coord, tile.content)
                if tile.content == ContentKind.BANK and self.memory.record_landmark(coord):
                    found += 1
        return found
