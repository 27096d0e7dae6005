from dataclasses import dataclass, field, fields
from typing import Optional
import os

import yaml

from .errors import ConfigError


def _default_energy_thresholds() -> dict:
    return {
        "tick": 150,          # admission gate for the state handler
        "move": 50,           # single step / single destroy
        "search": 400,        # greedy search-and-harvest loop
        "construction": 500,  # design + apply a project
        "finishing": 700,     # setting out for the best-earning bank
    }


@dataclass
class SaverConfig:
    # Target total saved; None means collect and bank forever
    goal: Optional[int] = None

    # CoinCollecting exits
    COIN_SAVE_THRESHOLD: int = 12        # coins held before heading to a bank
    GARBAGE_TRADE_THRESHOLD: int = 5
    ROCK_TRADE_THRESHOLD: int = 3

    # Saving fallbacks
    COIN_GIVE_UP_THRESHOLD: int = 3      # unreachable bank with this few coins -> keep collecting

    # RockCollecting exit
    ROCK_FINISH_THRESHOLD: int = 8

    # Energy gates, keyed by cost class name
    energy_thresholds: dict = field(default_factory=_default_energy_thresholds)

    # Search / navigation bounds
    search_depth: int = 6
    wander_steps: int = 3
    max_walk_steps: int = 200
    vicinity_size: int = 3

    # Random source for quadrant and wander choices
    seed: Optional[int] = None

    def validate(self) -> "SaverConfig":
        if self.goal is not None and self.goal < 0:
            raise ConfigError(f"goal must be non-negative, got {self.goal}")
        for name, value in self.energy_thresholds.items():
            if value < 0:
                raise ConfigError(f"energy threshold '{name}' is negative: {value}")
        missing = set(_default_energy_thresholds()) - set(self.energy_thresholds)
        if missing:
            raise ConfigError(f"missing energy thresholds: {sorted(missing)}")
        if self.vicinity_size < 3 or self.vicinity_size % 2 == 0:
            raise ConfigError("vicinity_size must be an odd number >= 3")
        for name in ("search_depth", "wander_steps", "max_walk_steps"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative")
        return self


# Safe load of a YAML config, ignoring unknown keys
def load_config(path: str = "saverbot.yaml") -> SaverConfig:
    """Load configuration from YAML, filter to SaverConfig fields."""
    cfg = SaverConfig()
    if os.path.exists(path):
        with open(path) as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(raw).__name__}")
        valid = {f.name for f in fields(SaverConfig)}
        filtered = {k: v for k, v in raw.items() if k in valid}
        # Partial threshold overrides keep the remaining defaults
        if "energy_thresholds" in filtered:
            merged = _default_energy_thresholds()
            merged.update(filtered["energy_thresholds"] or {})
            filtered["energy_thresholds"] = merged
        cfg = SaverConfig(**filtered)
    return cfg.validate()
