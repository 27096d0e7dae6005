"""Logging configuration for SaverBot runs.

Creates two output files per run:
- <runs>/latest.log: Human-readable narrative of states, deposits, failures
- <runs>/latest_metrics.jsonl: Structured per-tick metrics
"""

import logging
import json
from datetime import datetime
from pathlib import Path


# Default runs directory (relative to where the bot is launched)
RUNS_DIR = Path.cwd() / "runs"

# Log file paths; rebound by setup_logging
LOG_FILE = RUNS_DIR / "latest.log"
METRICS_FILE = RUNS_DIR / "latest_metrics.jsonl"


def setup_logging(runs_dir: str | Path | None = None, console_level: int = logging.INFO):
    """Configure logging for a new run. Clears previous log files."""
    global RUNS_DIR, LOG_FILE, METRICS_FILE

    if runs_dir is not None:
        RUNS_DIR = Path(runs_dir)
        LOG_FILE = RUNS_DIR / "latest.log"
        METRICS_FILE = RUNS_DIR / "latest_metrics.jsonl"
    RUNS_DIR.mkdir(parents=True, exist_ok=True)

    # Clear previous log files
    if LOG_FILE.exists():
        LOG_FILE.unlink()
    if METRICS_FILE.exists():
        METRICS_FILE.unlink()

    # Create main logger
    logger = logging.getLogger("saverbot")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # File handler for narrative log (overwrites each run)
    file_handler = logging.FileHandler(LOG_FILE, mode='w')
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_format = logging.Formatter('[%(name)s] %(message)s')
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # Write run header
    logger.info(f"=== SaverBot Run Started: {datetime.now().isoformat()} ===")

    return logger


def get_logger(name: str = "saverbot") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def log_metrics(tick: int, agent_state: dict):
    """
    Write metrics to JSONL file.

    The CLI wires this in as the agent's event sink: called once per tick.
    """
    metrics = {
        "tick": tick,
        "timestamp": datetime.now().isoformat(),
        "state": agent_state.get("state", ""),
        "admitted": agent_state.get("admitted", False),
        "energy": agent_state.get("energy", 0),
        "pos": list(agent_state.get("pos", (0, 0))),
        "saved": agent_state.get("saved", 0),
        "goal": agent_state.get("goal"),
        "inventory": agent_state.get("inventory", {}),
        "free_banks": agent_state.get("free_banks", 0),
        "filled_banks": agent_state.get("filled_banks", 0),
        "seen_tiles": agent_state.get("seen_tiles", 0),
    }

    METRICS_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(METRICS_FILE, 'a') as f:
        f.write(json.dumps(metrics) + '\n')


def log_state_change(tick: int, old: str, new: str, reason: str = ""):
    """Log a state machine transition."""
    logger = logging.getLogger("saverbot.agent")
    logger.info(f"t={tick} | {old} -> {new}" + (f" | {reason}" if reason else ""))


def log_deposit(tick: int, bank: tuple, requested: int, accepted: int, total_saved: int):
    """Log a deposit attempt with its outcome."""
    logger = logging.getLogger("saverbot.bank")
    level = logging.INFO if accepted > 0 else logging.WARNING
    logger.log(
        level,
        f"DEPOSIT t={tick} | bank={bank} requested={requested} "
        f"accepted={accepted} total_saved={total_saved}"
    )
