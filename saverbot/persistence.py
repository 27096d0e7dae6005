"""Save/load persistence for SaverAgent memory."""

import json
from pathlib import Path

from .agent.core import AgentState, SaverAgent


STATE_VERSION = 1


def save_state(agent: SaverAgent, filepath: str):
    """Save the agent's state machine, ledger and spatial memory to JSON."""
    state = {
        "version": STATE_VERSION,
        "agent": {
            "state": agent.state.value,
            "total_ticks": agent.total_ticks,
            "saved": agent.bank.total_saved,
            "goal": agent.goal,
            "steps_taken": agent.navigator.steps_taken,
            "built_around": list(agent.built_around) if agent.built_around else None,
        },
        "memory": agent.memory.to_dict(),
    }

    Path(filepath).write_text(json.dumps(state, indent=2))


def load_state(filepath: str, agent: SaverAgent):
    """Load saved state into an existing agent instance.

    The goal is not restored: it belongs to the agent's configuration.
    """
    data = json.loads(Path(filepath).read_text())

    ad = data["agent"]
    agent.state = AgentState(ad.get("state", AgentState.COIN_COLLECTING.value))
    agent.total_ticks = ad.get("total_ticks", 0)
    agent.bank.total_saved = ad.get("saved", 0)
    agent.navigator.steps_taken = ad.get("steps_taken", 0)
    built = ad.get("built_around")
    agent.built_around = tuple(built) if built else None

    # Components share the memory object, so refill it in place
    agent.memory.restore(data.get("memory", {}))
