"""
SaverBot: a foraging agent that banks coins in a partially observed grid.
"""

from .agent import AgentState, SaverAgent
from .config import SaverConfig, load_config

__version__ = "0.1.0"

__all__ = ["AgentState", "SaverAgent", "SaverConfig", "load_config"]
