from .bank import BankTransactor, DepositOutcome
from .core import AgentState, SaverAgent
from .energy import CostClass, EnergyGovernor
from .forager import Forager
from .memory import LandmarkRecord, LandmarkStatus, PerceptionMerger, SpatialMemory
from .navigator import Navigator
from .searcher import Searcher

__all__ = [
    "AgentState", "SaverAgent", "BankTransactor", "DepositOutcome", "CostClass",
    "EnergyGovernor", "Forager", "LandmarkRecord", "LandmarkStatus",
    "PerceptionMerger", "SpatialMemory", "Navigator", "Searcher",
]
