from .grid import SaverWorld
from .interface import Environment, Project
from .objects import ContentKind, Direction, Quadrant, Tile

__all__ = ["SaverWorld", "Environment", "Project", "ContentKind", "Direction", "Quadrant", "Tile"]
