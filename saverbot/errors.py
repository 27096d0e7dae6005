"""Error taxonomy for collaborator calls and configuration."""


class SaverBotError(Exception):
    """Base class for everything the saverbot package raises."""


class MovementError(SaverBotError):
    """A step could not be taken."""


class MovementBlocked(MovementError):
    """The target tile is out of bounds or occupied by solid content."""


class InsufficientEnergy(MovementError):
    """The embodiment does not have enough energy for the action."""


class InteractionError(SaverBotError):
    """A destroy/put style interaction with a tile failed."""


class InventoryEmpty(InteractionError):
    """Nothing of the requested kind is held."""


class InsufficientInventory(InventoryEmpty):
    """Less of the requested kind is held than the action needs."""


class DepositRejected(InteractionError):
    """The target tile does not accept deposits."""


class ConversionFailed(SaverBotError):
    """An inventory slot could not be converted into coins."""


class SearchExhausted(SaverBotError):
    """A directional search could not be run."""


class BuildFailed(SaverBotError):
    """A construction project could not be designed or applied."""


class ConfigError(SaverBotError):
    """Invalid configuration supplied at construction time."""
