class RackRushError(Exception):
    """Base class for errors raised at the engine boundary."""


class IllegalPhaseError(RackRushError):
    """An operation was requested in a phase that does not allow it."""

    def __init__(self, operation: str, phase: str):
        super().__init__(f"Cannot {operation} while the game is in phase '{phase}'.")
        self.operation = operation
        self.phase = phase


class InvalidStagingError(RackRushError):
    """A staged placement does not describe a legal set of rack tiles on free squares."""


class UnknownModeError(RackRushError):
    def __init__(self, mode: str):
        super().__init__(f"Unknown game mode '{mode}'.")
        self.mode = mode
