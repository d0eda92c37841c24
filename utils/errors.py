class DrillError(Exception):
    """Base class for trainer errors."""


class ConfigError(DrillError, ValueError):
    """Invalid number selection or game configuration."""


class EmptyDeckError(DrillError):
    """Selection was asked to pick from no candidates."""


class InvalidTransitionError(DrillError):
    """Session engine API called in the wrong state."""


class AlreadyRecordedError(InvalidTransitionError):
    """A finished session was recorded a second time."""


class PersistenceError(DrillError):
    """Writing to the store failed."""
