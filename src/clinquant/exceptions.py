"""Exceptions raised by clinquant."""


class ConfigurationError(ValueError):
    """Raised when a variable configuration cannot be binned.

    Covers non-positive zone bin counts, a normal range whose lower bound is
    not below its upper bound, an inverted data range and an empty
    distribution. Raised before any bin is produced for the variable.
    """
