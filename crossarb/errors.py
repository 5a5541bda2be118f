# crossarb/errors.py

"""Exception types raised by the crossarb core."""


class CrossArbError(Exception):
    """Base class for crossarb errors."""


class ConfigurationError(CrossArbError):
    """A platform is addressed that has no fee schedule configured."""
