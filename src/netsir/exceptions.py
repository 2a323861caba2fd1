"""Exceptions raised by the simulation core."""


class NetsirError(Exception):
    """Base class for netsir errors."""


class InvalidParameterError(NetsirError, ValueError):
    """Raised at construction when an input is out of range or malformed."""


class InvalidStateError(NetsirError, RuntimeError):
    """Raised when results are requested before the run completes, or a run is restarted."""
