"""Error kinds raised by the care log."""


class CareLogError(Exception):
    """Base class for all care log errors."""


class StorageError(CareLogError):
    """The underlying store could not be opened, created, read or written."""


class ValidationError(CareLogError, ValueError):
    """A caller supplied an out-of-range or otherwise invalid value."""
