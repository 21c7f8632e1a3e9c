class FitAvatarError(ValueError):
    """Base class for errors raised by the workout data core."""


class ValidationError(FitAvatarError):
    """Raised when a mutator receives malformed or out-of-range input."""


class NotFoundError(FitAvatarError):
    """Raised when an operation references a record id that does not exist."""


class DataImportError(FitAvatarError):
    """Raised when a transfer document is structurally invalid or incompatible."""
