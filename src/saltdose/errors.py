# src/saltdose/errors.py

class SaltdoseError(Exception):
    """Base exception for saltdose."""
    pass


class DataError(SaltdoseError):
    """Raised when a salt table or target file is invalid."""
    pass


class ConstraintParseError(DataError):
    """Raised when a target record cannot be turned into a constraint."""
    pass


class ConfigError(SaltdoseError):
    """Raised when optimizer settings are out of range."""
    pass
