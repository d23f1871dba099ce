"""
Error taxonomy for the Garage Booking application.
"""


class GarageError(Exception):
    """Base class for all application errors."""
    pass


class ConfigurationError(GarageError):
    """A required configuration key is absent."""
    pass


class ValidationError(GarageError):
    """User input was rejected before reaching the store."""
    pass


class StoreError(GarageError):
    """A database write failed; carries the driver's message."""
    pass


class EmailError(GarageError):
    """An SMTP transport or authentication failure."""
    pass
