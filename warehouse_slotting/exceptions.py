class SlottingError(Exception):
    """Base exception for Warehouse Slotting System errors.

    Carries a machine-readable ``code`` (e.g. ``NO_LOCATIONS``) and optional
    ``details`` next to the message. Subclasses only set a default message.
    """

    default_message = "An error occurred in the Warehouse Slotting System"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Error payload for callers that report failures as data."""
        payload = {'error': type(self).__name__, 'message': self.message}
        if self.code:
            payload['code'] = self.code
        if self.details:
            payload['details'] = dict(self.details)
        return payload


class ConfigError(SlottingError):
    """Invalid configuration or parameter object."""
    default_message = "Configuration error"


class DatabaseError(SlottingError):
    """A SQLAlchemy failure in the repository adapter."""
    default_message = "Database error"


class ValidationError(SlottingError):
    """A record violates a data-model invariant."""
    default_message = "Validation error"


class DataUnavailableError(SlottingError):
    """A collaborator fetch failed or returned an empty or inconsistent snapshot."""
    default_message = "Slotting data unavailable"


class InvalidStrategyError(SlottingError):
    """A slotting strategy failed validation."""
    default_message = "Invalid slotting strategy"


class AnalysisCancelledError(SlottingError):
    """An analysis run was cancelled or exceeded its deadline."""
    default_message = "Slotting analysis cancelled"


class MoveTaskError(SlottingError):
    """A move task could not be created."""
    default_message = "Move task error"
