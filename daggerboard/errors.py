"""Typed errors surfaced by state operations.

Every error is scoped to a single command: callers receive a
human-readable message and nothing is retried automatically.
"""


class DaggerboardError(Exception):
    """Base class for all state-layer errors."""

    kind: str = "error"
    status_code: int = 500
    prefix: str = "Error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class EntityNotFound(DaggerboardError):
    """A record looked up by id does not exist."""
    kind = "entity_not_found"
    status_code = 404
    prefix = "Entity not found"


class TrackerNotFound(DaggerboardError):
    """A countdown tracker looked up by id does not exist."""
    kind = "tracker_not_found"
    status_code = 404
    prefix = "Tracker not found"


class InvalidOperation(DaggerboardError):
    """The operation does not apply to the current state."""
    kind = "invalid_operation"
    status_code = 400
    prefix = "Invalid operation"


class OutOfRange(DaggerboardError):
    """A numeric argument lies outside its permitted range."""
    kind = "out_of_range"
    status_code = 400
    prefix = "Value out of range"


class ValidationFailed(DaggerboardError):
    """A business rule refused the request."""
    kind = "validation"
    status_code = 409
    prefix = "Validation error"


class LockError(DaggerboardError):
    """The state lock could not be acquired."""
    kind = "lock_error"
    status_code = 503
    prefix = "State lock error"


class PersistenceError(DaggerboardError):
    """The storage layer failed; the command was rolled back."""
    kind = "persistence_error"
    status_code = 500
    prefix = "Persistence error"


class EmitError(DaggerboardError):
    """A change notification could not be delivered."""
    kind = "emit_error"
    status_code = 500
    prefix = "Event emission error"
