"""Exception types raised by the planner core."""


class PlannerError(Exception):
    """Base class for failures the upward API reports as results."""
    kind = "error"


class ValidationError(PlannerError):
    """Boundary input is missing or malformed."""
    kind = "validation"


class NotFound(PlannerError):
    """The referenced user does not exist."""
    kind = "not_found"


class ConflictError(PlannerError):
    """Compare-and-swap retries on one aggregate were exhausted."""
    kind = "conflict"


class StorageUnavailable(PlannerError):
    """The key/value substrate could not be reached. Safe to retry."""
    kind = "storage"


class CorruptRecord(PlannerError):
    """A stored value could not be decoded."""
    kind = "storage"
