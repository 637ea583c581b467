"""Domain errors; main.py maps them to HTTP responses."""


class FitRecordError(Exception):
    """Base class for domain errors the API maps to client-facing responses."""


class NotFoundError(FitRecordError, LookupError):
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class SessionClosedError(FitRecordError):
    """A set belonging to an ended workout session was edited or completed."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Workout session {session_id} has ended; its sets are read-only")


class InvalidRestDurationError(FitRecordError, ValueError):
    def __init__(self, seconds: int, presets: tuple[int, ...]):
        self.seconds = seconds
        self.presets = presets
        allowed = ", ".join(str(p) for p in presets)
        super().__init__(f"Rest duration {seconds}s is not a preset (allowed: {allowed})")


class SetMismatchError(FitRecordError, ValueError):
    """The set does not belong to the client or exercise it was completed for."""

    def __init__(self, set_id: str, field: str, expected: str, given: str):
        self.set_id = set_id
        self.field = field
        super().__init__(f"Set {set_id} belongs to {field} {expected}, not {given}")
