"""Error types for session scheduling.

- InvalidInputError: bad identifiers, durations, recurrence values or
  timestamps. Raised before any resolution output exists.
- PersistenceError: one failed write against the session store.
- ParseAmbiguityError: free text could not be turned into concrete sessions.
"""


class SchedulingError(Exception):
    """Base exception for scheduling errors."""

    pass


class InvalidInputError(SchedulingError):
    """Raised when scheduling input is missing or malformed.

    Attributes:
        field: Name of the offending input field
        message: Human-readable description
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PersistenceError(SchedulingError):
    """Raised when the session store rejects a single write.

    Attributes:
        operation: "update" or "insert"
        session_id: ID of the updated session (None for inserts)
        position: Index of the failed write within its bucket
        original_error: Exception raised by the store
    """

    def __init__(
        self,
        operation: str,
        original_error: Exception,
        session_id: str | None = None,
        position: int | None = None,
    ) -> None:
        self.operation = operation
        self.session_id = session_id
        self.position = position
        self.original_error = original_error
        target = f" session {session_id}" if session_id else ""
        super().__init__(f"{operation}{target} failed: {original_error}")


class ParseAmbiguityError(SchedulingError):
    """Raised when parsed text lacks what is needed to build sessions.

    Never raised by the parser itself, only when a caller asks for concrete
    proposals from an incomplete parse.

    Attributes:
        missing: Names of the missing pieces ("time", "date")
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Could not determine: {', '.join(missing)}")
