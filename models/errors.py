class ExpenseTrackerError(Exception):
    """Base error. `code` is machine readable, `message` is shown to the user."""

    code = "error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(ExpenseTrackerError):
    """User-correctable field errors. Never logged as a fault."""

    code = "invalid"

    def __init__(self, field_errors: dict[str, str], code: str | None = None):
        message = "; ".join(field_errors.values()) or "Invalid input"
        super().__init__(message, code)
        self.field_errors = dict(field_errors)


class NotFoundError(ExpenseTrackerError):
    code = "not-found"


class ConflictError(ExpenseTrackerError):
    """Duplicate category name ("duplicate") or category still referenced ("in-use")."""

    code = "conflict"


class StoreError(ExpenseTrackerError):
    """The database failed. Transient from the caller's point of view; retry is fine."""

    code = "store"
