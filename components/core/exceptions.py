"""Domain errors raised by repositories and mapped to HTTP responses."""


class LedgerError(Exception):
    """Base class for expected, user-facing ledger errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(LedgerError):
    """Input rejected before any mutation took place."""

    status_code = 400


class NotFound(LedgerError):
    """Referenced entity does not exist."""

    status_code = 404


class ReferenceConflict(LedgerError):
    """Entity is still referenced by other rows and cannot be removed."""

    status_code = 409
