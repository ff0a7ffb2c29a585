# app/core/errors.py


class LedgerError(Exception):
    """Base error for the debt ledger; carries the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LedgerError):
    """Debt or debt transaction missing, or owned by someone else."""

    status_code = 404


class ValidationError(LedgerError):
    """Input rejected before any database work starts."""

    status_code = 400


class StorageError(LedgerError):
    """The database failed inside an atomic block; the block was rolled back."""

    status_code = 500
