# election_ledger/errors.py


class LedgerError(Exception):
    """Base class for rejected ledger operations. Nothing is applied when raised."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(LedgerError):
    """Caller is not the election admin."""


class InvalidState(LedgerError):
    """Operation attempted in the wrong phase."""


class InvalidInput(LedgerError):
    """Empty name, unknown candidate id and the like."""


class AlreadyDone(LedgerError):
    """Voter already cast a vote."""


class StorageError(Exception):
    """The persistence substrate failed or holds unusable data."""
