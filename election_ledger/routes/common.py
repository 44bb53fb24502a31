import logging

from fastapi import HTTPException, Request

from election_ledger.errors import (
    AlreadyDone,
    InvalidInput,
    InvalidState,
    LedgerError,
    StorageError,
    Unauthorized,
)
from election_ledger.ledger import ElectionLedger

logger = logging.getLogger(__name__)

STATUS_CODES = {
    Unauthorized: 403,
    InvalidState: 409,
    AlreadyDone: 409,
    InvalidInput: 400,
}


def get_ledger(request: Request) -> ElectionLedger:
    ledger = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise HTTPException(status_code=404, detail="Election not found.")
    return ledger


def to_http_exception(error: Exception) -> HTTPException:
    if isinstance(error, LedgerError):
        return HTTPException(status_code=STATUS_CODES.get(type(error), 400), detail=error.message)
    if isinstance(error, StorageError):
        logger.error(f"Storage failure: {error}")
        return HTTPException(status_code=500, detail="Storage error.")
    return HTTPException(status_code=500, detail="Internal Server Error")
