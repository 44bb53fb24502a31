from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from election_ledger.errors import LedgerError, StorageError
from election_ledger.events import AnyEvent
from election_ledger.ledger import ElectionLedger
from election_ledger.models.election_model import (
    CandidateCreated,
    CandidateCreate,
    CandidateList,
    ElectionCreate,
    ElectionStatus,
)
from election_ledger.routes.common import get_ledger, to_http_exception
from election_ledger.security import get_caller_identity

router = APIRouter(prefix="/election", tags=["Election"])


@router.post("/create", status_code=201)
def create_election(election: ElectionCreate, request: Request, caller: str = Depends(get_caller_identity)):
    """
    Creates the election. The caller becomes its admin.
    Only one election exists per service.
    """
    state = request.app.state
    with state.ledger_lock:
        if state.ledger is not None:
            raise HTTPException(status_code=409, detail="Election already exists.")
        try:
            state.ledger = ElectionLedger.create(
                election.name,
                caller,
                store=state.store,
                events=state.events,
                lock_candidates_while_open=state.lock_candidates_while_open,
            )
        except (LedgerError, StorageError) as e:
            raise to_http_exception(e)
    return {"message": "Election created successfully!", "name": election.name, "admin_identity": caller}


@router.get("", response_model=ElectionStatus)
def get_election(ledger: ElectionLedger = Depends(get_ledger)):
    election = ledger.election()
    return ElectionStatus(
        name=election.name,
        is_open=election.is_open,
        admin_identity=election.admin_identity,
        candidates_count=ledger.candidates_count,
    )


@router.post("/candidates", response_model=CandidateCreated, status_code=201)
def add_candidate(
    candidate: CandidateCreate,
    ledger: ElectionLedger = Depends(get_ledger),
    caller: str = Depends(get_caller_identity),
):
    try:
        candidate_id = ledger.add_candidate(caller, candidate.name)
    except (LedgerError, StorageError) as e:
        raise to_http_exception(e)
    return CandidateCreated(message="Candidate added successfully!", candidate_id=candidate_id)


@router.get("/candidates", response_model=CandidateList)
def list_candidates(ledger: ElectionLedger = Depends(get_ledger)):
    return CandidateList(candidates=ledger.list_candidates())


@router.post("/open")
def open_voting(ledger: ElectionLedger = Depends(get_ledger), caller: str = Depends(get_caller_identity)):
    try:
        ledger.open_voting(caller)
    except (LedgerError, StorageError) as e:
        raise to_http_exception(e)
    return {"message": "Voting opened.", "is_open": True}


@router.post("/close")
def close_voting(ledger: ElectionLedger = Depends(get_ledger), caller: str = Depends(get_caller_identity)):
    try:
        ledger.close_voting(caller)
    except (LedgerError, StorageError) as e:
        raise to_http_exception(e)
    return {"message": "Voting closed.", "is_open": False}


@router.get("/events", response_model=List[AnyEvent])
def list_events(request: Request, since: int = Query(0, ge=0)):
    return request.app.state.events.events(since=since)
