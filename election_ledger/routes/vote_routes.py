from fastapi import APIRouter, Depends

from election_ledger.errors import LedgerError, StorageError
from election_ledger.ledger import ElectionLedger
from election_ledger.models.vote_model import Results, Vote, VoteCheck
from election_ledger.routes.common import get_ledger, to_http_exception
from election_ledger.security import get_caller_identity

vote_router = APIRouter(prefix="/vote", tags=["Vote"])


@vote_router.post("/cast")
def cast_vote(vote: Vote, ledger: ElectionLedger = Depends(get_ledger), voter: str = Depends(get_caller_identity)):
    """
    Casts the caller's single vote for a candidate id.
    """
    try:
        ledger.cast_vote(voter, vote.candidate_id)
    except (LedgerError, StorageError) as e:
        raise to_http_exception(e)
    return {"message": "Vote cast successfully!", "candidate_id": vote.candidate_id}


@vote_router.get("/check/{identity}", response_model=VoteCheck)
def check_vote(identity: str, ledger: ElectionLedger = Depends(get_ledger)):
    return VoteCheck(identity=identity, has_voted=ledger.has_voted(identity))


@vote_router.get("/results", response_model=Results)
def get_results(ledger: ElectionLedger = Depends(get_ledger)):
    results = ledger.results()
    return Results(total_votes=sum(c.vote_count for c in results), results=results)
