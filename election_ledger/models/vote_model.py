from pydantic import BaseModel, StrictInt
from typing import List

from election_ledger.models.election_model import Candidate


class Vote(BaseModel):
    candidate_id: StrictInt


class VoteCheck(BaseModel):
    identity: str
    has_voted: bool


class Results(BaseModel):
    total_votes: int
    results: List[Candidate]
