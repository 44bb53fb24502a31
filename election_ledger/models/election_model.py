from pydantic import BaseModel, Field
from typing import List


class Candidate(BaseModel):
    id: int
    name: str
    vote_count: int = 0


class Election(BaseModel):
    name: str
    is_open: bool = False
    admin_identity: str


class ElectionCreate(BaseModel):
    name: str = Field(..., examples=["Council Election"])


class CandidateCreate(BaseModel):
    name: str = Field(..., examples=["Alice"])


class CandidateCreated(BaseModel):
    message: str
    candidate_id: int


class ElectionStatus(BaseModel):
    name: str
    is_open: bool
    admin_identity: str
    candidates_count: int


class CandidateList(BaseModel):
    candidates: List[Candidate]
