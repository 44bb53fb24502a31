from election_ledger.models.election_model import Candidate, Election

__all__ = ["Candidate", "Election"]
