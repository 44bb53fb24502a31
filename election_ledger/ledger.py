# election_ledger/ledger.py
"""
The election state machine.

One ``ElectionLedger`` owns the election record, the candidate table and the
voter records. Every mutating call runs under a single lock: preconditions
are checked first, the store is written next and the in-memory state is
updated last, so a failure at any step leaves nothing applied. Events are
numbered inside the lock and handed to sinks after it is released, so sinks
can neither undo a commit nor hold up other callers.
"""
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from election_ledger.errors import (
    AlreadyDone,
    InvalidInput,
    InvalidState,
    StorageError,
    Unauthorized,
)
from election_ledger.events import CandidateAdded, EventLog, VoteCast, VotingStatusChanged
from election_ledger.models.election_model import Candidate, Election
from election_ledger.storage import MemoryStore

logger = logging.getLogger(__name__)


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


class ElectionLedger:
    def __init__(
        self,
        election: Election,
        candidates: Optional[Iterable[Candidate]] = None,
        voters: Optional[Iterable[str]] = None,
        store=None,
        events: Optional[EventLog] = None,
        lock_candidates_while_open: bool = False,
    ):
        self._election = election
        self._candidates: List[Candidate] = list(candidates or [])
        self._voters: Dict[str, bool] = {identity: True for identity in voters or []}
        self.events = events if events is not None else EventLog()
        self.lock_candidates_while_open = lock_candidates_while_open
        self._lock = threading.RLock()
        if store is None:
            # default store starts out holding this ledger's state
            store = MemoryStore()
            store.create(self.snapshot())
        self._store = store

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def create(cls, election_name: str, creator_identity: str, store=None, events=None, **kwargs) -> "ElectionLedger":
        if _is_blank(election_name):
            raise InvalidInput("election name must not be empty")
        if _is_blank(creator_identity):
            raise InvalidInput("creator identity must not be empty")

        election = Election(name=election_name, is_open=False, admin_identity=creator_identity)
        ledger = cls(election, store=store, events=events, **kwargs)
        if store is not None:
            store.create(ledger.snapshot())
        logger.info(f"Election '{election_name}' created by {creator_identity}")
        return ledger

    @classmethod
    def restore(cls, snapshot: Dict[str, Any], store=None, events=None, **kwargs) -> "ElectionLedger":
        """Rebuild a ledger from ``snapshot()`` output, checking every invariant."""
        try:
            election = Election(**snapshot["election"])
            candidates = [Candidate(**c) for c in snapshot.get("candidates", [])]
            voters = list(snapshot.get("voters", []))
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Unreadable election snapshot: {e}") from e

        for position, candidate in enumerate(candidates, start=1):
            if candidate.id != position:
                raise StorageError(f"Candidate ids are not dense: expected {position}, found {candidate.id}")
            if _is_blank(candidate.name) or candidate.vote_count < 0:
                raise StorageError(f"Candidate {candidate.id} is malformed")
        if len(set(voters)) != len(voters):
            raise StorageError("A voter is recorded more than once")
        if sum(c.vote_count for c in candidates) != len(voters):
            raise StorageError("Vote counts do not match the number of voters")

        logger.info(f"Election '{election.name}' restored with {len(candidates)} candidates, {len(voters)} votes")
        return cls(election, candidates, voters, store=store, events=events, **kwargs)

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------
    def _require_admin(self, caller_identity: str, action: str) -> None:
        if caller_identity != self._election.admin_identity:
            logger.warning(f"Rejected {action} from non-admin {caller_identity}")
            raise Unauthorized(f"only the election admin may {action}")

    def add_candidate(self, caller_identity: str, name: str) -> int:
        with self._lock:
            self._require_admin(caller_identity, "add candidates")
            if _is_blank(name):
                raise InvalidInput("candidate name must not be empty")
            if self.lock_candidates_while_open and self._election.is_open:
                raise InvalidState("candidates cannot be added while voting is open")

            candidate = Candidate(id=len(self._candidates) + 1, name=name, vote_count=0)
            self._store.add_candidate(candidate)
            self._candidates.append(candidate)
            logger.info(f"Candidate {candidate.id} '{name}' added")
            event = self.events.record(CandidateAdded(id=candidate.id, name=name))
        self.events.dispatch(event)
        return candidate.id

    def open_voting(self, caller_identity: str) -> None:
        self._set_open(caller_identity, True)

    def close_voting(self, caller_identity: str) -> None:
        self._set_open(caller_identity, False)

    def _set_open(self, caller_identity: str, is_open: bool) -> None:
        action = "open voting" if is_open else "close voting"
        with self._lock:
            self._require_admin(caller_identity, action)
            if self._election.is_open == is_open:
                raise InvalidState(f"voting is already {'open' if is_open else 'closed'}")

            self._store.set_open(is_open)
            self._election.is_open = is_open
            logger.info(f"Voting {'opened' if is_open else 'closed'} for '{self._election.name}'")
            event = self.events.record(VotingStatusChanged(is_open=is_open))
        self.events.dispatch(event)

    # ------------------------------------------------------------------
    # Participant operations
    # ------------------------------------------------------------------
    def cast_vote(self, voter_identity: str, candidate_id: int) -> None:
        with self._lock:
            if not self._election.is_open:
                raise InvalidState("voting not open")
            if self._voters.get(voter_identity, False):
                raise AlreadyDone("already voted")
            if isinstance(candidate_id, bool) or not isinstance(candidate_id, int) \
                    or not 1 <= candidate_id <= len(self._candidates):
                raise InvalidInput("invalid candidate")

            self._store.record_vote(voter_identity, candidate_id)
            candidate = self._candidates[candidate_id - 1]
            self._candidates[candidate_id - 1] = candidate.model_copy(
                update={"vote_count": candidate.vote_count + 1}
            )
            self._voters[voter_identity] = True
            logger.info(f"Vote recorded for candidate {candidate_id}")
            event = self.events.record(VoteCast(voter_identity=voter_identity, candidate_id=candidate_id))
        self.events.dispatch(event)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_candidates(self) -> List[Candidate]:
        with self._lock:
            return [c.model_copy() for c in self._candidates]

    def has_voted(self, identity: str) -> bool:
        with self._lock:
            return self._voters.get(identity, False)

    def results(self) -> List[Candidate]:
        """Candidates by vote count, highest first; ties keep id order."""
        return sorted(self.list_candidates(), key=lambda c: (-c.vote_count, c.id))

    def total_votes(self) -> int:
        with self._lock:
            return sum(c.vote_count for c in self._candidates)

    def election(self) -> Election:
        with self._lock:
            return self._election.model_copy()

    @property
    def election_name(self) -> str:
        return self._election.name

    @property
    def admin_identity(self) -> str:
        return self._election.admin_identity

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._election.is_open

    @property
    def candidates_count(self) -> int:
        with self._lock:
            return len(self._candidates)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "election": self._election.model_dump(),
                "candidates": [c.model_dump() for c in self._candidates],
                "voters": [identity for identity, voted in self._voters.items() if voted],
            }
