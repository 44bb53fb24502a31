# election_ledger/events.py
# Append-only notification log for off-ledger observers
import logging
import threading
from datetime import datetime, timezone
from typing import Annotated, Any, Callable, List, Literal, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEvent(BaseModel):
    sequence: int = 0
    timestamp: datetime = Field(default_factory=_utcnow)


class CandidateAdded(LedgerEvent):
    kind: Literal["CandidateAdded"] = "CandidateAdded"
    id: int
    name: str


class VotingStatusChanged(LedgerEvent):
    kind: Literal["VotingStatusChanged"] = "VotingStatusChanged"
    is_open: bool


class VoteCast(LedgerEvent):
    kind: Literal["VoteCast"] = "VoteCast"
    voter_identity: str
    candidate_id: int


AnyEvent = Annotated[Union[CandidateAdded, VotingStatusChanged, VoteCast], Field(discriminator="kind")]
Sink = Callable[[LedgerEvent], Any]


class LoggingSink:
    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logging.getLogger("election_ledger.audit")

    def __call__(self, event: LedgerEvent) -> None:
        self.log.info(f"event #{event.sequence} {event.model_dump_json(exclude={'sequence'})}")


class MongoEventSink:
    """Copies each event into the ``logs`` collection."""

    def __init__(self, collection):
        self.collection = collection

    def __call__(self, event: LedgerEvent) -> None:
        self.collection.insert_one(event.model_dump())


class EventLog:
    """
    In-memory append-only log. ``record`` numbers and stores an event;
    ``dispatch`` hands it to every sink. ``emit`` does both. A failing sink
    is logged and skipped; it never reaches the caller that produced the event.
    """

    def __init__(self, sinks: Optional[List[Sink]] = None):
        self._events: List[LedgerEvent] = []
        self._sinks: List[Sink] = list(sinks or [])
        self._lock = threading.Lock()

    def add_sink(self, sink: Sink) -> None:
        self._sinks.append(sink)

    def record(self, event: LedgerEvent) -> LedgerEvent:
        with self._lock:
            event.sequence = len(self._events) + 1
            self._events.append(event)
        return event

    def dispatch(self, event: LedgerEvent) -> None:
        for sink in list(self._sinks):
            try:
                sink(event)
            except Exception as e:
                logger.error(f"Event sink {sink!r} failed on {type(event).__name__} #{event.sequence}: {e}")

    def emit(self, event: LedgerEvent) -> LedgerEvent:
        self.record(event)
        self.dispatch(event)
        return event

    def events(self, since: int = 0) -> List[LedgerEvent]:
        """Events with a sequence number greater than ``since``."""
        with self._lock:
            return [e.model_copy() for e in self._events[max(since, 0):]]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
