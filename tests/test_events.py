import logging

from election_ledger.events import (
    CandidateAdded,
    EventLog,
    LoggingSink,
    MongoEventSink,
    VoteCast,
    VotingStatusChanged,
)


class RecordingCollection:
    def __init__(self):
        self.docs = []

    def insert_one(self, doc):
        self.docs.append(doc)


def test_emit_numbers_events_in_order():
    log = EventLog()
    log.emit(CandidateAdded(id=1, name="Alice"))
    log.emit(VotingStatusChanged(is_open=True))
    log.emit(VoteCast(voter_identity="voter1", candidate_id=1))

    assert [e.sequence for e in log.events()] == [1, 2, 3]
    assert [e.kind for e in log.events(since=1)] == ["VotingStatusChanged", "VoteCast"]
    assert log.events(since=3) == []
    assert len(log) == 3


def test_events_listing_is_a_copy():
    log = EventLog()
    log.emit(CandidateAdded(id=1, name="Alice"))
    log.events()[0].name = "Mallory"
    assert log.events()[0].name == "Alice"


def test_sinks_receive_every_event():
    received = []
    log = EventLog([received.append])
    event = log.emit(VotingStatusChanged(is_open=False))
    assert received == [event]


def test_broken_sink_is_logged_and_skipped(caplog):
    received = []

    def broken(event):
        raise ConnectionError("observer unreachable")

    log = EventLog([broken, received.append])
    with caplog.at_level(logging.ERROR, logger="election_ledger.events"):
        log.emit(VoteCast(voter_identity="voter1", candidate_id=2))

    assert len(received) == 1
    assert "observer unreachable" in caplog.text
    assert len(log) == 1


def test_logging_sink_writes_audit_line(caplog):
    log = EventLog([LoggingSink()])
    with caplog.at_level(logging.INFO, logger="election_ledger.audit"):
        log.emit(CandidateAdded(id=1, name="Alice"))
    assert "CandidateAdded" in caplog.text
    assert "Alice" in caplog.text


def test_mongo_sink_inserts_documents():
    collection = RecordingCollection()
    log = EventLog([MongoEventSink(collection)])
    log.emit(VoteCast(voter_identity="voter1", candidate_id=1))

    assert collection.docs[0]["kind"] == "VoteCast"
    assert collection.docs[0]["voter_identity"] == "voter1"
    assert collection.docs[0]["sequence"] == 1
