import pytest
from fastapi.testclient import TestClient

from election_ledger.events import EventLog
from election_ledger.ledger import ElectionLedger
from election_ledger.main import create_app
from election_ledger.security import create_access_token
from election_ledger.storage import MemoryStore

ADMIN = "0xadmin"


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def ledger(events):
    return ElectionLedger.create("Council Election", ADMIN, store=MemoryStore(), events=events)


@pytest.fixture
def seeded_ledger(ledger):
    ledger.add_candidate(ADMIN, "Alice")
    ledger.add_candidate(ADMIN, "Bob")
    return ledger


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr("election_ledger.config.ELECTION_NAME", None)
    monkeypatch.setattr("election_ledger.config.ELECTION_ADMIN", None)
    return create_app(store=MemoryStore(), events=EventLog(), lock_candidates_while_open=False)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def auth(identity):
    return {"Authorization": f"Bearer {create_access_token({'sub': identity})}"}
