from datetime import datetime, timedelta, timezone

from jose import jwt

from election_ledger import config, crud
from election_ledger.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from election_ledger.storage import MemoryStore


def test_password_hash_round_trip():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong horse", hashed) is False


def test_token_carries_identity():
    token = create_access_token({"sub": "voter1"})
    assert decode_access_token(token) == "voter1"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "voter1"}, expires_minutes=-1)
    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    expire = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"sub": "0xadmin", "exp": expire}, "not-the-secret", algorithm=config.ALGORITHM)
    assert decode_access_token(token) is None


def test_token_without_subject_is_rejected():
    assert decode_access_token(create_access_token({"role": "admin"})) is None
    assert decode_access_token("garbage") is None


def test_register_and_authenticate():
    store = MemoryStore()
    assert crud.register_account(store, "voter1", "secret123") == ("voter1", None)

    identity, error = crud.register_account(store, "voter1", "other123")
    assert identity is None
    assert "already exists" in error

    assert crud.authenticate(store, "voter1", "secret123") == ("voter1", None)
    assert crud.authenticate(store, "voter1", "wrong")[0] is None
    assert crud.authenticate(store, "nobody", "secret123")[0] is None


def test_register_rejects_blank_identity():
    identity, error = crud.register_account(MemoryStore(), "   ", "secret123")
    assert identity is None
    assert error
