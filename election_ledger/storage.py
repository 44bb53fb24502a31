# election_ledger/storage.py
import copy
import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from election_ledger import config
from election_ledger.errors import StorageError
from election_ledger.models.election_model import Candidate

logger = logging.getLogger(__name__)


def _empty_db() -> Dict[str, Any]:
    return {"election": None, "candidates": [], "voters": [], "accounts": {}}


class MemoryStore:
    """
    Keeps the ledger document in process memory.

    Every write goes through ``_read_db``/``_write_db`` so that subclasses only
    have to say where the document lives.
    """

    def __init__(self):
        self._db = _empty_db()

    def _read_db(self) -> Dict[str, Any]:
        return copy.deepcopy(self._db)

    def _write_db(self, data: Dict[str, Any]) -> None:
        self._db = data

    # --- Election ---
    def load(self) -> Optional[Dict[str, Any]]:
        db = self._read_db()
        if db["election"] is None:
            return None
        return {
            "election": db["election"],
            "candidates": db["candidates"],
            "voters": db["voters"],
        }

    def create(self, snapshot: Dict[str, Any]) -> None:
        db = self._read_db()
        if db["election"] is not None:
            raise StorageError("An election is already stored.")
        db["election"] = snapshot["election"]
        db["candidates"] = snapshot.get("candidates", [])
        db["voters"] = snapshot.get("voters", [])
        self._write_db(db)

    def add_candidate(self, candidate: Candidate) -> None:
        db = self._read_db()
        db["candidates"].append(candidate.model_dump())
        self._write_db(db)

    def set_open(self, is_open: bool) -> None:
        db = self._read_db()
        db["election"]["is_open"] = is_open
        self._write_db(db)

    def record_vote(self, identity: str, candidate_id: int) -> None:
        db = self._read_db()
        db["candidates"][candidate_id - 1]["vote_count"] += 1
        db["voters"].append(identity)
        self._write_db(db)

    # --- Accounts ---
    def load_accounts(self) -> Dict[str, str]:
        return self._read_db()["accounts"]

    def save_account(self, identity: str, password_hash: str) -> bool:
        db = self._read_db()
        if identity in db["accounts"]:
            return False
        db["accounts"][identity] = password_hash
        self._write_db(db)
        return True

    def close(self) -> None:
        pass


class JsonFileStore(MemoryStore):
    """Single JSON document on disk, replaced atomically on every write."""

    def __init__(self, path: str = config.LEDGER_DB_PATH):
        self.path = path
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(path):
            self._write_db(_empty_db())

    def _read_db(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            return _empty_db()
        except json.JSONDecodeError as e:
            # A ledger file is never reset silently
            raise StorageError(f"Ledger file {self.path} is corrupt: {e}") from e
        for key, value in _empty_db().items():
            data.setdefault(key, value)
        return data

    def _write_db(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".ledger-", suffix=".json")
        except OSError as e:
            logger.error(f"Failed to write ledger file {self.path}: {e}")
            raise StorageError(f"Could not write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write ledger file {self.path}: {e}")
            raise StorageError(f"Could not write {self.path}: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


def build_store(backend: Optional[str] = None):
    """Store selected by ``STORAGE_BACKEND``."""
    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "json":
        return JsonFileStore(config.LEDGER_DB_PATH)
    if backend == "mongo":
        from election_ledger.storage_mongo import MongoStore

        return MongoStore()
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; use memory, json or mongo")
