# election_ledger/storage_mongo.py
import logging
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from election_ledger import config
from election_ledger.database.connection import (
    ACCOUNTS_COLLECTION_NAME,
    ELECTIONS_COLLECTION_NAME,
    LOGS_COLLECTION_NAME,
    get_database,
)
from election_ledger.errors import StorageError
from election_ledger.models.election_model import Candidate

logger = logging.getLogger(__name__)


class MongoStore:
    """
    The election lives in one document of the ``elections`` collection:

        {_id, election: {...}, candidates: [{id, name, vote_count}], voters: [identity]}

    Candidate ``id`` n sits at array position n - 1, so a vote is a single
    ``update_one`` on that document.
    """

    def __init__(self, db=None, doc_id: str = config.ELECTION_DOC_ID):
        try:
            self.db = db if db is not None else get_database()
            self.elections = self.db[ELECTIONS_COLLECTION_NAME]
            self.accounts = self.db[ACCOUNTS_COLLECTION_NAME]
            self.logs = self.db[LOGS_COLLECTION_NAME]
            self.doc_id = doc_id
            if db is None:
                self.db.client.server_info()
            logger.info(f"Connected to MongoDB: {self.db.name}")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StorageError(f"MongoDB unavailable: {e}") from e

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            doc = self.elections.find_one({"_id": self.doc_id})
        except PyMongoError as e:
            raise StorageError(f"Could not load election: {e}") from e
        if not doc:
            return None
        return {
            "election": doc["election"],
            "candidates": doc.get("candidates", []),
            "voters": doc.get("voters", []),
        }

    def create(self, snapshot: Dict[str, Any]) -> None:
        doc = {
            "_id": self.doc_id,
            "election": snapshot["election"],
            "candidates": snapshot.get("candidates", []),
            "voters": snapshot.get("voters", []),
        }
        try:
            self.elections.insert_one(doc)
        except DuplicateKeyError as e:
            raise StorageError("An election is already stored.") from e
        except PyMongoError as e:
            raise StorageError(f"Could not create election: {e}") from e

    def _update(self, query: Dict[str, Any], update: Dict[str, Any], what: str) -> None:
        try:
            result = self.elections.update_one(query, update)
        except PyMongoError as e:
            logger.error(f"Error writing {what}: {e}")
            raise StorageError(f"Could not write {what}: {e}") from e
        if result.matched_count == 0:
            raise StorageError(f"Election document rejected {what}.")

    def add_candidate(self, candidate: Candidate) -> None:
        self._update(
            {"_id": self.doc_id, "candidates": {"$size": candidate.id - 1}},
            {"$push": {"candidates": candidate.model_dump()}},
            f"candidate {candidate.id}",
        )

    def set_open(self, is_open: bool) -> None:
        self._update(
            {"_id": self.doc_id},
            {"$set": {"election.is_open": is_open}},
            "voting status",
        )

    def record_vote(self, identity: str, candidate_id: int) -> None:
        self._update(
            {"_id": self.doc_id, "voters": {"$ne": identity}},
            {
                "$inc": {f"candidates.{candidate_id - 1}.vote_count": 1},
                "$push": {"voters": identity},
            },
            f"vote of {identity}",
        )

    def load_accounts(self) -> Dict[str, str]:
        try:
            return {a["_id"]: a["password_hash"] for a in self.accounts.find({})}
        except PyMongoError as e:
            raise StorageError(f"Could not load accounts: {e}") from e

    def save_account(self, identity: str, password_hash: str) -> bool:
        try:
            self.accounts.insert_one({"_id": identity, "password_hash": password_hash})
            return True
        except DuplicateKeyError:
            logger.warning(f"Account {identity} already exists.")
            return False
        except PyMongoError as e:
            raise StorageError(f"Could not save account {identity}: {e}") from e

    def close(self) -> None:
        try:
            self.db.client.close()
            logger.info("MongoDB connection closed")
        except PyMongoError as e:
            logger.error(f"Error closing MongoDB connection: {e}")
