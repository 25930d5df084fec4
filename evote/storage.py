# evote/storage.py
import functools
import logging
import threading
from typing import Optional, List, Dict, Any

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from evote.config import (
    USERS_COLLECTION_NAME,
    ELECTION_COLLECTION_NAME,
    ELECTION_DOC_ID,
    SEED_CANDIDATES,
    SEED_USERS,
)
from evote.database.connection import get_database
from evote.errors import StorageError
from evote.models.election_model import Candidate
from evote.models.user_model import User, Role

logger = logging.getLogger(__name__)


def _storage_errors(operation):
    """Surface every driver failure as a StorageError that keeps the cause."""
    @functools.wraps(operation)
    def wrapper(self, *args, **kwargs):
        try:
            return operation(self, *args, **kwargs)
        except PyMongoError as e:
            logger.error(f"Storage failure in {operation.__name__}: {e}")
            raise StorageError(e) from e
    return wrapper


def _user_from_doc(doc: Dict[str, Any]) -> User:
    return User(
        username=doc["_id"],
        display_name=doc.get("display_name") or "",
        role=doc["role"],
        verified=bool(doc.get("verified")),
    )


def _candidate_key(candidate_id: int) -> str:
    return f"candidates.{candidate_id}"


class ElectionStore:
    """
    Users live in their own collection (_id = username). The active flag,
    the candidates (keyed by surrogate id), the voted usernames and the
    retired candidates share one singleton document, so a vote is a single
    atomic document update.

    Every mutation runs under `exclusive()`, a process-wide reentrant lock.
    """

    def __init__(self, db):
        self.db = db
        self.users = db[USERS_COLLECTION_NAME]
        self.election = db[ELECTION_COLLECTION_NAME]
        self._lock = threading.RLock()

    def exclusive(self):
        return self._lock

    @_storage_errors
    def init(self) -> None:
        """Create the election document and seed demo data. Existing data is never overwritten."""
        with self._lock:
            candidates = {}
            for idx, cand in enumerate(SEED_CANDIDATES, start=1):
                candidates[str(idx)] = {
                    "id": idx,
                    "name": cand["name"],
                    "manifesto": cand.get("manifesto"),
                    "votes": 0,
                }
            result = self.election.update_one(
                {"_id": ELECTION_DOC_ID},
                {"$setOnInsert": {
                    "active": False,
                    "next_candidate_id": len(candidates) + 1,
                    "candidates": candidates,
                    "retired": {},
                    "voted": [],
                }},
                upsert=True,
            )
            if result.upserted_id is not None:
                logger.info(f"Election store initialized with {len(candidates)} seed candidates")

            for user in SEED_USERS:
                self.users.update_one(
                    {"_id": user["username"]},
                    {"$setOnInsert": {
                        "display_name": user["display_name"],
                        "role": user["role"],
                        "verified": user["verified"],
                    }},
                    upsert=True,
                )

    def _election_doc(self, projection=None) -> Dict[str, Any]:
        doc = self.election.find_one({"_id": ELECTION_DOC_ID}, projection)
        if doc is None:
            raise StorageError(LookupError("election document missing; call init() first"))
        return doc

    # --- Users ---

    @_storage_errors
    def create_user(self, user: User) -> bool:
        """Insert a user unless the username is taken. Returns False on duplicates."""
        with self._lock:
            result = self.users.update_one(
                {"_id": user.username},
                {"$setOnInsert": {
                    "display_name": user.display_name,
                    "role": user.role.value,
                    "verified": user.verified,
                }},
                upsert=True,
            )
        if result.upserted_id is None:
            logger.warning(f"User {user.username} already exists")
            return False
        logger.info(f"User {user.username} saved successfully")
        return True

    @_storage_errors
    def get_user(self, username: str) -> Optional[User]:
        doc = self.users.find_one({"_id": username})
        return _user_from_doc(doc) if doc else None

    @_storage_errors
    def list_users(self, role: Optional[Role] = None) -> List[User]:
        query = {"role": role.value} if role else {}
        return [_user_from_doc(doc) for doc in self.users.find(query).sort("_id", 1)]

    @_storage_errors
    def set_user_verified(self, username: str) -> bool:
        with self._lock:
            result = self.users.update_one(
                {"_id": username, "role": Role.VOTER.value},
                {"$set": {"verified": True}},
            )
        return result.matched_count == 1

    @_storage_errors
    def delete_user(self, username: str) -> bool:
        """Delete a voter. The voted set is left alone."""
        with self._lock:
            result = self.users.delete_one({"_id": username, "role": Role.VOTER.value})
        return result.deleted_count == 1

    # --- Candidates ---

    @_storage_errors
    def list_candidates(self) -> List[Candidate]:
        doc = self._election_doc({"candidates": 1})
        cands = [Candidate(**c) for c in doc.get("candidates", {}).values()]
        return sorted(cands, key=lambda c: c.id)

    @_storage_errors
    def get_candidate(self, candidate_id: int) -> Optional[Candidate]:
        doc = self._election_doc({"candidates": 1})
        cand = doc.get("candidates", {}).get(str(candidate_id))
        return Candidate(**cand) if cand else None

    @_storage_errors
    def insert_candidate(self, name: str, manifesto: Optional[str]) -> Candidate:
        with self._lock:
            new_id = self._election_doc({"next_candidate_id": 1})["next_candidate_id"]
            record = {"id": new_id, "name": name, "manifesto": manifesto, "votes": 0}
            self.election.update_one(
                {"_id": ELECTION_DOC_ID, "next_candidate_id": new_id},
                {
                    "$set": {_candidate_key(new_id): record},
                    "$inc": {"next_candidate_id": 1},
                },
            )
        logger.info(f"Candidate {name} saved with id {new_id}")
        return Candidate(**record)

    @_storage_errors
    def update_candidate(self, candidate_id: int, name: str, manifesto: Optional[str]) -> bool:
        key = _candidate_key(candidate_id)
        with self._lock:
            result = self.election.update_one(
                {"_id": ELECTION_DOC_ID, key: {"$exists": True}},
                {"$set": {f"{key}.name": name, f"{key}.manifesto": manifesto}},
            )
        return result.matched_count == 1

    @_storage_errors
    def delete_candidate(self, candidate_id: int) -> Optional[Candidate]:
        """Remove a candidate from the ballot, keeping its final record among the retired."""
        key = _candidate_key(candidate_id)
        with self._lock:
            cand = self.get_candidate(candidate_id)
            if cand is None:
                return None
            self.election.update_one(
                {"_id": ELECTION_DOC_ID, key: {"$exists": True}},
                {
                    "$unset": {key: ""},
                    "$set": {f"retired.{candidate_id}": cand.model_dump()},
                },
            )
        logger.info(f"Candidate {cand.name} retired with {cand.votes} votes")
        return cand

    @_storage_errors
    def retired_candidates(self) -> List[Candidate]:
        doc = self._election_doc({"retired": 1})
        return sorted((Candidate(**c) for c in doc.get("retired", {}).values()), key=lambda c: c.id)

    # --- Election flag ---

    @_storage_errors
    def is_election_active(self) -> bool:
        return bool(self._election_doc({"active": 1}).get("active"))

    @_storage_errors
    def compare_and_set_election_active(self, expected: bool, new: bool) -> bool:
        with self._lock:
            result = self.election.update_one(
                {"_id": ELECTION_DOC_ID, "active": expected},
                {"$set": {"active": new}},
            )
        return result.matched_count == 1

    # --- Votes ---

    @_storage_errors
    def apply_vote(self, username: str, candidate_id: int) -> Optional[Candidate]:
        """
        Increment the tally and record the voter in one conditional update.
        Matches only while the election is active, the voter is not yet in the
        voted set and the candidate exists. Returns the updated candidate, or
        None when nothing was written.
        """
        key = _candidate_key(candidate_id)
        with self._lock:
            doc = self.election.find_one_and_update(
                {
                    "_id": ELECTION_DOC_ID,
                    "active": True,
                    "voted": {"$ne": username},
                    key: {"$exists": True},
                },
                {
                    "$inc": {f"{key}.votes": 1},
                    "$push": {"voted": username},
                },
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            return None
        return Candidate(**doc["candidates"][str(candidate_id)])

    @_storage_errors
    def has_voted(self, username: str) -> bool:
        return self.election.find_one({"_id": ELECTION_DOC_ID, "voted": username}, {"_id": 1}) is not None

    @_storage_errors
    def votes_cast(self) -> int:
        return len(self._election_doc({"voted": 1}).get("voted", []))


_storage: Optional[ElectionStore] = None
_storage_lock = threading.Lock()


def get_storage() -> ElectionStore:
    """Return the process-wide store, connecting and seeding on first use."""
    global _storage
    with _storage_lock:
        if _storage is None:
            store = ElectionStore(get_database())
            store.init()
            _storage = store
    return _storage
