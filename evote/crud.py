# evote/crud.py
# Voter registration and candidate management.
import logging
from typing import List, Optional

from evote.auth import check_capability
from evote.errors import RecordError, RecordFailure
from evote.models.election_model import Candidate
from evote.models.user_model import User, Role

logger = logging.getLogger(__name__)


def _required(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise RecordError(RecordFailure.MISSING_FIELD, message)
    return value


def _manifesto(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


# --- Voters ---

def register_voter(storage, username: str, display_name: str) -> User:
    """Anyone may register; the new voter cannot log in until an admin verifies them."""
    username = _required(username, "Provide both username and display name.")
    display_name = _required(display_name, "Provide both username and display name.")
    user = User(username=username, display_name=display_name, role=Role.VOTER, verified=False)
    if not storage.create_user(user):
        raise RecordError(RecordFailure.DUPLICATE_USERNAME, "Username already exists.")
    logger.info(f"Voter registered: {display_name} ({username}), awaiting verification")
    return user


def verify_voter(storage, capability, username: str) -> User:
    check_capability(capability)
    if not storage.set_user_verified((username or "").strip()):
        raise RecordError(RecordFailure.UNKNOWN_USER, f"No such voter: {username}")
    user = storage.get_user(username.strip())
    logger.info(f"Voter verified by {capability.username}: {username}")
    return user


def remove_voter(storage, capability, username: str) -> None:
    """Delete a voter. Votes already recorded stay counted."""
    check_capability(capability)
    if not storage.delete_user((username or "").strip()):
        raise RecordError(RecordFailure.UNKNOWN_USER, f"No such voter: {username}")
    logger.info(f"Voter removed by {capability.username}: {username}")


def list_voters(storage) -> List[User]:
    return storage.list_users(Role.VOTER)


# --- Candidates ---

def list_candidates(storage) -> List[Candidate]:
    return storage.list_candidates()


def add_candidate(storage, capability, name: str, manifesto: Optional[str] = None) -> Candidate:
    check_capability(capability)
    name = _required(name, "Name required.")
    with storage.exclusive():
        if any(c.name == name for c in storage.list_candidates()):
            raise RecordError(RecordFailure.DUPLICATE_CANDIDATE_NAME, f"Candidate {name} already exists.")
        return storage.insert_candidate(name, _manifesto(manifesto))


def edit_candidate(storage, capability, candidate_id: int, name: str, manifesto: Optional[str] = None) -> Candidate:
    """Change name and manifesto. The vote count is never touched."""
    check_capability(capability)
    name = _required(name, "Name required.")
    with storage.exclusive():
        candidates = storage.list_candidates()
        if not any(c.id == candidate_id for c in candidates):
            raise RecordError(RecordFailure.UNKNOWN_CANDIDATE, "Candidate not found.")
        if any(c.name == name and c.id != candidate_id for c in candidates):
            raise RecordError(RecordFailure.DUPLICATE_CANDIDATE_NAME, f"Candidate {name} already exists.")
        storage.update_candidate(candidate_id, name, _manifesto(manifesto))
        updated = storage.get_candidate(candidate_id)
    logger.info(f"Candidate {candidate_id} updated by {capability.username}")
    return updated


def remove_candidate(storage, capability, candidate_id: int) -> Candidate:
    """Take a candidate off the ballot; its votes stay in the historical count."""
    check_capability(capability)
    removed = storage.delete_candidate(candidate_id)
    if removed is None:
        raise RecordError(RecordFailure.UNKNOWN_CANDIDATE, "Candidate not found.")
    logger.info(f"Candidate {removed.name} removed by {capability.username}")
    return removed
