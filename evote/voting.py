# evote/voting.py
# One person, one vote.
import logging

from evote.auth import require_live_voter
from evote.errors import VoteError, VoteFailure
from evote.models.election_model import Candidate
from evote.models.session_model import VoterSession

logger = logging.getLogger(__name__)


def _candidate_id(value) -> int:
    """Accept ints, whole floats and digit strings; anything else names no candidate."""
    if isinstance(value, bool):
        raise ValueError("not a candidate id")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"not a candidate id: {value!r}")


def cast_vote(storage, session: VoterSession, candidate_id) -> Candidate:
    """
    Record one vote for `candidate_id` and return the candidate with its new tally.

    The active check, the already-voted check, the increment and the insertion
    into the voted set are one conditional document update made under the
    store's exclusive lock. When it matches nothing, the reason is looked up
    while the lock is still held; nothing has been written in that case.
    """
    session = require_live_voter(session)
    username = session.username

    try:
        cid = _candidate_id(candidate_id)
    except (TypeError, ValueError):
        cid = None

    with storage.exclusive():
        if cid is not None:
            updated = storage.apply_vote(username, cid)
            if updated is not None:
                logger.info(f"Vote recorded for candidate {updated.id} ({updated.votes} total)")
                return updated

        if not storage.is_election_active():
            reason, message = VoteFailure.NOT_ACTIVE, "Election is not active."
        elif storage.has_voted(username):
            reason, message = VoteFailure.ALREADY_VOTED, "You have already voted. Double voting is not allowed."
        else:
            reason, message = VoteFailure.UNKNOWN_CANDIDATE, "Candidate not found."

    logger.warning(f"Vote by {username} rejected: {reason.value}")
    raise VoteError(reason, message)


def has_voted(storage, session: VoterSession) -> bool:
    return storage.has_voted(session.username)
