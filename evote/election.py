# evote/election.py
# The single global voting window.
import logging

from evote.auth import check_capability
from evote.errors import ElectionError, ElectionFailure

logger = logging.getLogger(__name__)


def is_active(storage) -> bool:
    return storage.is_election_active()


def start(storage, capability) -> None:
    check_capability(capability)
    if not storage.compare_and_set_election_active(expected=False, new=True):
        logger.warning(f"{capability.username} tried to start an election that is already active")
        raise ElectionError(ElectionFailure.ALREADY_ACTIVE, "Election already active.")
    logger.info(f"Election started by {capability.username}")


def end(storage, capability) -> None:
    check_capability(capability)
    if not storage.compare_and_set_election_active(expected=True, new=False):
        logger.warning(f"{capability.username} tried to end an election that is not active")
        raise ElectionError(ElectionFailure.NOT_ACTIVE, "Election is not active.")
    logger.info(f"Election ended by {capability.username}")
