# evote/tally.py
import logging
from typing import List, Tuple, Union

from evote.errors import ResultsError, ResultsFailure
from evote.models.election_model import Winner, Tie

logger = logging.getLogger(__name__)


def live_tally(storage) -> List[Tuple[str, int]]:
    """Current (name, votes) pairs in candidate id order. Removed candidates are not listed."""
    return [(c.name, c.votes) for c in storage.list_candidates()]


def votes_cast(storage) -> int:
    """Every vote recorded this cycle, including votes for candidates removed since."""
    return storage.votes_cast()


def announce_results(storage) -> Union[Winner, Tie]:
    if storage.is_election_active():
        raise ResultsError(ResultsFailure.ELECTION_STILL_ACTIVE, "End the election before announcing results.")
    candidates = storage.list_candidates()
    if not candidates:
        raise ResultsError(ResultsFailure.NO_CANDIDATES, "No candidates available.")

    max_votes = -1
    leaders = []
    for cand in candidates:
        if cand.votes > max_votes:
            max_votes = cand.votes
            leaders = [cand.name]
        elif cand.votes == max_votes:
            leaders.append(cand.name)

    if len(leaders) == 1:
        logger.info(f"Winner: {leaders[0]} with {max_votes} votes")
        return Winner(name=leaders[0], count=max_votes)
    logger.info(f"Tie between {', '.join(leaders)} ({max_votes} votes each)")
    return Tie(names=leaders, count=max_votes)
