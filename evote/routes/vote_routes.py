from fastapi import APIRouter, Depends

from evote import tally, voting
from evote.errors import EVoteError
from evote.models.election_model import Winner
from evote.routes.deps import voter_session, to_http
from evote.schemas import VoteRequest, VoteReceipt, VoteStatus, LiveTally, TallyEntry, FinalResults
from evote.storage import ElectionStore, get_storage

vote_router = APIRouter(prefix="/vote", tags=["Vote"])
results_router = APIRouter(prefix="/results", tags=["Results"])


@vote_router.post("/cast", response_model=VoteReceipt)
def cast_vote(body: VoteRequest, session=Depends(voter_session), storage: ElectionStore = Depends(get_storage)):
    try:
        candidate = voting.cast_vote(storage, session, body.candidate_id)
    except EVoteError as e:
        raise to_http(e)
    return VoteReceipt(message=f"Vote cast for: {candidate.name}", candidate=candidate.name, votes=candidate.votes)


@vote_router.get("/status", response_model=VoteStatus)
def vote_status(session=Depends(voter_session), storage: ElectionStore = Depends(get_storage)):
    try:
        return VoteStatus(username=session.username, has_voted=voting.has_voted(storage, session))
    except EVoteError as e:
        raise to_http(e)


@results_router.get("/live", response_model=LiveTally)
def live_results(storage: ElectionStore = Depends(get_storage)):
    try:
        entries = [TallyEntry(name=name, votes=votes) for name, votes in tally.live_tally(storage)]
        return LiveTally(tally=entries, votes_cast=tally.votes_cast(storage))
    except EVoteError as e:
        raise to_http(e)


@results_router.get("/final", response_model=FinalResults)
def final_results(storage: ElectionStore = Depends(get_storage)):
    try:
        result = tally.announce_results(storage)
    except EVoteError as e:
        raise to_http(e)
    if isinstance(result, Winner):
        return FinalResults(
            outcome="winner",
            names=[result.name],
            count=result.count,
            message=f"Winner: {result.name} with {result.count} votes.",
        )
    return FinalResults(
        outcome="tie",
        names=result.names,
        count=result.count,
        message=f"Tie between: {', '.join(result.names)} ({result.count} votes each)",
    )
