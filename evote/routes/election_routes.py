from fastapi import APIRouter, Depends

from evote import election
from evote.errors import EVoteError
from evote.routes.deps import admin_capability, to_http
from evote.models.election_model import ElectionState
from evote.storage import ElectionStore, get_storage

router = APIRouter(prefix="/election", tags=["Election"])


@router.get("/status", response_model=ElectionState)
def election_status(storage: ElectionStore = Depends(get_storage)):
    try:
        return ElectionState(active=election.is_active(storage))
    except EVoteError as e:
        raise to_http(e)


@router.post("/start")
def start_election(capability=Depends(admin_capability), storage: ElectionStore = Depends(get_storage)):
    try:
        election.start(storage, capability)
    except EVoteError as e:
        raise to_http(e)
    return {"message": "Election started.", "active": True}


@router.post("/end")
def end_election(capability=Depends(admin_capability), storage: ElectionStore = Depends(get_storage)):
    try:
        election.end(storage, capability)
    except EVoteError as e:
        raise to_http(e)
    return {"message": "Election ended. Final results can now be announced.", "active": False}
