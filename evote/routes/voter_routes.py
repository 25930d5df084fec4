from typing import List

from fastapi import APIRouter, Depends

from evote import crud
from evote.errors import EVoteError
from evote.routes.deps import admin_capability, to_http
from evote.schemas import VoterRegisterRequest, VoterOut
from evote.storage import ElectionStore, get_storage

router = APIRouter(prefix="/voters", tags=["Voters"])


def _out(user) -> VoterOut:
    return VoterOut(username=user.username, display_name=user.display_name, verified=user.verified)


@router.post("/register", response_model=VoterOut, status_code=201)
def register_voter(body: VoterRegisterRequest, storage: ElectionStore = Depends(get_storage)):
    try:
        user = crud.register_voter(storage, body.username, body.display_name)
    except EVoteError as e:
        raise to_http(e)
    return _out(user)


@router.get("", response_model=List[VoterOut])
def list_voters(storage: ElectionStore = Depends(get_storage)):
    try:
        return [_out(u) for u in crud.list_voters(storage)]
    except EVoteError as e:
        raise to_http(e)


@router.post("/{username}/verify", response_model=VoterOut)
def verify_voter(username: str, capability=Depends(admin_capability), storage: ElectionStore = Depends(get_storage)):
    try:
        user = crud.verify_voter(storage, capability, username)
    except EVoteError as e:
        raise to_http(e)
    return _out(user)


@router.delete("/{username}")
def remove_voter(username: str, capability=Depends(admin_capability), storage: ElectionStore = Depends(get_storage)):
    try:
        crud.remove_voter(storage, capability, username)
    except EVoteError as e:
        raise to_http(e)
    return {"message": f"Removed voter: {username}"}
