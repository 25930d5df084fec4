from typing import List

from fastapi import APIRouter, Depends

from evote import crud
from evote.errors import EVoteError
from evote.models.election_model import Candidate
from evote.routes.deps import admin_capability, to_http
from evote.schemas import CandidateIn
from evote.storage import ElectionStore, get_storage

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get("", response_model=List[Candidate])
def list_candidates(storage: ElectionStore = Depends(get_storage)):
    try:
        return crud.list_candidates(storage)
    except EVoteError as e:
        raise to_http(e)


@router.post("", response_model=Candidate, status_code=201)
def add_candidate(body: CandidateIn, capability=Depends(admin_capability), storage: ElectionStore = Depends(get_storage)):
    try:
        return crud.add_candidate(storage, capability, body.name, body.manifesto)
    except EVoteError as e:
        raise to_http(e)


@router.put("/{candidate_id}", response_model=Candidate)
def edit_candidate(candidate_id: int, body: CandidateIn, capability=Depends(admin_capability),
                   storage: ElectionStore = Depends(get_storage)):
    try:
        return crud.edit_candidate(storage, capability, candidate_id, body.name, body.manifesto)
    except EVoteError as e:
        raise to_http(e)


@router.delete("/{candidate_id}")
def remove_candidate(candidate_id: int, capability=Depends(admin_capability), storage: ElectionStore = Depends(get_storage)):
    try:
        removed = crud.remove_candidate(storage, capability, candidate_id)
    except EVoteError as e:
        raise to_http(e)
    return {"message": "Candidate removed.", "candidate": removed.name, "votes": removed.votes}
