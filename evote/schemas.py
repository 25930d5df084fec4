from pydantic import BaseModel, Field
from typing import List, Optional


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class VoterLoginRequest(BaseModel):
    username: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    username: str


class VoterRegisterRequest(BaseModel):
    username: str = Field(..., json_schema_extra={"example": "voter2"})
    display_name: str = Field(..., json_schema_extra={"example": "Voter Two"})


class VoterOut(BaseModel):
    username: str
    display_name: str
    verified: bool


class CandidateIn(BaseModel):
    name: str = Field(..., json_schema_extra={"example": "Carol"})
    manifesto: Optional[str] = None


class VoteRequest(BaseModel):
    candidate_id: int


class VoteReceipt(BaseModel):
    message: str
    candidate: str
    votes: int


class VoteStatus(BaseModel):
    username: str
    has_voted: bool


class TallyEntry(BaseModel):
    name: str
    votes: int


class LiveTally(BaseModel):
    tally: List[TallyEntry]
    votes_cast: int


class FinalResults(BaseModel):
    outcome: str  # "winner" or "tie"
    names: List[str]
    count: int
    message: str
