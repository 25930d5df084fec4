from pydantic import BaseModel, Field
from typing import List, Optional


class Candidate(BaseModel):
    id: int
    name: str
    manifesto: Optional[str] = None
    votes: int = Field(default=0, ge=0)


class ElectionState(BaseModel):
    active: bool = False


class Winner(BaseModel):
    name: str
    count: int


class Tie(BaseModel):
    names: List[str]
    count: int
