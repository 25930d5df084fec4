from enum import Enum
from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "ADMIN"
    VOTER = "VOTER"


class User(BaseModel):
    username: str = Field(..., min_length=1, json_schema_extra={"example": "voter1"})
    display_name: str = Field(..., json_schema_extra={"example": "Voter One"})
    role: Role = Role.VOTER
    verified: bool = False  # meaningful for voters only

    @property
    def is_verified(self) -> bool:
        return self.role == Role.ADMIN or self.verified
