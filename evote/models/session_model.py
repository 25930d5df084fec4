from pydantic import BaseModel, ConfigDict, PrivateAttr


class AdminSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    session_id: str
    _issuer = PrivateAttr(default=None)


class VoterSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    display_name: str
    session_id: str
    _issuer = PrivateAttr(default=None)


class AdminCapability(BaseModel):
    """Proof that an admin session passed the admin gate. Valid while that session lasts."""
    model_config = ConfigDict(frozen=True)

    username: str
    session_id: str
    _issuer = PrivateAttr(default=None)
