# evote/errors.py
# Typed failures returned by the core. The HTTP layer turns them into responses.
from enum import Enum


class AuthFailure(str, Enum):
    INVALID_CREDENTIALS = "InvalidCredentials"
    UNKNOWN_USER = "UnknownUser"
    NOT_VERIFIED = "NotVerified"
    WRONG_ROLE = "WrongRole"
    UNAUTHORIZED = "Unauthorized"


class ElectionFailure(str, Enum):
    ALREADY_ACTIVE = "AlreadyActive"
    NOT_ACTIVE = "NotActive"


class VoteFailure(str, Enum):
    NOT_ACTIVE = "NotActive"
    ALREADY_VOTED = "AlreadyVoted"
    UNKNOWN_CANDIDATE = "UnknownCandidate"


class ResultsFailure(str, Enum):
    ELECTION_STILL_ACTIVE = "ElectionStillActive"
    NO_CANDIDATES = "NoCandidates"


class RecordFailure(str, Enum):
    DUPLICATE_USERNAME = "DuplicateUsername"
    DUPLICATE_CANDIDATE_NAME = "DuplicateCandidateName"
    UNKNOWN_USER = "UnknownUser"
    UNKNOWN_CANDIDATE = "UnknownCandidate"
    MISSING_FIELD = "MissingField"


class EVoteError(Exception):
    """Base class for every failure the core reports to its caller."""

    def __init__(self, reason, message: str = ""):
        self.reason = reason
        self.message = message or str(getattr(reason, "value", reason))
        super().__init__(self.message)


class AuthError(EVoteError):
    pass


class ElectionError(EVoteError):
    pass


class VoteError(EVoteError):
    pass


class ResultsError(EVoteError):
    pass


class RecordError(EVoteError):
    pass


class StorageError(EVoteError):
    """
    Raised when the data store fails. The original driver exception is kept
    both as `cause` and as `__cause__` (raise ... from ...).
    """

    def __init__(self, cause: Exception, message: str = ""):
        self.cause = cause
        super().__init__("StorageError", message or f"Storage failure: {cause}")
