# Shared FastAPI dependencies and the failure -> HTTP status mapping.
import threading
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from evote.auth import Authenticator
from evote.errors import (
    EVoteError, AuthError, AuthFailure, ElectionError, VoteError, VoteFailure,
    ResultsError, ResultsFailure, RecordError, RecordFailure, StorageError,
)
from evote.storage import get_storage

bearer_scheme = HTTPBearer(auto_error=False)

_authenticator: Optional[Authenticator] = None
_authenticator_lock = threading.Lock()


def get_authenticator() -> Authenticator:
    global _authenticator
    with _authenticator_lock:
        if _authenticator is None:
            _authenticator = Authenticator(get_storage())
    return _authenticator


def to_http(e: EVoteError) -> HTTPException:
    status = 400
    if isinstance(e, AuthError):
        status = 403 if e.reason == AuthFailure.UNAUTHORIZED else 401
    elif isinstance(e, RecordError):
        if e.reason in (RecordFailure.UNKNOWN_USER, RecordFailure.UNKNOWN_CANDIDATE):
            status = 404
        elif e.reason == RecordFailure.MISSING_FIELD:
            status = 400
        else:
            status = 409
    elif isinstance(e, ElectionError):
        status = 409
    elif isinstance(e, VoteError):
        status = 404 if e.reason == VoteFailure.UNKNOWN_CANDIDATE else 409
    elif isinstance(e, ResultsError):
        status = 404 if e.reason == ResultsFailure.NO_CANDIDATES else 409
    elif isinstance(e, StorageError):
        status = 503
    reason = getattr(e.reason, "value", e.reason)
    return HTTPException(status_code=status, detail={"reason": reason, "message": e.message})


def current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: Authenticator = Depends(get_authenticator),
):
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail={"reason": AuthFailure.UNAUTHORIZED.value, "message": "Not logged in."},
        )
    try:
        return auth.resolve(credentials.credentials)
    except AuthError as e:
        raise HTTPException(status_code=401, detail={"reason": e.reason.value, "message": e.message})


def admin_capability(session=Depends(current_session), auth: Authenticator = Depends(get_authenticator)):
    try:
        return auth.require_admin(session)
    except AuthError as e:
        raise to_http(e)


def voter_session(session=Depends(current_session), auth: Authenticator = Depends(get_authenticator)):
    try:
        return auth.require_voter(session)
    except AuthError as e:
        raise to_http(e)
