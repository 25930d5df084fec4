from fastapi import APIRouter, Depends

from evote.auth import Authenticator
from evote.errors import EVoteError
from evote.models.session_model import AdminSession
from evote.routes.deps import get_authenticator, current_session, to_http
from evote.schemas import AdminLoginRequest, VoterLoginRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(body: AdminLoginRequest, auth: Authenticator = Depends(get_authenticator)):
    try:
        session = auth.authenticate_admin(body.username, body.password)
    except EVoteError as e:
        raise to_http(e)
    return TokenResponse(access_token=auth.issue_token(session), role="ADMIN", username=session.username)


@router.post("/voter/login", response_model=TokenResponse)
def voter_login(body: VoterLoginRequest, auth: Authenticator = Depends(get_authenticator)):
    try:
        session = auth.authenticate_voter(body.username)
    except EVoteError as e:
        raise to_http(e)
    return TokenResponse(access_token=auth.issue_token(session), role="VOTER", username=session.username)


@router.post("/logout")
def logout(session=Depends(current_session), auth: Authenticator = Depends(get_authenticator)):
    auth.logout(session)
    who = "Admin" if isinstance(session, AdminSession) else "Voter"
    return {"message": f"{who} {session.username} logged out."}
