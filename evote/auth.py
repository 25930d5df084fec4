# evote/auth.py
# Identity & authorization: admin / voter sessions and the admin gate.
import logging
import threading
import uuid
from typing import Callable, Dict, Optional, Union

from evote.config import ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_PASSWORD_HASH
from evote.errors import AuthError, AuthFailure
from evote.models.session_model import AdminSession, VoterSession, AdminCapability
from evote.models.user_model import Role
from evote.security import hash_password, verify_password, create_access_token, decode_access_token

logger = logging.getLogger(__name__)

Session = Union[AdminSession, VoterSession]
CredentialVerifier = Callable[[str, str], bool]


class ConfiguredAdminVerifier:
    """
    Checks the single admin account from the configuration. Any callable
    taking (username, secret) and returning a bool can replace it.
    """

    def __init__(self, username: str = ADMIN_USERNAME, password_hash: Optional[str] = None):
        self.username = username
        self.password_hash = password_hash or ADMIN_PASSWORD_HASH or hash_password(ADMIN_PASSWORD)

    def __call__(self, username: str, secret: str) -> bool:
        if not username or not secret:
            return False
        if username.strip().lower() != self.username.lower():
            return False
        return verify_password(secret, self.password_hash)


class Authenticator:
    """
    Issues sessions and keeps them in memory only: a session stops resolving
    after logout and does not survive the process.
    """

    def __init__(self, storage, verify_admin: Optional[CredentialVerifier] = None):
        self.storage = storage
        self.verify_admin = verify_admin or ConfiguredAdminVerifier()
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def _register(self, session: Session) -> Session:
        session._issuer = self
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def authenticate_admin(self, username: str, secret: str) -> AdminSession:
        if not self.verify_admin(username or "", secret or ""):
            logger.warning(f"Rejected admin login for {username!r}")
            raise AuthError(AuthFailure.INVALID_CREDENTIALS, "Invalid admin credentials.")
        session = AdminSession(username=username.strip(), session_id=uuid.uuid4().hex)
        logger.info(f"Admin {session.username} logged in")
        return self._register(session)

    def authenticate_voter(self, username: str) -> VoterSession:
        username = (username or "").strip()
        if not username:
            raise AuthError(AuthFailure.UNKNOWN_USER, "Enter a voter username.")
        user = self.storage.get_user(username)
        if user is None:
            raise AuthError(AuthFailure.UNKNOWN_USER, f"No such voter: {username}")
        if user.role != Role.VOTER:
            raise AuthError(AuthFailure.WRONG_ROLE, f"{username} is not a voter account.")
        if not user.verified:
            raise AuthError(AuthFailure.NOT_VERIFIED, "Voter is not verified yet.")
        session = VoterSession(
            username=user.username,
            display_name=user.display_name,
            session_id=uuid.uuid4().hex,
        )
        logger.info(f"Voter {user.username} logged in")
        return self._register(session)

    def is_live(self, session) -> bool:
        """True only for a session object this authenticator issued and has not logged out."""
        if session is None:
            return False
        with self._lock:
            return self._sessions.get(getattr(session, "session_id", None)) is session

    def require_admin(self, session) -> AdminCapability:
        """Gate used before every admin-only mutation."""
        if not isinstance(session, AdminSession) or not self.is_live(session):
            raise AuthError(AuthFailure.UNAUTHORIZED, "Admin privileges required. Please log in as admin.")
        capability = AdminCapability(username=session.username, session_id=session.session_id)
        capability._issuer = self
        return capability

    def capability_is_live(self, capability: AdminCapability) -> bool:
        with self._lock:
            session = self._sessions.get(capability.session_id)
        return isinstance(session, AdminSession) and session.username == capability.username

    def require_voter(self, session) -> VoterSession:
        if not isinstance(session, VoterSession) or not self.is_live(session):
            raise AuthError(AuthFailure.UNAUTHORIZED, "Login as a verified voter first.")
        # the account may have been removed since login
        user = self.storage.get_user(session.username)
        if user is None or user.role != Role.VOTER or not user.verified:
            raise AuthError(AuthFailure.UNAUTHORIZED, "Voter account is no longer eligible.")
        return session

    def logout(self, session) -> None:
        with self._lock:
            removed = self._sessions.pop(getattr(session, "session_id", None), None)
        if removed is not None:
            logger.info(f"{removed.username} logged out")

    # --- Bearer tokens for the HTTP layer ---

    def issue_token(self, session: Session) -> str:
        role = Role.ADMIN if isinstance(session, AdminSession) else Role.VOTER
        return create_access_token({"sub": session.username, "role": role.value, "sid": session.session_id})

    def resolve(self, token: str) -> Session:
        payload = decode_access_token(token) if token else None
        if not payload:
            raise AuthError(AuthFailure.UNAUTHORIZED, "Invalid or expired token.")
        with self._lock:
            session = self._sessions.get(payload.get("sid"))
        if session is None or session.username != payload.get("sub"):
            raise AuthError(AuthFailure.UNAUTHORIZED, "Session has ended. Please log in again.")
        return session


def check_capability(capability) -> AdminCapability:
    """
    Admin-only core operations call this on the capability they are handed.
    Only a capability from `Authenticator.require_admin` whose admin session
    is still logged in passes.
    """
    issuer = getattr(capability, "_issuer", None) if isinstance(capability, AdminCapability) else None
    if issuer is None or not issuer.capability_is_live(capability):
        raise AuthError(AuthFailure.UNAUTHORIZED, "Admin privileges required. Please log in as admin.")
    return capability


def require_live_voter(session) -> VoterSession:
    """Voter-only core operations call this on the session they are handed."""
    issuer = getattr(session, "_issuer", None) if isinstance(session, VoterSession) else None
    if issuer is None:
        raise AuthError(AuthFailure.UNAUTHORIZED, "Login as a verified voter first.")
    return issuer.require_voter(session)
