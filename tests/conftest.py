import mongomock
import pytest

from evote import crud
from evote.auth import Authenticator, ConfiguredAdminVerifier
from evote.security import hash_password
from evote.storage import ElectionStore


@pytest.fixture(scope="session")
def admin_password_hash():
    # bcrypt is slow on purpose; hash once per run
    return hash_password("admin")


@pytest.fixture
def storage():
    client = mongomock.MongoClient()
    store = ElectionStore(client["evoting_test"])
    store.init()
    return store


@pytest.fixture
def auth(storage, admin_password_hash):
    return Authenticator(storage, verify_admin=ConfiguredAdminVerifier("admin", admin_password_hash))


@pytest.fixture
def admin_session(auth):
    return auth.authenticate_admin("admin", "admin")


@pytest.fixture
def capability(auth, admin_session):
    return auth.require_admin(admin_session)


@pytest.fixture
def make_voter(storage, auth, capability):
    """Register, verify and log in a voter; returns the voter session."""
    def _make(username, display_name=None):
        crud.register_voter(storage, username, display_name or username.title())
        crud.verify_voter(storage, capability, username)
        return auth.authenticate_voter(username)
    return _make


@pytest.fixture
def candidate_ids(storage):
    return {c.name: c.id for c in storage.list_candidates()}
