import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from evote.errors import StorageError
from evote.main import app
from evote.routes.deps import get_authenticator
from evote.storage import get_storage


@pytest.fixture
def client(storage, auth):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_authenticator] = lambda: auth
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    resp = client.post("/auth/admin/login", json={"username": "admin", "password": "admin"})
    assert resp.status_code == 200
    return _bearer(resp.json()["access_token"])


def _voter_headers(client, admin_headers, username):
    client.post("/voters/register", json={"username": username, "display_name": username.title()})
    client.post(f"/voters/{username}/verify", headers=admin_headers)
    resp = client.post("/auth/voter/login", json={"username": username})
    assert resp.status_code == 200
    return _bearer(resp.json()["access_token"])


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["election_active"] is False


def test_bad_admin_login(client):
    resp = client.post("/auth/admin/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["reason"] == "InvalidCredentials"


def test_unverified_voter_cannot_log_in(client):
    resp = client.post("/auth/voter/login", json={"username": "voter1"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["reason"] == "NotVerified"


def test_admin_routes_need_an_admin(client, admin_headers):
    assert client.post("/election/start").status_code == 401
    voter_headers = _voter_headers(client, admin_headers, "voter2")
    resp = client.post("/election/start", headers=voter_headers)
    assert resp.status_code == 403
    assert resp.json()["detail"]["reason"] == "Unauthorized"


def test_full_election(client, admin_headers):
    candidates = client.get("/candidates").json()
    ids = {c["name"]: c["id"] for c in candidates}

    resp = client.post("/candidates", json={"name": "Carol", "manifesto": "Parks"}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["votes"] == 0

    voter = _voter_headers(client, admin_headers, "voter2")

    resp = client.post("/vote/cast", json={"candidate_id": ids["Bob"]}, headers=voter)
    assert resp.status_code == 409
    assert resp.json()["detail"]["reason"] == "NotActive"

    assert client.post("/election/start", headers=admin_headers).status_code == 200
    assert client.post("/election/start", headers=admin_headers).status_code == 409
    assert client.get("/election/status").json() == {"active": True}

    resp = client.post("/vote/cast", json={"candidate_id": ids["Bob"]}, headers=voter)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Vote cast for: Bob", "candidate": "Bob", "votes": 1}

    resp = client.post("/vote/cast", json={"candidate_id": ids["Alice"]}, headers=voter)
    assert resp.status_code == 409
    assert resp.json()["detail"]["reason"] == "AlreadyVoted"
    assert client.get("/vote/status", headers=voter).json() == {"username": "voter2", "has_voted": True}

    assert client.get("/results/final").status_code == 409

    live = client.get("/results/live").json()
    assert live["votes_cast"] == 1
    assert live["tally"] == [
        {"name": "Alice", "votes": 0},
        {"name": "Bob", "votes": 1},
        {"name": "Carol", "votes": 0},
    ]

    assert client.post("/election/end", headers=admin_headers).status_code == 200
    final = client.get("/results/final").json()
    assert final["outcome"] == "winner"
    assert final["names"] == ["Bob"]
    assert final["message"] == "Winner: Bob with 1 votes."


def test_unknown_candidate_is_404(client, admin_headers):
    voter = _voter_headers(client, admin_headers, "voter2")
    client.post("/election/start", headers=admin_headers)
    resp = client.post("/vote/cast", json={"candidate_id": 12345}, headers=voter)
    assert resp.status_code == 404
    assert resp.json()["detail"]["reason"] == "UnknownCandidate"


def test_voter_management(client, admin_headers):
    resp = client.post("/voters/register", json={"username": "voter1", "display_name": "Again"})
    assert resp.status_code == 409

    assert client.post("/voters/ghost/verify", headers=admin_headers).status_code == 404
    client.post("/voters/register", json={"username": "eve", "display_name": "Eve"})
    assert [v["username"] for v in client.get("/voters").json()] == ["eve", "voter1"]

    assert client.delete("/voters/eve", headers=admin_headers).status_code == 200
    assert [v["username"] for v in client.get("/voters").json()] == ["voter1"]


def test_candidate_edit_and_remove(client, admin_headers):
    ids = {c["name"]: c["id"] for c in client.get("/candidates").json()}

    resp = client.put(f"/candidates/{ids['Alice']}", json={"name": "Alicia"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alicia"

    resp = client.put(f"/candidates/{ids['Bob']}", json={"name": "Alicia"}, headers=admin_headers)
    assert resp.status_code == 409

    resp = client.delete(f"/candidates/{ids['Bob']}", headers=admin_headers)
    assert resp.status_code == 200
    assert [c["name"] for c in client.get("/candidates").json()] == ["Alicia"]
    assert client.delete(f"/candidates/{ids['Bob']}", headers=admin_headers).status_code == 404


def test_logout_revokes_the_token(client, admin_headers):
    assert client.post("/auth/logout", headers=admin_headers).status_code == 200
    resp = client.post("/election/start", headers=admin_headers)
    assert resp.status_code == 401


def test_storage_failure_is_503(client, storage, monkeypatch):
    def unavailable():
        raise StorageError(ServerSelectionTimeoutError("connection refused"))

    monkeypatch.setattr(storage, "list_candidates", unavailable)
    resp = client.get("/results/live")
    assert resp.status_code == 503
    assert resp.json()["detail"]["reason"] == "StorageError"


def test_openapi_carries_field_examples():
    schemas = app.openapi()["components"]["schemas"]
    assert schemas["VoterRegisterRequest"]["properties"]["username"]["example"] == "voter2"
    assert schemas["CandidateIn"]["properties"]["name"]["example"] == "Carol"
