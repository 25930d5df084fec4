import pytest
from pymongo.errors import ServerSelectionTimeoutError

from evote.errors import StorageError
from evote.models.user_model import User, Role
from evote.tally import live_tally


def test_seed_state(storage):
    cands = storage.list_candidates()
    assert [(c.name, c.manifesto, c.votes) for c in cands] == [
        ("Alice", "Transparency and Innovation", 0),
        ("Bob", "Community and Growth", 0),
    ]
    assert storage.is_election_active() is False
    assert storage.votes_cast() == 0

    voter = storage.get_user("voter1")
    assert voter.role == Role.VOTER
    assert voter.verified is False
    admin = storage.get_user("admin")
    assert admin.role == Role.ADMIN
    assert admin.is_verified


def test_init_does_not_overwrite_existing_data(storage):
    storage.compare_and_set_election_active(expected=False, new=True)
    storage.set_user_verified("voter1")
    storage.apply_vote("voter1", 1)

    storage.init()

    assert storage.is_election_active() is True
    assert storage.get_user("voter1").verified is True
    assert storage.get_candidate(1).votes == 1
    assert storage.votes_cast() == 1


def test_create_user_rejects_duplicates(storage):
    user = User(username="voter2", display_name="Voter Two")
    assert storage.create_user(user) is True
    assert storage.create_user(User(username="voter2", display_name="Someone Else")) is False
    assert storage.get_user("voter2").display_name == "Voter Two"


def test_list_users_sorted_by_username(storage):
    for name in ("zed", "bea", "mia"):
        storage.create_user(User(username=name, display_name=name))
    assert [u.username for u in storage.list_users(Role.VOTER)] == ["bea", "mia", "voter1", "zed"]
    assert "admin" in [u.username for u in storage.list_users()]


def test_admin_cannot_be_deleted_or_reverified(storage):
    assert storage.delete_user("admin") is False
    assert storage.set_user_verified("admin") is False
    assert storage.get_user("admin") is not None


def test_candidate_ids_are_never_reused(storage):
    carol = storage.insert_candidate("Carol", None)
    storage.delete_candidate(carol.id)
    dave = storage.insert_candidate("Dave", "Roads")
    assert dave.id == carol.id + 1


def test_apply_vote_writes_nothing_when_it_does_not_match(storage):
    # election inactive
    assert storage.apply_vote("voter1", 1) is None
    storage.compare_and_set_election_active(expected=False, new=True)
    # unknown candidate
    assert storage.apply_vote("voter1", 99) is None
    assert storage.has_voted("voter1") is False
    assert storage.votes_cast() == 0

    updated = storage.apply_vote("voter1", 2)
    assert (updated.name, updated.votes) == ("Bob", 1)
    # already voted
    assert storage.apply_vote("voter1", 1) is None
    assert live_tally(storage) == [("Alice", 0), ("Bob", 1)]
    assert storage.votes_cast() == 1


def test_compare_and_set_election_flag(storage):
    assert storage.compare_and_set_election_active(expected=True, new=False) is False
    assert storage.compare_and_set_election_active(expected=False, new=True) is True
    assert storage.compare_and_set_election_active(expected=False, new=True) is False
    assert storage.is_election_active() is True


class _UnreachableCollection:
    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")
        return _fail


def test_driver_errors_surface_as_storage_error(storage, monkeypatch):
    monkeypatch.setattr(storage, "election", _UnreachableCollection())

    with pytest.raises(StorageError) as exc_info:
        live_tally(storage)
    assert isinstance(exc_info.value.cause, ServerSelectionTimeoutError)
    assert exc_info.value.__cause__ is exc_info.value.cause

    with pytest.raises(StorageError):
        storage.apply_vote("voter1", 1)


def test_missing_election_document_is_a_storage_error(storage):
    storage.election.delete_many({})
    with pytest.raises(StorageError):
        storage.is_election_active()
