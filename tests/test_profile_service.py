import pytest
from fastapi import HTTPException
from postgrest.exceptions import APIError

from app.modules.profiles.schemas import ProfileUpdate
from app.modules.profiles.service import ProfileService
from tests.fakes import FakeSupabase, profile_row


def _unique_violation(constraint):
    return APIError({
        "code": "23505",
        "message": f'duplicate key value violates unique constraint "{constraint}"',
        "details": None,
        "hint": None,
    })


def test_username_taken_by_other_identity_is_conflict_without_write(user_u2):
    caller = FakeSupabase()
    system = FakeSupabase().queue("profiles", [{"id": "u1"}])

    with pytest.raises(HTTPException) as exc_info:
        ProfileService(caller, system).upsert_profile(user_u2, ProfileUpdate(username="alice"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Username already taken"
    assert caller.queries == []
    assert system.writes() == []


def test_conflict_lookup_excludes_the_caller(user_u1):
    caller = FakeSupabase().queue("profiles", [profile_row("u1", "u1@x.com", username="alice")])
    system = FakeSupabase().queue("profiles", [])

    ProfileService(caller, system).upsert_profile(user_u1, ProfileUpdate(username="alice"))

    lookup = system.queries[0]
    assert lookup.op("select") == ("select", "id")
    assert ("eq", "username", "alice") in lookup.ops
    assert ("neq", "id", "u1") in lookup.ops


def test_update_goes_through_caller_scoped_client(user_u1):
    caller = FakeSupabase().queue(
        "profiles", [profile_row("u1", "u1@x.com", username="alice", full_name="Alice")]
    )
    system = FakeSupabase().queue("profiles", [])

    profile = ProfileService(caller, system).upsert_profile(
        user_u1, ProfileUpdate(username="alice", fullName="Alice")
    )

    assert profile.username == "alice"
    assert profile.full_name == "Alice"
    update = caller.queries[0]
    assert update.op("update") == ("update", {"username": "alice", "full_name": "Alice", "bio": None})
    assert ("eq", "id", "u1") in update.ops
    assert system.writes() == []


def test_empty_fields_are_written_as_null_and_skip_lookup(user_u1):
    caller = FakeSupabase().queue("profiles", [profile_row("u1", "u1@x.com")])
    system = FakeSupabase()

    ProfileService(caller, system).upsert_profile(user_u1, ProfileUpdate(username="", bio=""))

    assert caller.queries[0].op("update") == ("update", {"username": None, "full_name": None, "bio": None})
    assert system.queries == []


def test_missing_profile_is_created_in_system_context(user_u1):
    caller = FakeSupabase().queue("profiles", [])
    system = FakeSupabase().queue(
        "profiles", [], [profile_row("u1", "u1@x.com", username="alice")]
    )

    profile = ProfileService(caller, system).upsert_profile(user_u1, ProfileUpdate(username="alice"))

    assert profile.id == "u1"
    insert = system.queries[1].op("insert")
    assert insert == ("insert", {
        "id": "u1",
        "email": "u1@x.com",
        "username": "alice",
        "full_name": None,
        "bio": None,
    })


def test_unique_violation_on_username_from_concurrent_writer_is_conflict(user_u1):
    caller = FakeSupabase().queue("profiles", _unique_violation("profiles_username_key"))
    system = FakeSupabase().queue("profiles", [])

    with pytest.raises(HTTPException) as exc_info:
        ProfileService(caller, system).upsert_profile(user_u1, ProfileUpdate(username="alice"))

    assert exc_info.value.status_code == 400


def test_other_unique_violation_is_server_error(user_u1):
    caller = FakeSupabase().queue("profiles", [])
    system = FakeSupabase().queue("profiles", _unique_violation("profiles_pkey"))

    with pytest.raises(HTTPException) as exc_info:
        ProfileService(caller, system).upsert_profile(user_u1, ProfileUpdate(bio="hi"))

    assert exc_info.value.status_code == 500


def test_store_failure_is_server_error(user_u1):
    error = APIError({"code": "08006", "message": "connection failure", "details": None, "hint": None})
    caller = FakeSupabase().queue("profiles", error)

    with pytest.raises(HTTPException) as exc_info:
        ProfileService(caller, FakeSupabase()).upsert_profile(user_u1, ProfileUpdate(bio="hi"))

    assert exc_info.value.status_code == 500
    assert "connection failure" in exc_info.value.detail


def test_upsert_without_system_context_fails(user_u1):
    with pytest.raises(HTTPException) as exc_info:
        ProfileService(FakeSupabase()).upsert_profile(user_u1, ProfileUpdate(bio="hi"))

    assert exc_info.value.status_code == 500


def test_find_profile_returns_none_when_row_hidden_or_missing():
    caller = FakeSupabase().queue("profiles", [])

    assert ProfileService(caller).find_profile("u1") is None


def test_get_profile_missing_is_404():
    caller = FakeSupabase().queue("profiles", [])

    with pytest.raises(HTTPException) as exc_info:
        ProfileService(caller).get_profile("u1")

    assert exc_info.value.status_code == 404
