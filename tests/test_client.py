import pytest

from shared_todos.client import IdentityStore, TodoApiError, TodoClient
from shared_todos.config import settings


def test_identity_store_persists_between_instances(tmp_path):
    path = tmp_path / "identity.json"
    store = IdentityStore(path)
    user_id = store.get_or_create()
    assert user_id.startswith("user-")

    assert IdentityStore(path).user_id == user_id
    assert store.get_or_create() == user_id


def test_identity_store_treats_placeholder_values_as_missing(tmp_path):
    path = tmp_path / "identity.json"
    path.write_text('{"userId": "undefined"}', encoding="utf-8")

    store = IdentityStore(path)
    assert not store.has_identity()
    assert store.get_or_create() != "undefined"


def test_identity_store_reset_mints_new_identity():
    store = IdentityStore()
    first = store.get_or_create()
    store.set(first, "token")
    second = store.reset()
    assert second != first
    assert store.token is None


async def test_owner_and_guest_share_a_list(client, tmp_path):
    owner = TodoClient(client, IdentityStore(tmp_path / "owner.json"))
    guest = TodoClient(client, IdentityStore(tmp_path / "guest.json"))

    account = await owner.register("alice", "secret123")
    assert owner.identity.user_id == account["id"]

    todo = await owner.create_list("Groceries")

    # Shared link: the guest reads publicly, then joins and gets an identity minted
    assert (await guest.get_list(todo["id"]))["title"] == "Groceries"
    joined = await guest.add_user(todo["id"], "visitor")
    assert guest.identity.user_id == joined["generatedUserId"]

    after_add = await guest.add_tasks(todo["id"], ["Milk"], "visitor")
    task_id = after_add["tasks"][0]["id"]

    await owner.update_task(todo["id"], task_id, status="closed")
    seen = await guest.get_list(todo["id"])
    assert seen["tasks"][0]["status"] == "closed"
    assert seen["tasks"][0]["lastUpdatedBy"] == "alice"

    overview = await owner.get_all_lists()
    assert [row["id"] for row in overview["created"]] == [todo["id"]]

    roster = await guest.get_users(todo["id"])
    assert roster["totalUsers"] == 1


async def test_client_surfaces_api_errors(client, tmp_path):
    owner = TodoClient(client, IdentityStore(tmp_path / "owner.json"))
    member = TodoClient(client, IdentityStore(tmp_path / "member.json"))

    todo = await owner.create_list("Chores")
    await member.add_user(todo["id"], "bob")

    with pytest.raises(TodoApiError) as exc:
        await member.delete_list(todo["id"])
    assert exc.value.status_code == 403

    with pytest.raises(TodoApiError) as exc:
        await owner.login("nobody", "secret123")
    assert exc.value.status_code == 401


async def test_add_user_without_username(client, tmp_path):
    owner = TodoClient(client, IdentityStore(tmp_path / "owner.json"))
    guest = TodoClient(client, IdentityStore(tmp_path / "guest.json"))
    member = TodoClient(client, IdentityStore(tmp_path / "member.json"))
    todo = await owner.create_list("Chores")

    # A guest with no name is refused and keeps no identity
    with pytest.raises(TodoApiError) as exc:
        await guest.add_user(todo["id"])
    assert exc.value.status_code == 400
    assert exc.value.detail == "Username required"
    assert not guest.identity.has_identity()

    # A registered account joins under its own name
    await member.register("bobby", "secret123")
    joined = await member.add_user(todo["id"])
    assert "generatedUserId" not in joined
    assert [u["username"] for u in joined["users"]] == ["bobby"]


async def test_client_regenerates_identity_once_when_missing(client, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_SIGNED_IDENTITY", True)
    store = IdentityStore()
    first_id = store.get_or_create()
    todo_client = TodoClient(client, store)

    with pytest.raises(TodoApiError) as exc:
        await todo_client.create_list("Unsigned")
    assert exc.value.status_code == 401
    assert exc.value.detail == "User ID required"
    assert store.user_id != first_id
