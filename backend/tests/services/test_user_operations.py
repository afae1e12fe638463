"""User Operations — reading the caller's profile and updating their status."""

from uuid import uuid4

from tests.services.op_client import call, create_post, first_error, register_and_login


async def test_user_returns_caller_profile(client):
    user_id, token = await register_and_login(client)
    post = await create_post(client, token)

    res = await call(client, "user", token=token)
    assert res.status_code == 200
    assert res.json()["data"] == {
        "id": user_id,
        "name": "Alice",
        "email": "alice@example.com",
        "status": "I am new!",
        "posts": [post["id"]],
    }


async def test_user_requires_token(client):
    res = await call(client, "user")
    assert res.status_code == 401


async def test_user_rejects_arguments(client):
    _, token = await register_and_login(client)
    res = await call(client, "user", {"id": "someone-else"}, token=token)
    assert res.status_code == 400
    assert first_error(res)["message"] == "Invalid arguments for 'user'."


async def test_user_deleted_after_token_issued_is_404(client, credentials):
    token = credentials.issue_token(str(uuid4()), "ghost@example.com")
    res = await call(client, "user", token=token)
    assert res.status_code == 404


async def test_update_status_persists(client):
    _, token = await register_and_login(client)
    res = await call(client, "updateStatus", {"status": "Writing things"}, token=token)
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "Writing things"

    again = await call(client, "user", token=token)
    assert again.json()["data"]["status"] == "Writing things"


async def test_update_status_accepts_empty_string(client):
    _, token = await register_and_login(client)
    res = await call(client, "updateStatus", {"status": ""}, token=token)
    assert res.status_code == 200
    assert res.json()["data"]["status"] == ""


async def test_update_status_only_touches_caller(client):
    _, alice_token = await register_and_login(client)
    _, bob_token = await register_and_login(client, "bob@example.com", "Bob")

    await call(client, "updateStatus", {"status": "Alice was here"}, token=alice_token)

    bob = await call(client, "user", token=bob_token)
    assert bob.json()["data"]["status"] == "I am new!"
