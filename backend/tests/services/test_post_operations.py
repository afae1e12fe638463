"""Post Operations — create, list, read, update and delete through the endpoint.

Invariants:
    - Every protected operation answers 401 without a valid token
    - Pagination: 2 per page, newest first, total_posts counts everything
    - 404 takes precedence over 403; 403 over 422
    - deletePost removes the post, its back-reference, and requests image deletion
    - Rendered posts carry ISO timestamps and a fully resolved creator
"""

import asyncio
from datetime import datetime
from uuid import UUID, uuid4

import pytest
from sqlalchemy import select

from postboard.models.post import Post
from postboard.models.user import User
from tests.services.op_client import (
    call, create_post, first_error, register_and_login,
)


@pytest.fixture
async def alice(client):
    return await register_and_login(client, "alice@example.com", "Alice")


@pytest.fixture
async def bob(client):
    return await register_and_login(client, "bob@example.com", "Bob")


# ─── createPost ──────────────────────────────────────────────────

async def test_create_post_requires_token(client):
    res = await call(client, "createPost", {
        "post_input": {"title": "Hello world", "content": "Body text", "image_url": "images/x.png"},
    })
    assert res.status_code == 401
    assert first_error(res) == {"message": "Not authenticated!", "status": 401}


async def test_create_post_with_expired_or_bad_token_is_401(client):
    res = await call(client, "posts", {}, token="not.a.jwt")
    assert res.status_code == 401


async def test_create_post_renders_creator_and_timestamps(client, alice):
    user_id, token = alice
    post = await create_post(client, token)

    assert post["creator"]["id"] == user_id
    assert post["creator"]["name"] == "Alice"
    assert post["id"] in post["creator"]["posts"]
    datetime.fromisoformat(post["created_at"])
    datetime.fromisoformat(post["updated_at"])


async def test_create_post_links_into_user_posts(client, alice, test_session_factory):
    user_id, token = alice
    post = await create_post(client, token)

    res = await call(client, "user", token=token)
    assert res.json()["data"]["posts"] == [post["id"]]

    async with test_session_factory() as db:
        stored = (await db.execute(select(Post))).scalar_one()
        assert str(stored.creator_id) == user_id


async def test_create_post_reports_both_invalid_fields(client, alice, test_session_factory):
    _, token = alice
    res = await call(client, "createPost", {
        "post_input": {"title": "Hi", "content": "", "image_url": "images/x.png"},
    }, token=token)
    assert res.status_code == 422
    assert [d["message"] for d in first_error(res)["data"]] == [
        "Title is invalid.", "Content is invalid.",
    ]
    async with test_session_factory() as db:
        assert (await db.execute(select(Post))).scalars().all() == []


async def test_create_post_for_vanished_user_is_401(client, credentials):
    token = credentials.issue_token(str(uuid4()), "ghost@example.com")
    res = await call(client, "createPost", {
        "post_input": {"title": "Hello world", "content": "Body text", "image_url": "images/x.png"},
    }, token=token)
    assert res.status_code == 401
    assert first_error(res)["message"] == "Invalid user."


# ─── posts (pagination) ──────────────────────────────────────────

@pytest.fixture
async def five_posts(client, alice):
    _, token = alice
    titles = []
    for i in range(5):
        post = await create_post(client, token, title=f"Post number {i}")
        titles.append(post["title"])
        await asyncio.sleep(0.01)
    return token, titles


async def test_first_page_has_two_newest(client, five_posts):
    token, titles = five_posts
    res = await call(client, "posts", {"page": 1}, token=token)
    data = res.json()["data"]
    assert data["total_posts"] == 5
    assert [p["title"] for p in data["posts"]] == [titles[4], titles[3]]


async def test_missing_page_defaults_to_first(client, five_posts):
    token, titles = five_posts
    res = await call(client, "posts", {}, token=token)
    assert [p["title"] for p in res.json()["data"]["posts"]] == [titles[4], titles[3]]


async def test_zero_page_defaults_to_first(client, five_posts):
    token, titles = five_posts
    res = await call(client, "posts", {"page": 0}, token=token)
    assert [p["title"] for p in res.json()["data"]["posts"]] == [titles[4], titles[3]]


async def test_last_partial_page(client, five_posts):
    token, titles = five_posts
    res = await call(client, "posts", {"page": 3}, token=token)
    data = res.json()["data"]
    assert [p["title"] for p in data["posts"]] == [titles[0]]
    assert data["total_posts"] == 5


async def test_page_past_end_is_empty_not_error(client, five_posts):
    token, _ = five_posts
    res = await call(client, "posts", {"page": 4}, token=token)
    assert res.status_code == 200
    assert res.json()["data"] == {"posts": [], "total_posts": 5}


async def test_largest_page_is_empty_not_error(client, five_posts):
    token, _ = five_posts
    res = await call(client, "posts", {"page": 2**31 - 1}, token=token)
    assert res.status_code == 200
    assert res.json()["data"] == {"posts": [], "total_posts": 5}


async def test_oversized_page_is_invalid_argument(client, five_posts):
    token, _ = five_posts
    res = await call(client, "posts", {"page": 10**30}, token=token)
    assert res.status_code == 400
    error = first_error(res)
    assert error["message"] == "Invalid arguments for 'posts'."
    assert error["data"][0]["message"].startswith("page:")



async def test_listed_posts_have_resolved_creators(client, five_posts):
    token, _ = five_posts
    res = await call(client, "posts", {"page": 1}, token=token)
    for post in res.json()["data"]["posts"]:
        assert post["creator"]["email"] == "alice@example.com"


# ─── post ────────────────────────────────────────────────────────

async def test_post_by_id(client, alice):
    _, token = alice
    created = await create_post(client, token)
    res = await call(client, "post", {"id": created["id"]}, token=token)
    assert res.status_code == 200
    assert res.json()["data"] == created


@pytest.mark.parametrize("post_id", [str(uuid4()), "not-a-uuid"])
async def test_post_missing_is_404(client, alice, post_id):
    _, token = alice
    res = await call(client, "post", {"id": post_id}, token=token)
    assert res.status_code == 404


# ─── updatePost ──────────────────────────────────────────────────

async def test_owner_can_update(client, alice):
    _, token = alice
    created = await create_post(client, token)
    await asyncio.sleep(0.01)
    res = await call(client, "updatePost", {
        "id": created["id"],
        "post_input": {"title": "Edited title", "content": "Edited body", "image_url": "images/new.png"},
    }, token=token)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["title"] == "Edited title"
    assert data["image_url"] == "images/new.png"
    assert data["created_at"] == created["created_at"]
    assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(created["updated_at"])


@pytest.mark.parametrize("image_url", ["undefined", None])
async def test_update_keeps_image_when_unchanged(client, alice, image_url):
    _, token = alice
    created = await create_post(client, token, image_url="images/keep.png")
    post_input = {"title": "Edited title", "content": "Edited body"}
    if image_url is not None:
        post_input["image_url"] = image_url
    res = await call(client, "updatePost", {"id": created["id"], "post_input": post_input}, token=token)
    assert res.json()["data"]["image_url"] == "images/keep.png"


async def test_non_owner_update_is_forbidden(client, alice, bob):
    _, alice_token = alice
    _, bob_token = bob
    created = await create_post(client, alice_token)
    res = await call(client, "updatePost", {
        "id": created["id"],
        "post_input": {"title": "Hijacked!", "content": "Hijacked!", "image_url": "undefined"},
    }, token=bob_token)
    assert res.status_code == 403
    assert first_error(res)["message"] == "Not authorized!"


async def test_forbidden_wins_over_invalid_input(client, alice, bob):
    _, alice_token = alice
    _, bob_token = bob
    created = await create_post(client, alice_token)
    res = await call(client, "updatePost", {
        "id": created["id"], "post_input": {"title": "x", "content": "y"},
    }, token=bob_token)
    assert res.status_code == 403


async def test_not_found_wins_over_forbidden(client, bob):
    _, bob_token = bob
    res = await call(client, "updatePost", {
        "id": str(uuid4()), "post_input": {"title": "x", "content": "y"},
    }, token=bob_token)
    assert res.status_code == 404


async def test_owner_update_with_invalid_input_is_422(client, alice):
    _, token = alice
    created = await create_post(client, token)
    res = await call(client, "updatePost", {
        "id": created["id"], "post_input": {"title": "Edited title", "content": "no"},
    }, token=token)
    assert res.status_code == 422
    assert first_error(res)["data"] == [{"message": "Content is invalid."}]


# ─── deletePost ──────────────────────────────────────────────────

async def test_non_owner_delete_is_forbidden(client, alice, bob, fake_images):
    _, alice_token = alice
    _, bob_token = bob
    created = await create_post(client, alice_token)
    res = await call(client, "deletePost", {"id": created["id"]}, token=bob_token)
    assert res.status_code == 403
    assert fake_images.deleted == []


async def test_delete_has_all_three_side_effects(
    client, alice, fake_images, test_session_factory,
):
    user_id, token = alice
    created = await create_post(client, token, image_url="images/doomed.png")

    res = await call(client, "deletePost", {"id": created["id"]}, token=token)
    assert res.status_code == 200
    assert res.json()["data"] is True

    assert fake_images.deleted == ["images/doomed.png"]
    async with test_session_factory() as db:
        assert (await db.execute(select(Post))).scalars().all() == []
        user = await db.get(User, UUID(user_id))
        assert user.posts == []

    again = await call(client, "post", {"id": created["id"]}, token=token)
    assert again.status_code == 404


async def test_delete_survives_image_store_failure(client, alice, fake_images):
    _, token = alice
    fake_images.fail_deletes = True
    created = await create_post(client, token)
    res = await call(client, "deletePost", {"id": created["id"]}, token=token)
    assert res.status_code == 200
    assert fake_images.deleted == [created["image_url"]]


async def test_delete_missing_is_404(client, alice, fake_images):
    _, token = alice
    res = await call(client, "deletePost", {"id": str(uuid4())}, token=token)
    assert res.status_code == 404
    assert fake_images.deleted == []
