"""Entity Store — SQLAlchemy store against in-memory SQLite.

Invariants:
    - insert_post links the post into the creator's post set
    - delete_post removes the row AND the back-reference
    - Malformed ids resolve to None
    - find_posts_page orders newest first and honors skip/limit
"""

import asyncio

import pytest
from sqlalchemy import select

from postboard.infrastructure.entity_store import SqlEntityStore, parse_id
from postboard.models.post import Post
from postboard.models.user import User


@pytest.fixture
def store(test_db):
    return SqlEntityStore(test_db)


async def _user(store, email="alice@example.com"):
    user = await store.insert_user(email, "Alice", "hash")
    await store.commit()
    return user


def test_parse_id_rejects_garbage():
    assert parse_id("not-a-uuid") is None
    assert parse_id(None) is None


async def test_insert_user_defaults_status(store):
    user = await _user(store)
    found = await store.find_user_by_email("alice@example.com")
    assert found.id == user.id
    assert found.status == "I am new!"
    assert found.posts == []


async def test_find_user_by_malformed_id_is_none(store):
    assert await store.find_user_by_id("nope") is None


async def test_insert_post_links_back_reference(store, test_session_factory):
    user = await _user(store)
    post = await store.insert_post("Title one", "Content one", "images/a.png", user)
    await store.commit()

    assert post.creator_id == user.id
    async with test_session_factory() as fresh:
        reloaded = await fresh.get(User, user.id)
        assert [p.id for p in reloaded.posts] == [post.id]


async def test_find_post_resolves_creator(store):
    user = await _user(store)
    post = await store.insert_post("Title one", "Content one", "images/a.png", user)
    await store.commit()

    found = await store.find_post_by_id(str(post.id))
    assert found.creator.email == "alice@example.com"


async def test_delete_post_removes_row_and_reference(store, test_session_factory):
    user = await _user(store)
    post = await store.insert_post("Title one", "Content one", "images/a.png", user)
    await store.commit()

    await store.delete_post(post)
    await store.commit()

    assert post not in user.posts
    async with test_session_factory() as fresh:
        remaining = (await fresh.execute(select(Post))).scalars().all()
        assert remaining == []
        reloaded = await fresh.get(User, user.id)
        assert reloaded.posts == []


async def test_save_post_refreshes_updated_at(store):
    user = await _user(store)
    post = await store.insert_post("Title one", "Content one", "images/a.png", user)
    await store.commit()
    before = post.updated_at

    await asyncio.sleep(0.01)
    post.title = "Title two"
    await store.save_post(post)
    await store.commit()
    assert post.updated_at > before


async def test_posts_page_orders_newest_first(store):
    user = await _user(store)
    for i in range(3):
        await store.insert_post(f"Title {i}", f"Content {i}", "images/a.png", user)
        await store.commit()
        await asyncio.sleep(0.01)

    assert await store.count_posts() == 3
    page = await store.find_posts_page("created_at", True, skip=0, limit=2)
    assert [p.title for p in page] == ["Title 2", "Title 1"]
    tail = await store.find_posts_page("created_at", True, skip=2, limit=2)
    assert [p.title for p in tail] == ["Title 0"]


async def test_unknown_sort_key_is_rejected(store):
    with pytest.raises(ValueError):
        await store.find_posts_page("password_hash", True, skip=0, limit=2)
