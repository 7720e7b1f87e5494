"""Unit tests for UserRepository against mongomock."""

import pytest
from bson import ObjectId

from errors import ConflictError

EMAIL = "ada@example.com"


async def _create(repo, email=EMAIL):
    return await repo.create(email, "Ada", "auth-1", "refresh-1")


class TestCreateAndFind:
    async def test_create_sets_timestamps(self, user_repo):
        user = await _create(user_repo)
        assert user.id is not None
        assert user.tasks == []
        assert user.created_at == user.updated_at == user.last_login_at

    async def test_find_by_email(self, user_repo):
        await _create(user_repo)
        found = await user_repo.find_by_email(EMAIL)
        assert found.name == "Ada"
        assert found.auth_secret_component == "auth-1"
        assert found.refresh_secret_component == "refresh-1"

    async def test_find_missing(self, user_repo):
        assert await user_repo.find_by_email("nobody@example.com") is None

    async def test_duplicate_email_conflicts(self, user_repo):
        await _create(user_repo)
        with pytest.raises(ConflictError) as exc:
            await _create(user_repo)
        assert exc.value.field == "email"


class TestUpdates:
    async def test_update_name(self, user_repo):
        await _create(user_repo)
        user = await user_repo.update_name(EMAIL, "Ada L.")
        assert user.name == "Ada L."

    async def test_set_secret_components_replaces_both(self, user_repo):
        await _create(user_repo)
        user = await user_repo.set_secret_components(EMAIL, "auth-2", "refresh-2")
        assert (user.auth_secret_component, user.refresh_secret_component) == (
            "auth-2",
            "refresh-2",
        )

    async def test_touch_last_login(self, user_repo):
        await _create(user_repo)
        user = await user_repo.touch_last_login(EMAIL)
        assert user.last_login_at >= user.created_at
        assert user.last_login_at.tzinfo is not None

    @pytest.mark.parametrize(
        "method, args",
        [
            ("update_name", ("x",)),
            ("set_secret_components", ("a", "r")),
            ("touch_last_login", ()),
            ("delete", ()),
        ],
    )
    async def test_missing_user_returns_none(self, user_repo, method, args):
        assert await getattr(user_repo, method)("nobody@example.com", *args) is None

    async def test_delete_returns_removed_doc(self, user_repo):
        await _create(user_repo)
        deleted = await user_repo.delete(EMAIL)
        assert deleted.email == EMAIL
        assert await user_repo.find_by_email(EMAIL) is None


class TestTasks:
    async def test_add_keeps_order(self, user_repo):
        await _create(user_repo)
        await user_repo.add_task(EMAIL, "first")
        user = await user_repo.add_task(EMAIL, "second")
        assert [t.content for t in user.tasks] == ["first", "second"]
        assert all(t.completed is False for t in user.tasks)

    async def test_update_task_fields(self, user_repo):
        await _create(user_repo)
        user = await user_repo.add_task(EMAIL, "first")
        task_id = user.tasks[0].id
        user = await user_repo.update_task(EMAIL, task_id, {"completed": True})
        assert user.tasks[0].completed is True
        user = await user_repo.update_task(EMAIL, task_id, {"content": "renamed"})
        assert user.tasks[0].content == "renamed"

    async def test_update_only_touches_target(self, user_repo):
        await _create(user_repo)
        await user_repo.add_task(EMAIL, "first")
        user = await user_repo.add_task(EMAIL, "second")
        user = await user_repo.update_task(EMAIL, user.tasks[1].id, {"completed": True})
        assert [t.completed for t in user.tasks] == [False, True]

    async def test_update_unknown_task_returns_none(self, user_repo):
        await _create(user_repo)
        assert await user_repo.update_task(EMAIL, ObjectId(), {"completed": True}) is None

    async def test_remove_task(self, user_repo):
        await _create(user_repo)
        await user_repo.add_task(EMAIL, "first")
        user = await user_repo.add_task(EMAIL, "second")
        user = await user_repo.remove_task(EMAIL, user.tasks[0].id)
        assert [t.content for t in user.tasks] == ["second"]

    async def test_remove_unknown_task_returns_none(self, user_repo):
        await _create(user_repo)
        assert await user_repo.remove_task(EMAIL, ObjectId()) is None
