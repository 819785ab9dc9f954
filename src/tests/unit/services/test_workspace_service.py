"""Tests for WorkspaceService with mocked stores."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from upwatch.core.errors import (
    ForbiddenError,
    SlugTakenError,
    ValidationFailedError,
    WorkspaceNotFoundError,
)
from upwatch.core.models import Workspace
from upwatch.infra.stores import WorkspaceStore
from upwatch.services import AccessGuard, WorkspaceService


def _workspace(ws_id: str = "ws-1", owner_id: str = "user-1", slug: str = "acme"):
    ws = MagicMock(spec=Workspace)
    ws.id = ws_id
    ws.owner_id = owner_id
    ws.slug = slug
    return ws


@pytest.fixture
def store():
    store = AsyncMock(spec=WorkspaceStore)
    store.find_by_slug.return_value = None
    store.create.side_effect = lambda ws: ws
    return store


@pytest.fixture
def guard():
    return AsyncMock(spec=AccessGuard)


@pytest.fixture
def service(store, guard) -> WorkspaceService:
    return WorkspaceService(workspaces=store, guard=guard)


class TestCreate:
    """WorkspaceService.create() tests."""

    async def test_derives_slug_from_name(self, service, store) -> None:
        ws = await service.create("user-1", "My Workspace")

        assert ws.slug == "my-workspace"
        assert ws.owner_id == "user-1"
        store.find_by_slug.assert_awaited_once_with("my-workspace")

    async def test_long_name_slug_fits_column(self, service, store) -> None:
        ws = await service.create("user-1", "Monitoring " * 9)

        assert len(ws.slug) <= 60
        assert not ws.slug.endswith("-")
        store.find_by_slug.assert_awaited_once_with(ws.slug)

    async def test_explicit_slug_wins(self, service) -> None:
        ws = await service.create("user-1", "My Workspace", slug="custom")
        assert ws.slug == "custom"

    async def test_quota_defaults(self, service) -> None:
        ws = await service.create("user-1", "Acme")

        assert ws.plan == "free"
        assert ws.max_services == 5
        assert ws.max_check_interval_seconds == 300

    async def test_slug_taken(self, service, store) -> None:
        store.find_by_slug.return_value = _workspace(ws_id="other")

        with pytest.raises(SlugTakenError):
            await service.create("user-2", "X", slug="x")
        store.create.assert_not_awaited()

    async def test_race_on_unique_index_maps_to_slug_taken(self, service, store) -> None:
        store.create.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

        with pytest.raises(SlugTakenError):
            await service.create("user-1", "Acme")


class TestUpdate:
    """WorkspaceService.update() tests."""

    async def test_resubmitting_own_slug_is_not_a_conflict(
        self, service, store, guard
    ) -> None:
        ws = _workspace(slug="acme")
        guard.assert_workspace_access.return_value = ws
        store.find_by_slug.return_value = ws
        store.update.return_value = ws

        result = await service.update("ws-1", "user-1", {"slug": "acme"})

        assert result is ws
        store.update.assert_awaited_once_with("ws-1", {"slug": "acme"})

    async def test_slug_of_other_workspace_conflicts(self, service, store, guard) -> None:
        guard.assert_workspace_access.return_value = _workspace()
        store.find_by_slug.return_value = _workspace(ws_id="ws-2", slug="taken")

        with pytest.raises(SlugTakenError):
            await service.update("ws-1", "user-1", {"slug": "taken"})
        store.update.assert_not_awaited()

    async def test_name_only_skips_slug_check(self, service, store, guard) -> None:
        guard.assert_workspace_access.return_value = _workspace()
        store.update.return_value = _workspace()

        await service.update("ws-1", "user-1", {"name": "Renamed"})

        store.find_by_slug.assert_not_awaited()

    async def test_race_on_update_maps_to_slug_taken(self, service, store, guard) -> None:
        guard.assert_workspace_access.return_value = _workspace()
        store.update.side_effect = IntegrityError("UPDATE", {}, Exception("unique"))

        with pytest.raises(SlugTakenError):
            await service.update("ws-1", "user-1", {"slug": "fresh"})

    async def test_forbidden_propagates(self, service, store, guard) -> None:
        guard.assert_workspace_access.side_effect = ForbiddenError()

        with pytest.raises(ForbiddenError):
            await service.update("ws-1", "intruder", {"name": "x"})
        store.update.assert_not_awaited()


class TestGetListDelete:
    async def test_get_delegates_to_guard(self, service, guard) -> None:
        ws = _workspace()
        guard.assert_workspace_access.return_value = ws

        assert await service.get("ws-1", "user-1") is ws
        guard.assert_workspace_access.assert_awaited_once_with("ws-1", "user-1")

    async def test_list(self, service, store) -> None:
        store.find_all_by_owner_id.return_value = [_workspace()]

        assert len(await service.list("user-1")) == 1
        store.find_all_by_owner_id.assert_awaited_once_with("user-1")

    async def test_delete_cascades(self, service, store, guard) -> None:
        guard.assert_workspace_access.return_value = _workspace()

        await service.delete("ws-1", "user-1")

        store.soft_delete_cascade.assert_awaited_once_with("ws-1")

    async def test_delete_missing(self, service, store, guard) -> None:
        guard.assert_workspace_access.side_effect = WorkspaceNotFoundError()

        with pytest.raises(WorkspaceNotFoundError):
            await service.delete("ws-1", "user-1")
        store.soft_delete_cascade.assert_not_awaited()


class TestCreateEmptySlug:
    async def test_unsluggable_name_rejected(self, service, store) -> None:
        with pytest.raises(ValidationFailedError):
            await service.create("user-1", "!!!")
        store.create.assert_not_awaited()
