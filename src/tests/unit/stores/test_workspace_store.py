"""Tests for WorkspaceStore against SQLite."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from upwatch.core.models import Endpoint, Service, UserRecord, Workspace
from upwatch.infra.stores import EndpointStore, ServiceStore, WorkspaceStore


async def _seed(
    workspace_store: WorkspaceStore,
    service_store: ServiceStore,
    endpoint_store: EndpointStore,
    owner: UserRecord,
    slug: str = "acme",
) -> tuple[Workspace, list[Service], list[Endpoint]]:
    ws = await workspace_store.create(Workspace(owner_id=owner.id, name="Acme", slug=slug))
    services = [
        await service_store.create(
            Service(workspace_id=ws.id, name=f"svc-{i}", base_url="https://example.com")
        )
        for i in range(2)
    ]
    endpoints = [
        await endpoint_store.create(
            Endpoint(
                workspace_id=ws.id,
                service_id=svc.id,
                name=f"ep-{j}",
                route=f"/health/{j}",
            )
        )
        for svc in services
        for j in range(2)
    ]
    return ws, services, endpoints


class TestWorkspaceStoreLookups:
    """Active-scoped reads."""

    async def test_find_by_id_and_slug(
        self, workspace_store: WorkspaceStore, alice: UserRecord
    ) -> None:
        ws = await workspace_store.create(
            Workspace(owner_id=alice.id, name="Acme", slug="acme")
        )

        assert (await workspace_store.find_by_id(ws.id)).id == ws.id
        assert (await workspace_store.find_by_slug("acme")).id == ws.id
        assert await workspace_store.find_by_id("01HZZZZZZZZZZZZZZZZZZZZZZZ") is None

    async def test_find_all_by_owner_only_returns_own_active(
        self,
        workspace_store: WorkspaceStore,
        alice: UserRecord,
        bob: UserRecord,
    ) -> None:
        a1 = await workspace_store.create(Workspace(owner_id=alice.id, name="A1", slug="a1"))
        a2 = await workspace_store.create(Workspace(owner_id=alice.id, name="A2", slug="a2"))
        await workspace_store.create(Workspace(owner_id=bob.id, name="B1", slug="b1"))
        await workspace_store.soft_delete_cascade(a1.id)

        found = await workspace_store.find_all_by_owner_id(alice.id)

        assert [ws.id for ws in found] == [a2.id]

    async def test_update_applies_fields(
        self, workspace_store: WorkspaceStore, alice: UserRecord
    ) -> None:
        ws = await workspace_store.create(Workspace(owner_id=alice.id, name="Old", slug="old"))

        updated = await workspace_store.update(ws.id, {"name": "New", "slug": "new"})

        assert updated is not None
        assert updated.name == "New"
        assert updated.slug == "new"

    async def test_update_missing_returns_none(self, workspace_store: WorkspaceStore) -> None:
        assert await workspace_store.update("missing", {"name": "x"}) is None


class TestSlugUniqueness:
    """The partial unique index only counts active rows."""

    async def test_duplicate_active_slug_rejected(
        self, workspace_store: WorkspaceStore, alice: UserRecord, bob: UserRecord
    ) -> None:
        await workspace_store.create(Workspace(owner_id=alice.id, name="X", slug="x"))

        with pytest.raises(IntegrityError):
            await workspace_store.create(Workspace(owner_id=bob.id, name="X", slug="x"))

    async def test_deleted_slug_can_be_reused(
        self, workspace_store: WorkspaceStore, alice: UserRecord, bob: UserRecord
    ) -> None:
        first = await workspace_store.create(Workspace(owner_id=alice.id, name="X", slug="x"))
        await workspace_store.soft_delete_cascade(first.id)

        second = await workspace_store.create(Workspace(owner_id=bob.id, name="X", slug="x"))

        assert second.id != first.id
        assert (await workspace_store.find_by_slug("x")).id == second.id


class TestSoftDeleteCascade:
    """Workspace delete reaches services and endpoints."""

    async def test_cascade_shares_one_timestamp(
        self,
        workspace_store: WorkspaceStore,
        service_store: ServiceStore,
        endpoint_store: EndpointStore,
        alice: UserRecord,
        deleted_at_of,
    ) -> None:
        ws, services, endpoints = await _seed(
            workspace_store, service_store, endpoint_store, alice
        )

        await workspace_store.soft_delete_cascade(ws.id)

        stamps = (
            await deleted_at_of(Workspace, [ws.id])
            + await deleted_at_of(Service, [s.id for s in services])
            + await deleted_at_of(Endpoint, [e.id for e in endpoints])
        )
        assert len(stamps) == 1 + 2 + 4
        assert stamps[0] is not None
        assert len(set(stamps)) == 1

    async def test_children_unreachable_after_delete(
        self,
        workspace_store: WorkspaceStore,
        service_store: ServiceStore,
        endpoint_store: EndpointStore,
        alice: UserRecord,
    ) -> None:
        ws, services, endpoints = await _seed(
            workspace_store, service_store, endpoint_store, alice
        )

        await workspace_store.soft_delete_cascade(ws.id)

        assert await workspace_store.find_by_id(ws.id) is None
        assert await service_store.find_all_by_workspace_id(ws.id) == []
        for ep in endpoints:
            assert await endpoint_store.find_by_id(ep.id, ep.service_id) is None

    async def test_other_workspaces_untouched(
        self,
        workspace_store: WorkspaceStore,
        service_store: ServiceStore,
        endpoint_store: EndpointStore,
        alice: UserRecord,
        deleted_at_of,
    ) -> None:
        doomed, _, _ = await _seed(
            workspace_store, service_store, endpoint_store, alice, slug="doomed"
        )
        kept, kept_services, kept_endpoints = await _seed(
            workspace_store, service_store, endpoint_store, alice, slug="kept"
        )

        await workspace_store.soft_delete_cascade(doomed.id)

        assert await workspace_store.find_by_id(kept.id) is not None
        assert len(await service_store.find_all_by_workspace_id(kept.id)) == 2
        assert await deleted_at_of(Endpoint, [e.id for e in kept_endpoints]) == [
            None
        ] * len(kept_endpoints)

    async def test_already_deleted_children_keep_their_timestamp(
        self,
        workspace_store: WorkspaceStore,
        service_store: ServiceStore,
        endpoint_store: EndpointStore,
        alice: UserRecord,
        deleted_at_of,
    ) -> None:
        ws, services, _ = await _seed(
            workspace_store, service_store, endpoint_store, alice
        )
        await service_store.soft_delete_cascade(services[0].id, ws.id)
        [earlier] = await deleted_at_of(Service, [services[0].id])

        await workspace_store.soft_delete_cascade(ws.id)

        assert await deleted_at_of(Service, [services[0].id]) == [earlier]

    async def test_failure_midway_rolls_back_everything(
        self,
        workspace_store: WorkspaceStore,
        service_store: ServiceStore,
        endpoint_store: EndpointStore,
        alice: UserRecord,
        deleted_at_of,
        fail_on_statement,
    ) -> None:
        ws, services, endpoints = await _seed(
            workspace_store, service_store, endpoint_store, alice
        )
        # Endpoints and services are stamped, the workspace update fails
        fail_on_statement(3)

        with pytest.raises(OperationalError):
            await workspace_store.soft_delete_cascade(ws.id)

        assert await deleted_at_of(Workspace, [ws.id]) == [None]
        assert await deleted_at_of(Service, [s.id for s in services]) == [None] * 2
        assert await deleted_at_of(Endpoint, [e.id for e in endpoints]) == [None] * 4
