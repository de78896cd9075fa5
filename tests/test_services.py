"""
Tests for the service container.
"""

import asyncio

import pytest

from wraith.errors import ServiceError
from wraith.services.container import ServiceContainer, ServiceKind


class TestBindings:
    """Tests for the three service lifecycles."""

    def test_constructed_rebuilds_every_fetch(self, services):
        services.construct("list", list)
        assert services.get("list") is not services.get("list")
        assert services.kind_of("list") is ServiceKind.CONSTRUCTED

    def test_singleton_builds_once(self, services):
        calls = []

        def build():
            calls.append(1)
            return object()

        services.singleton("db", build)
        assert calls == []
        first = services.get("db")
        assert services.get("db") is first
        assert calls == [1]

    def test_instance(self, services):
        value = {"key": "value"}
        services.instance("settings", value)
        assert services.get("settings") is value
        assert services.kind_of("settings") is ServiceKind.INSTANCE

    def test_builders_must_be_callable(self, services):
        with pytest.raises(TypeError):
            services.construct("x", 5)
        with pytest.raises(TypeError):
            services.singleton("x", "nope")

    def test_aliases_resolve(self, services):
        services.instance(["database", "db"], "conn")
        assert services.get("db") == "conn"
        assert services.resolve_name("db") == "database"
        assert services.main_bindings == ["database"]

    def test_unknown_service(self, services):
        assert services.get("nope") is None
        assert not services.has("nope")
        assert services.kind_of("nope") is None

    def test_duplicate_binding_leaves_container_unchanged(self, services):
        services.instance(["database", "db"], "conn")
        with pytest.raises(ServiceError, match="already bound: 'db'"):
            services.instance(["cache", "db"], "other")
        assert not services.has("cache")

    def test_duplicate_identifiers_in_one_binding(self, services):
        with pytest.raises(ServiceError):
            services.instance(["a", "a"], 1)

    def test_invalid_identifier(self, services):
        with pytest.raises(TypeError):
            services.instance("", 1)
        with pytest.raises(TypeError):
            services.instance([], 1)


class TestUnbind:
    """Tests for removing services."""

    def test_unbind_by_alias_releases_all_names(self, services):
        services.instance(["database", "db", "store"], "conn")
        entry = services.unbind("store")
        assert entry.name == "database"
        assert not services.has("database")
        assert not services.has("db")
        assert len(services) == 0

    def test_name_is_reusable_after_unbind(self, services):
        services.instance(["database", "db"], 1)
        services.unbind("database")
        services.instance("db", 2)
        assert services.get("db") == 2

    def test_unbind_unknown(self, services):
        with pytest.raises(ServiceError, match="non-existent service: 'nope'"):
            services.unbind("nope")


class TestProviders:
    """Tests for binding through providers."""

    def test_bind_providers(self):
        def database(container):
            container.singleton("db", lambda: "conn")

        def settings(container):
            container.instance("settings", {})

        container = ServiceContainer().bind_providers(database, settings)
        assert container.main_bindings == ["db", "settings"]

    def test_iteration_fetches_services(self, services):
        services.instance("a", 1).construct("b", lambda: 2)
        assert dict(services) == {"a": 1, "b": 2}
        assert "a" in services


class TestAsyncBuilders:
    """Tests for services whose builders are coroutines."""

    @pytest.mark.asyncio
    async def test_async_singleton_is_awaited_once(self, services):
        calls = []

        async def connect():
            calls.append(1)
            return {"connected": True}

        services.singleton("db", connect)
        first = await services.aget("db")
        second = await services.aget("db")

        assert first == {"connected": True}
        assert second is first
        assert calls == [1]
        # once built, the sync lookup sees the cached value
        assert services.get("db") is first

    @pytest.mark.asyncio
    async def test_concurrent_fetches_build_once(self, services):
        calls = []

        async def connect():
            calls.append(1)
            await asyncio.sleep(0)
            return object()

        services.singleton("db", connect)
        results = await asyncio.gather(*(services.aget("db") for _ in range(5)))

        assert calls == [1]
        assert all(result is results[0] for result in results)

    @pytest.mark.asyncio
    async def test_async_constructed_is_rebuilt(self, services):
        async def build():
            return []

        services.construct("scratch", build)
        first = await services.aget("scratch")
        assert first == []
        assert await services.aget("scratch") is not first

    @pytest.mark.asyncio
    async def test_aget_sync_services(self, services):
        services.instance("settings", {"a": 1}).singleton("clock", lambda: "now")
        assert await services.aget("settings") == {"a": 1}
        assert await services.aget("clock") == "now"
        assert await services.aget("nope") is None

    def test_sync_get_refuses_unbuilt_async_builder(self, services):
        async def connect():
            return "conn"

        services.singleton("db", connect)
        with pytest.raises(ServiceError, match="async builder"):
            services.get("db")

    @pytest.mark.asyncio
    async def test_aitems_awaits_services(self, services):
        async def connect():
            return "conn"

        services.singleton("db", connect).instance("settings", {})
        assert [item async for item in services.aitems()] == [("db", "conn"), ("settings", {})]
