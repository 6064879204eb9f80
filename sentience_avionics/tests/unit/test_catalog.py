"""Unit tests for catalogs and the catalog registry.

Tests:
- CatalogEntry lazy, shared, retry-on-failure instantiation
- Catalog filtering and order
- CatalogRegistry caching by scope key
"""

import threading

import pytest

from sentience_protocols import CapabilityKind, RobotFamily, SensorFamily
from sentience_avionics.capabilities import (
    Catalog,
    CatalogEntry,
    CatalogRegistry,
    CapabilityDescriptor,
    ModuleScope,
    RegistrationTable,
    TypeSetScope,
    get_registration_table,
)
from sentience_shared.errors import DiscoveryError


class _Lifecycle:
    def configure(self, config):
        pass

    def initialise(self):
        pass

    def deactivate(self):
        pass

    def get_configuration_type(self):
        return dict


class CountingSensor(_Lifecycle):
    built = 0

    def __init__(self):
        CountingSensor.built += 1

    def subscribe_data_received(self, listener):
        pass


class SimpleRobot(_Lifecycle):
    def pause(self):
        pass

    def resume(self):
        pass

    def give_global_configuration(self, configurator):
        pass

    def give_factories(self, factories):
        pass


def descriptor_for(cls, kind=CapabilityKind.SENSOR, family=SensorFamily.GPS):
    return CapabilityDescriptor(kind, family, cls, cls.__qualname__)


@pytest.fixture
def table(mock_logger):
    table = RegistrationTable(logger=mock_logger)
    table.register(CountingSensor, CapabilityKind.SENSOR, SensorFamily.GPS)
    table.register(SimpleRobot, CapabilityKind.ROBOT, RobotFamily.MOBILE)
    return table


# =============================================================================
# ENTRIES
# =============================================================================

class TestCatalogEntry:
    """Test lazy instantiation."""

    def test_not_built_until_requested(self):
        entry = CatalogEntry(descriptor_for(CountingSensor), CountingSensor, 0)
        assert not entry.is_instantiated

    def test_instance_shared(self):
        entry = CatalogEntry(descriptor_for(CountingSensor), CountingSensor, 0)
        first = entry.instance()
        assert entry.instance() is first
        assert entry.is_instantiated

    def test_constructor_runs_once_under_contention(self):
        calls = []
        gate = threading.Event()

        def slow_constructor():
            gate.wait(1)
            calls.append(1)
            return object()

        entry = CatalogEntry(descriptor_for(CountingSensor), slow_constructor, 0)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(entry.instance()))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        gate.set()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len({id(r) for r in results}) == 1

    def test_failed_construction_retried(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("hardware not ready")
            return "ready"

        entry = CatalogEntry(descriptor_for(CountingSensor), flaky, 0)
        with pytest.raises(RuntimeError):
            entry.instance()
        assert not entry.is_instantiated
        assert entry.instance() == "ready"


# =============================================================================
# CATALOG
# =============================================================================

class TestCatalog:
    """Test catalog queries."""

    def test_entries_by_kind(self):
        sensor = CatalogEntry(descriptor_for(CountingSensor), CountingSensor, 0)
        robot = CatalogEntry(
            descriptor_for(SimpleRobot, CapabilityKind.ROBOT, RobotFamily.MOBILE),
            SimpleRobot,
            1,
        )
        catalog = Catalog("key", [sensor, robot])

        assert len(catalog) == 2
        assert list(catalog) == [sensor, robot]
        assert catalog.entries(CapabilityKind.ROBOT) == [robot]
        assert catalog.descriptors(CapabilityKind.SENSOR) == [sensor.descriptor]
        assert catalog.entries(CapabilityKind.EFFECTOR) == []


# =============================================================================
# REGISTRY
# =============================================================================

class TestCatalogRegistry:
    """Test catalog caching."""

    def test_builds_in_scope_order(self, table, mock_logger):
        registry = CatalogRegistry(table, logger=mock_logger)
        catalog = registry.get_or_build(TypeSetScope([SimpleRobot, CountingSensor]))

        assert [e.descriptor.concrete_type for e in catalog] == [SimpleRobot, CountingSensor]
        assert [e.position for e in catalog] == [0, 1]

    def test_same_key_same_catalog(self, table, mock_logger):
        registry = CatalogRegistry(table, logger=mock_logger)
        first = registry.get_or_build(TypeSetScope([CountingSensor], name="a"))
        second = registry.get_or_build(TypeSetScope([CountingSensor], name="a"))

        assert first is second
        assert len(registry) == 1
        assert registry.has(first.scope_key)
        assert registry.get(first.scope_key) is first

    def test_instances_shared_through_cache(self, table, mock_logger):
        registry = CatalogRegistry(table, logger=mock_logger)
        scope = TypeSetScope([CountingSensor])
        one = registry.get_or_build(scope).entries()[0].instance()
        two = registry.get_or_build(scope).entries()[0].instance()
        assert one is two

    def test_distinct_keys_distinct_catalogs(self, table, mock_logger):
        registry = CatalogRegistry(table, logger=mock_logger)
        first = registry.get_or_build(TypeSetScope([CountingSensor], name="a"))
        second = registry.get_or_build(TypeSetScope([CountingSensor], name="b"))

        assert first is not second
        assert sorted(map(str, registry.keys())) == sorted(map(str, [first.scope_key, second.scope_key]))

    def test_failed_discovery_not_cached(self, mock_logger):
        table = RegistrationTable(logger=mock_logger)
        registry = CatalogRegistry(table, logger=mock_logger)
        scope = TypeSetScope([CountingSensor])

        with pytest.raises(DiscoveryError):
            registry.get_or_build(scope)
        assert not registry.has(scope.key)

        table.register(CountingSensor, CapabilityKind.SENSOR, SensorFamily.GPS)
        assert len(registry.get_or_build(scope)) == 1

    def test_single_discovery_under_contention(self, table, mock_logger):
        resolved = []

        class CountingScope(TypeSetScope):
            def resolve(self, table, logger=None):
                resolved.append(1)
                return super().resolve(table, logger)

        registry = CatalogRegistry(table, logger=mock_logger)
        scope = CountingScope([CountingSensor])
        catalogs = []
        threads = [
            threading.Thread(target=lambda: catalogs.append(registry.get_or_build(scope)))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(resolved) == 1
        assert all(c is catalogs[0] for c in catalogs)

    def test_clear(self, table, mock_logger):
        registry = CatalogRegistry(table, logger=mock_logger)
        scope = TypeSetScope([CountingSensor])
        first = registry.get_or_build(scope)
        registry.clear()
        assert registry.get_or_build(scope) is not first

    def test_default_table(self):
        assert CatalogRegistry().table is get_registration_table()

    def test_empty_custom_table_is_kept(self, mock_logger):
        empty = RegistrationTable(logger=mock_logger)
        registry = CatalogRegistry(empty, logger=mock_logger)

        assert registry.table is empty
        # Built-ins registered in the default table are not visible here
        catalog = registry.get_or_build(ModuleScope("sentience_mission_system.components"))
        assert len(catalog) == 0
