"""Capability registration, discovery, catalogs and typed factories.

Flow:
    export decorators -> RegistrationTable -> DiscoveryScope.resolve()
    -> CatalogRegistry.get_or_build() -> Catalog -> typed factories
"""

from sentience_avionics.capabilities.registration import (
    CAPABILITY_CONTRACTS,
    CapabilityDescriptor,
    Registration,
    RegistrationTable,
    TypeToken,
    coerce_family,
    export,
    export_effector,
    export_processor,
    export_robot,
    export_sensor,
    get_registration_table,
    reset_registration_table,
    set_registration_table,
    type_id_for,
)
from sentience_avionics.capabilities.discovery import (
    AggregateScope,
    DirectoryScope,
    DiscoveryScope,
    ModuleScope,
    TypeSetScope,
)
from sentience_avionics.capabilities.catalog import (
    Catalog,
    CatalogEntry,
    CatalogRegistry,
)
from sentience_avionics.capabilities.factory import (
    FACTORY_CODE_BASES,
    CapabilityFactories,
    CapabilityFactory,
    EffectorFactory,
    ProcessorFactory,
    RobotFactory,
    SensorFactory,
)

__all__ = [
    # Registration
    "CAPABILITY_CONTRACTS",
    "CapabilityDescriptor",
    "Registration",
    "RegistrationTable",
    "TypeToken",
    "type_id_for",
    "coerce_family",
    "export",
    "export_robot",
    "export_sensor",
    "export_effector",
    "export_processor",
    "get_registration_table",
    "set_registration_table",
    "reset_registration_table",
    # Discovery
    "DiscoveryScope",
    "ModuleScope",
    "DirectoryScope",
    "TypeSetScope",
    "AggregateScope",
    # Catalog
    "CatalogEntry",
    "Catalog",
    "CatalogRegistry",
    # Factories
    "FACTORY_CODE_BASES",
    "CapabilityFactory",
    "RobotFactory",
    "SensorFactory",
    "EffectorFactory",
    "ProcessorFactory",
    "CapabilityFactories",
]
