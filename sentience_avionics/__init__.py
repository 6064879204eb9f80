"""Sentience Avionics - infrastructure layer.

Settings, configuration bundles, logging bring-up, and the capability
registry (registration, discovery, catalogs, typed factories).

Layering: imports from sentience_protocols and sentience_shared only.
"""

from sentience_avionics.settings import Settings, get_settings, reset_settings, set_settings
from sentience_avionics.configuration import (
    Configurator,
    EffectorConfiguration,
    LogConfiguration,
    OutputConfiguration,
    ProcessorConfiguration,
    RobotConfiguration,
    SensorConfiguration,
    SentienceConfiguration,
    StartupConfiguration,
)
from sentience_avionics.capabilities import (
    AggregateScope,
    CapabilityDescriptor,
    CapabilityFactories,
    CapabilityFactory,
    Catalog,
    CatalogEntry,
    CatalogRegistry,
    DirectoryScope,
    DiscoveryScope,
    EffectorFactory,
    ModuleScope,
    ProcessorFactory,
    RegistrationTable,
    RobotFactory,
    SensorFactory,
    TypeSetScope,
    export,
    export_effector,
    export_processor,
    export_robot,
    export_sensor,
    get_registration_table,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "set_settings",
    "reset_settings",
    # Configuration
    "Configurator",
    "SentienceConfiguration",
    "OutputConfiguration",
    "LogConfiguration",
    "RobotConfiguration",
    "StartupConfiguration",
    "SensorConfiguration",
    "EffectorConfiguration",
    "ProcessorConfiguration",
    # Capabilities
    "CapabilityDescriptor",
    "RegistrationTable",
    "get_registration_table",
    "export",
    "export_robot",
    "export_sensor",
    "export_effector",
    "export_processor",
    "DiscoveryScope",
    "ModuleScope",
    "DirectoryScope",
    "TypeSetScope",
    "AggregateScope",
    "CatalogEntry",
    "Catalog",
    "CatalogRegistry",
    "CapabilityFactory",
    "RobotFactory",
    "SensorFactory",
    "EffectorFactory",
    "ProcessorFactory",
    "CapabilityFactories",
]
