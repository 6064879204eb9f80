"""AppContext - application context for dependency injection.

Built once by the composition root (bootstrap.create_app_context) and
passed to the orchestrator. Everything the bootstrap sequence needs comes
from here, not from globals.

Usage:
    from sentience_mission_system.bootstrap import create_app_context

    app_context = create_app_context()
    manager = SentienceManager(app_context)
"""

from dataclasses import dataclass

from sentience_protocols import LoggerProtocol
from sentience_avionics.capabilities import CatalogRegistry, DiscoveryScope
from sentience_avionics.configuration import Configurator
from sentience_avionics.settings import Settings
from sentience_mission_system.output import Output


@dataclass
class AppContext:
    """Dependencies of the System Orchestrator.

    Attributes:
        settings: Process settings
        logger: Root logger
        configurator: Configuration bundle store
        catalog_registry: Catalog cache owned by this context
        scope: Discovery scope robots and their parts are resolved from
        output: User-facing output collaborator
    """

    settings: Settings
    logger: LoggerProtocol
    configurator: Configurator
    catalog_registry: CatalogRegistry
    scope: DiscoveryScope
    output: Output


__all__ = ["AppContext"]
