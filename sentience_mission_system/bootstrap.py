"""Composition root and System Orchestrator.

create_app_context() is the only place concrete infrastructure is built
and wired. SentienceManager then runs the bootstrap sequence, strictly in
order, stopping at the first failure:

    1.  select the configuration bundle (named, else default)
    2.  configure and initialise Output          ("output" section)
    3.  configure logging                        ("log" section)
    4.  resolve the robot by type                ("robot" section)
    5.  configure the robot with its own section type
    6.  give the robot the configuration resolver
    6b. give the robot the typed factories
    7.  initialise the robot

Usage:
    app_context = create_app_context()
    manager = SentienceManager(app_context)
    manager.configure(StartupConfiguration(args=sys.argv[1:]))
    if manager.initialise():
        ...
    manager.deactivate()
"""

import sys
from typing import Any, List, Optional

from sentience_protocols import LoggerProtocol, LogLevel
from sentience_shared.errors import (
    ALREADY_INITIALISED,
    BOOTSTRAP_UNEXPECTED,
    ROBOT_START_FAILED,
    ROBOT_TYPE_UNAVAILABLE,
    WRONG_CONFIGURATION_TYPE,
    ConfigurationError,
    LifecycleError,
    Messages,
    RobotStartupError,
    SentienceError,
)
from sentience_shared.logging import create_logger, get_component_logger, log_at
from sentience_avionics.capabilities import (
    AggregateScope,
    CapabilityFactories,
    CatalogRegistry,
    DirectoryScope,
    DiscoveryScope,
    ModuleScope,
    RegistrationTable,
)
from sentience_avionics.configuration import (
    Configurator,
    LogConfiguration,
    OutputConfiguration,
    RobotConfiguration,
    StartupConfiguration,
)
from sentience_avionics.logging import configure_from_section, configure_from_settings
from sentience_avionics.settings import Settings, get_settings
from sentience_mission_system.context import AppContext
from sentience_mission_system.output import Output

# Messages shown to the operator when bootstrap fails
OUTPUT_FAILED_TEXT = "Oops! Failed to start up"
LOGGING_FAILED_TEXT = "Oops! Failed to get going"
ROBOT_FAILED_TEXT = "Failed to start robot"


def build_discovery_scope(settings: Settings) -> DiscoveryScope:
    """Discovery scope described by the settings.

    One child scope is returned as-is; several are aggregated in order
    (component modules first, then plugin directories).
    """
    children: List[DiscoveryScope] = [ModuleScope(m) for m in settings.component_modules]
    children.extend(DirectoryScope(d) for d in settings.plugin_dirs)
    if len(children) == 1:
        return children[0]
    return AggregateScope("settings", children)


def create_app_context(
    settings: Optional[Settings] = None,
    *,
    scope: Optional[DiscoveryScope] = None,
    output: Optional[Output] = None,
    table: Optional[RegistrationTable] = None,
    logger: Optional[LoggerProtocol] = None,
) -> AppContext:
    """Create AppContext once per process.

    COMPOSITION ROOT: This is the ONLY place where concrete
    implementations are instantiated and wired together.

    Args:
        settings: Optional pre-configured settings. Uses get_settings() if None.
        scope: Discovery scope. Built from settings if None.
        output: Output collaborator. A console Output if None.
        table: Registration table. The process default if None.
        logger: Root logger. Created if None.

    Returns:
        AppContext with all dependencies wired.
    """
    if settings is None:
        settings = get_settings()

    # Pre-bundle logging; a no-op if logging is already configured
    configure_from_settings(settings)

    root_logger = logger or create_logger("sentience")
    settings.log_settings(root_logger)

    configurator = Configurator.from_settings(settings, logger=root_logger)
    catalog_registry = CatalogRegistry(table=table, logger=root_logger)

    if scope is None:
        scope = build_discovery_scope(settings)

    if output is None:
        output = Output(logger=root_logger)

    root_logger.info(
        "app_context_created",
        config_dir=settings.config_dir,
        default_bundle=settings.default_bundle,
        scope=repr(scope),
    )

    return AppContext(
        settings=settings,
        logger=root_logger,
        configurator=configurator,
        catalog_registry=catalog_registry,
        scope=scope,
        output=output,
    )


class SentienceManager:
    """The System Orchestrator.

    configure() selects the bundle, initialise() runs the remaining stages
    and reports failures instead of raising them, deactivate() shuts Output
    and then the robot down.
    """

    def __init__(self, context: AppContext):
        self._context = context
        self._logger = get_component_logger("SentienceManager", context.logger)
        self._startup: Optional[StartupConfiguration] = None
        self._bundle: Optional[str] = None
        self._factories: Optional[CapabilityFactories] = None
        self._robot: Any = None
        self._attempted = False
        self._started = False
        self._deactivated = False
        self._last_error: Optional[BaseException] = None

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def context(self) -> AppContext:
        return self._context

    @property
    def bundle(self) -> Optional[str]:
        """Bundle selected in stage 1, None if none could be loaded."""
        return self._bundle

    @property
    def robot(self) -> Any:
        """The running robot, None unless bootstrap succeeded."""
        return self._robot

    @property
    def factories(self) -> Optional[CapabilityFactories]:
        return self._factories

    @property
    def started(self) -> bool:
        return self._started

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    # =========================================================================
    # STAGE 1 - CONFIGURATION
    # =========================================================================

    def configure(self, config: StartupConfiguration) -> None:
        """Select the configuration bundle named by the startup arguments.

        Raises:
            ConfigurationError: ``config`` is not a StartupConfiguration (155)
        """
        if not isinstance(config, StartupConfiguration):
            raise ConfigurationError(
                WRONG_CONFIGURATION_TYPE,
                Messages(
                    full=(
                        "The SentienceManager expects a StartupConfiguration but was "
                        f"given a {type(config).__name__}"
                    ),
                    summary="SentienceManager given incorrect configuration type",
                    developer=(
                        f"The SentienceManager was given a configuration of type "
                        f"{type(config).__name__} when it was expecting StartupConfiguration"
                    ),
                    user="Error starting system",
                ),
                logger=self._logger,
            )

        self._startup = config
        requested = config.bundle_name
        if requested:
            self._logger.debug("configuring_with_argument", code=10001, bundle=requested)
        else:
            self._logger.debug("configuring_with_default", code=10002)
        self._bundle = self._establish_configuration(requested)

    def _establish_configuration(self, requested: Optional[str]) -> Optional[str]:
        configurator = self._context.configurator
        default = self._context.settings.default_bundle

        if requested is not None:
            if requested in configurator.list_bundles() and configurator.select_bundle(requested):
                return requested
            self._logger.warning(
                "bundle_unavailable_using_default",
                requested=requested,
                default=default,
            )

        if configurator.select_bundle(default):
            return default

        self._logger.warning("default_bundle_unavailable", default=default)
        return None

    # =========================================================================
    # STAGES 2-7 - BRING-UP
    # =========================================================================

    def initialise(self) -> bool:
        """Run stages 2 to 7. Single-shot.

        Returns:
            True if the robot is running. On False the failure has been
            reported and is available as ``last_error``.

        Raises:
            LifecycleError: Called again (702) or after deactivate() (703)
        """
        if self._attempted or self._deactivated:
            raise LifecycleError(
                ALREADY_INITIALISED,
                Messages(
                    full="SentienceManager.initialise() may only be called once",
                    summary="Orchestrator already initialised",
                    developer="Create a new SentienceManager to bootstrap again",
                    user="The system is already running.",
                ),
                logger=self._logger,
            )
        self._attempted = True
        output = self._context.output

        try:
            self._initialise_output()
        except Exception as e:
            self._last_error = e
            self._logger.error("output_initialisation_failed", error=str(e))
            print(OUTPUT_FAILED_TEXT, file=sys.stderr, flush=True)
            return False

        try:
            self._initialise_logging()
        except Exception as e:
            self._last_error = e
            self._logger.error("logging_initialisation_failed", error=str(e))
            output.send(LOGGING_FAILED_TEXT)
            return False

        try:
            log_at(self._logger, LogLevel.METRIC, "initialising_robot", code=6000)
            self._initialise_robot()
        except Exception as e:
            error = e if isinstance(e, SentienceError) else RobotStartupError(
                BOOTSTRAP_UNEXPECTED,
                Messages(
                    full=f"Robot start-up raised an unexpected {type(e).__name__}: {e}",
                    summary="Unexpected robot start-up failure",
                    developer=f"{type(e).__name__} escaped robot start-up",
                    user="Error starting robot",
                ),
                cause=e,
                logger=self._logger,
            )
            self._last_error = error
            output.send(ROBOT_FAILED_TEXT)
            log_at(
                self._logger,
                LogLevel.CRITICAL,
                "robot_start_failed",
                code=ROBOT_START_FAILED,
                error_code=error.code,
                error=str(error),
            )
            self._abandon_robot()
            return False

        self._started = True
        self._logger.info("sentience_started", bundle=self._bundle)
        return True

    def _initialise_output(self) -> None:
        section = self._context.configurator.get_section("output", OutputConfiguration)
        self._context.output.configure(section)
        self._context.output.initialise()
        self._logger.debug("output_initialised", code=10004)

    def _initialise_logging(self) -> None:
        section = self._context.configurator.get_section("log", LogConfiguration)
        configure_from_section(section, self._context.logger)
        self._logger.debug("log_configured", code=10003)

    def _initialise_robot(self) -> None:
        configurator = self._context.configurator
        self._logger.debug("robot_initialisation", code=10005)
        robot_section = configurator.get_section("robot", RobotConfiguration)
        self._logger.debug("robot_configuration_loaded", code=10006, robot_type=robot_section.robot_type)

        catalog = self._context.catalog_registry.get_or_build(self._context.scope)
        factories = CapabilityFactories(catalog, self._context.logger)
        try:
            robot = factories.robots.one_by_type(robot_section.robot_type)
        except SentienceError as e:
            raise RobotStartupError(
                ROBOT_TYPE_UNAVAILABLE,
                Messages(
                    full=(
                        f"The robot configuration specified a type ({robot_section.robot_type}) "
                        "which is not available to instantiate"
                    ),
                    summary="Robot configuration specified that does not exist",
                    developer="The robot specified by configuration is not available",
                    user="Error starting robot",
                ),
                context={"robot_type": robot_section.robot_type},
                cause=e,
                logger=self._logger,
            ) from e
        self._logger.debug("robot_loaded", code=10007, robot=type(robot).__name__)
        self._robot = robot
        self._factories = factories

        self._logger.debug("robot_configuring", code=10008)
        robot.configure(
            configurator.get_section(
                "robot",
                RobotConfiguration,
                deserialise_as=robot.get_configuration_type(),
            )
        )

        self._logger.debug("providing_global_configuration", code=10114)
        robot.give_global_configuration(configurator)
        self._logger.debug("providing_factories", code=10115)
        robot.give_factories(factories)

        self._logger.debug("robot_initialising", code=10009)
        robot.initialise()
        self._logger.debug("robot_initialised", code=10010)

    def _abandon_robot(self) -> None:
        """Deactivate a robot left behind by a failed bring-up."""
        robot, self._robot = self._robot, None
        if robot is None:
            return
        try:
            robot.deactivate()
        except Exception as e:
            self._logger.error("robot_teardown_failed", error=str(e))

    # =========================================================================
    # SHUTDOWN
    # =========================================================================

    def deactivate(self) -> None:
        """Deactivate Output, then the robot. Later calls do nothing."""
        if self._deactivated:
            return
        self._deactivated = True
        self._logger.info("sentience_stopping", started=self._started)
        try:
            self._context.output.deactivate()
        finally:
            if self._robot is not None:
                self._robot.deactivate()


__all__ = [
    "OUTPUT_FAILED_TEXT",
    "LOGGING_FAILED_TEXT",
    "ROBOT_FAILED_TEXT",
    "build_discovery_scope",
    "create_app_context",
    "SentienceManager",
]
