"""Contract tests for layer boundary enforcement.

These tests verify that the layered architecture is properly enforced
by programmatically checking import dependencies.

Contract: Each layer may only import from layers below it.

Layers (top to bottom):
- L3: sentience_mission_system (application)
- L2: sentience_control_tower (component kernel)
- L1: sentience_avionics (settings, configuration, capabilities)
- L0: sentience_protocols, sentience_shared (foundation)
"""

import ast
import importlib
import sys
from pathlib import Path
from typing import List, Tuple

import pytest


# =============================================================================
# Layer Definitions
# =============================================================================

LAYER_HIERARCHY = {
    # Layer 3: Application
    "sentience_mission_system": {
        "level": 3,
        "allowed": [
            "sentience_control_tower",
            "sentience_avionics",
            "sentience_shared",
            "sentience_protocols",
        ],
    },
    # Layer 2: Kernel
    "sentience_control_tower": {
        "level": 2,
        "allowed": ["sentience_avionics", "sentience_shared", "sentience_protocols"],
    },
    # Layer 1: Infrastructure
    "sentience_avionics": {
        "level": 1,
        "allowed": ["sentience_shared", "sentience_protocols"],
    },
    # Layer 0: Foundation
    "sentience_shared": {
        "level": 0,
        "allowed": ["sentience_protocols"],
    },
    "sentience_protocols": {
        "level": 0,
        "allowed": [],
    },
}

SENTIENCE_PACKAGES = set(LAYER_HIERARCHY.keys())

PROJECT_ROOT = Path(__file__).parent.parent.parent


# =============================================================================
# Helper Functions
# =============================================================================

def get_imports_from_file(filepath: Path) -> List[Tuple[str, int]]:
    """Extract all imports from a Python file.

    Returns:
        List of (import_path, line_number) tuples
    """
    tree = ast.parse(filepath.read_text(encoding="utf-8"))
    imports = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.append((alias.name, node.lineno))
        elif isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                imports.append((node.module, node.lineno))
    return imports


def get_package_name(import_path: str) -> str:
    """Extract the top-level package name from an import path."""
    return import_path.split(".")[0]


def check_layer_violation(source_package: str, import_path: str) -> bool:
    """Check if an import violates layer boundaries.

    Returns:
        True if violation, False if allowed
    """
    target_package = get_package_name(import_path)

    # External dependency
    if target_package not in SENTIENCE_PACKAGES:
        return False

    if target_package == source_package:
        return False

    return target_package not in LAYER_HIERARCHY[source_package]["allowed"]


def find_violations(package: str) -> List[str]:
    package_dir = PROJECT_ROOT / package
    if not package_dir.exists():
        pytest.skip(f"{package} not found")

    violations = []
    for py_file in sorted(package_dir.rglob("*.py")):
        for import_path, line in get_imports_from_file(py_file):
            if check_layer_violation(package, import_path):
                violations.append(
                    f"{py_file.relative_to(PROJECT_ROOT)}:{line} imports {import_path}"
                )
    return violations


# =============================================================================
# Contract Tests
# =============================================================================

class TestLayerBoundariesStatic:
    """Static analysis tests for layer boundaries."""

    @pytest.mark.parametrize("package", sorted(SENTIENCE_PACKAGES))
    def test_package_respects_layer(self, package):
        violations = find_violations(package)
        assert violations == [], "Layer violations found:\n" + "\n".join(violations)

    def test_allowed_lists_point_downwards(self):
        for package, config in LAYER_HIERARCHY.items():
            for allowed in config["allowed"]:
                assert LAYER_HIERARCHY[allowed]["level"] <= config["level"], (package, allowed)


class TestLayerBoundariesRuntime:
    """Runtime tests for layer boundary enforcement."""

    def test_protocols_imports_nothing_internal(self):
        """Importing protocols must not pull in any other sentience package."""
        loaded_before = {name for name in sys.modules if get_package_name(name) in SENTIENCE_PACKAGES}
        importlib.import_module("sentience_protocols")
        loaded_after = {name for name in sys.modules if get_package_name(name) in SENTIENCE_PACKAGES}

        pulled_in = {get_package_name(name) for name in loaded_after - loaded_before}
        assert pulled_in <= {"sentience_protocols"}

    @pytest.mark.parametrize("package", sorted(SENTIENCE_PACKAGES))
    def test_package_imports(self, package):
        assert importlib.import_module(package).__name__ == package


# =============================================================================
# Cross-Layer Contract Tests
# =============================================================================

class TestCrossLayerContracts:
    """Test contracts that span multiple layers."""

    def test_logger_protocol_consistent(self):
        """Test that LoggerProtocol is the same class wherever it is imported."""
        from sentience_protocols import LoggerProtocol as PackageLogger
        from sentience_protocols.interfaces import LoggerProtocol as ModuleLogger

        assert PackageLogger is ModuleLogger

    def test_base_classes_satisfy_protocols(self):
        from sentience_protocols import EffectorProtocol, RobotProtocol, SensorProtocol
        from sentience_control_tower import Effector, Robot, Sensor

        assert issubclass(Robot, RobotProtocol)
        assert issubclass(Sensor, SensorProtocol)
        assert issubclass(Effector, EffectorProtocol)

    def test_configurator_satisfies_resolver_protocol(self):
        from sentience_protocols import ConfigurationResolverProtocol
        from sentience_avionics.configuration import Configurator

        assert issubclass(Configurator, ConfigurationResolverProtocol)
