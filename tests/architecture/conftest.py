"""Architecture fixtures: the evaluated module graph and the monitor's layers.

PyTestArch names modules relative to the source root, so the package shows
up as ``src.lifecycle_monitor``.
"""

from pathlib import Path

import pytest
from pytestarch import (
    EvaluableArchitecture,
    LayeredArchitecture,
    get_evaluable_architecture,
)

SRC_DIR = Path(__file__).resolve().parents[2] / "src"
PACKAGE = "src.lifecycle_monitor"

# Layer name -> top-level subpackage
LAYERS = {
    "domain": f"{PACKAGE}.domain",
    "application": f"{PACKAGE}.application",
    "infrastructure": f"{PACKAGE}.infrastructure",
    "schemas": f"{PACKAGE}.schemas",
    "cli": f"{PACKAGE}.cli",
}


@pytest.fixture(scope="session")
def evaluable() -> EvaluableArchitecture:
    """Import graph of src/lifecycle_monitor."""
    return get_evaluable_architecture(
        str(SRC_DIR), str(SRC_DIR / "lifecycle_monitor")
    )


@pytest.fixture(scope="session")
def layers() -> LayeredArchitecture:
    """Domain core, engine, adapters, the schema boundary and the CLI."""
    architecture = LayeredArchitecture()
    for name, module in LAYERS.items():
        architecture = architecture.layer(name).containing_modules([module])
    return architecture
