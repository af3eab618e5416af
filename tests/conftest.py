# tests/conftest.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for Ergon scheduler tests.

The configuration handles:
- Python path setup for module imports
- Test environment initialization
- Common fixtures for label registries, node pools and queues
"""

import sys
import pytest
from pathlib import Path

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Verify that the project packages import before any test runs.

    Yields:
        None: Control to test execution

    Raises:
        pytest.skip: If required modules cannot be imported
    """
    try:
        import core
        import labels
        import model
        import utils
    except ImportError as e:
        pytest.skip(f"Cannot import required modules: {e}")

    yield


@pytest.fixture
def registry():
    """Provide a fresh atom registry.

    Returns:
        AtomRegistry: Registry not shared with any other test
    """
    from labels import AtomRegistry

    return AtomRegistry()


@pytest.fixture
def windows_pool():
    """Provide the three-node pool used by the queue scenarios.

    Nodes, in registration order:
        w32: win 32bit
        w64: win 64bit
        l32: linux 32bit

    Returns:
        NodePool: Pool with all three nodes idle
    """
    from core import NodePool

    pool = NodePool()
    pool.register_node("w32", "win 32bit")
    pool.register_node("w64", "win 64bit")
    pool.register_node("l32", "linux 32bit")
    return pool


@pytest.fixture
def windows_queue(windows_pool):
    """Provide a build queue attached to ``windows_pool``.

    Returns:
        BuildQueue: Empty queue
    """
    from core import BuildQueue

    return BuildQueue(windows_pool)
