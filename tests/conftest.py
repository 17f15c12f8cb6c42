"""
Root pytest configuration and fixtures for unit and live scenario tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.environment import EnvironmentConfig, HarnessSettings, Topology  # noqa: E402


@pytest.fixture
def harness_settings():
    return HarnessSettings()


@pytest.fixture
def env_config(harness_settings):
    """Local configuration pointing at the default development ports."""
    return EnvironmentConfig(
        frontend_url='http://localhost:3100',
        backend_url='http://localhost:5100',
        topology=Topology.local(),
        settings=harness_settings,
    )
