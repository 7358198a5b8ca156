"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.test_inputs import (
    get_reference_inputs,
    get_exit_inputs,
    get_stressed_inputs,
)


@pytest.fixture
def reference_inputs():
    """Get the reference deal without exit or stress."""
    return get_reference_inputs()


@pytest.fixture
def exit_inputs():
    """Get the reference deal with a year-10 sale."""
    return get_exit_inputs()


@pytest.fixture
def stressed_inputs():
    """Get the reference deal with all stresses enabled."""
    return get_stressed_inputs()
