import os
import sys

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for testing

import pytest

# Get the path to the project root (one level up from 'tests')
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(project_root, 'src')

# Add 'src' to sys.path
sys.path.insert(0, src_path)

from flexrod.dynamics.properties import ElasticProperties  # noqa: E402
from flexrod.dynamics.rod import Rod  # noqa: E402


@pytest.fixture
def default_props():
    """Reference material: stiffness 8, damping 2.5, mass 2, stretch 20."""
    return ElasticProperties()


@pytest.fixture
def rod(default_props):
    """100-unit rod at rest, handle at origin pointing +Y."""
    return Rod(100.0, default_props)
