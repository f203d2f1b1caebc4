"""
flexrod - Real-time elastic rod (whip / blade / fishing rod) simulator.

A single elastic tip follows a kinematically driven handle under Verlet
integration, a bending spring, a soft length constraint and hard bend /
stretch limits. The rod shape is queried as a taper-aware cubic Bezier.

Core Components
---------------
Vector3 : Immutable 3D vector value
ElasticProperties : Material parameters (+ named presets)
Rod : The simulated rod (advance / reset / shape queries)
RodSimulation : Time loop with handle driver, time scale and logging

Examples
--------
>>> from flexrod import Rod, Vector3, get_preset
>>> rod = Rod(100.0, get_preset("fishing_rod"))
>>> rod.advance(Vector3(0, 0, 0), Vector3(1, 0, 0), 1 / 60)
>>> rod.query_normalized_position(1.0)
"""

__version__ = "0.1.0"

from flexrod.utils.vector import Vector3

# Dynamics
from flexrod.dynamics.properties import MATERIAL_PRESETS, ElasticProperties, get_preset
from flexrod.dynamics.rod import Rod, RodState, step_once
from flexrod.dynamics.drivers import FunctionHandle, HandleDriver, StaticHandle, SwingHandle

# Simulation
from flexrod.core.simulation import RodSimulation

# Logging
from flexrod.logger import CSVLogger
from flexrod.api.scenario import Scenario

__all__ = [
    # Version
    "__version__",
    # Math
    "Vector3",
    # Dynamics
    "ElasticProperties",
    "MATERIAL_PRESETS",
    "get_preset",
    "Rod",
    "RodState",
    "step_once",
    # Drivers
    "HandleDriver",
    "StaticHandle",
    "SwingHandle",
    "FunctionHandle",
    # Simulation
    "RodSimulation",
    # Logging
    "CSVLogger",
    # API
    "Scenario",
]
