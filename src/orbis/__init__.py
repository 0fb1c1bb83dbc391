"""
Orbis: Keplerian Orbit State Representation

A Python package for representing two-body orbit state as Cartesian state
vectors or classical orbital elements, converting exactly between them,
propagating analytically and applying impulsive maneuvers.
"""

# Configuration
from .config import config, temp_config

# Core classes
from .frame import ReferenceFrame
from .orbital_elements import OrbitalElements, OrbitalElements as OE
from .state_vector import StateVector, StateVector as SV
from .trajectory import Trajectory, Trajectory as Traj

# Solver and capabilities
from .kepler import solve_kepler
from .propagation import Tick, Push, propagate, propagate_many, apply_maneuver

# Errors and warnings
from .utils import (ValidationError, UnsupportedOrbitError,
                    KeplerConvergenceError, ConvergenceWarning, Representation)

# Commonly-used celestial bodies
from .defaults import EARTH, MOON, MARS, SUN

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from orbis import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Classes
    "ReferenceFrame",
    "OrbitalElements",
    "StateVector",
    "Trajectory",
    "Representation",
    # Abbreviations
    "OE",
    "SV",
    "Traj",
    # Functions and capabilities
    "solve_kepler",
    "Tick",
    "Push",
    "propagate",
    "propagate_many",
    "apply_maneuver",
    # Errors
    "ValidationError",
    "UnsupportedOrbitError",
    "KeplerConvergenceError",
    "ConvergenceWarning",
    # Constants
    "EARTH",
    "MOON",
    "MARS",
    "SUN",
]
