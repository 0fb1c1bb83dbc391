"""
Utility functions and classes for the Orbis package.
"""

import warnings
from enum import Enum
from typing import Type
import numpy as np
from .config import config


# ========== ERRORS AND WARNINGS ==========
class ValidationError(ValueError):
    """Invalid construction input (frame basis, vector shape, ranges)."""


class UnsupportedOrbitError(ValueError):
    """Orbit is not a bound ellipse (parabolic, hyperbolic or rectilinear)."""


class KeplerConvergenceError(RuntimeError):
    """Newton-Raphson iteration on Kepler's equation did not converge."""


class ConvergenceWarning(UserWarning):
    """Issued instead of KeplerConvergenceError when convergence is not strict."""


def convergence_error(message: str,
                      error_class: Type[Exception] = KeplerConvergenceError,
                      warning_class: Type[Warning] = ConvergenceWarning):
    """
    Raise error or warn based on config.STRICT_CONVERGENCE.

    This function provides consistent handling of numerical convergence
    failures across the package. When STRICT_CONVERGENCE is True (default),
    raises the specified exception. When False, issues a warning instead
    and lets the caller continue with its last iterate.

    Parameters
    ----------
    message : str
        Failure message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_CONVERGENCE is True.
        Default: KeplerConvergenceError
    warning_class : Type[Warning], optional
        Warning category issued if STRICT_CONVERGENCE is False.
        Default: ConvergenceWarning

    Examples
    --------
    >>> from orbis.utils import convergence_error
    >>> from orbis import config
    >>> config.STRICT_CONVERGENCE = True
    >>> convergence_error("No convergence")  # Raises KeplerConvergenceError

    >>> config.STRICT_CONVERGENCE = False
    >>> convergence_error("No convergence")  # Issues ConvergenceWarning
    """
    if config.STRICT_CONVERGENCE:
        raise error_class(message)
    else:
        warnings.warn(message, warning_class, stacklevel=3)


# ========== REPRESENTATIONS ==========
class Representation(Enum):
    CARTESIAN = 'cart'      # [x;y;z;vx;vy;vz]
    KEPLERIAN = 'kep'       # [a;e;inc;lan;ap;m0]


def parse_representation(representation):
    """Convert string or enum to Representation enum"""
    if isinstance(representation, Representation):
        return representation
    elif isinstance(representation, str):
        type_map = {
            'cart': Representation.CARTESIAN,
            'cartesian': Representation.CARTESIAN,
            'csv': Representation.CARTESIAN,
            'kep': Representation.KEPLERIAN,
            'kepler': Representation.KEPLERIAN,
            'keplerian': Representation.KEPLERIAN,
            'koe': Representation.KEPLERIAN,
        }
        if representation in type_map:
            return type_map[representation]
        else:
            raise ValueError(f"Unknown representation '{representation}'. "
                             f"Use: {list(type_map.keys())}")
    else:
        raise TypeError(f"representation must be Representation or str, "
                        f"got {type(representation)}")


# ========== VECTOR AND ANGLE HELPERS ==========
def as_vector3(value, name="vector"):
    """
    Convert input to a read-only float 3-vector.

    Raises
    ------
    ValidationError
        If the input does not have shape (3,) or holds NaN/Inf.
    """
    vec = np.array(value, dtype=float)
    if vec.shape != (3,):
        raise ValidationError(f"{name} must have shape (3,), got {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise ValidationError(f"{name} contains NaN or Inf: {vec}")
    vec.flags.writeable = False
    return vec


def resolve_angle(cos_angle, first_half):
    """
    Angle in [0, 2pi) from its cosine and a half-plane test.

    ``acos`` only covers [0, pi]; ``first_half`` says whether the angle lies
    in that half. The cosine is clamped to [-1, 1] to absorb round-off.
    """
    angle = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    if first_half:
        return float(angle)
    return float(2*np.pi - angle)


def wrap_to_2pi(angle):
    """Wrap angle into [0, 2pi)"""
    wrapped = float(np.mod(angle, 2*np.pi))
    # np.mod rounds tiny negative angles up to exactly 2pi
    return 0.0 if wrapped == 2*np.pi else wrapped


def wrap_to_pi(angle):
    """Wrap angle into [-pi, pi)"""
    return float(np.mod(angle + np.pi, 2*np.pi) - np.pi)


def angle_difference(a, b):
    """Smallest signed difference a - b between two angles [rad]"""
    return wrap_to_pi(a - b)
