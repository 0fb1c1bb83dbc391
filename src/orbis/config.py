"""
Global Configuration for Orbis Package
======================================

This module provides package-wide configuration settings that users can modify
to control numerical tolerances, degeneracy thresholds and Kepler solver
behavior.

Examples
--------
View current configuration:

>>> import orbis
>>> print(orbis.config)

Modify settings:

>>> orbis.config.KEPLER_MAX_ITER = 100  # Larger Newton budget
>>> orbis.config.SNAP_TO_CIRCULAR = 1e-7  # Coarser circular detection

Reset to defaults:

>>> orbis.config.reset()

Temporarily modify settings:

>>> with orbis.temp_config(KEPLER_MAX_ITER=10, KEPLER_TOL=0.0):
...     # Legacy fixed-iteration solver for this block only
...     sv = oe.to_state_vector()

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager
import math


@dataclass
class OrbisConfig:
    """
    Global configuration for Orbis package.

    Attributes
    ----------
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons.
        Default: 1e-12 (approximately millimeter-level at LEO distances)
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-14
    HASH_DECIMALS : int
        Number of decimal places for rounding when computing hash values.
        Automatically computed to preserve hash contract
    FRAME_TOL : float
        Absolute tolerance for the orthonormality and handedness checks
        performed when a ReferenceFrame is constructed.
        Default: 1e-9
    SNAP_TO_CIRCULAR : float
        Eccentricity below this threshold treated as circular orbit (e=0).
        Default: 1e-9
    SNAP_TO_EQUATORIAL : float
        Inclination (or its supplement) below this threshold treated as
        equatorial. Snapped to exactly 0 or pi when working from a state
        vector.
        Default: 1e-9
    PARABOLIC_TOL : float
        Eccentricity within this distance of 1 is treated as parabolic and
        rejected as an unsupported orbit.
        Default: 1e-9
    KEPLER_MAX_ITER : int
        Newton-Raphson iteration budget for Kepler's equation.
        Default: 50
    KEPLER_TOL : float
        Early exit tolerance on the Newton step |dE| [rad]. A value <= 0
        disables both the early exit and the convergence check, running
        exactly KEPLER_MAX_ITER iterations.
        Default: 1e-12
    STRICT_CONVERGENCE : bool
        If True, a Kepler solve that misses KEPLER_TOL raises
        KeplerConvergenceError. If False, a ConvergenceWarning is issued
        and the last iterate is returned.
        Default: True
    DEFAULT_PROPAGATION : str
        Method used by StateVector.tick() when none is given.
        'kepler' (analytic, exact) or 'euler' (single explicit step).
        Default: 'kepler'
    DEFAULT_SAMPLE_POINTS : int
        Default number of points for trajectory sampling and export.
        Default: 1000
    """

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    # Frame construction
    FRAME_TOL: float = 1e-9

    # Snapping behavior thresholds
    SNAP_TO_CIRCULAR: float = 1e-9
    SNAP_TO_EQUATORIAL: float = 1e-9
    PARABOLIC_TOL: float = 1e-9

    # Kepler solver
    KEPLER_MAX_ITER: int = 50
    KEPLER_TOL: float = 1e-12
    STRICT_CONVERGENCE: bool = True

    # Propagation defaults
    DEFAULT_PROPAGATION: str = 'kepler'
    DEFAULT_SAMPLE_POINTS: int = 1000

    @property
    def HASH_DECIMALS(self) -> int:
        """
        Compute hash rounding decimals from equality tolerance.

        The hash rounding must be coarse enough that if two values
        are equal (within EQUALITY_ATOL), they hash to the same value.

        Formula: HASH_DECIMALS = -floor(log10(ATOL)) - 2
        The -2 provides safety margin (2 orders of magnitude).

        Returns
        -------
        int
            Number of decimal places for hash rounding
        """
        magnitude = -math.floor(math.log10(self.EQUALITY_ATOL))
        return max(magnitude - 2, 0)  # At least 0 decimals

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import orbis
        >>> orbis.config.KEPLER_MAX_ITER = 10  # Modify
        >>> orbis.config.reset()  # Back to defaults
        >>> orbis.config.KEPLER_MAX_ITER
        50
        """
        defaults = OrbisConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["OrbisConfig:"]
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append(f"    HASH_DECIMALS = {self.HASH_DECIMALS}")
        lines.append(f"    FRAME_TOL = {self.FRAME_TOL}")
        lines.append("  Snapping Thresholds:")
        lines.append(f"    SNAP_TO_CIRCULAR = {self.SNAP_TO_CIRCULAR}")
        lines.append(f"    SNAP_TO_EQUATORIAL = {self.SNAP_TO_EQUATORIAL}")
        lines.append(f"    PARABOLIC_TOL = {self.PARABOLIC_TOL}")
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_MAX_ITER = {self.KEPLER_MAX_ITER}")
        lines.append(f"    KEPLER_TOL = {self.KEPLER_TOL}")
        lines.append(f"    STRICT_CONVERGENCE = {self.STRICT_CONVERGENCE}")
        lines.append("  Propagation:")
        lines.append(f"    DEFAULT_PROPAGATION = '{self.DEFAULT_PROPAGATION}'")
        lines.append(f"    DEFAULT_SAMPLE_POINTS = {self.DEFAULT_SAMPLE_POINTS}")
        return "\n".join(lines)


# Global configuration instance
config = OrbisConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import orbis
    >>> with orbis.temp_config(STRICT_CONVERGENCE=False):
    ...     # Solver failures only warn inside this block
    ...     E = orbis.solve_kepler(1.0, 0.5, max_iter=1)
    >>> # Original config restored here
    >>> orbis.config.STRICT_CONVERGENCE
    True

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if key not in config.__dataclass_fields__:
            raise AttributeError(
                f"OrbisConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
