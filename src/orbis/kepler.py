"""
Kepler's equation and anomaly conversions for elliptic orbits.

All angles in radians. Only 0 <= e < 1 is supported.
"""

import numpy as np
from .config import config
from .utils import UnsupportedOrbitError, convergence_error


def solve_kepler(mean_anomaly: float, e: float, max_iter: int = None,
                 tol: float = None) -> float:
    """
    Solve Kepler's equation M = E - e sin(E) for the eccentric anomaly.

    Uses Newton-Raphson iteration on f(E) = E - e sin(E) - M with the
    update E <- E - f(E) / (1 - e cos(E)).

    Parameters
    ----------
    mean_anomaly : float
        Mean anomaly M [rad], any real value
    e : float
        Eccentricity, 0 <= e < 1
    max_iter : int, optional
        Iteration budget. Defaults to config.KEPLER_MAX_ITER
    tol : float, optional
        Stop once |dE| < tol. Defaults to config.KEPLER_TOL. With tol <= 0
        exactly max_iter iterations are run and convergence is not checked
        (max_iter=10, tol=0 is the historical fixed-iteration solver).

    Returns
    -------
    float
        Eccentric anomaly E [rad]. E - e sin(E) equals the input M,
        including whole revolutions.

    Raises
    ------
    UnsupportedOrbitError
        If e is outside [0, 1)
    KeplerConvergenceError
        If |dE| is still above tol after max_iter iterations and
        config.STRICT_CONVERGENCE is True (otherwise a ConvergenceWarning)
    """
    if not (0.0 <= e < 1.0):
        raise UnsupportedOrbitError(
            f"Elliptic Kepler solver requires 0 <= e < 1, got e={e}")
    max_iter = config.KEPLER_MAX_ITER if max_iter is None else int(max_iter)
    tol = config.KEPLER_TOL if tol is None else tol
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")

    # iterate on M wrapped to [-pi, pi), add the revolutions back at the end
    M = float(np.mod(mean_anomaly + np.pi, 2*np.pi) - np.pi)
    revolutions = float(mean_anomaly) - M

    # For higher e, start closer to pi to avoid slow convergence near M~0
    if e < 0.8:
        E = M
    else:
        E = np.pi*np.sign(M) if M != 0.0 else 0.0

    converged = False
    for _ in range(max_iter):
        dE = (E - e*np.sin(E) - M)/(1.0 - e*np.cos(E))
        E = E - dE
        if tol > 0 and abs(dE) < tol:
            converged = True
            break

    if tol > 0 and not converged:
        convergence_error(
            f"Kepler's equation did not converge within {max_iter} "
            f"iterations (M={mean_anomaly}, e={e}, last |dE|={abs(dE):.3e})")

    return float(E + revolutions)


def true_from_eccentric(E: float, e: float) -> float:
    """True anomaly from eccentric anomaly, same revolution as E/2 allows."""
    return float(2.0*np.arctan2(np.sqrt(1.0 + e)*np.sin(E/2.0),
                                np.sqrt(1.0 - e)*np.cos(E/2.0)))


def eccentric_from_true(ta: float, e: float) -> float:
    """Eccentric anomaly in (-pi, pi) from true anomaly."""
    return float(2.0*np.arctan(np.tan(ta/2.0)/np.sqrt((1.0 + e)/(1.0 - e))))


def mean_from_eccentric(E: float, e: float) -> float:
    """Kepler's equation, M = E - e sin(E)"""
    return float(E - e*np.sin(E))
