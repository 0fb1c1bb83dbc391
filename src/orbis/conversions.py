'''Conversion engine between Keplerian elements and Cartesian state vectors.

Functions work on plain floats and arrays so that both OrbitalElements and
StateVector can call them without importing each other.

Degenerate orbits
-----------------
Some classical elements are undefined for degenerate geometries and are
replaced by surrogate angles:

=====================  ============  ===============================  ==========================
orbit                  lan           ap                               true anomaly slot
=====================  ============  ===============================  ==========================
general                node angle    argument of periapsis            true anomaly
circular, inclined     node angle    0                                argument of latitude
eccentric, equatorial  0             longitude of periapsis           true anomaly
circular, equatorial   0             0                                true longitude
=====================  ============  ===============================  ==========================

Retrograde equatorial orbits (inc ~ pi) follow the equatorial rows with the
reference axis i standing in for the node; their inclination rotation is
kept.
'''

import numpy as np
from .config import config
from .kepler import (solve_kepler, true_from_eccentric, eccentric_from_true,
                     mean_from_eccentric)
from .utils import UnsupportedOrbitError, resolve_angle


# ========== DEGENERACY TESTS ==========
def is_circular(e: float) -> bool:
    """Eccentricity small enough to treat the orbit as circular"""
    return abs(e) < config.SNAP_TO_CIRCULAR


def is_equatorial(inc: float) -> bool:
    """Inclination within tolerance of 0 or pi"""
    return (abs(inc) < config.SNAP_TO_EQUATORIAL or
            abs(np.pi - inc) < config.SNAP_TO_EQUATORIAL)


def is_prograde_equatorial(inc: float) -> bool:
    return abs(inc) < config.SNAP_TO_EQUATORIAL


# ========== KEPLERIAN -> CARTESIAN ==========
def perifocal_rotation(e: float, inc: float, lan: float, ap: float,
                       frame) -> np.ndarray:
    """
    Rotation taking vectors in the frame's i, j plane into the orbit plane.

    Composes a rotation by lan about k, then by inc about the node axis,
    then by ap about the new polar axis. The lan and inc rotations are
    skipped for equatorial orbits and the ap rotation for circular orbits,
    whatever values are stored for those angles. For retrograde equatorial
    orbits only lan is skipped.

    Parameters
    ----------
    e, inc, lan, ap : float
        Eccentricity and orientation angles [rad]
    frame : ReferenceFrame
        Frame providing the rotation axes

    Returns
    -------
    np.ndarray
        Read-only 3x3 rotation matrix in frame coordinates
    """
    R = np.eye(3)
    if not is_equatorial(inc):
        R = R @ _R3(lan) @ _R1(inc)
    elif not is_prograde_equatorial(inc):
        R = R @ _R1(inc)
    if not is_circular(e):
        R = R @ _R3(ap)
    # rotations above are about the frame's own axes
    B = frame.basis
    rot = B @ R @ B.T
    rot.flags.writeable = False
    return rot


def _R1(angle):
    # rotation about x-axis (node axis)
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [1, 0,  0],
        [0, c, -s],
        [0, s,  c]
    ])


def _R3(angle):
    # rotation about z-axis (polar axis)
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, -s, 0],
        [s,  c, 0],
        [0,  0, 1]
    ])


def keplerian_to_cartesian(a: float, e: float, m0: float, rot: np.ndarray,
                           frame):
    """
    Position and velocity from elements and their cached rotation.

    Parameters
    ----------
    a : float
        Semi-major axis [km]
    e : float
        Eccentricity
    m0 : float
        Mean anomaly [rad]
    rot : np.ndarray
        Output of perifocal_rotation() for these elements
    frame : ReferenceFrame

    Returns
    -------
    r, v : np.ndarray
        Position [km] and velocity [km/s] in frame coordinates
    """
    # eccentric anomaly from Kepler's equation
    E = solve_kepler(m0, e)
    ta = true_from_eccentric(E, e)
    # distance to the center of the central body
    dist = a*(1 - e*np.cos(E))
    # position and velocity in the i, j plane
    r_pf = dist*(np.cos(ta)*frame.i + np.sin(ta)*frame.j)
    v_pf = (np.sqrt(frame.mu*a)/dist)*(-np.sin(E)*frame.i +
                                       np.sqrt(1 - e**2)*np.cos(E)*frame.j)
    return rot @ r_pf, rot @ v_pf


# ========== CARTESIAN -> KEPLERIAN ==========
def cartesian_to_keplerian(r: np.ndarray, v: np.ndarray, frame):
    """
    Classical elements from a position/velocity pair.

    Degenerate cases are checked with the eccentricity test first, then the
    inclination test, and the surrogate angles of the module table are
    substituted. Eccentricity and inclination are snapped to 0 (or pi) when
    they fall under the configured thresholds.

    Parameters
    ----------
    r : np.ndarray
        Position [km]
    v : np.ndarray
        Velocity [km/s]
    frame : ReferenceFrame

    Returns
    -------
    tuple of float
        (a, e, inc, lan, ap, m0)

    Raises
    ------
    UnsupportedOrbitError
        For rectilinear, parabolic or hyperbolic states
    """
    mu = frame.mu
    r_mag = np.linalg.norm(r)
    if r_mag == 0:
        raise UnsupportedOrbitError("Position vector has zero length")

    # specific angular momentum
    h = np.cross(r, v)
    h_mag = np.linalg.norm(h)
    if h_mag == 0:
        raise UnsupportedOrbitError(
            "Angular momentum is zero (rectilinear motion)")

    # eccentricity vector, points towards periapsis
    evec = np.cross(v, h)/mu - r/r_mag
    e = np.linalg.norm(evec)

    # semi-major axis from vis-viva
    inv_a = 2/r_mag - np.dot(v, v)/mu
    if e >= 1 - config.PARABOLIC_TOL or inv_a <= 0:
        raise UnsupportedOrbitError(
            f"State is not a bound elliptic orbit (e={e:.6f}, "
            f"2/r - v²/mu={inv_a:.6e}); parabolic and hyperbolic orbits "
            f"are not supported")
    a = 1/inv_a

    # node vector, towards the ascending node
    nvec = np.cross(frame.k, h)
    n_mag = np.linalg.norm(nvec)

    # inclination, acos(h.k/|h|) written with |k x h| = |h| sin(inc) so
    # that it keeps full precision near 0 and pi
    inc = float(np.arctan2(n_mag, np.dot(h, frame.k)))

    circular = is_circular(e)
    equatorial = is_equatorial(inc)
    if circular:
        e = 0.0
    if equatorial:
        inc = 0.0 if np.dot(h, frame.k) > 0 else np.pi

    # generic angles, only where their vectors are defined
    lan = 0.0
    ap = 0.0
    ta = 0.0
    if not equatorial:
        node = nvec/n_mag
        lan = resolve_angle(np.dot(node, frame.i), np.dot(node, frame.j) >= 0)
        if not circular:
            ap = resolve_angle(np.dot(node, evec)/e,
                               np.dot(evec, np.cross(h, node)) >= 0)
    if not circular:
        ta = resolve_angle(np.dot(evec, r)/(e*r_mag), np.dot(r, v) >= 0)

    # degenerate overrides, eccentricity before inclination
    if circular:
        ap = 0.0
    if equatorial:
        lan = 0.0
        # the reference axis stands in for the node
        node = frame.i
        node_normal = frame.j if inc == 0.0 else -frame.j
        if not circular:
            # longitude of periapsis
            ap = resolve_angle(np.dot(node, evec)/e,
                               np.dot(evec, node_normal) >= 0)
        else:
            ap = 0.0
    if circular:
        if equatorial:
            # true longitude
            ta = resolve_angle(np.dot(frame.i, r)/r_mag,
                               np.dot(frame.i, v) <= 0)
        else:
            # argument of latitude
            ta = resolve_angle(np.dot(nvec, r)/(n_mag*r_mag),
                               np.dot(nvec, v) <= 0)

    # mean anomaly through the eccentric anomaly
    E = eccentric_from_true(ta, e)
    m0 = mean_from_eccentric(E, e)
    return float(a), float(e), inc, lan, ap, m0
