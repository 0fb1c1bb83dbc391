'''OrbitalElements class definition
Classical Keplerian elements of a bound elliptic orbit'''

import warnings
import numpy as np
from typing import TYPE_CHECKING
from .config import config
from .frame import ReferenceFrame
from .conversions import (perifocal_rotation, keplerian_to_cartesian,
                          cartesian_to_keplerian, is_circular, is_equatorial)
from .kepler import solve_kepler, true_from_eccentric
from .utils import (ValidationError, UnsupportedOrbitError, angle_difference,
                    wrap_to_2pi)

if TYPE_CHECKING:
    from .state_vector import StateVector

#define basic orbital element class
class OrbitalElements:
    """
    Represents a bound elliptic orbit as six classical Keplerian elements
    expressed in a ReferenceFrame.

    OrbitalElements is immutable: tick() and the conversions return new
    instances, and the frame is shared by reference. The mean motion and the
    perifocal-to-frame rotation are computed once at construction and
    carried along by tick(), since neither changes under two-body motion.

    For degenerate orbits the angle slots hold surrogates: ap is the
    longitude of periapsis on an equatorial orbit, and m0 counts from the
    node (argument of latitude) or from the reference axis (true longitude)
    on a circular orbit. See orbis.conversions.

    Parameters
    ----------
    a : float
        Semi-major axis [km], a > 0
    e : float
        Eccentricity, 0 <= e < 1
    inc : float
        Inclination [rad], 0 <= inc <= pi
    lan : float
        Longitude of ascending node [rad]
    ap : float
        Argument of periapsis (or its substitute) [rad]
    m0 : float
        Mean anomaly at the reference epoch [rad]
    frame : ReferenceFrame
        Frame the orientation angles refer to
    validate : bool, optional
        Whether to validate elements (default True)

    Raises
    ------
    UnsupportedOrbitError
        If e >= 1 or a <= 0 (parabolic and hyperbolic orbits)
    ValidationError
        For negative eccentricity, inclination outside [0, pi], or
        non-finite values
    """
    # ========== CLASS CONSTANTS ==========
    # Column order for arrays and DataFrames
    COLUMNS = ('a', 'e', 'inc', 'lan', 'ap', 'm0')

    # ========== CONSTRUCTION ==========
    def __init__(self, a, e, inc, lan, ap, m0, frame: ReferenceFrame,
                 validate=True):
        if not isinstance(frame, ReferenceFrame):
            raise TypeError(f"frame must be a ReferenceFrame, got {type(frame)}")
        self._a = float(a)
        self._e = float(e)
        self._inc = float(inc)
        self._lan = float(lan)
        self._ap = float(ap)
        self._m0 = float(m0)
        self._frame = frame
        # run validation checks on input parameters (if not flagged otherwise)
        if validate:
            self._validate()
        # Mean motion
        self._n = float(np.sqrt(frame.mu/self._a**3))
        # rot is invariant between ticks, keep it with the elements
        self._rot = perifocal_rotation(self._e, self._inc, self._lan,
                                       self._ap, frame)

    # define alternate constructors for array input and state vectors
    @classmethod
    def from_array(cls, elements, frame: ReferenceFrame, validate=True):
        """
        Create orbital elements from a 6-element array

        Args:
            elements: 6-element array [a, e, inc, lan, ap, m0]
            frame: ReferenceFrame
            validate: whether to validate (default True)

        Returns:
            OrbitalElements instance
        """
        elements = np.asarray(elements, dtype=float)
        if elements.shape != (6,):
            raise ValidationError(
                f"Orbital elements must be 6-element vector, got {elements.shape}")
        return cls(*elements, frame=frame, validate=validate)

    @classmethod
    def from_state_vector(cls, state: "StateVector") -> "OrbitalElements":
        """
        Convert a Cartesian state vector to orbital elements.

        Parameters
        ----------
        state : StateVector

        Returns
        -------
        OrbitalElements
            Elements in the same (shared) frame

        Raises
        ------
        UnsupportedOrbitError
            If the state is not on a bound ellipse
        """
        a, e, inc, lan, ap, m0 = cartesian_to_keplerian(state.r, state.v,
                                                        state.frame)
        return cls(a, e, inc, lan, ap, m0, state.frame)

    # ========== VALIDATION ==========
    def _validate(self):
        """Check that the elements describe a supported orbit"""
        values = (self._a, self._e, self._inc, self._lan, self._ap, self._m0)
        if not np.all(np.isfinite(values)):
            raise ValidationError("Elements contain NaN or Inf")
        if self._e < 0:
            raise ValidationError(f"Eccentricity must be >= 0, got {self._e}")
        if self._e >= 1 - config.PARABOLIC_TOL:
            raise UnsupportedOrbitError(
                f"Only elliptic orbits are supported, got e={self._e}")
        if self._a <= 0:
            raise UnsupportedOrbitError(f"Elliptic orbit (e={self._e}) "
                                        f"requires positive semi-major axis, "
                                        f"got a={self._a}")
        if self._inc < 0 or self._inc > np.pi:
            raise ValidationError(
                f"Inclination out of range [0, pi], got {self._inc}")
        # undefined angles are kept but not applied
        if is_equatorial(self._inc) and self._lan != 0:
            warnings.warn(
                f"lan={self._lan} specified for an equatorial orbit "
                f"but will be ignored", stacklevel=3)
        if is_circular(self._e) and self._ap != 0:
            warnings.warn(
                f"ap={self._ap} specified for a circular orbit "
                f"but will be ignored", stacklevel=3)

    # ========== FACTORY METHODS ==========
    @classmethod
    def from_numpy(cls, array, frame: ReferenceFrame, validate=True):
        """
        Create list of OrbitalElements from NumPy array.

        Parameters
        ----------
        array : np.ndarray
            Array of shape (n_orbits, 6), columns [a, e, inc, lan, ap, m0]
        frame : ReferenceFrame
        validate : bool, optional, defaults to True

        Returns
        -------
        list of OrbitalElements
        """
        array = np.asarray(array, dtype=float)
        if array.ndim != 2 or array.shape[1] != 6:
            raise ValueError(f"Array must have shape (n, 6), got {array.shape}")

        return [cls.from_array(row, frame, validate=validate) for row in array]

    @classmethod
    def from_dataframe(cls, df, frame: ReferenceFrame, validate=True):
        """
        Create list of OrbitalElements from pandas DataFrame.

        Parameters
        ----------
        df : pd.DataFrame
            DataFrame with columns a, e, inc, lan, ap, m0 (extra columns,
            such as time, are ignored)
        frame : ReferenceFrame
        validate : bool, optional, defaults to True

        Returns
        -------
        list of OrbitalElements
        """
        missing = [c for c in cls.COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"DataFrame is missing columns {missing}")
        return cls.from_numpy(df[list(cls.COLUMNS)].to_numpy(dtype=float),
                              frame, validate=validate)

    # ========== CONVERSIONS AND PROPAGATION ==========
    def to_state_vector(self) -> "StateVector":
        """Convert to a Cartesian StateVector in the same frame."""
        from .state_vector import StateVector
        r, v = keplerian_to_cartesian(self._a, self._e, self._m0, self._rot,
                                      self._frame)
        return StateVector(r, v, self._frame)

    def tick(self, dt: float) -> "OrbitalElements":
        """
        Return the elements dt seconds later.

        Only the mean anomaly advances (m0 + n*dt); the other elements, the
        mean motion and the cached rotation are carried over unchanged.

        Parameters
        ----------
        dt : float
            Time step [s], may be negative

        Returns
        -------
        OrbitalElements
        """
        return self._with_mean_anomaly(self._m0 + self._n*dt)

    def _with_mean_anomaly(self, m0):
        new = object.__new__(type(self))
        new.__dict__.update(self.__dict__)
        new._m0 = float(m0)
        return new

    # ========== PROPERTY ACCESS ==========
    @property
    def frame(self) -> ReferenceFrame:
        """Reference frame (shared)"""
        return self._frame

    @property
    def mu(self):
        """Gravitational parameter [km³/s²]"""
        return self._frame.mu

    @property
    def a(self):
        """Semi-major axis [km]"""
        return self._a

    @property
    def e(self):
        """Eccentricity"""
        return self._e

    @property
    def inc(self):
        """Inclination [rad]"""
        return self._inc

    @property
    def lan(self):
        """Longitude of ascending node [rad]"""
        return self._lan

    @property
    def ap(self):
        """Argument of periapsis, or longitude of periapsis if equatorial [rad]"""
        return self._ap

    @property
    def m0(self):
        """Mean anomaly [rad]"""
        return self._m0

    @property
    def n(self):
        """Mean motion [rad/s]"""
        return self._n

    @property
    def rot(self) -> np.ndarray:
        """Perifocal to frame rotation matrix (read-only)"""
        return self._rot

    @property
    def elements(self) -> np.ndarray:
        """Array [a, e, inc, lan, ap, m0]"""
        return np.array([self._a, self._e, self._inc,
                         self._lan, self._ap, self._m0])

    @property
    def is_circular(self) -> bool:
        return is_circular(self._e)

    @property
    def is_equatorial(self) -> bool:
        return is_equatorial(self._inc)

    # ========== ORBITAL PROPERTIES ==========
    def eccentric_anomaly(self):
        """Eccentric anomaly at the current epoch [rad]"""
        return solve_kepler(self._m0, self._e)

    def true_anomaly(self):
        """
        True anomaly at the current epoch, in [0, 2pi) [rad]

        For circular orbits this is the argument of latitude (inclined) or
        the true longitude (equatorial).
        """
        ta = true_from_eccentric(self.eccentric_anomaly(), self._e)
        return wrap_to_2pi(ta)

    def mean_motion(self):
        """Mean motion n = √(μ/a³) [rad/s]"""
        return self._n

    def orbital_period(self):
        """Orbital period [s]"""
        return 2*np.pi/self._n

    def semi_latus_rectum(self):
        """Semi-latus rectum p = a(1 - e²) [km]"""
        return self._a*(1 - self._e**2)

    def periapsis(self):
        """Periapsis radius [km]"""
        return self._a*(1 - self._e)

    def apoapsis(self):
        """Apoapsis radius [km]"""
        return self._a*(1 + self._e)

    def specific_energy(self):
        """Specific orbital energy -μ/2a [km²/s²]"""
        return -self.mu/(2*self._a)

    def specific_angular_momentum(self):
        """Specific angular momentum magnitude √(μp) [km²/s]"""
        return np.sqrt(self.mu*self.semi_latus_rectum())

    # ========== UTILITY METHODS ==========
    def to_numpy(self) -> np.ndarray:
        """Same as .elements"""
        return self.elements

    def isclose(self, other: "OrbitalElements", rtol: float = None,
                atol: float = None) -> bool:
        """
        Compare with tolerances, angles modulo 2pi.

        a and e use rtol/atol; inc, lan, ap and m0 are compared through
        their wrapped difference against atol.
        """
        rtol = config.EQUALITY_RTOL if rtol is None else rtol
        atol = config.EQUALITY_ATOL if atol is None else atol
        if not np.isclose(self._a, other.a, rtol=rtol, atol=atol):
            return False
        if not np.isclose(self._e, other.e, rtol=rtol, atol=atol):
            return False
        for mine, theirs in ((self._inc, other.inc), (self._lan, other.lan),
                             (self._ap, other.ap), (self._m0, other.m0)):
            if abs(angle_difference(mine, theirs)) > atol:
                return False
        return True

    # ========== BATCH OPERATIONS ==========
    class Batch:
        """
        Batch operations on collections of OrbitalElements.

        All methods accept a list of OrbitalElements and return
        a list of OrbitalElements, StateVectors or computed values.
        """
        @staticmethod
        def to_state_vectors(orbits):
            """Convert multiple orbits to StateVectors"""
            return [o.to_state_vector() for o in orbits]

        @staticmethod
        def tick(orbits, dt):
            """Advance multiple orbits by dt"""
            return [o.tick(dt) for o in orbits]

        @staticmethod
        def a(orbits):
            """Get semi-major axis for multiple orbits"""
            return np.array([o.a for o in orbits])

        @staticmethod
        def e(orbits):
            """Get eccentricity for multiple orbits"""
            return np.array([o.e for o in orbits])

        @staticmethod
        def orbital_period(orbits):
            """Get orbital periods for multiple orbits"""
            return np.array([o.orbital_period() for o in orbits])

        @staticmethod
        def mean_motion(orbits):
            """Get mean motions for multiple orbits"""
            return np.array([o.n for o in orbits])

        @staticmethod
        def specific_energy(orbits):
            """Get specific energy for multiple orbits"""
            return np.array([o.specific_energy() for o in orbits])

        @staticmethod
        def to_numpy(orbits):
            """
            Convert list of OrbitalElements to NumPy array.

            Parameters
            ----------
            orbits : list of OrbitalElements

            Returns
            -------
            np.ndarray
                Array of shape (n_orbits, 6) containing orbital elements
            """
            if not orbits:
                return np.empty((0, 6))
            return np.array([o.elements for o in orbits])

        @staticmethod
        def to_dataframe(orbits, index=None):
            """
            Convert list of OrbitalElements to pandas DataFrame.

            Parameters
            ----------
            orbits : list of OrbitalElements
                List of orbital elements
            index : array-like, optional
                Index for the DataFrame (e.g., time values).
                If None, uses integer index.

            Returns
            -------
            pd.DataFrame
                DataFrame with columns ['a', 'e', 'inc', 'lan', 'ap', 'm0']

            Raises
            ------
            ValueError
                If index length doesn't match number of orbits
            """
            # pandas isn't needed unless this function is used
            try:
                import pandas as pd
            except ImportError:
                raise ImportError("pandas required for to_dataframe()")
            # check for empty list input and return empty DataFrame
            if not orbits:
                return pd.DataFrame(columns=list(OrbitalElements.COLUMNS))

            # Validate index length
            if index is not None:
                if len(index) != len(orbits):
                    raise ValueError(
                        f"Index length ({len(index)}) must match "
                        f"number of orbits ({len(orbits)})"
                    )

            data = OrbitalElements.Batch.to_numpy(orbits)
            return pd.DataFrame(data, columns=list(OrbitalElements.COLUMNS),
                                index=index)

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        #Length of element vector (always 6)
        return 6

    def __getitem__(self, key):
        #Allow indexing like orbit[0]
        return self.elements[key]

    def __iter__(self):
        #Allow iteration over elements
        return iter(self.elements)

    def __repr__(self):
        #Machine-readable representation
        return (f"OrbitalElements(a={self._a!r}, e={self._e!r}, "
                f"inc={self._inc!r}, lan={self._lan!r}, ap={self._ap!r}, "
                f"m0={self._m0!r}, frame={self._frame.name!r})")

    def __str__(self):
        #Human-readable representation
        return (f"Keplerian Elements:\n"
                f"  a     = {self._a:12.4f} km\n"
                f"  e     = {self._e:12.6f}\n"
                f"  inc   = {np.degrees(self._inc):12.4f}°\n"
                f"  lan   = {np.degrees(self._lan):12.4f}°\n"
                f"  ap    = {np.degrees(self._ap):12.4f}°\n"
                f"  m0    = {np.degrees(self._m0):12.4f}°")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, OrbitalElements):
            return False
        return (self._frame == other.frame and
                np.allclose(self.elements, other.elements,
                            rtol=config.EQUALITY_RTOL,
                            atol=config.EQUALITY_ATOL))

    def __hash__(self):
        #Hash with rounding to match equality
        rounded = tuple(round(x, config.HASH_DECIMALS) for x in self.elements)
        return hash((self._frame, rounded))
