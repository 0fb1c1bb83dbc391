'''StateVector class definition
Cartesian position and velocity of an orbiting body'''

import numpy as np
from .config import config
from .frame import ReferenceFrame
from .orbital_elements import OrbitalElements
from .utils import ValidationError, as_vector3


class StateVector:
    """
    Position and velocity of a body, expressed in a ReferenceFrame.

    StateVector is immutable: tick(), push() and reproject() return new
    instances, and the frame is shared by reference.

    Parameters
    ----------
    r : array-like
        Position [km], shape (3,)
    v : array-like
        Velocity [km/s], shape (3,)
    frame : ReferenceFrame
        Frame the components are expressed in

    Raises
    ------
    ValidationError
        If r or v is not a finite 3-vector
    """
    # ========== CLASS CONSTANTS ==========
    # Column order for arrays and DataFrames
    COLUMNS = ('x', 'y', 'z', 'vx', 'vy', 'vz')
    _METHODS = ('kepler', 'euler')

    # ========== CONSTRUCTION ==========
    def __init__(self, r, v, frame: ReferenceFrame):
        if not isinstance(frame, ReferenceFrame):
            raise TypeError(f"frame must be a ReferenceFrame, got {type(frame)}")
        self._r = as_vector3(r, "r")
        self._v = as_vector3(v, "v")
        self._frame = frame

    @classmethod
    def from_array(cls, state, frame: ReferenceFrame) -> "StateVector":
        """
        Create a state vector from a 6-element array [x, y, z, vx, vy, vz].
        """
        state = np.asarray(state, dtype=float)
        if state.shape != (6,):
            raise ValidationError(
                f"State must be 6-element vector, got {state.shape}")
        return cls(state[:3], state[3:], frame)

    @classmethod
    def from_orbital_elements(cls, elements: OrbitalElements) -> "StateVector":
        """
        Convert orbital elements to a Cartesian state vector.

        Parameters
        ----------
        elements : OrbitalElements

        Returns
        -------
        StateVector
            State in the same (shared) frame
        """
        return elements.to_state_vector()

    # ========== FACTORY METHODS ==========
    @classmethod
    def from_numpy(cls, array, frame: ReferenceFrame):
        """
        Create list of StateVectors from NumPy array.

        Parameters
        ----------
        array : np.ndarray
            Array of shape (n_states, 6), columns [x, y, z, vx, vy, vz]
        frame : ReferenceFrame

        Returns
        -------
        list of StateVector
        """
        array = np.asarray(array, dtype=float)
        if array.ndim != 2 or array.shape[1] != 6:
            raise ValueError(f"Array must have shape (n, 6), got {array.shape}")
        return [cls.from_array(row, frame) for row in array]

    @classmethod
    def from_dataframe(cls, df, frame: ReferenceFrame):
        """
        Create list of StateVectors from pandas DataFrame.

        Parameters
        ----------
        df : pd.DataFrame
            DataFrame with columns x, y, z, vx, vy, vz (extra columns,
            such as time, are ignored)
        frame : ReferenceFrame

        Returns
        -------
        list of StateVector
        """
        missing = [c for c in cls.COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"DataFrame is missing columns {missing}")
        return cls.from_numpy(df[list(cls.COLUMNS)].to_numpy(dtype=float),
                              frame)

    # ========== CONVERSIONS, PROPAGATION AND MANEUVERS ==========
    def to_orbital_elements(self) -> OrbitalElements:
        """Convert to OrbitalElements in the same frame."""
        return OrbitalElements.from_state_vector(self)

    def tick(self, dt: float, method: str = None) -> "StateVector":
        """
        Return the state dt seconds later.

        Parameters
        ----------
        dt : float
            Time step [s], may be negative
        method : str, optional
            'kepler' converts to orbital elements, advances the mean
            anomaly and converts back (exact two-body motion).
            'euler' takes a single explicit Euler step under point-mass
            gravity, a first-order approximation whose error grows with dt.
            Defaults to config.DEFAULT_PROPAGATION

        Returns
        -------
        StateVector

        Raises
        ------
        UnsupportedOrbitError
            With method='kepler', if the state is not a bound ellipse
        """
        method = config.DEFAULT_PROPAGATION if method is None else method
        if method not in self._METHODS:
            raise ValueError(f"Unknown propagation method '{method}'. "
                             f"Valid options: {self._METHODS}")
        if dt == 0:
            return StateVector(self._r, self._v, self._frame)
        if method == 'kepler':
            return self.to_orbital_elements().tick(dt).to_state_vector()
        # explicit Euler step
        r_mag = np.linalg.norm(self._r)
        accel = -self._frame.mu*self._r/r_mag**3
        return StateVector(self._r + self._v*dt, self._v + accel*dt,
                           self._frame)

    def push(self, delta_v) -> "StateVector":
        """
        Apply an instantaneous velocity change.

        Parameters
        ----------
        delta_v : array-like
            Velocity increment [km/s] in this state's frame

        Returns
        -------
        StateVector
            Same position and frame, velocity v + delta_v
        """
        return StateVector(self._r, self._v + as_vector3(delta_v, "delta_v"),
                           self._frame)

    def reproject(self, other_frame: ReferenceFrame) -> "StateVector":
        """Express the same position and velocity in another frame."""
        return StateVector(self._frame.reproject(self._r, other_frame),
                           self._frame.reproject(self._v, other_frame),
                           other_frame)

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
    def r(self) -> np.ndarray:
        """Position vector [km] (read-only)"""
        return self._r

    @property
    def v(self) -> np.ndarray:
        """Velocity vector [km/s] (read-only)"""
        return self._v

    @property
    def position(self) -> np.ndarray:
        """Alias of r"""
        return self._r

    @property
    def velocity(self) -> np.ndarray:
        """Alias of v"""
        return self._v

    # ========== ORBITAL PROPERTIES ==========
    def radius(self):
        """Distance from the central body [km]"""
        return float(np.linalg.norm(self._r))

    def speed(self):
        """Speed [km/s]"""
        return float(np.linalg.norm(self._v))

    def specific_energy(self):
        """Specific orbital energy from vis-viva, v²/2 - μ/r [km²/s²]"""
        return self.speed()**2/2 - self.mu/self.radius()

    def specific_angular_momentum(self):
        """
        Calculate specific angular momentum magnitude

        Returns h = |cross(position,velocity)|
        """
        return float(np.linalg.norm(np.cross(self._r, self._v)))

    # ========== UTILITY METHODS ==========
    def to_numpy(self) -> np.ndarray:
        """Array [x, y, z, vx, vy, vz]"""
        return np.concatenate([self._r, self._v])

    def isclose(self, other: "StateVector", rtol: float = None,
                atol: float = None) -> bool:
        """Compare position, velocity and frame within tolerances."""
        rtol = config.EQUALITY_RTOL if rtol is None else rtol
        atol = config.EQUALITY_ATOL if atol is None else atol
        return bool(
            self._frame == other.frame and
            np.allclose(self._r, other.r, rtol=rtol, atol=atol) and
            np.allclose(self._v, other.v, rtol=rtol, atol=atol)
        )

    # ========== BATCH OPERATIONS ==========
    class Batch:
        """
        Batch operations on collections of StateVectors.
        """
        @staticmethod
        def to_orbital_elements(states):
            """Convert multiple states to OrbitalElements"""
            return [s.to_orbital_elements() for s in states]

        @staticmethod
        def tick(states, dt, method=None):
            """Advance multiple states by dt"""
            return [s.tick(dt, method=method) for s in states]

        @staticmethod
        def push(states, delta_v):
            """Apply the same velocity change to multiple states"""
            return [s.push(delta_v) for s in states]

        @staticmethod
        def pos(states):
            """Get position for multiple states"""
            return np.array([s.r for s in states])

        @staticmethod
        def vel(states):
            """Get velocity for multiple states"""
            return np.array([s.v for s in states])

        @staticmethod
        def specific_energy(states):
            """Get specific energy for multiple states"""
            return np.array([s.specific_energy() for s in states])

        @staticmethod
        def to_numpy(states):
            """Array of shape (n_states, 6)"""
            if not states:
                return np.empty((0, 6))
            return np.array([s.to_numpy() for s in states])

        @staticmethod
        def to_dataframe(states, index=None):
            """
            Convert list of StateVectors to pandas DataFrame.

            Parameters
            ----------
            states : list of StateVector
            index : array-like, optional
                Index for the DataFrame (e.g., time values).

            Returns
            -------
            pd.DataFrame
                DataFrame with columns ['x', 'y', 'z', 'vx', 'vy', 'vz']
            """
            try:
                import pandas as pd
            except ImportError:
                raise ImportError("pandas required for to_dataframe()")
            if not states:
                return pd.DataFrame(columns=list(StateVector.COLUMNS))
            if index is not None and len(index) != len(states):
                raise ValueError(
                    f"Index length ({len(index)}) must match "
                    f"number of states ({len(states)})"
                )
            return pd.DataFrame(StateVector.Batch.to_numpy(states),
                                columns=list(StateVector.COLUMNS), index=index)

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return 6

    def __getitem__(self, key):
        return self.to_numpy()[key]

    def __iter__(self):
        return iter(self.to_numpy())

    def __repr__(self):
        return (f"StateVector(r={self._r.tolist()}, v={self._v.tolist()}, "
                f"frame={self._frame.name!r})")

    def __str__(self):
        r, v = self._r, self._v
        return (f"Cartesian State:\n"
                f"  r = [{r[0]:12.4f}, {r[1]:12.4f}, {r[2]:12.4f}] km\n"
                f"  v = [{v[0]:12.4f}, {v[1]:12.4f}, {v[2]:12.4f}] km/s")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, StateVector):
            return False
        return self.isclose(other)

    def __hash__(self):
        #Hash with rounding to match equality
        rounded = tuple(round(x, config.HASH_DECIMALS) for x in self.to_numpy())
        return hash((self._frame, rounded))
