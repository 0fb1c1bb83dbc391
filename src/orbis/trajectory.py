'''Trajectory class definition
Time-bounded Keplerian arc with continuous-time state access'''

import numpy as np
import pandas as pd
from typing import Union, Optional
from .config import config
from .orbital_elements import OrbitalElements
from .state_vector import StateVector
from .utils import Representation, parse_representation, as_vector3


class Trajectory:
    """
    A two-body trajectory segment with continuous-time state access.

    States are computed analytically from the elements at t0, so any time in
    [t0, tf] can be queried directly without stepping.

    Parameters
    ----------
    initial_state : StateVector or OrbitalElements
        State at time t0
    t0 : float
        Start time [s]
    tf : float
        End time [s] (may be earlier than t0 for backward arcs)

    Attributes:
        frame: Reference frame of the initial state (shared)
        elements: OrbitalElements at t0
        t0: Start time
        tf: End time
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, initial_state: Union[StateVector, OrbitalElements],
                 t0: float, tf: float):
        if isinstance(initial_state, StateVector):
            self._elements = initial_state.to_orbital_elements()
        elif isinstance(initial_state, OrbitalElements):
            self._elements = initial_state
        else:
            raise TypeError(
                f"initial_state must be StateVector or OrbitalElements, "
                f"got {type(initial_state)}")
        self._t0 = float(t0)
        self._tf = float(tf)

    # ========== PROPERTY ACCESS ==========
    @property
    def frame(self):
        return self._elements.frame

    @property
    def elements(self) -> OrbitalElements:
        return self._elements

    @property
    def t0(self):
        return self._t0

    @property
    def tf(self):
        return self._tf

    @property
    def duration(self):
        """Trajectory duration."""
        return self.tf - self.t0

    # ========== UTILITY METHODS ==========
    def state_at(self, t: float,
                 representation: Union[Representation, str] = 'cart'
                 ) -> Union[StateVector, OrbitalElements]:
        """
        Get orbital state at specified time.

        Parameters:
            t: Time to query (must be in [t0, tf])
            representation: 'cart' for a StateVector (default) or 'kep'
                for OrbitalElements
        """
        self._validate_time(t)
        representation = parse_representation(representation)
        elements = self._elements.tick(float(t) - self._t0)
        if representation == Representation.KEPLERIAN:
            return elements
        return elements.to_state_vector()

    def evaluate(self,
                 times: Union[float, np.ndarray, list],
                 representation: Union[Representation, str] = 'cart'):
        """
        Evaluate trajectory at one or more times.

        Parameters:
            times: Single time or array of times
            representation: 'cart' (default) or 'kep'

        Returns:
            Single state if times is scalar,
            list of states if times is array-like
        """
        # Handle scalar input
        if isinstance(times, (int, float)):
            return self.state_at(times, representation=representation)

        # Handle array input
        times = np.asarray(times, dtype=float)
        return [self.state_at(t, representation=representation) for t in times]

    def sample(self, representation: Union[Representation, str] = 'cart',
               n_points: int = 100) -> list:
        """
        States at n_points evenly spaced times from t0 to tf, both ends
        included.

        Parameters:
            representation: 'cart' (default) or 'kep'
            n_points: Sample count, at least 2 (default: 100)
        """
        if n_points < 2:
            raise ValueError("n_points must be at least 2, use .state_at()")
        return self.evaluate(self.get_times(n_points),
                             representation=representation)

    def state_at_raw(self, t: float) -> np.ndarray:
        """Get raw Cartesian state array at time t"""
        return self.state_at(t).to_numpy()

    def evaluate_raw(self, times: Union[float, np.ndarray, list]) -> np.ndarray:
        """
        Evaluate at one or more times, returning raw Cartesian arrays.

        Parameters:
            times: Single time or array of times

        Returns:
            State array of shape (6,) if times is scalar,
            Array of shape (n_times, 6) if times is array-like
        """
        if isinstance(times, (int, float)):
            return self.state_at_raw(times)
        times = np.asarray(times, dtype=float)
        return StateVector.Batch.to_numpy(self.evaluate(times))

    def sample_raw(self, n_points: int = 100) -> np.ndarray:
        """
        Same as sample(), as an (n_points, 6) Cartesian array.
        """
        if n_points < 2:
            raise ValueError("n_points must be at least 2, use .state_at_raw()")
        return self.evaluate_raw(self.get_times(n_points))

    def _validate_time(self, t: float):
        """Validate that time is within trajectory bounds."""
        if not self.contains_time(t):
            raise ValueError(
                f"Time {t} outside trajectory bounds [{self.t0}, {self.tf}]"
            )

    def contains_time(self, t: float) -> bool:
        """Check if time is within trajectory bounds."""
        return min(self.t0, self.tf) <= t <= max(self.t0, self.tf)

    def get_times(self, n_points: int = 100) -> np.ndarray:
        """Generate uniform time array spanning trajectory."""
        return np.linspace(self.t0, self.tf, n_points)

    def to_dataframe(self,
                     times: Optional[np.ndarray] = None,
                     n_points: Optional[int] = None,
                     representation: Union[Representation, str] = 'cart'
                     ) -> pd.DataFrame:
        """
        Export trajectory to pandas DataFrame.

        Parameters:
            times: Specific times to evaluate. If None, uses uniform sampling.
            n_points: Number of uniform samples if times not provided
                (default: config.DEFAULT_SAMPLE_POINTS)
            representation: 'cart' for x..vz columns (default), 'kep' for
                a, e, inc, lan, ap, m0 columns

        Returns:
            DataFrame with a time column followed by state components
        """
        if times is None:
            n_points = config.DEFAULT_SAMPLE_POINTS if n_points is None else n_points
            times = self.get_times(n_points)
        else:
            times = np.asarray(times, dtype=float)

        representation = parse_representation(representation)
        states = self.evaluate(times, representation=representation)
        if representation == Representation.KEPLERIAN:
            df = OrbitalElements.Batch.to_dataframe(states)
        else:
            df = StateVector.Batch.to_dataframe(states)
        df.insert(0, 'time', times)
        return df

    def extend(self, new_tf: float) -> 'Trajectory':
        """
        Continue the arc past tf.

        The elements at tf seed a new Trajectory on [tf, new_tf]; this one
        is left as it is.

        Raises:
            ValueError: If new_tf is not later than tf
        """
        if new_tf <= self.tf:
            raise ValueError(f"new_tf ({new_tf}) must be > current tf ({self.tf})")
        final_state = self.state_at(self.tf, representation='kep')
        return Trajectory(final_state, self.tf, float(new_tf))

    def slice(self, t_start: float, t_end: float) -> 'Trajectory':
        """
        Sub-arc on [t_start, t_end], seeded with the elements at t_start.

        Raises:
            ValueError: If t_start >= t_end or the window leaves [t0, tf]
        """
        if t_start >= t_end:
            raise ValueError(f"t_start ({t_start}) must be < t_end ({t_end})")

        if t_start < self.t0 or t_end > self.tf:
            raise ValueError(
                f"Slice bounds [{t_start}, {t_end}] outside trajectory "
                f"bounds [{self.t0}, {self.tf}]"
            )
        new_initial_state = self.state_at(t_start, representation='kep')
        return Trajectory(new_initial_state, float(t_start), float(t_end))

    def maneuver(self, t: float, delta_v, tf: Optional[float] = None
                 ) -> 'Trajectory':
        """
        Apply an impulsive maneuver at time t.

        Parameters:
            t: Burn time (must be in [t0, tf])
            delta_v: Velocity change [km/s] in the trajectory frame
            tf: End time of the new arc (default: this trajectory's tf)

        Returns:
            New Trajectory starting at t from the post-burn state

        Raises:
            UnsupportedOrbitError: If the burn leaves a bound ellipse
        """
        burned = self.state_at(t).push(as_vector3(delta_v, "delta_v"))
        tf = self.tf if tf is None else tf
        return Trajectory(burned, float(t), float(tf))

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        return (f"Trajectory(frame={self.frame.name}, "
                f"t0={self.t0}, tf={self.tf}, duration={self.duration})")

    def __str__(self):
        return (f"Trajectory around {self.frame.name}: "
                f"t ∈ [{self.t0}, {self.tf}]")

    def __call__(self, t: float,
                 representation: Union[Representation, str] = 'cart'):
        """
        Evaluate trajectory at time t.
        Syntactic sugar for .state_at(t). Allows traj(t) syntax.
        """
        return self.state_at(t, representation=representation)
