"""
Propagation and maneuver capabilities shared by the state representations.

Both StateVector and OrbitalElements can tell their future state (Tick);
StateVector additionally accepts impulsive velocity changes (Push). These are
structural interfaces: any object with a matching method qualifies.
"""

from typing import Protocol, TypeVar, runtime_checkable
import numpy as np

T = TypeVar("T", bound="Tick")
P = TypeVar("P", bound="Push")


@runtime_checkable
class Tick(Protocol):
    """Objects that can return their state dt seconds later."""

    def tick(self, dt: float) -> "Tick":
        ...


@runtime_checkable
class Push(Protocol):
    """Objects that accept an instantaneous velocity change."""

    def push(self, delta_v) -> "Push":
        ...


def propagate(state: T, dt: float, steps: int = 1) -> T:
    """
    Advance a state by dt in equal sub-steps.

    With the analytic propagators the result does not depend on the
    number of steps; steps only matters for approximate methods.

    Parameters
    ----------
    state : Tick
        StateVector or OrbitalElements
    dt : float
        Total time step [s]
    steps : int, optional
        Number of equal sub-steps (default 1)
    """
    if not isinstance(state, Tick):
        raise TypeError(f"{type(state).__name__} does not implement tick()")
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")
    h = dt/steps
    for _ in range(steps):
        state = state.tick(h)
    return state


def propagate_many(state: T, times) -> list:
    """
    States at several offsets from the given state.

    Each entry is ticked directly from the initial state, so errors do not
    accumulate between entries.

    Parameters
    ----------
    state : Tick
    times : array-like
        Offsets [s] from the epoch of state

    Returns
    -------
    list
        One state per offset, same type as the input
    """
    if not isinstance(state, Tick):
        raise TypeError(f"{type(state).__name__} does not implement tick()")
    return [state.tick(float(t)) for t in np.atleast_1d(times)]


def apply_maneuver(state: P, delta_v) -> P:
    """Apply an impulsive velocity change to any Push-capable state."""
    if not isinstance(state, Push):
        raise TypeError(f"{type(state).__name__} does not implement push()")
    return state.push(delta_v)
