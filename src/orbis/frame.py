'''ReferenceFrame class definition
A central body's gravitational parameter and the orthonormal basis that
anchors every vector quantity of the package'''

import numpy as np
from dataclasses import dataclass, field
from typing import Optional
from .config import config
from .utils import ValidationError, as_vector3


@dataclass(frozen=True, eq=False)
class ReferenceFrame:
    """
    Immutable reference frame attached to a central body.

    Attributes
    ----------
    mu : float
        Gravitational parameter of the central body [km³/s²]
    i : np.ndarray
        Unit vector towards the intersection of the reference meridian and
        the equator (reference direction)
    j : np.ndarray
        Unit vector completing the right-handed triple, j = k × i
    k : np.ndarray
        Unit vector towards the north pole (polar axis)
    name : str, optional
        Identifier for printing

    Raises
    ------
    ValidationError
        If mu is not positive and finite, or i, j, k do not form an
        orthonormal right-handed basis (within config.FRAME_TOL). The basis
        is never corrected.

    Notes
    -----
    Frames are shared by reference between every StateVector and
    OrbitalElements built against them. Vectors are stored as read-only
    arrays, so a frame can be read from several threads without locking.
    """
    mu: float
    i: np.ndarray
    j: np.ndarray
    k: np.ndarray
    name: Optional[str] = field(default=None)

    def __post_init__(self):
        #Validate parameters
        mu = float(self.mu)
        if not np.isfinite(mu) or mu <= 0:
            raise ValidationError(
                f"Gravitational parameter must be positive, got {self.mu}")
        i = as_vector3(self.i, "i")
        j = as_vector3(self.j, "j")
        k = as_vector3(self.k, "k")

        tol = config.FRAME_TOL
        for (name_a, a), (name_b, b) in (
                (("i", i), ("j", j)), (("i", i), ("k", k)), (("j", j), ("k", k))):
            if abs(np.dot(a, b)) > tol:
                raise ValidationError(
                    f"Basis vectors {name_a} and {name_b} are not orthogonal "
                    f"({name_a}·{name_b} = {np.dot(a, b):.3e})")
        for name, vec in (("i", i), ("j", j), ("k", k)):
            if abs(np.linalg.norm(vec) - 1.0) > tol:
                raise ValidationError(
                    f"Basis vector {name} is not unit length "
                    f"(|{name}| = {np.linalg.norm(vec):.15f})")
        if np.linalg.norm(np.cross(i, j) - k) > tol:
            raise ValidationError(
                "Basis is not right-handed: cross(i, j) != k")

        basis = np.column_stack([i, j, k])
        basis.flags.writeable = False
        # frozen dataclass: bypass __setattr__ for normalized storage
        object.__setattr__(self, 'mu', mu)
        object.__setattr__(self, 'i', i)
        object.__setattr__(self, 'j', j)
        object.__setattr__(self, 'k', k)
        object.__setattr__(self, '_basis', basis)

    # ========== ALTERNATE CONSTRUCTORS ==========
    @classmethod
    def standard(cls, mu: float, name: Optional[str] = None) -> "ReferenceFrame":
        """Frame whose basis is the identity (x, y, z)."""
        return cls(mu, np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0]),
                   np.array([0.0, 0.0, 1.0]), name=name)

    @classmethod
    def from_pole(cls, mu: float, pole, reference,
                  name: Optional[str] = None) -> "ReferenceFrame":
        """
        Build a frame from its polar axis and reference direction.

        The third axis is derived as j = pole × reference. Both inputs must
        already be orthogonal unit vectors.

        Parameters
        ----------
        mu : float
            Gravitational parameter [km³/s²]
        pole : array-like
            Polar axis (becomes k)
        reference : array-like
            Reference direction in the equatorial plane (becomes i)
        """
        k = as_vector3(pole, "pole")
        i = as_vector3(reference, "reference")
        return cls(mu, i, np.cross(k, i), k, name=name)

    # ========== PROPERTY ACCESS ==========
    @property
    def basis(self) -> np.ndarray:
        """3x3 matrix with columns i, j, k (read-only)"""
        return self._basis

    @property
    def reference(self) -> np.ndarray:
        """Reference direction (alias of i)"""
        return self.i

    @property
    def right(self) -> np.ndarray:
        """Alias of j"""
        return self.j

    @property
    def up(self) -> np.ndarray:
        """Polar axis (alias of k)"""
        return self.k

    # ========== UTILITY METHODS ==========
    def reproject(self, vector, other_frame: "ReferenceFrame") -> np.ndarray:
        """
        Re-express a vector given in this frame in another frame's basis.

        The vector is projected onto this frame's i, j, k and recombined
        using other_frame's i, j, k. Both frames are assumed to share an
        origin (pure rotation).

        Parameters
        ----------
        vector : array-like
            3-vector expressed in this frame
        other_frame : ReferenceFrame
            Target frame

        Returns
        -------
        np.ndarray
            Vector components in other_frame
        """
        vec = as_vector3(vector)
        return other_frame.basis @ (self.basis.T @ vec)

    def isclose(self, other: "ReferenceFrame", rtol: float = None,
                atol: float = None) -> bool:
        """Compare mu and basis vectors within tolerances."""
        rtol = config.EQUALITY_RTOL if rtol is None else rtol
        atol = config.EQUALITY_ATOL if atol is None else atol
        return bool(
            np.isclose(self.mu, other.mu, rtol=rtol, atol=atol) and
            np.allclose(self.basis, other.basis, rtol=rtol, atol=atol)
        )

    # ========== SPECIAL METHODS ==========
    def __eq__(self, other) -> bool:
        if not isinstance(other, ReferenceFrame):
            return NotImplemented
        if self is other:
            return True
        return self.isclose(other) and self.name == other.name

    def __hash__(self) -> int:
        # Round to tolerance for hashing (similar to OrbitalElements)
        decimals = config.HASH_DECIMALS
        basis_rounded = tuple(round(x, decimals) for x in self.basis.flat)
        return hash((round(self.mu, decimals), basis_rounded, self.name))

    def __repr__(self) -> str:
        return (f"ReferenceFrame(mu={self.mu!r}, i={self.i.tolist()}, "
                f"j={self.j.tolist()}, k={self.k.tolist()}, name={self.name!r})")

    def __str__(self) -> str:
        name_str = self.name if self.name else "unnamed"
        return (f"Reference Frame ({name_str}):\n"
                f"  mu = {self.mu:.6e} km³/s²\n"
                f"  i  = [{self.i[0]: .6f}, {self.i[1]: .6f}, {self.i[2]: .6f}]\n"
                f"  j  = [{self.j[0]: .6f}, {self.j[1]: .6f}, {self.j[2]: .6f}]\n"
                f"  k  = [{self.k[0]: .6f}, {self.k[1]: .6f}, {self.k[2]: .6f}]")
