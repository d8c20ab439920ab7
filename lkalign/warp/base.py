# -*- coding: utf-8 -*-
"""
Warp Base Class - Abstract interface for parametric motion models.

Defines the ``Warp`` ABC that every motion family implements. A warp owns a
dense parameter vector of length ``n_parameters`` and maps image
coordinates ``(x, y)`` (column, row) through a 3x3 homogeneous matrix built
from those parameters. The zero vector is the identity for every family,
so the forward-additive update ``p <- p + delta`` is well defined.

The alignment engine consumes the following capabilities:

- ``n_parameters`` / ``warp_type``: static description of the family.
- ``set_identity()``, ``get_parameters()``, ``set_parameters()``.
- ``apply(points)``: map points through the current warp.
- ``jacobian(points)``: derivative of the mapped point with respect to the
  parameters, shape ``(2, P)`` per point.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
from abc import ABC, abstractmethod
from typing import Optional, Tuple

# Third-party
import numpy as np

# lkalign internal
from lkalign.exceptions import SingularSystemError, ValidationError
from lkalign.vocabulary import WarpType

# Homogeneous scale below which a projected point is treated as at infinity.
_W_EPSILON = 1e-12


def as_points(points: np.ndarray) -> Tuple[np.ndarray, bool]:
    """Coerce *points* to a float64 ``(N, 2)`` array.

    Parameters
    ----------
    points : array_like
        A single point ``(x, y)`` or an ``(N, 2)`` array of points.

    Returns
    -------
    Tuple[np.ndarray, bool]
        The ``(N, 2)`` array and whether the input was a single point.

    Raises
    ------
    ValidationError
        If the input cannot be interpreted as 2D points.
    """
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim == 1 and arr.shape[0] == 2:
        return arr.reshape(1, 2), True
    if arr.ndim == 2 and arr.shape[1] == 2:
        return arr, False
    raise ValidationError(
        f"Points must have shape (2,) or (N, 2), got {arr.shape}"
    )


class Warp(ABC):
    """Abstract parametric warp of 2D image coordinates.

    Parameters
    ----------
    parameters : array_like, optional
        Initial parameter vector of length ``n_parameters``. If omitted the
        warp starts at identity.

    Attributes
    ----------
    warp_type : WarpType
        Motion family of the subclass.
    n_parameters : int
        Number of free parameters ``P``.
    point_independent_jacobian : bool
        True when ``jacobian`` returns the same matrix for every point,
        which lets the engine evaluate it once per step.
    """

    warp_type: WarpType
    n_parameters: int
    point_independent_jacobian: bool = False

    def __init__(self, parameters: Optional[np.ndarray] = None) -> None:
        self._parameters = np.zeros(self.n_parameters, dtype=np.float64)
        if parameters is not None:
            self.set_parameters(parameters)

    # -----------------------------------------------------------------
    # Parameter state
    # -----------------------------------------------------------------
    def set_identity(self) -> None:
        """Reset the parameters to the identity transform."""
        self._parameters = np.zeros(self.n_parameters, dtype=np.float64)

    def get_parameters(self) -> np.ndarray:
        """Return a copy of the parameter vector, shape ``(P,)``."""
        return self._parameters.copy()

    def set_parameters(self, parameters: np.ndarray) -> None:
        """Replace the parameter vector.

        Column vectors of shape ``(P, 1)`` are accepted and flattened.

        Raises
        ------
        ValidationError
            If the number of values is not ``n_parameters``.
        """
        values = np.asarray(parameters, dtype=np.float64).reshape(-1)
        if values.size != self.n_parameters:
            raise ValidationError(
                f"{type(self).__name__} expects {self.n_parameters} "
                f"parameters, got {values.size}"
            )
        self._parameters = values.copy()

    @property
    def parameters(self) -> np.ndarray:
        """Copy of the parameter vector (alias of ``get_parameters``)."""
        return self.get_parameters()

    # -----------------------------------------------------------------
    # Geometry
    # -----------------------------------------------------------------
    @abstractmethod
    def matrix(self) -> np.ndarray:
        """Homogeneous 3x3 matrix acting on column vectors ``[x, y, 1]``."""
        ...

    @classmethod
    @abstractmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'Warp':
        """Build a warp of this family from a 3x3 homogeneous matrix."""
        ...

    @abstractmethod
    def _jacobian(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Parameter Jacobian at coordinate arrays *x*, *y*.

        Returns an array of shape ``(N, 2, P)``.
        """
        ...

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Map points through the warp.

        Parameters
        ----------
        points : array_like
            ``(x, y)`` or ``(N, 2)`` array of ``(x, y)`` points.

        Returns
        -------
        np.ndarray
            Warped points with the same shape as the input.
        """
        pts, single = as_points(points)
        ones = np.ones((pts.shape[0], 1))
        mapped = np.hstack([pts, ones]) @ self.matrix().T
        w = mapped[:, 2:3]
        w = np.where(np.abs(w) < _W_EPSILON, _W_EPSILON, w)
        result = mapped[:, :2] / w
        return result[0] if single else result

    def __call__(self, points: np.ndarray) -> np.ndarray:
        return self.apply(points)

    def jacobian(self, points: Optional[np.ndarray] = None) -> np.ndarray:
        """Derivative of the warped point with respect to the parameters.

        Parameters
        ----------
        points : array_like, optional
            ``(x, y)`` or ``(N, 2)``. Defaults to the origin.

        Returns
        -------
        np.ndarray
            ``(2, P)`` for a single point, ``(N, 2, P)`` otherwise.
        """
        if points is None:
            points = (0.0, 0.0)
        pts, single = as_points(points)
        jac = self._jacobian(pts[:, 0], pts[:, 1])
        return jac[0] if single else jac

    def inverse(self) -> 'Warp':
        """Return a new warp of the same family mapping back the other way.

        Raises
        ------
        SingularSystemError
            If the warp matrix is not invertible.
        """
        mat = self.matrix()
        det = np.linalg.det(mat)
        if not np.isfinite(det) or abs(det) < _W_EPSILON:
            raise SingularSystemError(
                f"{type(self).__name__} is not invertible (det={det:g})"
            )
        return type(self).from_matrix(np.linalg.inv(mat))

    def copy(self) -> 'Warp':
        """Independent copy with the same parameters."""
        return type(self)(self._parameters)

    def __repr__(self) -> str:
        values = ', '.join(f"{v:.6g}" for v in self._parameters)
        return f"{type(self).__name__}([{values}])"
