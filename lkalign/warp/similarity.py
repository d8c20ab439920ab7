# -*- coding: utf-8 -*-
"""
Similarity Warp - Rotation, uniform scale and translation, four parameters.

Parameters are ``(tx, ty, a, b)``::

    x' = (1 + a) * x - b * y + tx
    y' = b * x + (1 + a) * y + ty

so the scale is ``hypot(1 + a, b)`` and the angle ``atan2(b, 1 + a)``.
The form is linear in the parameters.

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

# Third-party
import numpy as np

# lkalign internal
from lkalign.warp.base import Warp
from lkalign.vocabulary import WarpType


class SimilarityWarp(Warp):
    """Similarity transform in the linear ``(tx, ty, a, b)`` form."""

    warp_type = WarpType.SIMILARITY
    n_parameters = 4

    def matrix(self) -> np.ndarray:
        tx, ty, a, b = self._parameters
        return np.array([
            [1.0 + a, -b, tx],
            [b, 1.0 + a, ty],
            [0.0, 0.0, 1.0],
        ])

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'SimilarityWarp':
        m = np.asarray(matrix, dtype=np.float64)
        m = m / m[2, 2]
        return cls([m[0, 2], m[1, 2], m[0, 0] - 1.0, m[1, 0]])

    @property
    def scale(self) -> float:
        """Uniform scale factor."""
        return float(np.hypot(1.0 + self._parameters[2], self._parameters[3]))

    @property
    def angle(self) -> float:
        """Rotation angle in radians."""
        return float(np.arctan2(self._parameters[3], 1.0 + self._parameters[2]))

    def _jacobian(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        jac = np.zeros((x.shape[0], 2, 4))
        jac[:, 0, 0] = 1.0
        jac[:, 1, 1] = 1.0
        jac[:, 0, 2] = x
        jac[:, 1, 2] = y
        jac[:, 0, 3] = -y
        jac[:, 1, 3] = x
        return jac
