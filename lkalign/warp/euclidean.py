# -*- coding: utf-8 -*-
"""
Euclidean Warp - Rotation plus translation, three parameters.

Parameters are ``(tx, ty, theta)`` with ``theta`` in radians::

    x' = cos(theta) * x - sin(theta) * y + tx
    y' = sin(theta) * x + cos(theta) * y + ty

The rotation is about the image origin (pixel ``(0, 0)``), so the
Jacobian column for ``theta`` depends on the point.

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


class EuclideanWarp(Warp):
    """Rigid motion: rotation by ``theta`` then translation by ``(tx, ty)``."""

    warp_type = WarpType.EUCLIDEAN
    n_parameters = 3

    def matrix(self) -> np.ndarray:
        tx, ty, theta = self._parameters
        c, s = np.cos(theta), np.sin(theta)
        return np.array([
            [c, -s, tx],
            [s, c, ty],
            [0.0, 0.0, 1.0],
        ])

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'EuclideanWarp':
        m = np.asarray(matrix, dtype=np.float64)
        m = m / m[2, 2]
        theta = np.arctan2(m[1, 0], m[0, 0])
        return cls([m[0, 2], m[1, 2], theta])

    def _jacobian(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        theta = self._parameters[2]
        c, s = np.cos(theta), np.sin(theta)
        jac = np.zeros((x.shape[0], 2, 3))
        jac[:, 0, 0] = 1.0
        jac[:, 1, 1] = 1.0
        jac[:, 0, 2] = -s * x - c * y
        jac[:, 1, 2] = c * x - s * y
        return jac
