# -*- coding: utf-8 -*-
"""
Affine Warp - General 2D affine motion, six parameters.

Uses the Baker-Matthews parameterization ``(p1, ..., p6)``::

    x' = (1 + p1) * x + p3 * y + p5
    y' = p2 * x + (1 + p4) * y + p6

Based on
--------
Baker, S. and Matthews, I. "Lucas-Kanade 20 years on: A unifying
framework." IJCV 56.3 (2004): 221-255.

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


class AffineWarp(Warp):
    """Affine transform with identity at the zero parameter vector."""

    warp_type = WarpType.AFFINE
    n_parameters = 6

    def matrix(self) -> np.ndarray:
        p1, p2, p3, p4, p5, p6 = self._parameters
        return np.array([
            [1.0 + p1, p3, p5],
            [p2, 1.0 + p4, p6],
            [0.0, 0.0, 1.0],
        ])

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'AffineWarp':
        m = np.asarray(matrix, dtype=np.float64)
        m = m / m[2, 2]
        return cls([
            m[0, 0] - 1.0, m[1, 0],
            m[0, 1], m[1, 1] - 1.0,
            m[0, 2], m[1, 2],
        ])

    def _jacobian(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        # [[x, 0, y, 0, 1, 0],
        #  [0, x, 0, y, 0, 1]]
        jac = np.zeros((x.shape[0], 2, 6))
        jac[:, 0, 0] = x
        jac[:, 1, 1] = x
        jac[:, 0, 2] = y
        jac[:, 1, 3] = y
        jac[:, 0, 4] = 1.0
        jac[:, 1, 5] = 1.0
        return jac
