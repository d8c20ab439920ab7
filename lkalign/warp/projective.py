# -*- coding: utf-8 -*-
"""
Projective Warp - Planar homography, eight parameters.

Extends the affine parameterization with two perspective terms::

    H = [[1 + p1, p3,     p5],
         [p2,     1 + p4, p6],
         [p7,     p8,     1 ]]

Points are mapped as ``(u / w, v / w)`` with ``[u, v, w] = H @ [x, y, 1]``.
The Jacobian depends on the point through both the coordinates and the
homogeneous scale ``w``.

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


class ProjectiveWarp(Warp):
    """Homography normalized so that ``H[2, 2] == 1``."""

    warp_type = WarpType.PROJECTIVE
    n_parameters = 8

    def matrix(self) -> np.ndarray:
        p1, p2, p3, p4, p5, p6, p7, p8 = self._parameters
        return np.array([
            [1.0 + p1, p3, p5],
            [p2, 1.0 + p4, p6],
            [p7, p8, 1.0],
        ])

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'ProjectiveWarp':
        m = np.asarray(matrix, dtype=np.float64)
        m = m / m[2, 2]
        return cls([
            m[0, 0] - 1.0, m[1, 0],
            m[0, 1], m[1, 1] - 1.0,
            m[0, 2], m[1, 2],
            m[2, 0], m[2, 1],
        ])

    def _jacobian(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        h = self.matrix()
        u = h[0, 0] * x + h[0, 1] * y + h[0, 2]
        v = h[1, 0] * x + h[1, 1] * y + h[1, 2]
        w = h[2, 0] * x + h[2, 1] * y + h[2, 2]
        xw, yw, inv_w = x / w, y / w, 1.0 / w
        xp, yp = u / w, v / w

        jac = np.zeros((x.shape[0], 2, 8))
        jac[:, 0, 0] = xw
        jac[:, 1, 1] = xw
        jac[:, 0, 2] = yw
        jac[:, 1, 3] = yw
        jac[:, 0, 4] = inv_w
        jac[:, 1, 5] = inv_w
        jac[:, 0, 6] = -xw * xp
        jac[:, 1, 6] = -xw * yp
        jac[:, 0, 7] = -yw * xp
        jac[:, 1, 7] = -yw * yp
        return jac
