# -*- coding: utf-8 -*-
"""
Translation Warp - Pure 2D shift, two parameters.

Parameters are ``(tx, ty)`` and a point maps as ``(x + tx, y + ty)``. The
parameter Jacobian is the 2x2 identity everywhere.

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


class TranslationWarp(Warp):
    """Translation by ``(tx, ty)`` pixels."""

    warp_type = WarpType.TRANSLATION
    n_parameters = 2
    point_independent_jacobian = True

    def matrix(self) -> np.ndarray:
        tx, ty = self._parameters
        return np.array([
            [1.0, 0.0, tx],
            [0.0, 1.0, ty],
            [0.0, 0.0, 1.0],
        ])

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> 'TranslationWarp':
        m = np.asarray(matrix, dtype=np.float64)
        m = m / m[2, 2]
        return cls([m[0, 2], m[1, 2]])

    def _jacobian(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        jac = np.zeros((x.shape[0], 2, 2))
        jac[:, 0, 0] = 1.0
        jac[:, 1, 1] = 1.0
        return jac
