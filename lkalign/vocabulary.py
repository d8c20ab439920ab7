# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for lkalign.

Defines the single source of truth for controlled vocabularies used across
the package: motion families, resampling boundary modes, and linear solver
strategies. Members subclass ``str`` so plain string values compare equal
and can be passed anywhere an enum member is accepted.

Author
------
Steven Siebert

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

from enum import Enum


class WarpType(str, Enum):
    """Supported motion families.

    Each member names one ``Warp`` subclass in :mod:`lkalign.warp`.
    """

    TRANSLATION = "translation"
    EUCLIDEAN = "euclidean"
    SIMILARITY = "similarity"
    AFFINE = "affine"
    PROJECTIVE = "projective"


class BoundaryMode(str, Enum):
    """Out-of-bounds policy for resampling and gradient filtering.

    Values are passed straight through to ``scipy.ndimage``.
    """

    NEAREST = "nearest"
    CONSTANT = "constant"
    REFLECT = "reflect"
    MIRROR = "mirror"
    WRAP = "wrap"


class SolverType(str, Enum):
    """Strategy for solving the Gauss-Newton normal equations."""

    LSTSQ = "lstsq"
    STRICT = "strict"
