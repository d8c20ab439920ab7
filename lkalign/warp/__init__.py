# -*- coding: utf-8 -*-
"""
Warp Module - Parametric motion models for image alignment.

Provides one ``Warp`` subclass per motion family and a small factory for
building them by ``WarpType``. Every warp is the identity at the zero
parameter vector, maps ``(x, y)`` points (column, row), and exposes the
parameter Jacobian consumed by the alignment engine.

Key Classes
-----------
- Warp: Abstract base class for motion models
- TranslationWarp: 2 parameters ``(tx, ty)``
- EuclideanWarp: 3 parameters ``(tx, ty, theta)``
- SimilarityWarp: 4 parameters ``(tx, ty, a, b)``
- AffineWarp: 6 parameters (Baker-Matthews)
- ProjectiveWarp: 8 parameters (homography)

Usage
-----
    >>> from lkalign.warp import create_warp
    >>> w = create_warp('euclidean', [5.0, 5.0, 0.1])
    >>> w.apply((10.0, 15.0))

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
from typing import Dict, Optional, Type, Union

# Third-party
import numpy as np

# lkalign internal
from lkalign.exceptions import ValidationError
from lkalign.vocabulary import WarpType
from lkalign.warp.base import Warp
from lkalign.warp.translation import TranslationWarp
from lkalign.warp.euclidean import EuclideanWarp
from lkalign.warp.similarity import SimilarityWarp
from lkalign.warp.affine import AffineWarp
from lkalign.warp.projective import ProjectiveWarp

WARP_CLASSES: Dict[WarpType, Type[Warp]] = {
    cls.warp_type: cls
    for cls in (
        TranslationWarp,
        EuclideanWarp,
        SimilarityWarp,
        AffineWarp,
        ProjectiveWarp,
    )
}


def resolve_warp_type(warp_type: Union[WarpType, str]) -> WarpType:
    """Normalize a ``WarpType`` member or its string value.

    Raises
    ------
    ValidationError
        If *warp_type* does not name a supported motion family.
    """
    try:
        return WarpType(warp_type)
    except ValueError:
        allowed = [t.value for t in WarpType]
        raise ValidationError(
            f"Unknown warp type {warp_type!r}; expected one of {allowed}"
        ) from None


def warp_class(warp_type: Union[WarpType, str]) -> Type[Warp]:
    """Return the ``Warp`` subclass for *warp_type*."""
    return WARP_CLASSES[resolve_warp_type(warp_type)]


def create_warp(
    warp_type: Union[WarpType, str],
    parameters: Optional[np.ndarray] = None,
) -> Warp:
    """Instantiate a warp, at identity unless *parameters* are given."""
    return warp_class(warp_type)(parameters)


__all__ = [
    'Warp',
    'TranslationWarp',
    'EuclideanWarp',
    'SimilarityWarp',
    'AffineWarp',
    'ProjectiveWarp',
    'WARP_CLASSES',
    'create_warp',
    'resolve_warp_type',
    'warp_class',
]
