# -*- coding: utf-8 -*-
"""
Input Validation Helpers - Shared image and boundary mode checks.

Provides the validation functions used by the resampler, the gradient
operator and the alignment engine so that every entry point rejects bad
images and unsupported boundary modes with the same messages.

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
from lkalign.exceptions import InvalidInputError, ValidationError
from lkalign.vocabulary import BoundaryMode


BOUNDARY_MODES = tuple(m.value for m in BoundaryMode)


def validate_mode(mode: str, name: str = 'mode') -> str:
    """Validate that *mode* is a supported ``scipy.ndimage`` boundary mode.

    Returns
    -------
    str
        The plain string value of the mode.

    Raises
    ------
    ValidationError
        If ``mode`` is not one of ``BOUNDARY_MODES``.
    """
    value = getattr(mode, 'value', mode)
    if value not in BOUNDARY_MODES:
        raise ValidationError(
            f"{name} must be one of {BOUNDARY_MODES}, got {mode!r}"
        )
    return value


def as_single_channel(image: np.ndarray, name: str = 'image') -> np.ndarray:
    """Return *image* as a 2D array, rejecting multi-channel input.

    Accepts shape ``(rows, cols)`` or ``(rows, cols, 1)``. The data is not
    copied or converted.

    Raises
    ------
    InvalidInputError
        If the image has more than one channel, is not 2D, is empty, or
        is not real-valued numeric.
    """
    arr = np.asarray(image)
    if arr.ndim == 3:
        if arr.shape[2] != 1:
            raise InvalidInputError(
                f"{name} must be single-channel, got {arr.shape[2]} "
                f"channels (shape {arr.shape})"
            )
        arr = arr[:, :, 0]
    if arr.ndim != 2:
        raise InvalidInputError(
            f"{name} must be 2D (rows, cols), got shape {arr.shape}"
        )
    if arr.size == 0:
        raise InvalidInputError(f"{name} is empty (shape {arr.shape})")
    if arr.dtype == bool or not (
        np.issubdtype(arr.dtype, np.integer)
        or np.issubdtype(arr.dtype, np.floating)
    ):
        raise InvalidInputError(
            f"{name} must be real-valued numeric, got dtype {arr.dtype}"
        )
    return arr
