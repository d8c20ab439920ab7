# -*- coding: utf-8 -*-
"""
Image Resampling - Inverse-mapping bilinear warping of single-channel images.

For every destination pixel ``(x, y)`` the resampler evaluates the warp at
that location to obtain a (possibly fractional) source coordinate and
samples the source image there with bilinear interpolation
(``scipy.ndimage.map_coordinates`` with ``order=1``).

Out-of-bounds policy
--------------------
Source coordinates outside the image follow the boundary ``mode``:

- ``'nearest'`` (default): clamp to the closest edge pixel.
- ``'constant'``: use ``fill_value``.
- ``'reflect'``: mirror about the image edge, repeating the edge pixel.
- ``'mirror'``: mirror about the edge pixel without repeating it.
- ``'wrap'``: periodic continuation.

Clamping keeps border pixels close to their true intensity under small
displacements, which keeps the alignment error small near image borders.

Dependencies
------------
scipy

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
from typing import Optional, Tuple

# Third-party
import numpy as np
from scipy.ndimage import map_coordinates

# lkalign internal
from lkalign._validation import as_single_channel, validate_mode
from lkalign.exceptions import ValidationError
from lkalign.warp.base import Warp


def pixel_grid(shape: Tuple[int, int]) -> np.ndarray:
    """All pixel centers of an image of *shape* as ``(N, 2)`` ``(x, y)``.

    Points are listed in row-major order, matching ``image.ravel()``.
    """
    rows, cols = shape
    ys, xs = np.mgrid[0:rows, 0:cols]
    return np.column_stack([xs.ravel(), ys.ravel()]).astype(np.float64)


def sample_bilinear(
    image: np.ndarray,
    x: np.ndarray,
    y: np.ndarray,
    mode: str = 'nearest',
    fill_value: float = 0.0,
    output: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Bilinearly sample *image* at fractional coordinates.

    Parameters
    ----------
    image : np.ndarray
        Single-channel image, shape ``(rows, cols)``.
    x, y : np.ndarray
        Column and row coordinates, any matching shape.
    mode : str
        Boundary mode, see module docstring.
    fill_value : float
        Value used outside the image when ``mode='constant'``.
    output : np.ndarray, optional
        Preallocated array with the shape of *x* to write the samples into.

    Returns
    -------
    np.ndarray
        Samples with the shape of *x*, dtype of *image*.
    """
    img = as_single_channel(image)
    mode = validate_mode(mode)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValidationError(
            f"x and y must have the same shape, got {x.shape} and {y.shape}"
        )
    return map_coordinates(
        img,
        [y, x],
        order=1,
        mode=mode,
        cval=fill_value,
        output=output,
    )


def warp_image(
    source: np.ndarray,
    warp: Warp,
    output_shape: Optional[Tuple[int, int]] = None,
    mode: str = 'nearest',
    fill_value: float = 0.0,
) -> np.ndarray:
    """Resample *source* under *warp* by inverse mapping.

    Output pixel ``(x, y)`` receives ``source(warp.apply((x, y)))``. The
    warp therefore maps destination (template) coordinates to source
    (target) coordinates and is applied as given, without inversion.

    Parameters
    ----------
    source : np.ndarray
        Single-channel image, shape ``(rows, cols)`` or ``(rows, cols, 1)``.
    warp : Warp
        Current warp estimate.
    output_shape : Optional[Tuple[int, int]]
        Destination ``(rows, cols)``. If None, uses the source shape.
    mode : str
        Boundary mode for out-of-bounds source coordinates.
    fill_value : float
        Value for out-of-bounds samples when ``mode='constant'``.

    Returns
    -------
    np.ndarray
        Resampled image of shape ``output_shape``, dtype of *source*.
    """
    img = as_single_channel(source, name='source')
    if output_shape is None:
        output_shape = img.shape
    out_rows, out_cols = output_shape

    src = warp.apply(pixel_grid((out_rows, out_cols)))
    src_x = src[:, 0].reshape(out_rows, out_cols)
    src_y = src[:, 1].reshape(out_rows, out_cols)

    return sample_bilinear(img, src_x, src_y, mode=mode, fill_value=fill_value)
