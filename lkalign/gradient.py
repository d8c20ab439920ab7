# -*- coding: utf-8 -*-
"""
Image Gradients - Sobel derivatives in intensity-per-pixel units.

The 3x3 Sobel kernel combines a central difference ``[-1, 0, 1]`` with a
``[1, 2, 1]`` smoothing pass, so its raw response to a unit ramp is 8.
Scaling by ``SOBEL_NORMALIZATION = 1/8`` brings the result back to
intensity change per pixel, which is what the Gauss-Newton update expects.

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
from typing import Tuple

# Third-party
import numpy as np
from scipy.ndimage import sobel

# lkalign internal
from lkalign._validation import as_single_channel, validate_mode

SOBEL_NORMALIZATION = 0.125


def sobel_gradients(
    image: np.ndarray,
    mode: str = 'mirror',
) -> Tuple[np.ndarray, np.ndarray]:
    """Compute normalized x (column) and y (row) derivatives.

    Parameters
    ----------
    image : np.ndarray
        Single-channel image. Integer input is promoted to float64; float
        input keeps its precision.
    mode : str
        Boundary mode for the convolution. Default ``'mirror'``, which
        reflects about the edge pixel without repeating it.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(gx, gy)``, each with the image shape.
    """
    img = as_single_channel(image)
    mode = validate_mode(mode)
    if not np.issubdtype(img.dtype, np.floating):
        img = img.astype(np.float64)

    gx = sobel(img, axis=1, mode=mode) * SOBEL_NORMALIZATION
    gy = sobel(img, axis=0, mode=mode) * SOBEL_NORMALIZATION
    return gx.astype(img.dtype, copy=False), gy.astype(img.dtype, copy=False)
