# -*- coding: utf-8 -*-
"""
Lucas-Kanade Co-Registration - Fixed-step forward-additive registration.

Wraps ``ForwardAdditiveAligner`` in the ``CoRegistration`` estimate/apply
interface. ``estimate`` runs exactly ``iterations`` alignment steps from
the initial warp; it applies no convergence test, so the caller controls
the work done per image pair.

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
import logging
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

# lkalign internal
from lkalign._validation import as_single_channel, validate_mode
from lkalign.align.forward_additive import ForwardAdditiveAligner
from lkalign.coregistration.base import CoRegistration, RegistrationResult
from lkalign.exceptions import InvalidInputError, ValidationError
from lkalign.resample import warp_image
from lkalign.versioning import processor_version
from lkalign.vocabulary import WarpType
from lkalign.warp import create_warp, resolve_warp_type
from lkalign.warp.base import Warp

logger = logging.getLogger(__name__)


@processor_version('0.1.0')
class LucasKanadeCoRegistration(CoRegistration):
    """Intensity-based co-registration by forward-additive Lucas-Kanade.

    Parameters
    ----------
    warp_type : WarpType or str
        Motion family to estimate. Default ``'translation'``.
    iterations : int
        Number of Gauss-Newton steps per ``estimate``. Must be >= 1.
        Default 20.
    boundary_mode : str
        Out-of-bounds policy for resampling. Default ``'nearest'``.
    solver : str
        ``'lstsq'`` or ``'strict'``, see ``ForwardAdditiveAligner``.

    Raises
    ------
    ValidationError
        If ``iterations`` < 1 or a setting is not recognized.

    Examples
    --------
    >>> coreg = LucasKanadeCoRegistration(warp_type='affine', iterations=30)
    >>> result = coreg.estimate(fixed_img, moving_img)
    >>> aligned = coreg.apply(moving_img, result)
    """

    def __init__(
        self,
        warp_type: Union[WarpType, str] = WarpType.TRANSLATION,
        iterations: int = 20,
        boundary_mode: str = 'nearest',
        solver: str = 'lstsq',
    ) -> None:
        if isinstance(iterations, bool) or not isinstance(iterations, int):
            raise ValidationError(
                f"iterations must be an integer, got {type(iterations).__name__}"
            )
        if iterations < 1:
            raise ValidationError(f"iterations must be >= 1, got {iterations}")
        self._warp_type = resolve_warp_type(warp_type)
        self._iterations = iterations
        self._boundary_mode = validate_mode(boundary_mode, name='boundary_mode')
        self._aligner = ForwardAdditiveAligner(
            warp_type=self._warp_type,
            boundary_mode=self._boundary_mode,
            solver=solver,
        )

    def estimate(
        self,
        fixed: np.ndarray,
        moving: np.ndarray,
        initial: Optional[Warp] = None,
    ) -> RegistrationResult:
        """Run ``iterations`` alignment steps and report the result.

        Raises
        ------
        InvalidInputError
            If an image is not single-channel or *initial* is of another
            motion family.
        SingularSystemError
            With the strict solver on an ill-conditioned step.
        """
        if initial is None:
            warp = create_warp(self._warp_type)
        elif initial.warp_type != self._warp_type:
            raise InvalidInputError(
                f"initial warp is {initial.warp_type.value}, "
                f"expected {self._warp_type.value}"
            )
        else:
            warp = initial.copy()

        self._aligner.prepare(fixed, moving)
        residuals = [self._aligner.align(warp) for _ in range(self._iterations)]

        fixed_2d = self._aligner.template_image
        aligned = warp_image(
            self._aligner.target_image, warp,
            output_shape=fixed_2d.shape, mode=self._boundary_mode,
        )
        rms = float(np.sqrt(np.mean((fixed_2d - aligned) ** 2)))
        logger.debug(
            "%s registration after %d steps: rms=%.6g",
            self._warp_type.value, self._iterations, rms,
        )

        return RegistrationResult(
            warp_type=self._warp_type,
            parameters=warp.get_parameters(),
            residuals=residuals,
            residual_rms=rms,
            metadata={
                'method': 'forward_additive_lucas_kanade',
                'iterations': self._iterations,
                'boundary_mode': self._boundary_mode,
                'fixed_shape': tuple(fixed_2d.shape),
                'moving_shape': tuple(self._aligner.target_image.shape),
            },
        )

    def apply(
        self,
        moving: np.ndarray,
        result: RegistrationResult,
        output_shape: Optional[Tuple[int, int]] = None,
    ) -> np.ndarray:
        """Resample *moving* into the fixed frame.

        Parameters
        ----------
        moving : np.ndarray
            Single-channel image with the geometry of the estimated moving
            image.
        result : RegistrationResult
            Result of a previous ``estimate``.
        output_shape : Optional[Tuple[int, int]]
            Output ``(rows, cols)``. Defaults to the fixed image shape
            recorded in the result, else the moving image shape.
        """
        image = as_single_channel(moving, name='moving')
        if output_shape is None:
            output_shape = result.metadata.get('fixed_shape', image.shape)
        return warp_image(
            image, result.warp(),
            output_shape=output_shape, mode=self._boundary_mode,
        )
