# -*- coding: utf-8 -*-
"""
Forward-Additive Alignment - Classic Lucas-Kanade image registration step.

Aligns a target image to a template image by minimizing the sum of squared
intensity differences between the template and the warped target with
respect to the warp parameters. Baker and Matthews call this the
forward-additive algorithm: the target is warped forward onto the template
frame and parameter updates are summed onto the current estimate.

One call to ``align`` performs a single Gauss-Newton step:

1. Resample the target and its precomputed gradients under the warp.
2. Form the error image ``template - warped_target``.
3. Build the steepest-descent rows ``[gx, gy] @ dW/dp`` for every pixel.
4. Accumulate ``H = sum(sd^T sd)`` and ``b = sum(sd^T e)``.
5. Solve ``H delta = b`` and set ``p <- p + delta``.

Stopping criteria and iteration counts are left to the caller.

Based on
--------
[1] Lucas, B. D. and Kanade, T. "An iterative image registration technique
    with an application to stereo vision." IJCAI 81 (1981).
[2] Baker, S. and Matthews, I. "Lucas-Kanade 20 years on: A unifying
    framework." IJCV 56.3 (2004): 221-255.

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
from typing import Annotated, Optional

# Third-party
import numpy as np

# lkalign internal
from lkalign._validation import as_single_channel
from lkalign.align.base import Aligner
from lkalign.exceptions import (
    AlignmentStateError,
    InvalidInputError,
    SingularSystemError,
)
from lkalign.gradient import sobel_gradients
from lkalign.params import Desc, Options, Range
from lkalign.resample import pixel_grid, sample_bilinear
from lkalign.versioning import processor_version
from lkalign.vocabulary import BoundaryMode, SolverType, WarpType
from lkalign.warp import warp_class
from lkalign.warp.base import Warp

logger = logging.getLogger(__name__)


def _readonly(arr: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if arr is None:
        return None
    view = arr.view()
    view.flags.writeable = False
    return view


@processor_version('1.0.0')
class ForwardAdditiveAligner(Aligner):
    """Forward-additive Lucas-Kanade alignment engine.

    Parameters
    ----------
    warp_type : str
        Motion family of the warps this engine refines (``'translation'``,
        ``'euclidean'``, ``'similarity'``, ``'affine'``, ``'projective'``).
        Fixes the parameter count ``P``. Required.
    boundary_mode : str
        Out-of-bounds policy when resampling the target. Default
        ``'nearest'`` (clamp to edge).
    fill_value : float
        Out-of-bounds intensity when ``boundary_mode='constant'``.
    gradient_mode : str
        Boundary mode of the Sobel filter. Default ``'mirror'`` (edge
        pixel not repeated).
    solver : str
        ``'lstsq'`` (default) solves the normal equations in the
        minimum-norm least-squares sense, so parameters the image cannot
        observe are left unchanged. ``'strict'`` raises
        ``SingularSystemError`` when the Hessian condition number exceeds
        ``max_condition``.
    max_condition : float
        Condition number limit for the strict solver. Default ``1e12``.
    precision : str
        Working image dtype, ``'float64'`` (default) or ``'float32'``. The
        Hessian is always accumulated in float64.

    Examples
    --------
    >>> from lkalign import ForwardAdditiveAligner, create_warp
    >>> warp = create_warp('translation')
    >>> aligner = ForwardAdditiveAligner(warp_type='translation')
    >>> aligner.prepare(template, target)
    >>> for _ in range(20):
    ...     residual = aligner.align(warp)
    >>> warp.get_parameters()
    """

    warp_type: Annotated[str, Options(*WarpType),
                         Desc('Motion family to estimate')]
    boundary_mode: Annotated[str, Options(*BoundaryMode),
                             Desc('Out-of-bounds policy for resampling')] = 'nearest'
    fill_value: Annotated[float,
                          Desc('Intensity outside the target (constant mode)')] = 0.0
    gradient_mode: Annotated[str, Options(*BoundaryMode),
                             Desc('Boundary mode of the Sobel filter')] = 'mirror'
    solver: Annotated[str, Options(*SolverType),
                      Desc('Normal equation solver')] = 'lstsq'
    max_condition: Annotated[float, Range(min=1.0),
                             Desc('Strict solver condition number limit')] = 1e12
    precision: Annotated[str, Options('float64', 'float32'),
                         Desc('Working image dtype')] = 'float64'

    def __post_init__(self) -> None:
        self.warp_type = WarpType(self.warp_type)
        self.boundary_mode = BoundaryMode(self.boundary_mode).value
        self.gradient_mode = BoundaryMode(self.gradient_mode).value
        self.solver = SolverType(self.solver)

        self._template: Optional[np.ndarray] = None
        self._target: Optional[np.ndarray] = None
        self._grad_x: Optional[np.ndarray] = None
        self._grad_y: Optional[np.ndarray] = None
        self._warped_target: Optional[np.ndarray] = None
        self._warped_grad_x: Optional[np.ndarray] = None
        self._warped_grad_y: Optional[np.ndarray] = None
        self._error_image: Optional[np.ndarray] = None
        self._grid: Optional[np.ndarray] = None
        self._last_hessian: Optional[np.ndarray] = None
        self._last_delta: Optional[np.ndarray] = None

    @property
    def n_parameters(self) -> int:
        """Parameter count ``P`` of the configured warp type."""
        return warp_class(self.warp_type).n_parameters

    @property
    def is_prepared(self) -> bool:
        return self._template is not None

    # -----------------------------------------------------------------
    # Setup
    # -----------------------------------------------------------------
    def prepare(self, template_image: np.ndarray, target_image: np.ndarray) -> None:
        """Convert the image pair, compute target gradients, allocate buffers.

        Template and target may differ in size. Per-iteration buffers take
        the template's shape; target samples falling outside the target
        follow ``boundary_mode``.

        Raises
        ------
        InvalidInputError
            If either image is not single-channel, empty, or non-numeric.
            Existing state is left untouched.
        """
        template = as_single_channel(template_image, name='template_image')
        target = as_single_channel(target_image, name='target_image')

        dtype = np.dtype(self.precision)
        template = template.astype(dtype)
        target = target.astype(dtype)
        grad_x, grad_y = sobel_gradients(target, mode=self.gradient_mode)

        shape = template.shape
        self._template = template
        self._target = target
        self._grad_x = grad_x
        self._grad_y = grad_y
        self._warped_target = np.zeros(shape, dtype=dtype)
        self._warped_grad_x = np.zeros(shape, dtype=dtype)
        self._warped_grad_y = np.zeros(shape, dtype=dtype)
        self._error_image = np.zeros(shape, dtype=dtype)
        self._grid = pixel_grid(shape)
        self._last_hessian = None
        self._last_delta = None

        logger.debug(
            "Prepared %s alignment: template %s, target %s, %s",
            self.warp_type.value, shape, target.shape, dtype,
        )

    # -----------------------------------------------------------------
    # Gauss-Newton step
    # -----------------------------------------------------------------
    def align(self, warp: Warp) -> float:
        """Refine *warp* by one forward-additive Gauss-Newton step.

        Parameters
        ----------
        warp : Warp
            Current estimate, of the engine's ``warp_type``. Its parameters
            are replaced by ``p + delta``.

        Returns
        -------
        float
            Mean signed intensity error ``mean(template - warped_target)``
            under the warp as it was on entry. Errors of opposite sign
            cancel, so this is a diagnostic rather than a convergence norm.

        Raises
        ------
        AlignmentStateError
            If ``prepare`` has not completed.
        InvalidInputError
            If *warp* is of a different motion family.
        SingularSystemError
            With ``solver='strict'`` when the Hessian is ill-conditioned.
        """
        if not self.is_prepared:
            raise AlignmentStateError(
                "align() called before prepare(); supply a template/target pair first"
            )
        if (
            getattr(warp, 'warp_type', None) != self.warp_type
            or warp.n_parameters != self.n_parameters
        ):
            raise InvalidInputError(
                f"Engine expects a {self.warp_type.value} warp with "
                f"{self.n_parameters} parameters, got {warp!r}"
            )

        # Target coordinates of every template pixel, shared by all three
        # resampled images.
        shape = self._template.shape
        mapped = warp.apply(self._grid)
        src_x = mapped[:, 0].reshape(shape)
        src_y = mapped[:, 1].reshape(shape)
        for source, buffer in (
            (self._target, self._warped_target),
            (self._grad_x, self._warped_grad_x),
            (self._grad_y, self._warped_grad_y),
        ):
            sample_bilinear(source, src_x, src_y, mode=self.boundary_mode,
                            fill_value=self.fill_value, output=buffer)
        np.subtract(self._template, self._warped_target, out=self._error_image)

        gradient = np.column_stack([
            self._warped_grad_x.ravel(),
            self._warped_grad_y.ravel(),
        ]).astype(np.float64)
        error = self._error_image.ravel().astype(np.float64)

        # Steepest-descent image, one 1xP row per pixel.
        if warp.point_independent_jacobian:
            steepest = gradient @ warp.jacobian()
        else:
            steepest = np.einsum('nk,nkp->np', gradient, warp.jacobian(self._grid))

        hessian = steepest.T @ steepest
        rhs = steepest.T @ error
        delta = self._solve(hessian, rhs)

        warp.set_parameters(warp.get_parameters() + delta)
        self._last_hessian = hessian
        self._last_delta = delta

        residual = float(np.mean(self._error_image))
        logger.debug(
            "%s step: residual=%.6g |delta|=%.6g",
            self.warp_type.value, residual, float(np.linalg.norm(delta)),
        )
        return residual

    def _solve(self, hessian: np.ndarray, rhs: np.ndarray) -> np.ndarray:
        """Solve ``hessian @ delta = rhs`` with the configured strategy."""
        if self.solver == SolverType.STRICT:
            singular_values = np.linalg.svd(hessian, compute_uv=False)
            largest, smallest = singular_values[0], singular_values[-1]
            if not np.all(np.isfinite(singular_values)) or \
                    smallest * self.max_condition <= largest or largest == 0.0:
                cond = largest / smallest if smallest > 0 else np.inf
                raise SingularSystemError(
                    f"Hessian is singular or ill-conditioned "
                    f"(condition number {cond:.3g} exceeds {self.max_condition:.3g})"
                )
            return np.linalg.solve(hessian, rhs)

        delta, _, rank, _ = np.linalg.lstsq(hessian, rhs, rcond=None)
        if rank < hessian.shape[0]:
            logger.warning(
                "Hessian is rank deficient (rank %d of %d); unobservable "
                "%s parameters are left unchanged",
                rank, hessian.shape[0], self.warp_type.value,
            )
        return delta

    # -----------------------------------------------------------------
    # Read-only buffer access
    # -----------------------------------------------------------------
    @property
    def template_image(self) -> Optional[np.ndarray]:
        return _readonly(self._template)

    @property
    def target_image(self) -> Optional[np.ndarray]:
        return _readonly(self._target)

    @property
    def gradient_x(self) -> Optional[np.ndarray]:
        """Normalized x derivative of the un-warped target."""
        return _readonly(self._grad_x)

    @property
    def gradient_y(self) -> Optional[np.ndarray]:
        """Normalized y derivative of the un-warped target."""
        return _readonly(self._grad_y)

    @property
    def warped_target(self) -> Optional[np.ndarray]:
        return _readonly(self._warped_target)

    @property
    def warped_gradient_x(self) -> Optional[np.ndarray]:
        return _readonly(self._warped_grad_x)

    @property
    def warped_gradient_y(self) -> Optional[np.ndarray]:
        return _readonly(self._warped_grad_y)

    @property
    def error_image(self) -> Optional[np.ndarray]:
        """``template - warped_target`` from the most recent step."""
        return _readonly(self._error_image)

    @property
    def last_hessian(self) -> Optional[np.ndarray]:
        """Gauss-Newton Hessian of the most recent step, shape ``(P, P)``."""
        return _readonly(self._last_hessian)

    @property
    def last_delta(self) -> Optional[np.ndarray]:
        """Parameter update of the most recent step, shape ``(P,)``."""
        return _readonly(self._last_delta)

    def __repr__(self) -> str:
        state = 'prepared' if self.is_prepared else 'unprepared'
        return (
            f"ForwardAdditiveAligner(warp_type={self.warp_type.value!r}, "
            f"solver={self.solver.value!r}, {state})"
        )
