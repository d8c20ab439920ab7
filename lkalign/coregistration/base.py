# -*- coding: utf-8 -*-
"""
Co-Registration Base Classes - Estimate/apply interface for image alignment.

Defines the ``CoRegistration`` ABC and the ``RegistrationResult`` container
produced by co-registration drivers. A driver estimates the warp that maps
fixed (template) pixel coordinates into the moving (target) image, and can
then resample the moving image into the fixed frame.

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
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Third-party
import numpy as np

# lkalign internal
from lkalign.vocabulary import WarpType
from lkalign.warp import create_warp, resolve_warp_type
from lkalign.warp.base import Warp


class RegistrationResult:
    """Result of a co-registration estimate.

    Parameters
    ----------
    warp_type : WarpType or str
        Motion family of the estimated warp.
    parameters : np.ndarray
        Final warp parameters, shape ``(P,)``.
    residuals : Sequence[float]
        Mean signed intensity error returned by each alignment step, in
        step order.
    residual_rms : float
        Root mean square intensity error between the fixed image and the
        moving image resampled under the final warp.
    metadata : Dict[str, Any], optional
        Driver-specific metadata (settings, image shapes).

    Attributes
    ----------
    warp_type : WarpType
    parameters : np.ndarray
    residuals : List[float]
    residual_rms : float
    metadata : Dict[str, Any]
    """

    def __init__(
        self,
        warp_type: WarpType,
        parameters: np.ndarray,
        residuals: Sequence[float],
        residual_rms: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.warp_type = resolve_warp_type(warp_type)
        self.parameters = np.asarray(parameters, dtype=np.float64).copy()
        self.residuals: List[float] = [float(r) for r in residuals]
        self.residual_rms = residual_rms
        self.metadata = metadata or {}

    @property
    def iterations(self) -> int:
        """Number of alignment steps taken."""
        return len(self.residuals)

    @property
    def final_residual(self) -> Optional[float]:
        """Residual of the last step, or None if no step was taken."""
        return self.residuals[-1] if self.residuals else None

    def warp(self) -> Warp:
        """A new ``Warp`` instance holding the estimated parameters."""
        return create_warp(self.warp_type, self.parameters)

    @property
    def transform_matrix(self) -> np.ndarray:
        """3x3 homogeneous matrix mapping fixed ``(x, y)`` to moving."""
        return self.warp().matrix()

    def transform_points(
        self,
        points: np.ndarray,
        inverse: bool = False,
    ) -> np.ndarray:
        """Map ``(x, y)`` points with the estimated warp.

        Parameters
        ----------
        points : np.ndarray
            ``(x, y)`` or ``(N, 2)`` points.
        inverse : bool
            If False (default), map fixed -> moving. If True, map
            moving -> fixed.

        Raises
        ------
        SingularSystemError
            If ``inverse=True`` and the warp is not invertible.
        """
        warp = self.warp()
        if inverse:
            warp = warp.inverse()
        return warp.apply(points)

    def __repr__(self) -> str:
        params = ', '.join(f"{v:.4g}" for v in self.parameters)
        return (
            f"RegistrationResult({self.warp_type.value}, "
            f"params=[{params}], "
            f"rms={self.residual_rms:.4f}, "
            f"steps={self.iterations})"
        )


class CoRegistration(ABC):
    """Abstract base class for image co-registration drivers.

    The two-step interface separates estimation (``estimate``) from
    application (``apply``) so the same result can be applied to several
    images sharing the moving image's geometry.
    """

    @abstractmethod
    def estimate(
        self,
        fixed: np.ndarray,
        moving: np.ndarray,
        initial: Optional[Warp] = None,
    ) -> RegistrationResult:
        """Estimate the warp aligning *moving* to *fixed*.

        Parameters
        ----------
        fixed : np.ndarray
            Single-channel reference (template) image.
        moving : np.ndarray
            Single-channel image to register (target).
        initial : Optional[Warp]
            Starting estimate. Not modified. Identity when omitted.

        Returns
        -------
        RegistrationResult
        """
        ...

    @abstractmethod
    def apply(
        self,
        moving: np.ndarray,
        result: RegistrationResult,
        output_shape: Optional[Tuple[int, int]] = None,
    ) -> np.ndarray:
        """Resample *moving* into the fixed frame using *result*."""
        ...
