# -*- coding: utf-8 -*-
"""
lkalign - Forward-additive Lucas-Kanade image alignment.

Estimates the parametric warp that aligns a moving target image onto a
fixed template image by Gauss-Newton minimization of the sum of squared
intensity differences.

Dependencies
------------
numpy
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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from lkalign.exceptions import (
    LKAlignError,
    ValidationError,
    InvalidInputError,
    AlignmentStateError,
    SingularSystemError,
)
from lkalign.vocabulary import BoundaryMode, SolverType, WarpType
from lkalign.warp import (
    Warp,
    TranslationWarp,
    EuclideanWarp,
    SimilarityWarp,
    AffineWarp,
    ProjectiveWarp,
    create_warp,
)
from lkalign.resample import warp_image
from lkalign.gradient import sobel_gradients
from lkalign.align import Aligner, ForwardAdditiveAligner
from lkalign.coregistration import (
    CoRegistration,
    LucasKanadeCoRegistration,
    RegistrationResult,
)

__all__ = [
    'LKAlignError',
    'ValidationError',
    'InvalidInputError',
    'AlignmentStateError',
    'SingularSystemError',
    'BoundaryMode',
    'SolverType',
    'WarpType',
    'Warp',
    'TranslationWarp',
    'EuclideanWarp',
    'SimilarityWarp',
    'AffineWarp',
    'ProjectiveWarp',
    'create_warp',
    'warp_image',
    'sobel_gradients',
    'Aligner',
    'ForwardAdditiveAligner',
    'CoRegistration',
    'LucasKanadeCoRegistration',
    'RegistrationResult',
]
