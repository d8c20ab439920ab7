# -*- coding: utf-8 -*-
"""
Co-Registration Module - Estimate/apply wrappers around the alignment engine.

Key Classes
-----------
- CoRegistration: Abstract base class for co-registration drivers
- RegistrationResult: Estimated warp, per-step residuals and RMS error
- LucasKanadeCoRegistration: Fixed-step forward-additive Lucas-Kanade

Usage
-----
    >>> from lkalign.coregistration import LucasKanadeCoRegistration
    >>> coreg = LucasKanadeCoRegistration(warp_type='euclidean', iterations=25)
    >>> result = coreg.estimate(fixed_image, moving_image)
    >>> aligned = coreg.apply(moving_image, result)

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

from lkalign.coregistration.base import CoRegistration, RegistrationResult
from lkalign.coregistration.lucas_kanade import LucasKanadeCoRegistration

__all__ = [
    'CoRegistration',
    'RegistrationResult',
    'LucasKanadeCoRegistration',
]
