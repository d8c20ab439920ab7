# -*- coding: utf-8 -*-
"""
Alignment Module - Iterative intensity-based image alignment engines.

Key Classes
-----------
- Aligner: Abstract base class with prepare/align and declarative settings
- ForwardAdditiveAligner: Classic Lucas-Kanade (forward-additive) step

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

from lkalign.align.base import Aligner
from lkalign.align.forward_additive import ForwardAdditiveAligner

__all__ = [
    'Aligner',
    'ForwardAdditiveAligner',
]
