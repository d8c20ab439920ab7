# -*- coding: utf-8 -*-
"""
lkalign Exception Hierarchy - Domain-specific exceptions for image alignment.

Provides a small exception hierarchy that lets callers catch alignment
errors distinctly from Python built-in exceptions. All lkalign exceptions
subclass both ``LKAlignError`` and the appropriate built-in exception for
backward compatibility.

Author
------
Steven Siebert

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


class LKAlignError(Exception):
    """Base exception for all lkalign errors."""


class ValidationError(LKAlignError, ValueError):
    """Invalid parameters, arguments, or configuration.

    Raised for wrong parameter vector lengths, unknown warp types,
    unsupported boundary modes, and other argument validation failures.
    """


class InvalidInputError(ValidationError):
    """Image or warp input rejected by the alignment engine.

    Raised by ``prepare()`` when an image is not single-channel (or is
    empty / non-numeric), and by ``align()`` when the warp family does not
    match the engine's configured warp type.
    """


class AlignmentStateError(LKAlignError, RuntimeError):
    """Operation called in the wrong engine state.

    Raised when ``align()`` is called before a successful ``prepare()``.
    """


class SingularSystemError(LKAlignError, ArithmeticError):
    """Linear system or transform matrix is singular or ill-conditioned.

    Raised by the strict solver when the Gauss-Newton Hessian exceeds the
    configured condition number, and by ``Warp.inverse()`` when the warp
    matrix cannot be inverted.
    """
