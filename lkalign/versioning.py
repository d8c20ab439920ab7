# -*- coding: utf-8 -*-
"""
Aligner Versioning - Version stamp decorator for alignment algorithms.

Provides the ``@processor_version`` class decorator that stamps a semantic
version string on aligner and co-registration classes. The stamped version
identifies the numerical behavior of the algorithm, so a change in results
for identical inputs must come with a version bump.

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

# Standard library
import importlib.metadata
from typing import Optional, Type, TypeVar

T = TypeVar('T')


def processor_version(version: Optional[str] = None):
    """Class decorator that sets ``__processor_version__`` on a class.

    If no version is given it is read from the installed ``lkalign``
    distribution metadata, falling back to ``'unknown'`` when the package
    is not installed (e.g. running from a source checkout).

    Parameters
    ----------
    version : str, optional
        Semantic version string (e.g., ``'1.0.0'``).

    Returns
    -------
    Callable
        Class decorator.

    Examples
    --------
    >>> @processor_version('1.0.0')
    ... class MyAligner(Aligner):
    ...     ...
    >>> MyAligner.__processor_version__
    '1.0.0'
    """
    def decorator(cls: Type[T]) -> Type[T]:
        if version:
            cls.__processor_version__ = version
        else:
            try:
                cls.__processor_version__ = importlib.metadata.version('lkalign')
            except importlib.metadata.PackageNotFoundError:
                cls.__processor_version__ = "unknown"
        return cls
    return decorator
