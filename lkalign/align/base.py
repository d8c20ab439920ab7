# -*- coding: utf-8 -*-
"""
Aligner Base Class - Abstract interface for iterative image aligners.

Defines the ``Aligner`` ABC shared by alignment engines. An aligner is
prepared once for a template/target image pair and then stepped
repeatedly, each step refining a caller-owned ``Warp`` in place.

``Aligner`` provides two cross-cutting capabilities:

**Version checking**: concrete subclasses that do not declare a version via
``@processor_version('x.y.z')`` trigger a ``UserWarning`` at first
instantiation. The check runs in ``__new__`` so decorators have already
been applied.

**Tunable settings**: subclasses declare settings as ``typing.Annotated``
class-body fields using markers from :mod:`lkalign.params`.
``__init_subclass__`` collects them into ``__param_specs__`` and generates
a keyword-only validating ``__init__`` unless the subclass defines one.

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
import warnings
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

# Third-party
import numpy as np

# lkalign internal
from lkalign.params import ParamSpec, collect_param_specs, make_init
from lkalign.warp.base import Warp

logger = logging.getLogger(__name__)


class Aligner(ABC):
    """Common base class for single-step image aligners.

    Subclasses implement ``prepare`` and ``align``. The engine has two
    states: *Unprepared* until the first successful ``prepare``, and
    *Prepared* afterwards. ``align`` may be called any number of times in
    the Prepared state; a new ``prepare`` replaces all image state.

    Instances are not thread-safe. Use one aligner per worker.
    """

    _version_warned_classes: set = set()

    __param_specs__: Tuple[ParamSpec, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__param_specs__ = collect_param_specs(cls)
        if cls.__param_specs__ and '__init__' not in cls.__dict__:
            cls.__init__ = make_init(cls.__param_specs__)

    def __new__(cls, *args: Any, **kwargs: Any) -> 'Aligner':
        if cls not in Aligner._version_warned_classes:
            Aligner._version_warned_classes.add(cls)
            if (
                not getattr(cls, '__processor_version__', None)
                and not getattr(cls, '__abstractmethods__', None)
            ):
                warnings.warn(
                    f"{cls.__qualname__} does not declare a processor version. "
                    f"Use @processor_version('x.y.z') to declare one.",
                    UserWarning,
                    stacklevel=2,
                )
        logger.debug("Instantiating %s", cls.__qualname__)
        return super().__new__(cls)

    @property
    def settings(self) -> Dict[str, Any]:
        """Current values of all declared settings."""
        return {
            spec.name: getattr(self, spec.name)
            for spec in type(self).__param_specs__
        }

    @property
    @abstractmethod
    def is_prepared(self) -> bool:
        """Whether ``prepare`` has completed successfully."""
        ...

    @abstractmethod
    def prepare(self, template_image: np.ndarray, target_image: np.ndarray) -> None:
        """Set up engine state for a template/target image pair.

        Parameters
        ----------
        template_image : np.ndarray
            Fixed single-channel reference image; defines the alignment
            window.
        target_image : np.ndarray
            Moving single-channel image whose warp is estimated.

        Raises
        ------
        InvalidInputError
            If either image is not single-channel. The engine state is left
            unchanged.
        """
        ...

    @abstractmethod
    def align(self, warp: Warp) -> float:
        """Perform one alignment step, updating *warp* in place.

        The aligner holds exclusive use of *warp* for the duration of the
        call: it reads the current parameters and Jacobian and writes the
        refined parameters back through ``set_parameters``.

        Returns
        -------
        float
            Alignment residual of the step before the update.

        Raises
        ------
        AlignmentStateError
            If called before ``prepare``.
        """
        ...
