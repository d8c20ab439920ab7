# -*- coding: utf-8 -*-
"""
Tunable Parameter Annotations - Declarative settings via typing.Annotated.

Provides constraint marker types (``Range``, ``Options``, ``Desc``) for use
inside ``typing.Annotated`` annotations on ``Aligner`` subclasses, plus the
``ParamSpec`` introspection class and the collection / ``__init__``
generation utilities consumed by ``Aligner.__init_subclass__``.

Usage
-----
Declare settings as class-body annotations::

    from typing import Annotated
    from lkalign.params import Range, Options, Desc

    class MyAligner(Aligner):
        solver: Annotated[str, Options('lstsq', 'strict'),
                          Desc('Normal equation solver')] = 'lstsq'
        max_condition: Annotated[float, Range(min=1.0),
                                 Desc('Strict solver threshold')] = 1e12

Settings are collected into ``cls.__param_specs__`` at class definition
time. A keyword-only ``__init__`` is generated unless the class defines
its own.

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
import inspect
from typing import (
    Annotated,
    Any,
    Optional,
    Tuple,
    Union,
    get_origin,
    get_type_hints,
)

# lkalign internal
from lkalign.exceptions import ValidationError


# =====================================================================
# Constraint marker types  (used inside Annotated[...])
# =====================================================================

class ParamMeta:
    """Base marker for tunable parameter metadata in ``Annotated`` types.

    Any ``Annotated`` class-body field whose metadata includes at least one
    ``ParamMeta`` instance is treated as a tunable setting.
    """


class Range(ParamMeta):
    """Inclusive numeric range constraint.

    Parameters
    ----------
    min : int or float, optional
        Minimum allowed value (inclusive).
    max : int or float, optional
        Maximum allowed value (inclusive).
    """

    __slots__ = ('min', 'max')

    def __init__(
        self,
        min: Optional[Union[int, float]] = None,
        max: Optional[Union[int, float]] = None,
    ) -> None:
        self.min = min
        self.max = max

    def __repr__(self) -> str:
        parts = []
        if self.min is not None:
            parts.append(f"min={self.min!r}")
        if self.max is not None:
            parts.append(f"max={self.max!r}")
        return f"Range({', '.join(parts)})"


class Options(ParamMeta):
    """Discrete choice constraint.

    Parameters
    ----------
    *choices
        Allowed values. Must supply at least one. ``str`` enum members may
        be given; their plain string values then also match.
    """

    __slots__ = ('choices',)

    def __init__(self, *choices: Any) -> None:
        if not choices:
            raise ValueError("Options requires at least one choice")
        self.choices = choices

    def __repr__(self) -> str:
        return f"Options{self.choices!r}"


class Desc(ParamMeta):
    """Human-readable parameter description."""

    __slots__ = ('text',)

    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"Desc({self.text!r})"


_SENTINEL = object()


class ParamSpec:
    """Resolved specification for a single tunable setting.

    Attributes
    ----------
    name : str
        Setting name (keyword-argument key).
    param_type : type
        Expected Python type.
    default : Any
        Default value, or ``None`` if the setting is required.
    description : str
        Human-readable description.
    min_value, max_value : int, float, or None
        Inclusive bounds (from ``Range``).
    choices : tuple or None
        Allowed values (from ``Options``).
    """

    __slots__ = (
        'name', 'param_type', 'default', '_has_default',
        'description', 'min_value', 'max_value', 'choices',
    )

    def __init__(
        self,
        name: str,
        param_type: type,
        default: Any,
        has_default: bool,
        description: str,
        min_value: Optional[Union[int, float]],
        max_value: Optional[Union[int, float]],
        choices: Optional[Tuple],
    ) -> None:
        self.name = name
        self.param_type = param_type
        self.default = default
        self._has_default = has_default
        self.description = description
        self.min_value = min_value
        self.max_value = max_value
        self.choices = choices

    @property
    def required(self) -> bool:
        """Whether this setting must be supplied (has no default)."""
        return not self._has_default

    def validate(self, value: Any) -> None:
        """Validate *value* against this spec's type and constraints.

        ``int`` is accepted where ``float`` is declared; ``bool`` is not.

        Raises
        ------
        TypeError
            If *value* has the wrong type.
        ValidationError
            If *value* violates range or choices constraints.
        """
        if self.param_type is float:
            ok = (isinstance(value, (int, float))
                  and not isinstance(value, bool))
        elif self.param_type is object:
            ok = True
        else:
            ok = isinstance(value, self.param_type)
        if not ok:
            raise TypeError(
                f"Setting '{self.name}' must be "
                f"{self.param_type.__name__}, got {type(value).__name__}"
            )

        if self.min_value is not None and value < self.min_value:
            raise ValidationError(
                f"Setting '{self.name}' value {value!r} "
                f"is below minimum {self.min_value!r}"
            )
        if self.max_value is not None and value > self.max_value:
            raise ValidationError(
                f"Setting '{self.name}' value {value!r} "
                f"is above maximum {self.max_value!r}"
            )
        if self.choices is not None and value not in self.choices:
            allowed = tuple(getattr(c, 'value', c) for c in self.choices)
            raise ValidationError(
                f"Setting '{self.name}' value {value!r} "
                f"is not one of {allowed!r}"
            )

    def __repr__(self) -> str:
        text = (
            f"ParamSpec(name={self.name!r}, "
            f"param_type={self.param_type.__name__}, "
            f"required={self.required!r}"
        )
        if not self.required:
            text += f", default={self.default!r}"
        if self.choices is not None:
            text += f", choices={self.choices!r}"
        return text + ")"


def collect_param_specs(cls: type) -> Tuple[ParamSpec, ...]:
    """Parse ``Annotated`` type hints on *cls* into ``ParamSpec`` objects.

    Fields are ordered parent-first, preserving declaration order within
    each class.

    Raises
    ------
    TypeError
        If a field carries both ``Range`` and ``Options``.
    """
    hints = get_type_hints(cls, include_extras=True)

    seen: set = set()
    ordered_names: list = []
    for klass in reversed(cls.__mro__):
        for name in getattr(klass, '__annotations__', {}):
            if name not in seen and name in hints:
                seen.add(name)
                ordered_names.append(name)

    specs: list = []
    for name in ordered_names:
        hint = hints[name]
        if get_origin(hint) is not Annotated:
            continue
        metas = [m for m in hint.__metadata__ if isinstance(m, ParamMeta)]
        if not metas:
            continue

        range_meta = next((m for m in metas if isinstance(m, Range)), None)
        options_meta = next((m for m in metas if isinstance(m, Options)), None)
        desc_meta = next((m for m in metas if isinstance(m, Desc)), None)
        if range_meta and options_meta:
            raise TypeError(
                f"Setting '{name}' on {cls.__qualname__}: "
                f"Range and Options are mutually exclusive."
            )

        default = getattr(cls, name, _SENTINEL)
        has_default = default is not _SENTINEL
        specs.append(ParamSpec(
            name=name,
            param_type=hint.__args__[0],
            default=default if has_default else None,
            has_default=has_default,
            description=desc_meta.text if desc_meta else '',
            min_value=range_meta.min if range_meta else None,
            max_value=range_meta.max if range_meta else None,
            choices=options_meta.choices if options_meta else None,
        ))

    return tuple(specs)


def make_init(param_specs: Tuple[ParamSpec, ...]):
    """Build a keyword-only, validating ``__init__`` from *param_specs*.

    The generated function falls back to spec defaults, validates every
    value, rejects unknown keywords, and finally calls
    ``self.__post_init__()`` when the class defines one.
    """
    specs = param_specs

    def __init__(self, **kwargs):
        unexpected = set(kwargs) - {s.name for s in specs}
        if unexpected:
            raise TypeError(
                f"{type(self).__name__}() got unexpected "
                f"keyword arguments: {', '.join(sorted(unexpected))}"
            )
        for spec in specs:
            if spec.name in kwargs:
                value = kwargs[spec.name]
            elif not spec.required:
                value = spec.default
            else:
                raise TypeError(
                    f"{type(self).__name__}() missing required "
                    f"keyword argument: '{spec.name}'"
                )
            spec.validate(value)
            object.__setattr__(self, spec.name, value)

        if hasattr(self, '__post_init__'):
            self.__post_init__()

    params = [inspect.Parameter('self', inspect.Parameter.POSITIONAL_OR_KEYWORD)]
    for spec in specs:
        if spec.required:
            params.append(inspect.Parameter(
                spec.name, inspect.Parameter.KEYWORD_ONLY))
        else:
            params.append(inspect.Parameter(
                spec.name, inspect.Parameter.KEYWORD_ONLY,
                default=spec.default))
    __init__.__signature__ = inspect.Signature(params)
    __init__.__qualname__ = '__init__'

    return __init__
