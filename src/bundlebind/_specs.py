from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from ._errors import ArgumentCountError


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


@dataclass(frozen=True)
class Ref:
    """Reference to another registered token, resolved recursively."""

    target: Any


@dataclass(frozen=True)
class Value:
    """Literal injected as-is."""

    value: Any


DependencySpec = Union[Ref, Value]


def as_spec(obj: object) -> DependencySpec:
    """Normalise one entry of a dependency list.

    Classes are references, everything else is a literal. Wrap a class in
    :class:`Value` to inject the class object itself.
    """
    if isinstance(obj, (Ref, Value)):
        return obj
    if inspect.isclass(obj):
        return Ref(obj)
    return Value(obj)


def as_specs(dependencies: Iterable[object]) -> tuple[DependencySpec, ...]:
    return tuple(as_spec(d) for d in dependencies)


def references(specs: Iterable[DependencySpec], token: object) -> bool:
    return any(isinstance(s, Ref) and s.target is token for s in specs)


def positional_arity(target: Callable[..., object]) -> tuple[int, int | None, tuple[str, ...]] | None:
    """Return (required, maximum, keyword_only) parameter info.

    ``maximum`` is None when the callable takes ``*args``. ``keyword_only``
    names the required keyword-only parameters, which positional
    dependencies can never fill. Returns None when no signature can be
    introspected (builtins, some C extensions).
    """
    try:
        sig = inspect.signature(target)
    except (TypeError, ValueError):
        return None

    required = 0
    maximum: int | None = 0
    keyword_only = []
    for p in sig.parameters.values():
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            if maximum is not None:
                maximum += 1
            if p.default is inspect.Parameter.empty:
                required += 1
        elif p.kind is inspect.Parameter.VAR_POSITIONAL:
            maximum = None
        elif p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty:
            keyword_only.append(p.name)

    return required, maximum, tuple(keyword_only)


def check_arity(token: object, target: Callable[..., object], given: int) -> None:
    arity = positional_arity(target)
    if arity is None:
        return

    required, maximum, keyword_only = arity
    if given >= required and (maximum is None or given <= maximum) and not keyword_only:
        return

    if maximum is None:
        expected = f"at least {required}"
    elif maximum == required:
        expected = str(required)
    else:
        expected = f"{required} to {maximum}"
    raise ArgumentCountError(token, expected, given, keyword_only)
