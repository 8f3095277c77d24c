"""Minimal dependency injection container with extension bundles.

This package provides a small dependency injection container for Python.
Dependencies are declared explicitly at registration time, as an ordered list
of other registered classes (resolved recursively) and literal values
(injected as-is).

Exports:
- `Container`: registration, override and resolution of services.
- `ExtendableContainer`: `Container` plus extension bundles and string-keyed
  parameters shared across bundles.
- `Bundle`: protocol for extension bundles.
- `Lifetime`: shared or transient instances.
- `Ref` / `Value`: explicit dependency specs, for when a bare class or value
  would be ambiguous.
- `assert_wired`: runtime check that no constructor argument arrived as None.
"""

from ._assert import assert_wired
from ._container import Container, Lifetime
from ._errors import (
    ArgumentCountError,
    ContainerError,
    ContainerNotReadyError,
    CyclicalDependencyError,
    DependencyNotWiredError,
    OverrideUserError,
    ParameterNotFoundError,
    ServiceNotFoundError,
)
from ._extension import Bundle, ExtendableContainer
from ._specs import DependencySpec, Ref, Value


__all__ = [
    "ArgumentCountError",
    "Bundle",
    "Container",
    "ContainerError",
    "ContainerNotReadyError",
    "CyclicalDependencyError",
    "DependencyNotWiredError",
    "DependencySpec",
    "ExtendableContainer",
    "Lifetime",
    "OverrideUserError",
    "ParameterNotFoundError",
    "Ref",
    "ServiceNotFoundError",
    "Value",
    "assert_wired",
]
