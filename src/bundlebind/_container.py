from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Literal,
    TypeVar,
    overload,
)

from ._errors import (
    ContainerNotReadyError,
    CyclicalDependencyError,
    OverrideUserError,
    ServiceNotFoundError,
    token_name,
)
from ._specs import DependencySpec, Ref, as_specs, check_arity, references


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from typing import Self

T = TypeVar("T")


class Lifetime(Enum):
    SHARED = "shared"
    TRANSIENT = "transient"
    SINGLETON = "shared"  # alias of SHARED


_EMPTY = object()


@dataclass
class Registration:
    factory: Callable[..., object] | None
    dependencies: tuple[DependencySpec, ...]
    lifetime: Lifetime
    instance: object = _EMPTY  # shared instance slot

    @property
    def has_instance(self) -> bool:
        return self.instance is not _EMPTY


@dataclass
class Override:
    replacement: Callable[..., object]
    dependencies: tuple[DependencySpec, ...]


class Container:
    """Minimal DI container with explicitly declared dependencies.

    - register classes (or factories) with an ordered dependency list
    - lifetimes: shared / transient
    - override implementations before build
    - resolve after build.
    """

    def __init__(self) -> None:
        self._registrations: dict[Any, Registration] = {}
        self._overrides: dict[Any, Override] = {}
        self._resolving: list[Any] = []
        self._built = False
        self._lock = threading.RLock()

        own = Registration(factory=None, dependencies=(), lifetime=Lifetime.SHARED, instance=self)
        self._registrations[Container] = own
        self._registrations[type(self)] = own

    @property
    def built(self) -> bool:
        return self._built

    def register(
        self,
        token: type[T],
        dependencies: Iterable[object] = (),
        lifetime: Lifetime = Lifetime.SHARED,
        *,
        factory: Callable[..., T] | None = None,
    ) -> Self:
        """Register a class with its ordered dependency list.

        Classes in ``dependencies`` are resolved from the container, any other
        value is passed through verbatim. ``factory`` replaces the class
        constructor when given.

        Example:
          container.register(Database, ["sqlite://", Logger])
          container.register(Clock, [], Lifetime.TRANSIENT, factory=make_clock)

        """
        specs = as_specs(dependencies)

        if references(specs, token):
            raise CyclicalDependencyError(token)

        check_arity(token, factory or token, len(specs))

        with self._lock:
            self._registrations[token] = Registration(factory=factory, dependencies=specs, lifetime=lifetime)

        logger.debug("Registered %s (%s, %d dependencies)", token_name(token), lifetime.value, len(specs))
        return self

    def singleton(
        self,
        token: type[T],
        dependencies: Iterable[object] = (),
        *,
        factory: Callable[..., T] | None = None,
    ) -> Self:
        """Register a class whose instance is shared by every consumer."""
        return self.register(token, dependencies, Lifetime.SHARED, factory=factory)

    def transient(
        self,
        token: type[T],
        dependencies: Iterable[object] = (),
        *,
        factory: Callable[..., T] | None = None,
    ) -> Self:
        """Register a class that is constructed anew for every consumer."""
        return self.register(token, dependencies, Lifetime.TRANSIENT, factory=factory)

    def override(
        self,
        token: type[T],
        replacement: Callable[..., T],
        dependencies: Iterable[object] | None = None,
    ) -> Self:
        """Substitute another implementation for ``token``, applied by :meth:`build`.

        When ``dependencies`` is omitted the replacement receives the
        dependencies currently registered for ``token``.
        """
        with self._lock:
            if self._built:
                raise OverrideUserError

            base = self._registrations.get(token)

            if dependencies is None:
                specs = base.dependencies if base else ()
            else:
                specs = as_specs(dependencies)

            if references(specs, token):
                raise CyclicalDependencyError(token)
            if references(specs, replacement):
                raise CyclicalDependencyError(replacement)

            check_arity(replacement, replacement, len(specs))

            self._registrations[token] = Registration(
                factory=replacement,
                dependencies=specs,
                lifetime=Lifetime.SHARED,
            )
            self._overrides[token] = Override(replacement=replacement, dependencies=specs)

        logger.debug("Override %s -> %s", token_name(token), token_name(replacement))
        return self

    def build(self) -> Self:
        """Finalize the container and construct every override.

        Overridden tokens always behave as shared: the replacement instance is
        installed directly in the token's slot.

        If construction fails the container is left unbuilt, so the error can
        be fixed and build() called again.
        """
        with self._lock:
            if self._built:
                logger.warning("Container was already built; ignoring repeated build()")
                return self

            self._built = True
            try:
                self._finish_build()
            except Exception:
                self._built = False
                self._discard_instances()
                raise

        logger.debug("Container built (%d overrides applied)", len(self._overrides))
        return self

    def _finish_build(self) -> None:
        # Every replacement is installed before any is constructed, so that
        # one override can depend on another overridden token.
        for token, entry in self._overrides.items():
            self._registrations[token] = Registration(
                factory=entry.replacement,
                dependencies=entry.dependencies,
                lifetime=Lifetime.SHARED,
            )

        for token in self._overrides:
            self.resolve(token)

    def _discard_instances(self) -> None:
        for reg in self._registrations.values():
            if reg.instance is not self:
                reg.instance = _EMPTY

    def get(self, token: type[T]) -> T:
        """Resolve ``token``, raising if it was never registered."""
        return self.resolve(token, strict=True)

    @overload
    def resolve(self, token: type[T], strict: Literal[True] = ...) -> T: ...

    @overload
    def resolve(self, token: type[T], strict: bool) -> T | None: ...

    def resolve(self, token: type[T], strict: bool = True) -> T | None:
        """Resolve ``token`` to an instance.

        - Shared tokens are constructed once and cached.
        - Transient tokens are constructed on every call.
        - Unregistered tokens raise in strict mode, else return None.
        """
        with self._lock:
            if not self._built:
                raise ContainerNotReadyError

            reg = self._registrations.get(token)
            if reg is None:
                if strict:
                    raise ServiceNotFoundError(token)
                return None

            if reg.lifetime is Lifetime.SHARED and reg.has_instance:
                return reg.instance  # type: ignore[return-value]

            instance = self._create(token, reg.factory or token, reg.dependencies)

            # Cache only once the whole subgraph resolved.
            if reg.lifetime is Lifetime.SHARED:
                reg.instance = instance

            return instance  # type: ignore[return-value]

    def _create(self, token: Any, factory: Callable[..., object], specs: tuple[DependencySpec, ...]) -> object:
        if token in self._resolving:
            start = self._resolving.index(token)
            raise CyclicalDependencyError(*self._resolving[start:], token)

        self._resolving.append(token)
        try:
            args = [self.resolve(spec.target) if isinstance(spec, Ref) else spec.value for spec in specs]
            return factory(*args)
        finally:
            self._resolving.pop()
