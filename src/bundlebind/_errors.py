from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable


def token_name(token: object) -> str:
    return getattr(token, "__name__", None) or repr(token)


class ContainerError(RuntimeError):
    """Base class for every container configuration error."""


class ArgumentCountError(ContainerError, TypeError):
    def __init__(self, token: object, expected: str, given: int, keyword_only: Iterable[str] = ()) -> None:
        self.token = token
        self.expected = expected
        self.given = given
        self.keyword_only = tuple(keyword_only)
        msg = f"'{token_name(token)}' expects {expected} dependencies, but {given} were given."
        if self.keyword_only:
            msg += f" Required keyword-only parameters cannot be injected: {', '.join(self.keyword_only)}."
        super().__init__(msg)


class CyclicalDependencyError(ContainerError):
    def __init__(self, *chain: object) -> None:
        self.chain = chain
        if len(chain) == 1:
            msg = f"Cyclical dependency for {token_name(chain[0])}"
        else:
            msg = f"Cyclical dependency: {' -> '.join(token_name(t) for t in chain)}"
        super().__init__(msg)


class ContainerNotReadyError(ContainerError):
    def __init__(self) -> None:
        super().__init__("Container must be built first. Try calling container.build() before get().")


class OverrideUserError(ContainerError):
    def __init__(self) -> None:
        super().__init__("Container was already built. You can only call override() before build().")


class ServiceNotFoundError(ContainerError, LookupError):
    def __init__(self, token: object) -> None:
        self.token = token
        name = token_name(token)
        super().__init__(
            f"'{name}' is not a registered service. Did you forget to call "
            f"'container.register({name}, ...)'? Or did you forget to load a bundle?"
        )


class ParameterNotFoundError(ContainerError, LookupError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Parameter '{key}' was not set. Did you forget to call 'container.set_parameter()'?")


class DependencyNotWiredError(ContainerError, ValueError):
    """Raised by :func:`assert_wired` when a constructor received ``None`` for a dependency."""

    def __init__(self, positions: Iterable[int], given: int) -> None:
        self.positions = tuple(positions)
        super().__init__(
            f"Expected {given} wired dependencies, but argument(s) {list(self.positions)} were None. "
            "Did you forget to wire one of the services?"
        )
