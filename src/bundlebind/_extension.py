from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from ._container import Container
from ._errors import ParameterNotFoundError, token_name
from ._specs import check_arity


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from typing import Self

B = TypeVar("B", bound="Bundle")


@runtime_checkable
class Bundle(Protocol):
    """A pluggable group of services.

    ``configure`` runs once, during :meth:`ExtendableContainer.build`, and
    receives the container plus the config passed to ``add_extension`` (or
    None). It registers the bundle's services and the bundle class itself,
    so that :meth:`ExtendableContainer.get_extension` can resolve it.
    """

    def configure(self, container: ExtendableContainer, config: Any) -> None: ...


class ExtendableContainer(Container):
    """DI container that supports extension bundles and superglobal parameters.

    - add bundles via :meth:`add_extension`
    - set bundle configuration via :meth:`add_extension` or :meth:`configure`
    - look bundles up by class or class name via :meth:`get_extension`
    - share cross-cutting values via :meth:`set_parameter` / :meth:`get_parameter`

    :meth:`build` applies overrides first, then configures every bundle in
    insertion order. A bundle whose ``configure`` raises leaves the container
    unbuilt.
    """

    def __init__(self) -> None:
        super().__init__()
        self._extensions: dict[type, Bundle] = {}
        self._configs: dict[type, Any] = {}
        self._extension_types: dict[str, type] = {}
        self._parameters: dict[str, Any] = {}

    def add_extension(self, bundle: type[Bundle], config: Any = None) -> Self:
        """Add a bundle; it is constructed now and configured during build().

        Adding the same bundle again keeps the first instance and only
        replaces the stored config when one is given.
        """
        with self._lock:
            if bundle not in self._extensions:
                self._extensions[bundle] = self._instantiate_bundle(bundle)
                self._extension_types[bundle.__name__] = bundle

                if self._built:
                    logger.warning("Extension %s added after build(); it will not be configured", bundle.__name__)

            if config is not None:
                self._configs[bundle] = config

        logger.debug("Added extension %s", bundle.__name__)
        return self

    def configure(self, bundle: type[Bundle], config: Any) -> Self:
        """Set the config handed to ``bundle.configure()`` during build()."""
        with self._lock:
            self._configs[bundle] = config
        return self

    def has_extension(self, bundle: type[Bundle] | str) -> bool:
        """Tell whether a bundle was added, by class or by class name, without resolving it."""
        name = bundle if isinstance(bundle, str) else bundle.__name__
        return name in self._extension_types

    def get_extension(self, bundle: type[B] | str) -> B | None:
        """Get a bundle by class or by class name.

        Returns None when the bundle was never added, so callers can treat
        bundles as feature toggles.
        """
        name = bundle if isinstance(bundle, str) else bundle.__name__
        bundle_type = self._extension_types.get(name)
        if bundle_type is None:
            return None
        return self.resolve(bundle_type, strict=False)

    def set_parameter(self, key: str, value: Any) -> Self:
        """Store a superglobal value, readable by bundles during configure()."""
        with self._lock:
            self._parameters[key] = value
        return self

    def get_parameter(self, key: str, strict: bool = True) -> Any:
        """Look a parameter up; a missing or None value raises in strict mode."""
        value = self._parameters.get(key)
        if value is None and strict:
            raise ParameterNotFoundError(key)
        return value

    def _finish_build(self) -> None:
        super()._finish_build()

        for bundle_type, instance in list(self._extensions.items()):
            logger.debug("Configuring extension %s", token_name(bundle_type))
            instance.configure(self, self._configs.get(bundle_type))

    def _instantiate_bundle(self, bundle: type[Bundle]) -> Bundle:
        check_arity(bundle, bundle, 0)
        instance = bundle()

        if not isinstance(instance, Bundle) or not callable(instance.configure):
            msg = f"Extension {bundle.__name__} must define a configure(container, config) method"
            raise TypeError(msg)

        return instance
