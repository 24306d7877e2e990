from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._properties import load_properties
from ._registry import Registry, Scope


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import os
    from collections.abc import Hashable, Mapping

    T = TypeVar("T")


class Container:
    """Named modules sharing one property store.

    Each module is a separate `Registry`, so different environments can wire
    different implementations. `bind` and `assemble` act on the active module.

    Example:
      container = Container()
      container.property_source("application.properties")
      container.bind(Greeter, FriendlyGreeter)
      greeter = container.assemble(Greeter)

      container.change_module("test")
      container.bind(Greeter, SilentGreeter)
    """

    DEFAULT_MODULE = "default"

    def __init__(self, properties: Mapping[str, Any] | None = None) -> None:
        self._properties: dict[str, Any] = dict(properties or {})
        self._modules: dict[str, Registry] = {}
        self._lock = threading.RLock()
        self._active_name = self.DEFAULT_MODULE
        self._active = self.module(self.DEFAULT_MODULE)

    @property
    def properties(self) -> Mapping[str, Any]:
        return MappingProxyType(self._properties)

    @property
    def active_module(self) -> Registry:
        return self._active

    @property
    def active_module_name(self) -> str:
        return self._active_name

    def property_source(self, path: str | os.PathLike[str]) -> None:
        """Read `key=value` properties from `path` into the shared store.

        Placeholders may refer to keys from sources loaded earlier.
        """
        with self._lock:
            self._properties.update(load_properties(path, self._properties))

    def module(self, name: str) -> Registry:
        """Return the module called `name`, creating it if needed."""
        with self._lock:
            registry = self._modules.get(name)
            if registry is None:
                registry = self._modules[name] = Registry(MappingProxyType(self._properties))
                logger.debug("Created module %r", name)
            return registry

    def change_module(self, name: str) -> Registry:
        registry = self.module(name)
        with self._lock:
            self._active_name = name
            self._active = registry
        logger.debug("Active module is now %r", name)
        return registry

    def bind(
        self,
        interface: Hashable,
        impl: type,
        values: Mapping[str, Any] | None = None,
        scope: Scope = Scope.SINGLETON,
    ) -> None:
        self._active.bind(interface, impl, values, scope)

    @overload
    def assemble(self, token: type[T]) -> T: ...

    @overload
    def assemble(self, token: Hashable) -> Any: ...

    def assemble(self, token: Hashable) -> Any:
        return self._active.assemble(token)
