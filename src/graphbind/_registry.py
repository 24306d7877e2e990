from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import CircularDependencyError, EqualBindingError, NoBindingFoundError
from ._inject import constructor_parameters, inject_values, run_post_creation_hook


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping

    T = TypeVar("T")


class Scope(Enum):
    SINGLETON = "singleton"
    NEW_INSTANCE = "new_instance"


@dataclass(frozen=True)
class Binding:
    interface: Any
    impl: type
    scope: Scope = Scope.SINGLETON
    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


class Registry:
    """Binding registry and object graph assembler.

    - bind interfaces (any hashable token) to concrete classes
    - assemble with recursive constructor injection
    - scopes: singleton / new instance, kept per concrete class
    - circular dependencies are detected per assembly
    - `Value` fields are filled from the property store, then the post-creation hook runs.
    """

    def __init__(self, properties: Mapping[str, Any] | None = None) -> None:
        self._properties: Mapping[str, Any] = properties if properties is not None else MappingProxyType({})
        self._bindings: dict[Any, Binding] = {}
        # latest binding naming each concrete class; carries its scope and explicit values
        self._impl_bindings: dict[type, Binding] = {}
        self._singletons: dict[type, object] = {}
        self._lock = threading.RLock()

    @property
    def properties(self) -> Mapping[str, Any]:
        return self._properties

    def bind(
        self,
        interface: Hashable,
        impl: type,
        values: Mapping[str, Any] | None = None,
        scope: Scope = Scope.SINGLETON,
    ) -> None:
        """Bind `interface` to the concrete class `impl`.

        Example:
          registry.bind(Repository, SqlRepository)
          registry.bind(Client, HttpClient, {"timeout": 5.0}, scope=Scope.NEW_INSTANCE)

        `values` supplies constructor arguments by parameter name. Binding the same
        interface again replaces the earlier binding.
        """
        if interface == impl:
            msg = f"You cannot bind {getattr(impl, '__qualname__', impl)!r} to itself"
            raise EqualBindingError(msg)

        if not inspect.isclass(impl):
            msg = f"Implementation must be a class, got {impl!r}"
            raise TypeError(msg)

        binding = Binding(interface=interface, impl=impl, scope=scope, values=MappingProxyType(dict(values or {})))

        with self._lock:
            previous = self._bindings.get(interface)
            self._bindings[interface] = binding
            self._impl_bindings[impl] = binding

        if previous is not None and previous.impl is not impl:
            logger.debug("Rebound %r from %s to %s", interface, previous.impl.__qualname__, impl.__qualname__)
        else:
            logger.debug("Bound %r to %s (%s)", interface, impl.__qualname__, scope.value)

    def resolve(self, token: Hashable) -> type:
        """Map a token to the concrete class that should be constructed for it.

        Both a bound interface and a class that is currently a binding target resolve.
        """
        with self._lock:
            binding = self._bindings.get(token)
            if binding is not None:
                return binding.impl

            if any(b.impl == token for b in self._bindings.values()):
                return token  # type: ignore[return-value]

        raise NoBindingFoundError(token)

    def binding(self, token: Hashable) -> Binding:
        impl = self.resolve(token)
        with self._lock:
            return self._impl_bindings[impl]

    def scope(self, token: Hashable) -> Scope:
        return self.binding(token).scope

    def __contains__(self, token: object) -> bool:
        try:
            self.resolve(token)  # type: ignore[arg-type]
        except (NoBindingFoundError, TypeError):
            return False
        return True

    @overload
    def assemble(self, token: type[T]) -> T: ...

    @overload
    def assemble(self, token: Hashable) -> Any: ...

    def assemble(self, token: Hashable) -> Any:
        """Assemble the object bound to `token` with all of its dependencies."""
        with self._lock:
            impl = self.resolve(token)

            cached = self._cached(impl)
            if cached is not None:
                logger.debug("Returning cached singleton %s", impl.__qualname__)
                return cached

            # cycle tracking is per request; an ordered dict keeps the chain for error messages
            return self._build(impl, {})

    def _build(self, token: Hashable, seen: dict[type, None]) -> Any:
        impl = self.resolve(token)

        cached = self._cached(impl)
        if cached is not None:
            return cached

        if impl in seen:
            raise CircularDependencyError(impl, [*seen, impl])

        seen[impl] = None
        try:
            instance = self._instantiate(self._impl_bindings[impl], seen)
        finally:
            del seen[impl]

        if self._impl_bindings[impl].scope is Scope.SINGLETON:
            instance = self._singletons.setdefault(impl, instance)

        return instance

    def _cached(self, impl: type) -> object | None:
        if self._impl_bindings[impl].scope is not Scope.SINGLETON:
            return None
        return self._singletons.get(impl)

    def _instantiate(self, binding: Binding, seen: dict[type, None]) -> Any:
        impl = binding.impl
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for param in constructor_parameters(impl):
            if param.name in binding.values:
                # explicit values win even when they are None
                value = binding.values[param.name]
            elif param.has_default:
                if not param.positional_only:
                    continue
                value = param.default
            elif param.has_annotation:
                value = self._build(param.annotation, seen)
            else:
                msg = (
                    f"Cannot satisfy constructor parameter '{param.name}' for {impl.__name__}: "
                    "no explicit value, default or type annotation found."
                )
                raise NoBindingFoundError(impl, msg)

            if param.positional_only:
                args.append(value)
            else:
                kwargs[param.name] = value

        instance = impl(*args, **kwargs)
        inject_values(instance, self._properties)
        run_post_creation_hook(instance)

        logger.debug("Assembled %s (%s)", impl.__qualname__, binding.scope.value)
        return instance
