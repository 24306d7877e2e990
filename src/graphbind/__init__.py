"""Minimal dependency injection container.

This package assembles object graphs from interface-to-implementation bindings,
resolving constructor dependencies recursively.

Exports:
- `Registry`: binds interfaces to concrete classes and assembles instances,
  with singleton / new-instance scoping and circular dependency detection.
- `Container`: named modules (registries) sharing one property store.
- `Scope`: Enum for controlling instance sharing per concrete class.
- `Value`: class attribute filled from the property store after construction.
- `Lifecycle` / `post_construct`: ways to declare a post-creation hook.
- `parse_properties` / `load_properties`: `key=value` property sources with
  `${key}` interpolation.
"""

from ._container import Container
from ._errors import (
    CircularDependencyError,
    ContainerError,
    EqualBindingError,
    NoBindingFoundError,
    PropertyNotFoundError,
    ResolutionError,
)
from ._inject import Lifecycle, Value, post_construct
from ._properties import load_properties, parse_properties
from ._registry import Binding, Registry, Scope


__all__ = [
    "Binding",
    "CircularDependencyError",
    "Container",
    "ContainerError",
    "EqualBindingError",
    "Lifecycle",
    "NoBindingFoundError",
    "PropertyNotFoundError",
    "Registry",
    "ResolutionError",
    "Scope",
    "Value",
    "load_properties",
    "parse_properties",
    "post_construct",
]
