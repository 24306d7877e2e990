from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, get_type_hints, runtime_checkable

from ._errors import PropertyNotFoundError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    F = TypeVar("F", bound=Callable[..., Any])

_POST_CONSTRUCT_MARKER = "__graphbind_post_construct__"


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: Any
    default: Any
    positional_only: bool

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def has_annotation(self) -> bool:
        return self.annotation is not inspect.Parameter.empty


def constructor_parameters(cls: type) -> list[Parameter]:
    """List the parameters of `cls`'s constructor in declaration order.

    Variadic parameters are left out: the engine only ever fills named slots.
    Annotations come from the evaluated type hints of `__init__` when they can be
    evaluated, otherwise from the raw signature unless that is a string.
    """
    params = inspect.signature(cls).parameters
    hints = _init_type_hints(cls)

    result = []
    for name, p in params.items():
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            continue

        annotation = hints.get(name, p.annotation)
        if isinstance(annotation, str):
            annotation = inspect.Parameter.empty

        result.append(
            Parameter(
                name=name,
                annotation=annotation,
                default=p.default,
                positional_only=p.kind is p.POSITIONAL_ONLY,
            )
        )
    return result


def _init_type_hints(cls: type) -> dict[str, Any]:
    try:
        init = inspect.getattr_static(cls, "__init__")
        hints = get_type_hints(init)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)
        hints = {}

    return hints


class Value:
    """Class attribute filled from the property store after construction.

    Example:
      class Greeter:
          greeting = Value("example.greet")

    The attribute is read-only for normal assignment; only the container writes it.
    """

    __slots__ = ("key", "name", "owner")

    def __init__(self, key: str) -> None:
        self.key = key
        self.name: str | None = None
        self.owner: type | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, obj: object | None, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        try:
            return vars(obj)[self.name]
        except KeyError:
            msg = f"'{type(obj).__name__}.{self.name}' has not been injected from property '{self.key}'"
            raise AttributeError(msg) from None

    def __set__(self, obj: object, value: Any) -> None:
        msg = f"'{type(obj).__name__}.{self.name}' is injected from property '{self.key}' and cannot be assigned"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"Value({self.key!r})"

    def inject(self, obj: object, value: Any) -> None:
        vars(obj)[self.name] = value


def injectable_fields(cls: type) -> list[Value]:
    fields: dict[str, Value] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, Value):
                fields[name] = attr
            elif name in fields:
                # shadowed by a plain attribute in a subclass
                del fields[name]
    return list(fields.values())


def inject_values(instance: object, properties: Mapping[str, Any]) -> None:
    for field in injectable_fields(type(instance)):
        if field.key not in properties:
            raise PropertyNotFoundError(field.key, field.owner)
        field.inject(instance, properties[field.key])


@runtime_checkable
class Lifecycle(Protocol):
    """Capability of objects that need work done once they are fully assembled.

    `post_creation_hook` runs after values are injected, before the instance is
    cached or handed out.
    """

    def post_creation_hook(self) -> None: ...


def post_construct(func: F) -> F:
    """Mark a zero-argument method as the post-creation hook of its class."""
    setattr(func, _POST_CONSTRUCT_MARKER, True)
    return func


def find_post_creation_hook(instance: object) -> Callable[[], object] | None:
    cls = type(instance)
    marked = [
        name
        for name in dir(cls)
        if getattr(inspect.getattr_static(cls, name, None), _POST_CONSTRUCT_MARKER, False)
    ]
    if len(marked) > 1:
        msg = f"{cls.__name__} declares more than one post_construct hook: {', '.join(marked)}"
        raise TypeError(msg)

    if marked:
        return getattr(instance, marked[0])
    if isinstance(instance, Lifecycle):
        return instance.post_creation_hook
    return None


def run_post_creation_hook(instance: object) -> None:
    hook = find_post_creation_hook(instance)
    if hook is not None:
        hook()
