from __future__ import annotations

from typing import Any


def _describe(token: Any) -> str:
    if isinstance(token, str):
        return repr(token)
    return getattr(token, "__qualname__", None) or repr(token)


class ContainerError(RuntimeError):
    pass


class EqualBindingError(ContainerError):
    """Raised when a token is bound to itself."""


class ResolutionError(ContainerError):
    pass


class NoBindingFoundError(ResolutionError):
    def __init__(self, token: Any, msg: str | None = None) -> None:
        self.token = token
        super().__init__(msg or f"No binding could be found for {_describe(token)}")


class CircularDependencyError(ResolutionError):
    """Raised when a class depends on itself, directly or transitively, within one assembly."""

    def __init__(self, token: type, chain: list[type]) -> None:
        self.token = token
        self.chain = chain
        path = " -> ".join(_describe(t) for t in chain)
        super().__init__(f"Detected a circular dependency on {_describe(token)}: {path}")


class PropertyNotFoundError(ResolutionError):
    def __init__(self, key: str, owner: Any = None) -> None:
        self.key = key
        self.owner = owner
        where = f" required by {_describe(owner)}" if owner is not None else ""
        super().__init__(f"Property '{key}'{where} does not exist")
