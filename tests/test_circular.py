from abc import ABC

import pytest

from graphbind import CircularDependencyError, Registry, Scope


class ServiceA(ABC): ...


class ServiceB(ABC): ...


class ServiceC(ABC): ...


class ServiceCImpl(ServiceC): ...


class ServiceBImpl(ServiceB):
    def __init__(self, service_c: ServiceC):
        self.service_c = service_c


class ServiceAImpl(ServiceA):
    def __init__(self, service_b: ServiceB):
        self.service_b = service_b


class Loop(ABC): ...


class LoopImpl(Loop):
    def __init__(self, service_a: ServiceA, loop: Loop):
        self.service_a = service_a
        self.loop = loop


class Ping(ABC): ...


class Pong(ABC): ...


class PingImpl(Ping):
    def __init__(self, pong: Pong):
        self.pong = pong


class PongImpl(Pong):
    def __init__(self, ping: Ping):
        self.ping = ping


@pytest.fixture
def registry():
    r = Registry()
    r.bind(ServiceA, ServiceAImpl)
    r.bind(ServiceB, ServiceBImpl)
    r.bind(ServiceC, ServiceCImpl)
    r.bind(Loop, LoopImpl)
    r.bind(Ping, PingImpl)
    r.bind(Pong, PongImpl)
    return r


@pytest.mark.parametrize("token", [Loop, LoopImpl])
def test_direct_self_dependency_detected(registry, token):
    with pytest.raises(CircularDependencyError) as ctx:
        registry.assemble(token)

    assert ctx.value.token is LoopImpl
    assert "LoopImpl" in str(ctx.value)


@pytest.mark.parametrize("token", [Ping, PingImpl])
def test_transitive_dependency_detected(registry, token):
    with pytest.raises(CircularDependencyError) as ctx:
        registry.assemble(token)

    assert ctx.value.chain == [PingImpl, PongImpl, PingImpl]
    assert "PingImpl -> " in str(ctx.value)


def test_cycle_error_leaves_registry_usable(registry):
    with pytest.raises(CircularDependencyError):
        registry.assemble(Loop)

    # the acyclic part of the graph is still assemblable
    a = registry.assemble(ServiceA)
    assert isinstance(a.service_b.service_c, ServiceCImpl)

    with pytest.raises(CircularDependencyError):
        registry.assemble(Loop)


def test_diamond_is_not_a_cycle():
    class Shared: ...

    class Left:
        def __init__(self, shared: Shared):
            self.shared = shared

    class Right:
        def __init__(self, shared: Shared):
            self.shared = shared

    class Top:
        def __init__(self, left: Left, right: Right):
            self.left = left
            self.right = right

    r = Registry()
    r.bind("shared", Shared)
    r.bind("left", Left)
    r.bind("right", Right)
    r.bind("top", Top)

    top = r.assemble("top")
    assert top.left.shared is top.right.shared


def test_diamond_of_new_instances_is_not_a_cycle():
    class Shared: ...

    class Left:
        def __init__(self, shared: Shared):
            self.shared = shared

    class Top:
        def __init__(self, left: Left, shared: Shared):
            self.left = left
            self.shared = shared

    r = Registry()
    r.bind("shared", Shared, scope=Scope.NEW_INSTANCE)
    r.bind("left", Left)
    r.bind("top", Top)

    top = r.assemble("top")
    assert top.left.shared is not top.shared
