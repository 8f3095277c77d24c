import pytest

from bundlebind import (
    ArgumentCountError,
    Container,
    CyclicalDependencyError,
    OverrideUserError,
)


TEST_VALUE1 = 69
TEST_VALUE2 = 42
TEST_VALUE3 = 32


class MyService:
    def get_value1(self) -> int:
        return TEST_VALUE1


class MyTransientService:
    def get_value2(self) -> int:
        return TEST_VALUE2


class MyClassConfig:
    somevar = True


class MyClass:
    def __init__(self, dep: MyService, transient: MyTransientService, config: MyClassConfig) -> None:
        self.dep = dep
        self.transient = transient
        self.config = config


class OverrideClass(MyClass):
    def extra_method(self) -> int:
        return TEST_VALUE3


class MyTransientOverride(MyTransientService): ...


def test_override_with_explicit_dependencies():
    c = Container()
    config = MyClassConfig()

    c.singleton(MyService, [])
    c.transient(MyTransientOverride, [])
    c.singleton(MyClass, [MyService, MyTransientService, config])
    c.override(MyClass, OverrideClass, [MyService, MyTransientOverride, config])
    c.build()

    obj = c.get(MyClass)
    assert isinstance(obj, OverrideClass)
    assert obj.extra_method() == TEST_VALUE3
    assert obj.dep is c.get(MyService)
    assert isinstance(obj.transient, MyTransientOverride)
    assert obj.config is config


def test_override_reuses_base_dependencies_when_omitted():
    c = Container()
    config = MyClassConfig()

    c.singleton(MyService, [])
    c.transient(MyTransientService, [])
    c.singleton(MyClass, [MyService, MyTransientService, config])
    c.override(MyClass, OverrideClass)
    c.build()

    obj = c.get(MyClass)
    assert isinstance(obj, OverrideClass)
    assert obj.dep is c.get(MyService)
    assert obj.config is config


def test_override_is_shared_even_if_base_was_transient():
    c = Container()

    class Base:
        def __init__(self, x: MyService) -> None:
            self.x = x

    class Derived(Base): ...

    c.singleton(MyService)
    c.transient(Base, [MyService])
    c.override(Base, Derived)
    c.build()

    first = c.get(Base)
    second = c.get(Base)
    first.marker = "seen"

    assert isinstance(first, Derived)
    assert first is second
    assert second.marker == "seen"
    assert isinstance(first.x, MyService)


def test_override_does_not_touch_replacement_registration():
    c = Container()

    class Base: ...

    class Derived(Base): ...

    c.register(Base)
    c.transient(Derived)
    c.override(Base, Derived)
    c.build()

    assert c.get(Derived) is not c.get(Derived)
    assert c.get(Base) is c.get(Base)
    assert c.get(Base) is not c.get(Derived)


def test_override_is_constructed_eagerly_during_build():
    c = Container()
    constructed = []

    class Base: ...

    class Derived(Base):
        def __init__(self) -> None:
            constructed.append(self)

    c.register(Base)
    c.override(Base, Derived)
    assert constructed == []

    c.build()
    assert len(constructed) == 1
    assert c.get(Base) is constructed[0]


def test_override_unregistered_base():
    c = Container()

    class Base: ...

    class Derived(Base):
        def __init__(self, name: str) -> None:
            self.name = name

    c.override(Base, Derived, ["impl"])
    c.build()

    assert c.get(Base).name == "impl"


def test_override_with_explicit_empty_dependencies():
    c = Container()

    class Base:
        def __init__(self, svc: MyService) -> None:
            self.svc = svc

    class Stub(Base):
        def __init__(self) -> None:
            self.svc = None

    c.register(Base, [MyService])
    c.override(Base, Stub, [])
    c.build()

    assert isinstance(c.get(Base), Stub)


def test_override_same_base_twice_last_one_wins():
    c = Container()

    class Base: ...

    class First(Base): ...

    class Second(Base): ...

    c.register(Base)
    c.override(Base, First).override(Base, Second)
    c.build()

    assert type(c.get(Base)) is Second


def test_overrides_for_distinct_bases_are_independent():
    c = Container()

    class A: ...

    class B: ...

    class FakeA(A): ...

    class FakeB(B): ...

    c.register(A).register(B)
    c.override(A, FakeA).override(B, FakeB)
    c.build()

    assert type(c.get(A)) is FakeA
    assert type(c.get(B)) is FakeB


def test_override_after_build_raises():
    c = Container()

    c.register(MyService, [])
    c.build()

    with pytest.raises(OverrideUserError):
        c.override(MyClass, OverrideClass)


def test_override_checks_replacement_arity():
    c = Container()

    class Base:
        def __init__(self, svc: MyService) -> None:
            self.svc = svc

    class NeedsTwo(Base):
        def __init__(self, svc: MyService, extra: int) -> None:
            super().__init__(svc)
            self.extra = extra

    c.register(Base, [MyService])

    with pytest.raises(ArgumentCountError):
        c.override(Base, NeedsTwo)


def test_override_rejects_self_referencing_dependencies():
    c = Container()

    class Base: ...

    class Wrapper(Base):
        def __init__(self, inner: Base) -> None:
            self.inner = inner

    c.register(Base)

    with pytest.raises(CyclicalDependencyError):
        c.override(Base, Wrapper, [Base])


def test_override_can_depend_on_another_overridden_base():
    c = Container()

    class Engine: ...

    class TurboEngine(Engine): ...

    class Car:
        def __init__(self, engine: Engine) -> None:
            self.engine = engine

    class SportsCar(Car): ...

    c.register(Engine)
    c.register(Car, [Engine])
    c.override(Car, SportsCar)
    c.override(Engine, TurboEngine)
    c.build()

    car = c.get(Car)

    assert isinstance(car, SportsCar)
    assert isinstance(car.engine, TurboEngine)
    assert car.engine is c.get(Engine)


def test_override_survives_later_registration_of_base():
    c = Container()

    class Clock: ...

    class FrozenClock(Clock): ...

    c.override(Clock, FrozenClock)
    c.register(Clock)
    c.build()

    assert type(c.get(Clock)) is FrozenClock
