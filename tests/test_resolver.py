from dataclasses import dataclass

import pytest

from dagdeploy.domain import (
    AccountList,
    ComponentDescriptor,
    ComponentRef,
    DeployedComponent,
    Literal,
)
from dagdeploy.errors import UnresolvedDependency, UnsupportedArgKind
from dagdeploy.resolver import ArgumentResolver


@dataclass(frozen=True)
class EnvValue:
    key: str


@pytest.fixture
def resolver():
    return ArgumentResolver()


@pytest.fixture
def deployed():
    return {"Roles": DeployedComponent("Roles", "0xA", 1)}


def test_resolves_each_kind_in_order(resolver, deployed):
    descriptor = ComponentDescriptor(
        "Policies",
        [Literal(42), AccountList(["0x01", "0x02"]), ComponentRef("Roles")],
    )

    assert resolver.resolve(descriptor, deployed) == [42, ["0x01", "0x02"], "0xA"]


def test_undeployed_reference_raises(resolver, deployed):
    descriptor = ComponentDescriptor("Claims", [ComponentRef("Policies")])

    with pytest.raises(UnresolvedDependency) as excinfo:
        resolver.resolve(descriptor, deployed)

    assert (excinfo.value.component, excinfo.value.dependency) == ("Claims", "Policies")


def test_unknown_kind_raises(resolver, deployed):
    descriptor = ComponentDescriptor("Oracle", [EnvValue("FEED")])

    with pytest.raises(UnsupportedArgKind, match="unsupported kind EnvValue"):
        resolver.resolve(descriptor, deployed)


def test_registered_handler_resolves_extra_kind(resolver, deployed):
    resolver.register(EnvValue, lambda arg, component, deployed: f"env:{arg.key}")
    descriptor = ComponentDescriptor("Oracle", [EnvValue("FEED"), ComponentRef("Roles")])

    assert resolver.resolve(descriptor, deployed) == ["env:FEED", "0xA"]


def test_check_reports_unsupported_kind_without_resolving(resolver):
    descriptor = ComponentDescriptor("Oracle", [ComponentRef("Missing"), EnvValue("FEED")])

    with pytest.raises(UnsupportedArgKind):
        resolver.check(descriptor)

    resolver.check(ComponentDescriptor("Claims", [ComponentRef("Missing")]))
