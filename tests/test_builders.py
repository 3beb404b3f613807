import logging

import pytest

from dagdeploy.builders import deploy, plan_deployment, with_known_addresses
from dagdeploy.config import FailurePolicy, OrchestratorSettings
from dagdeploy.domain import AccountList, ComponentDescriptor, ComponentRef, Literal
from dagdeploy.errors import CycleDetected, UnknownReference
from dagdeploy.events import InMemoryEventSink
from dagdeploy.insurance import insurance_registry
from dagdeploy.ledger import InMemoryLedgerClient
from dagdeploy.registry import ComponentDescriptorRegistry
from dagdeploy.report import Status


@pytest.fixture
def registry() -> ComponentDescriptorRegistry:
    registry = ComponentDescriptorRegistry()
    registry.component("Roles")
    registry.component("Policies", ComponentRef("Roles"))
    registry.component("Claims", ComponentRef("Roles"), ComponentRef("Policies"))
    return registry


@pytest.fixture
def settings() -> OrchestratorSettings:
    return OrchestratorSettings(_env_file=None)


def test_plan_deployment(registry):
    assert plan_deployment(registry).order == ("Roles", "Policies", "Claims")


def test_planning_twice_gives_same_plan(registry):
    assert plan_deployment(registry).order == plan_deployment(registry.descriptors()).order


def test_deploy_end_to_end(registry, settings):
    ledger = InMemoryLedgerClient(["0xA", "0xB", "0xC"])
    sink = InMemoryEventSink()

    report = deploy(registry, ledger, settings, sink=sink)

    assert report.addresses() == {"Roles": "0xA", "Policies": "0xB", "Claims": "0xC"}
    assert ledger.calls[-1] == ("Claims", ["0xA", "0xB"])
    assert len(sink.events) == 6


def test_deploy_stops_when_a_component_fails(registry, settings):
    ledger = InMemoryLedgerClient(["0xA", "0xB", "0xC"], failing={"Policies"})

    report = deploy(registry, ledger, settings)

    assert [(o.name, o.status) for o in report.outcomes] == [
        ("Roles", Status.SUCCESS),
        ("Policies", Status.FAILED),
    ]
    assert "Claims" not in ledger.attempted_names


def test_deploy_honours_failure_policy(settings):
    registry = ComponentDescriptorRegistry()
    registry.component("a")
    registry.component("b")
    ledger = InMemoryLedgerClient(failing={"a"})

    report = deploy(
        registry,
        ledger,
        settings.model_copy(update={"failure_policy": FailurePolicy.SKIP_DEPENDENTS}),
    )

    assert ledger.attempted_names == ["a", "b"]
    assert report.success_count == 1


def test_self_reference_fails_before_any_deployment(settings):
    ledger = InMemoryLedgerClient()

    with pytest.raises(CycleDetected) as excinfo:
        deploy([ComponentDescriptor("A", [ComponentRef("A")])], ledger, settings)

    assert excinfo.value.cycle_path == ["A"]
    assert ledger.calls == []


def test_unknown_reference_fails_before_any_deployment(settings):
    ledger = InMemoryLedgerClient()

    with pytest.raises(UnknownReference):
        deploy([ComponentDescriptor("Claims", [ComponentRef("Roles")])], ledger, settings)

    assert ledger.calls == []


def test_deploy_logs_progress_events(registry, settings, caplog):
    with caplog.at_level(logging.INFO, logger="dagdeploy"):
        deploy(registry, InMemoryLedgerClient(["0xA", "0xB", "0xC"]), settings)

    assert "[3] Claims succeeded at 0xC" in caplog.text


def test_with_known_addresses_substitutes_literals(registry):
    remaining = with_known_addresses(registry, {"Roles": "0xA"})

    assert remaining == [
        ComponentDescriptor("Policies", [Literal("0xA")]),
        ComponentDescriptor("Claims", [Literal("0xA"), ComponentRef("Policies")]),
    ]


def test_rerun_after_partial_failure_deploys_only_the_rest(registry, settings):
    first = deploy(registry, InMemoryLedgerClient(["0xA"], failing={"Policies"}), settings)
    ledger = InMemoryLedgerClient(["0xB", "0xC"])

    second = deploy(with_known_addresses(registry, first.addresses()), ledger, settings)

    assert ledger.calls == [("Policies", ["0xA"]), ("Claims", ["0xA", "0xB"])]
    assert {**first.addresses(), **second.addresses()} == {
        "Roles": "0xA",
        "Policies": "0xB",
        "Claims": "0xC",
    }


def test_insurance_suite(settings):
    registry = insurance_registry(["0x01"])
    ledger = InMemoryLedgerClient()

    report = deploy(registry, ledger, settings)

    assert report.completed
    assert ledger.attempted_names == [
        "RoleRegistry",
        "PolicyRegistry",
        "ClaimProcessing",
        "PayoutDistribution",
        "PremiumCollection",
    ]
    assert ledger.calls[0] == ("RoleRegistry", [["0x01"]])
    addresses = report.addresses()
    assert ledger.calls[3] == ("PayoutDistribution", [addresses["ClaimProcessing"]])


def test_insurance_registry_declares_admin_accounts():
    registry = insurance_registry(["0x01", "0x02"])

    assert registry["RoleRegistry"].constructor_args == (AccountList(("0x01", "0x02")),)


def test_deploy_applies_configured_log_level(registry):
    package_logger = logging.getLogger("dagdeploy")
    previous_level = package_logger.level

    deploy(
        registry,
        InMemoryLedgerClient(),
        OrchestratorSettings(_env_file=None, log_level="WARNING"),
    )

    assert package_logger.level == logging.WARNING
    package_logger.setLevel(previous_level)


def test_insurance_registry_rejects_single_admin_string():
    with pytest.raises(TypeError):
        insurance_registry("0x01")
