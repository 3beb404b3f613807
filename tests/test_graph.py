import pytest

from dagdeploy.domain import ComponentDescriptor, ComponentRef, Literal
from dagdeploy.errors import CycleDetected, DuplicateComponent, UnknownReference
from dagdeploy.graph import build_dependency_graph


def component(name, *refs):
    return ComponentDescriptor(name, [ComponentRef(ref) for ref in refs])


def test_builds_edges_from_component_refs():
    graph = build_dependency_graph(
        [
            component("Roles"),
            component("Policies", "Roles"),
            ComponentDescriptor(
                "Claims", [ComponentRef("Roles"), Literal(3), ComponentRef("Policies")]
            ),
        ]
    )

    assert graph.dependencies == {
        "Roles": frozenset(),
        "Policies": frozenset({"Roles"}),
        "Claims": frozenset({"Roles", "Policies"}),
    }
    assert graph.edges() == [
        ("Claims", "Policies"),
        ("Claims", "Roles"),
        ("Policies", "Roles"),
    ]


def test_building_is_deterministic():
    descriptors = [component("c", "a"), component("a"), component("b", "a", "c")]

    assert build_dependency_graph(descriptors) == build_dependency_graph(descriptors)


def test_self_reference_is_a_cycle():
    with pytest.raises(CycleDetected) as excinfo:
        build_dependency_graph([component("A", "A")])

    assert excinfo.value.cycle_path == ["A"]


def test_transitive_cycle_reports_path():
    with pytest.raises(CycleDetected, match="a -> b -> c -> a") as excinfo:
        build_dependency_graph(
            [component("a", "b"), component("b", "c"), component("c", "a"), component("d")]
        )

    assert excinfo.value.cycle_path == ["a", "b", "c"]


def test_cycle_path_excludes_nodes_leading_into_cycle():
    with pytest.raises(CycleDetected) as excinfo:
        build_dependency_graph(
            [component("a", "b"), component("b", "c"), component("c", "b")]
        )

    assert excinfo.value.cycle_path == ["b", "c"]


def test_unknown_reference_raises():
    with pytest.raises(UnknownReference) as excinfo:
        build_dependency_graph([component("Roles"), component("Claims", "Policies")])

    assert (excinfo.value.from_name, excinfo.value.to_name) == ("Claims", "Policies")


def test_duplicate_descriptor_raises():
    with pytest.raises(DuplicateComponent):
        build_dependency_graph([component("a"), component("a")])


def test_dependents_of_is_transitive():
    graph = build_dependency_graph(
        [
            component("Roles"),
            component("Policies", "Roles"),
            component("Claims", "Policies"),
            component("Payouts", "Claims"),
            component("Oracle"),
        ]
    )

    assert graph.dependents_of("Policies") == {"Claims", "Payouts"}
    assert graph.dependents_of("Roles") == {"Policies", "Claims", "Payouts"}
    assert graph.dependents_of("Oracle") == set()
