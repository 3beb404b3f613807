"""Construction and validation of the component dependency graph.

Each node is a component name and each edge runs from a component to a
component it references through a ``ComponentRef`` constructor argument.
Building the graph validates the descriptor set: names must be unique,
every reference must name a component in the set, and no component may
transitively reference itself.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from dagdeploy.domain import ComponentDescriptor
from dagdeploy.errors import CycleDetected, DuplicateComponent, UnknownReference

__all__ = ["DependencyGraph", "build_dependency_graph"]


@dataclass(frozen=True)
class DependencyGraph:
    """
    A validated, acyclic graph of component dependencies.

    Attributes:
        descriptors: Mapping from component names to their descriptors, in input order.
        dependencies: Mapping from component names to the names they reference directly.
    """

    descriptors: dict[str, ComponentDescriptor]
    dependencies: dict[str, frozenset[str]]

    def edges(self) -> list[tuple[str, str]]:
        """All ``(dependent, dependency)`` pairs, sorted."""
        return sorted(
            (dependent, dependency)
            for dependent, dependencies in self.dependencies.items()
            for dependency in dependencies
        )

    def dependents_of(self, name: str) -> set[str]:
        """Return every component that transitively depends on ``name``."""
        direct_dependents: dict[str, set[str]] = {node: set() for node in self.dependencies}
        for dependent, dependency in self.edges():
            direct_dependents[dependency].add(dependent)

        found: set[str] = set()
        pending = [name]
        while pending:
            for dependent in direct_dependents.get(pending.pop(), ()):
                if dependent not in found:
                    found.add(dependent)
                    pending.append(dependent)
        return found


def build_dependency_graph(descriptors: Iterable[ComponentDescriptor]) -> DependencyGraph:
    """
    Build a dependency graph from a set of component descriptors.

    Args:
        descriptors: The descriptors to include.

    Returns:
        The validated :class:`DependencyGraph`.

    Raises:
        DuplicateComponent: If two descriptors share a name.
        UnknownReference: If a ComponentRef names a component not in the set.
        CycleDetected: If any component transitively references itself.
    """
    descriptors_by_name = _descriptors_by_unique_name(descriptors)

    dependencies: dict[str, frozenset[str]] = {}
    for name, descriptor in descriptors_by_name.items():
        for reference in descriptor.references:
            if reference not in descriptors_by_name:
                raise UnknownReference(name, reference)
        dependencies[name] = frozenset(descriptor.references)

    cycle = _find_cycle(dependencies)
    if cycle is not None:
        raise CycleDetected(cycle)

    return DependencyGraph(descriptors_by_name, dependencies)


def _descriptors_by_unique_name(
    descriptors: Iterable[ComponentDescriptor],
) -> dict[str, ComponentDescriptor]:
    descriptors_by_name = {}

    for descriptor in descriptors:
        if descriptor.name in descriptors_by_name:
            raise DuplicateComponent(descriptor.name)
        descriptors_by_name[descriptor.name] = descriptor

    return descriptors_by_name


def _find_cycle(dependencies: dict[str, frozenset[str]]) -> Optional[list[str]]:
    """Find a cycle by depth-first search, visiting names in lexicographic order.

    Returns:
        The names on the first cycle found, starting where the cycle closes,
        or None if the graph is acyclic.
    """
    finished: set[str] = set()

    for root in sorted(dependencies):
        if root in finished:
            continue

        path: list[str] = [root]
        on_path = {root}
        stack = [iter(sorted(dependencies[root]))]

        while stack:
            next_node = next(stack[-1], None)
            if next_node is None:
                stack.pop()
                done = path.pop()
                on_path.discard(done)
                finished.add(done)
            elif next_node in on_path:
                return path[path.index(next_node):]
            elif next_node not in finished:
                path.append(next_node)
                on_path.add(next_node)
                stack.append(iter(sorted(dependencies[next_node])))

    return None
