"""Deployment planning.

The planner turns a :class:`~dagdeploy.graph.DependencyGraph` into a
:class:`DeploymentPlan`: an order in which every component appears after all
of the components it references. Whenever several components are ready at
once, the one with the lexicographically smallest name goes first, so the
same descriptor set always yields the same plan.
"""

import heapq
import logging
from dataclasses import dataclass
from typing import Iterator

from dagdeploy.domain import ComponentDescriptor
from dagdeploy.errors import CycleDetected
from dagdeploy.graph import DependencyGraph

__all__ = ["DeploymentPlan", "make_plan"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentPlan:
    """Description of the order in which components are deployed."""

    order: tuple[str, ...]
    """Component names, dependencies first."""

    graph: DependencyGraph
    """The graph the plan was derived from."""

    @property
    def descriptors(self) -> dict[str, ComponentDescriptor]:
        return self.graph.descriptors

    def index_of(self, name: str) -> int:
        return self.order.index(name)

    def __iter__(self) -> Iterator[ComponentDescriptor]:
        return (self.graph.descriptors[name] for name in self.order)

    def __len__(self) -> int:
        return len(self.order)


class _ReadySet:
    """
    Internal helper tracking which components may be placed next.

    Holds, for each unplaced component, the set of its dependencies that are
    not yet placed. Components with no outstanding dependencies are kept in
    a min-heap keyed on name.
    """

    def __init__(self, dependencies: dict[str, frozenset[str]]):
        self._outstanding: dict[str, set[str]] = {
            name: set(names) for name, names in dependencies.items()
        }
        self._ready = [name for name, names in self._outstanding.items() if not names]
        heapq.heapify(self._ready)

    def traverse(self) -> Iterator[str]:
        """
        Yield component names in dependency order.

        Raises:
            CycleDetected: If components remain that can never become ready.
        """
        while self._ready:
            next_item = heapq.heappop(self._ready)
            yield next_item
            self._place(next_item)

        if self._outstanding:
            raise CycleDetected(sorted(self._outstanding))

    def _place(self, placed: str):
        del self._outstanding[placed]

        for name, outstanding in self._outstanding.items():
            if placed in outstanding:
                outstanding.discard(placed)
                if not outstanding:
                    heapq.heappush(self._ready, name)


def make_plan(graph: DependencyGraph) -> DeploymentPlan:
    """Topologically sort a dependency graph into a deployment plan.

    Args:
        graph: The graph to sort.

    Returns:
        The deterministic :class:`DeploymentPlan` for the graph.

    Raises:
        CycleDetected: If the graph turns out to contain a cycle.

    Example:
        >>> plan = make_plan(build_dependency_graph(registry))
        >>> plan.order
        ('RoleRegistry', 'PolicyRegistry', 'ClaimProcessing')
    """
    order = tuple(_ReadySet(graph.dependencies).traverse())
    logger.debug("Planned deployment order: %s", ", ".join(order))
    return DeploymentPlan(order, graph)
