"""High level entry points for planning and running deployments."""

import logging
from typing import Iterable, Mapping, Optional, Union

from dagdeploy.config import OrchestratorSettings, configure_logging, get_settings
from dagdeploy.domain import ComponentDescriptor, ComponentRef, Literal
from dagdeploy.events import CompositeEventSink, EventSink, LoggingEventSink
from dagdeploy.executor import DeploymentExecutor
from dagdeploy.graph import build_dependency_graph
from dagdeploy.ledger import LedgerClient
from dagdeploy.planner import DeploymentPlan, make_plan
from dagdeploy.registry import ComponentDescriptorRegistry
from dagdeploy.report import RunReport
from dagdeploy.resolver import ArgumentResolver

__all__ = ["plan_deployment", "deploy", "with_known_addresses"]

logger = logging.getLogger(__name__)

Descriptors = Union[ComponentDescriptorRegistry, Iterable[ComponentDescriptor]]


def plan_deployment(descriptors: Descriptors) -> DeploymentPlan:
    """Build the dependency graph for a descriptor set and plan its deployment.

    Args:
        descriptors: A registry, or any iterable of descriptors.

    Returns:
        The deterministic :class:`DeploymentPlan`.

    Raises:
        DuplicateComponent: If two descriptors share a name.
        UnknownReference: If a ComponentRef names a component not in the set.
        CycleDetected: If the references are cyclic.

    Example:
        >>> plan = plan_deployment(registry)
        >>> print(plan.order)
    """
    return make_plan(build_dependency_graph(descriptors))


def deploy(
    descriptors: Descriptors,
    ledger: LedgerClient,
    settings: Optional[OrchestratorSettings] = None,
    sink: Optional[EventSink] = None,
    resolver: Optional[ArgumentResolver] = None,
) -> RunReport:
    """Plan and deploy a descriptor set.

    Planning errors are raised before the ledger client is called. The
    configured log level is applied to the ``dagdeploy`` loggers, and progress
    events go to the given sink and are also logged.

    Args:
        descriptors: A registry, or any iterable of descriptors.
        ledger: The client that performs deployments.
        settings: Orchestrator settings; defaults to :func:`get_settings`.
        sink: An optional additional event sink.
        resolver: An optional argument resolver with extra handlers.

    Returns:
        The finalised :class:`RunReport`.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    plan = plan_deployment(descriptors)

    executor = DeploymentExecutor(
        ledger,
        resolver=resolver,
        sink=CompositeEventSink([LoggingEventSink(level=settings.event_level), sink]),
        failure_policy=settings.failure_policy,
    )
    return executor.run(plan)


def with_known_addresses(
    descriptors: Descriptors, known: Mapping[str, str]
) -> list[ComponentDescriptor]:
    """Substitute already-deployed components with their addresses.

    Descriptors named in ``known`` are dropped, and every reference to one
    of them is replaced by a :class:`Literal` holding its address. Passing
    the addresses from a previous, partially failed run makes a re-run
    deploy only what is still missing.

    Args:
        descriptors: A registry, or any iterable of descriptors.
        known: Addresses of components that are already deployed, keyed by name.

    Returns:
        The descriptors still to deploy.

    Example:
        >>> remaining = with_known_addresses(registry, previous_report.addresses())
    """
    remaining = []
    for descriptor in descriptors:
        if descriptor.name in known:
            logger.info(
                "Using known address %s for %s", known[descriptor.name], descriptor.name
            )
            continue
        remaining.append(
            ComponentDescriptor(
                descriptor.name,
                [
                    Literal(known[arg.name])
                    if isinstance(arg, ComponentRef) and arg.name in known
                    else arg
                    for arg in descriptor.constructor_args
                ],
            )
        )
    return remaining
