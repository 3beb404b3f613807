"""Exceptions raised while planning and executing deployments."""

from typing import Any, Optional, Sequence

__all__ = [
    "OrchestrationError",
    "DuplicateComponent",
    "CycleDetected",
    "UnknownReference",
    "UnresolvedDependency",
    "UnsupportedArgKind",
    "DeploymentFailed",
    "DeploymentCancelled",
]


class OrchestrationError(Exception):
    """Base class for all orchestrator errors.

    Errors raised part-way through a run carry the report accumulated so far
    in ``report``; errors raised before any deployment leave it as None.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.report: Optional[Any] = None


class DuplicateComponent(OrchestrationError):
    """Raised when two descriptors share a name."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate component name '{name}'")
        self.name = name


class CycleDetected(OrchestrationError):
    """Raised when a component transitively references itself."""

    def __init__(self, cycle_path: Sequence[str]):
        super().__init__(
            f"Dependency cycle detected: {' -> '.join([*cycle_path, cycle_path[0]])}"
            if cycle_path
            else "Dependency cycle detected"
        )
        self.cycle_path = list(cycle_path)


class UnknownReference(OrchestrationError):
    """Raised when a ComponentRef names a component absent from the descriptor set."""

    def __init__(self, from_name: str, to_name: str):
        super().__init__(
            f"Component '{from_name}' references unknown component '{to_name}'"
        )
        self.from_name = from_name
        self.to_name = to_name


class UnresolvedDependency(OrchestrationError):
    """Raised when a referenced component has not been deployed yet."""

    def __init__(self, component: str, dependency: str):
        super().__init__(
            f"Component '{component}' depends on '{dependency}', which has not been deployed"
        )
        self.component = component
        self.dependency = dependency


class UnsupportedArgKind(OrchestrationError):
    """Raised when no handler is registered for a constructor argument's kind."""

    def __init__(self, component: str, arg: Any):
        super().__init__(
            f"Component '{component}' has argument {arg!r} "
            f"of unsupported kind {type(arg).__name__}"
        )
        self.component = component
        self.arg = arg


class DeploymentFailed(OrchestrationError):
    """Raised when the ledger client failed to deploy a component."""

    def __init__(self, component: str, cause: Any):
        super().__init__(f"Deployment of '{component}' failed: {cause}")
        self.component = component
        self.cause = cause


class DeploymentCancelled(OrchestrationError):
    """Raised by callers that treat a cancelled run as an error."""

    def __init__(self, remaining: Sequence[str]):
        super().__init__(f"Run cancelled before deploying {list(remaining)}")
        self.remaining = list(remaining)
