"""The per-run record of deployment outcomes.

A :class:`RunReport` is built up by the executor as it walks a plan, one
:class:`Outcome` per component that was attempted or skipped, and is
finalised when the plan is exhausted or the run stops. Callers read the
addresses of newly deployed components from it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from dagdeploy.domain import DeployedComponent
from dagdeploy.errors import DeploymentCancelled, DeploymentFailed

__all__ = ["Status", "Outcome", "RunReport"]


class Status(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    """
    The outcome of one component in a run.

    Attributes:
        name: Component name.
        status: Whether the component succeeded, failed or was skipped.
        elapsed: Seconds spent on the component, including the ledger call.
        address: Deployed address, for successes.
        error_kind: Name of the error kind, for failures and skips.
        message: Human readable error description, for failures and skips.
        cause: The underlying exception, for failures.
    """

    name: str
    status: Status
    elapsed: float = 0.0
    address: Optional[str] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None
    cause: Optional[BaseException] = None

    @staticmethod
    def success(name: str, address: str, elapsed: float) -> "Outcome":
        return Outcome(name, Status.SUCCESS, elapsed, address=address)

    @staticmethod
    def failed(
        name: str,
        error_kind: str,
        message: str,
        elapsed: float,
        cause: Optional[BaseException] = None,
    ) -> "Outcome":
        return Outcome(
            name, Status.FAILED, elapsed, error_kind=error_kind, message=message, cause=cause
        )

    @staticmethod
    def skipped(name: str, failed_dependency: str) -> "Outcome":
        return Outcome(
            name,
            Status.SKIPPED,
            error_kind="DependencyFailed",
            message=f"Skipped because '{failed_dependency}' failed",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (
                ("name", self.name),
                ("status", self.status.value),
                ("elapsed", self.elapsed),
                ("address", self.address),
                ("error_kind", self.error_kind),
                ("message", self.message),
            )
            if value is not None
        }


class RunReport:
    """Ordered, append-only log of outcomes for a single run.

    Attributes:
        plan_order: The names in the plan the run executed.
        halted: True if the run stopped before reaching the end of the plan.
        cancelled: True if the run stopped because it was cancelled.
    """

    def __init__(self, plan_order: Sequence[str] = ()):
        self.plan_order = tuple(plan_order)
        self.halted = False
        self.cancelled = False
        self._outcomes: list[Outcome] = []
        self._deployed: dict[str, DeployedComponent] = {}
        self._finalized = False

    def record(self, outcome: Outcome, deployed: Optional[DeployedComponent] = None):
        """Append an outcome, with the deployed component for successes.

        Raises:
            RuntimeError: If the report has been finalised.
            ValueError: If the component already has an outcome in this run.
        """
        if self._finalized:
            raise RuntimeError("Cannot record outcomes on a finalised run report")
        if any(existing.name == outcome.name for existing in self._outcomes):
            raise ValueError(f"Component '{outcome.name}' already has an outcome")
        self._outcomes.append(outcome)
        if deployed is not None:
            self._deployed[deployed.name] = deployed

    def finalize(self, halted: bool = False, cancelled: bool = False):
        self.halted = halted or cancelled
        self.cancelled = cancelled
        self._finalized = True

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def outcomes(self) -> tuple[Outcome, ...]:
        return tuple(self._outcomes)

    @property
    def deployed(self) -> dict[str, DeployedComponent]:
        """The components deployed during the run, keyed by name."""
        return dict(self._deployed)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self._outcomes if outcome.status is Status.SUCCESS)

    @property
    def first_failure(self) -> Optional[Outcome]:
        return next(
            (outcome for outcome in self._outcomes if outcome.status is Status.FAILED),
            None,
        )

    @property
    def attempted(self) -> list[str]:
        """Names of components the ledger client was asked to deploy, or that failed resolving."""
        return [
            outcome.name for outcome in self._outcomes if outcome.status is not Status.SKIPPED
        ]

    @property
    def not_attempted(self) -> list[str]:
        """Plan entries with no outcome."""
        recorded = {outcome.name for outcome in self._outcomes}
        return [name for name in self.plan_order if name not in recorded]

    @property
    def completed(self) -> bool:
        """True if every plan entry was deployed successfully."""
        return self.success_count == len(self.plan_order)

    def addresses(self) -> dict[str, str]:
        """Map each successfully deployed component to its address, in plan order."""
        return {
            outcome.name: outcome.address
            for outcome in self._outcomes
            if outcome.status is Status.SUCCESS
        }

    def raise_for_failure(self):
        """Raise if the run did not deploy everything it set out to.

        Raises:
            DeploymentFailed: For the first failed component, chained from its cause.
            DeploymentCancelled: If the run was cancelled without any failure.
        """
        failure = self.first_failure
        if failure is not None:
            error = DeploymentFailed(failure.name, failure.message)
            error.report = self
            raise error from failure.cause
        if self.cancelled:
            error = DeploymentCancelled(self.not_attempted)
            error.report = self
            raise error

    def to_dict(self) -> dict[str, Any]:
        return {
            "completed": self.completed,
            "halted": self.halted,
            "cancelled": self.cancelled,
            "addresses": self.addresses(),
            "outcomes": [outcome.to_dict() for outcome in self._outcomes],
        }

    def __iter__(self):
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)
