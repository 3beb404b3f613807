"""Execution of deployment plans.

The executor walks a :class:`~dagdeploy.planner.DeploymentPlan` strictly in
order, one component at a time. For each component it resolves the
constructor arguments against the components already deployed in the run,
asks the ledger client to deploy it, and records the outcome.

Deployments are never rolled back. A failure either halts the run (the
default) or, with :attr:`FailurePolicy.SKIP_DEPENDENTS`, skips every
component that transitively depends on the failed one.
"""

import logging
import threading
import time
from typing import Callable, Optional

from dagdeploy.config import FailurePolicy
from dagdeploy.domain import ComponentDescriptor, DeployedComponent
from dagdeploy.errors import OrchestrationError
from dagdeploy.events import DeploymentEvent, EventSink, Phase
from dagdeploy.ledger import LedgerClient
from dagdeploy.planner import DeploymentPlan
from dagdeploy.report import Outcome, RunReport, Status
from dagdeploy.resolver import ArgumentResolver

__all__ = ["DeploymentExecutor"]

logger = logging.getLogger(__name__)


class DeploymentExecutor:
    """Deploy the components of a plan through a ledger client.

    An executor may be reused for several runs, one at a time; each run
    owns its own table of deployed components.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        resolver: Optional[ArgumentResolver] = None,
        sink: Optional[EventSink] = None,
        failure_policy: FailurePolicy = FailurePolicy.HALT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ledger = ledger
        self._resolver = resolver or ArgumentResolver()
        self._sink = sink
        self._failure_policy = failure_policy
        self._clock = clock
        self._cancel_requested = threading.Event()

    def cancel(self):
        """Request that the current or next run stops before its next deployment.

        A ledger call already in flight runs to completion.
        """
        self._cancel_requested.set()

    def run(self, plan: DeploymentPlan) -> RunReport:
        """Deploy every component of the plan, in plan order.

        Args:
            plan: The plan to execute.

        Returns:
            The finalised :class:`RunReport`. Ledger failures are recorded in
            the report rather than raised.

        Raises:
            UnresolvedDependency: If a referenced component has not been deployed.
            UnsupportedArgKind: If an argument kind cannot be resolved. Checked for
                every component before the first deployment.
        """
        report = RunReport(plan.order)
        try:
            return self._run(plan, report)
        finally:
            self._cancel_requested.clear()

    def _run(self, plan: DeploymentPlan, report: RunReport) -> RunReport:
        for descriptor in plan:
            try:
                self._resolver.check(descriptor)
            except OrchestrationError as e:
                report.finalize(halted=True)
                e.report = report
                raise

        deployed: dict[str, DeployedComponent] = {}
        skipped: set[str] = set()

        logger.info("Deploying %d components: %s", len(plan), ", ".join(plan.order))

        for sequence, descriptor in enumerate(plan, start=1):
            if descriptor.name in skipped:
                continue

            if self._cancel_requested.is_set():
                logger.warning(
                    "Run cancelled before deploying %s", ", ".join(report.not_attempted)
                )
                report.finalize(cancelled=True)
                return report

            outcome = self._deploy_one(descriptor, sequence, deployed, report)
            if outcome.status is Status.SUCCESS:
                continue

            if self._failure_policy is FailurePolicy.HALT:
                logger.error(
                    "Halting after %s failed; not deploying %s",
                    descriptor.name,
                    ", ".join(report.not_attempted) or "nothing",
                )
                report.finalize(halted=True)
                return report

            for dependent in sorted(
                plan.graph.dependents_of(descriptor.name) - skipped, key=plan.index_of
            ):
                skipped.add(dependent)
                report.record(Outcome.skipped(dependent, descriptor.name))
                self._emit(
                    DeploymentEvent(
                        dependent,
                        Phase.SKIPPED,
                        plan.index_of(dependent) + 1,
                        error=f"dependency {descriptor.name} failed",
                    )
                )

        report.finalize()
        logger.info(
            "Deployed %d of %d components", report.success_count, len(plan)
        )
        return report

    def _deploy_one(
        self,
        descriptor: ComponentDescriptor,
        sequence: int,
        deployed: dict[str, DeployedComponent],
        report: RunReport,
    ) -> Outcome:
        name = descriptor.name
        started = self._clock()
        self._emit(DeploymentEvent(name, Phase.STARTED, sequence))

        try:
            args = self._resolver.resolve(descriptor, deployed)
        except OrchestrationError as e:
            self._record_failure(name, sequence, type(e).__name__, str(e), started, e, report)
            report.finalize(halted=True)
            e.report = report
            raise

        logger.debug("Deploying %s with arguments %r", name, args)
        try:
            address = self._ledger.deploy(name, args)
            if not address:
                raise ValueError(f"Ledger client returned no address for {name}")
        except Exception as e:
            return self._record_failure(
                name, sequence, "DeploymentFailed", f"{type(e).__name__}: {e}", started, e, report
            )

        component = DeployedComponent(name, address, len(deployed) + 1)
        deployed[name] = component
        outcome = Outcome.success(name, address, self._clock() - started)
        report.record(outcome, component)
        self._emit(DeploymentEvent(name, Phase.SUCCEEDED, sequence, address=address))
        logger.debug("Deployed %s at %s", name, address)
        return outcome

    def _record_failure(self, name, sequence, error_kind, message, started, cause, report):
        outcome = Outcome.failed(name, error_kind, message, self._clock() - started, cause)
        report.record(outcome)
        self._emit(DeploymentEvent(name, Phase.FAILED, sequence, error=message))
        logger.debug("Deployment of %s failed: %s", name, message)
        return outcome

    def _emit(self, event: DeploymentEvent):
        if self._sink is None:
            return
        try:
            self._sink.emit(event)
        except Exception as e:
            logger.warning(f"Event sink failed on {event.component} {event.phase.value}: {e}")
