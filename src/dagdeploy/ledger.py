"""The ledger client port and an in-memory implementation of it."""

import logging
from typing import Any, Iterable, Optional, Protocol, Sequence

__all__ = ["LedgerClient", "LedgerError", "InMemoryLedgerClient"]

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Raised by ledger clients when a deployment is rejected or cannot be submitted."""

    pass


class LedgerClient(Protocol):
    """Submits deployments and waits for them to be confirmed.

    ``deploy`` blocks until the ledger gives a definitive answer. It returns
    the address of the deployed component, or raises on failure.
    """

    def deploy(self, name: str, args: Sequence[Any]) -> str:
        ...


class InMemoryLedgerClient:
    """Deterministic ledger client for dry runs and tests.

    Addresses come from ``addresses`` in order, and once those are used up
    are generated from a counter. Every call is recorded in ``calls``,
    including calls that fail.

    Example:
        >>> ledger = InMemoryLedgerClient(["0xA", "0xB"], failing={"Claims"})
        >>> ledger.deploy("Roles", [])
        '0xA'
    """

    def __init__(
        self,
        addresses: Optional[Iterable[str]] = None,
        failing: Optional[Iterable[str]] = None,
    ):
        self._addresses = iter(addresses or ())
        self._failing = set(failing or ())
        self._counter = 0
        self.calls: list[tuple[str, list[Any]]] = []

    def fail(self, name: str):
        """Make subsequent deployments of ``name`` fail."""
        self._failing.add(name)

    def deploy(self, name: str, args: Sequence[Any]) -> str:
        self.calls.append((name, list(args)))
        if name in self._failing:
            raise LedgerError(f"Deployment of {name} reverted")

        address = next(self._addresses, None)
        if address is None:
            self._counter += 1
            address = f"0x{self._counter:040x}"
        logger.debug("In-memory ledger deployed %s at %s", name, address)
        return address

    @property
    def attempted_names(self) -> list[str]:
        return [name for name, _ in self.calls]
