"""Domain models used throughout the orchestrator."""

from dataclasses import dataclass, field
from typing import Any, Iterator, Union


@dataclass(frozen=True)
class Literal:
    """A constructor argument passed through unchanged."""

    value: Any


@dataclass(frozen=True)
class AccountList:
    """A constructor argument holding a list of account addresses.

    Attributes:
        addresses: The addresses, normalised to a tuple so the descriptor stays immutable.
    """

    addresses: tuple[str, ...]

    def __post_init__(self):
        if isinstance(self.addresses, str):
            raise TypeError(
                f"AccountList expects a sequence of addresses, got the string {self.addresses!r}"
            )
        object.__setattr__(self, "addresses", tuple(self.addresses))


@dataclass(frozen=True)
class ComponentRef:
    """A constructor argument resolved to the deployed address of another component."""

    name: str


ArgSpec = Union[Literal, AccountList, ComponentRef]


@dataclass(frozen=True)
class ComponentDescriptor:
    """Describes a deployable component.

    Attributes:
        name: Unique name of the component.
        constructor_args: Ordered constructor argument schema.

    Example:
        >>> ComponentDescriptor("ClaimProcessing", [ComponentRef("RoleRegistry")])
    """

    name: str
    constructor_args: tuple[ArgSpec, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "constructor_args", tuple(self.constructor_args))

    @property
    def references(self) -> Iterator[str]:
        """Names of referenced components, in declaration order without repeats."""
        seen = set()
        for arg in self.constructor_args:
            if isinstance(arg, ComponentRef) and arg.name not in seen:
                seen.add(arg.name)
                yield arg.name


@dataclass(frozen=True)
class DeployedComponent:
    """
    Represents a component deployed during a run.

    Attributes:
        name: The component name.
        address: The address returned by the ledger client.
        deployed_at: 1-based logical sequence number of the deployment within the run.
    """

    name: str
    address: str
    deployed_at: int
