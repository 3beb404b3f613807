"""Resolution of constructor argument schemas into concrete values.

An :class:`ArgumentResolver` holds one handler per argument kind. Each
handler receives the argument, the name of the component being deployed
and the table of components deployed so far, and returns the value passed
to the ledger client.
"""

from typing import Any, Callable, Mapping

from dagdeploy.domain import (
    AccountList,
    ComponentDescriptor,
    ComponentRef,
    DeployedComponent,
    Literal,
)
from dagdeploy.errors import UnresolvedDependency, UnsupportedArgKind

__all__ = ["ArgumentHandler", "ArgumentResolver"]


ArgumentHandler = Callable[[Any, str, Mapping[str, DeployedComponent]], Any]


def _resolve_literal(arg: Literal, component: str, deployed) -> Any:
    return arg.value


def _resolve_account_list(arg: AccountList, component: str, deployed) -> list[str]:
    return list(arg.addresses)


def _resolve_component_ref(
    arg: ComponentRef, component: str, deployed: Mapping[str, DeployedComponent]
) -> str:
    try:
        return deployed[arg.name].address
    except KeyError:
        raise UnresolvedDependency(component, arg.name) from None


class ArgumentResolver:
    """Resolve :class:`ComponentDescriptor` arguments against deployed components."""

    def __init__(self):
        self._handlers: dict[type, ArgumentHandler] = {
            Literal: _resolve_literal,
            AccountList: _resolve_account_list,
            ComponentRef: _resolve_component_ref,
        }

    def register(self, kind: type, handler: ArgumentHandler):
        """Register (or replace) the handler for an argument kind.

        Args:
            kind: The argument class the handler resolves.
            handler: Callable taking the argument, the component name and the deployed table.
        """
        self._handlers[kind] = handler

    def resolve(
        self,
        descriptor: ComponentDescriptor,
        deployed: Mapping[str, DeployedComponent],
    ) -> list[Any]:
        """Resolve each constructor argument of a descriptor, in order.

        Args:
            descriptor: The component about to be deployed.
            deployed: Components deployed so far in the run, keyed by name.

        Returns:
            The resolved constructor arguments.

        Raises:
            UnresolvedDependency: If a referenced component has not been deployed.
            UnsupportedArgKind: If an argument has no registered handler.
        """
        self.check(descriptor)
        return [
            self._handlers[type(arg)](arg, descriptor.name, deployed)
            for arg in descriptor.constructor_args
        ]

    def check(self, descriptor: ComponentDescriptor):
        """Check that every argument of a descriptor has a registered handler.

        Raises:
            UnsupportedArgKind: For the first argument with no handler.
        """
        for arg in descriptor.constructor_args:
            if type(arg) not in self._handlers:
                raise UnsupportedArgKind(descriptor.name, arg)
