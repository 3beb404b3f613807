"""Registration of component descriptors."""

from typing import Iterator

from dagdeploy.domain import ArgSpec, ComponentDescriptor
from dagdeploy.errors import DuplicateComponent

__all__ = ["ComponentDescriptorRegistry"]


class ComponentDescriptorRegistry:
    """Registry of component descriptors, kept in registration order.

    Example:
        >>> registry = ComponentDescriptorRegistry()
        >>> registry.component("RoleRegistry", AccountList(["0x01"]))
        >>> registry.component("PolicyRegistry", ComponentRef("RoleRegistry"))
    """

    def __init__(self):
        self._descriptors: dict[str, ComponentDescriptor] = {}

    def register(self, descriptor: ComponentDescriptor) -> ComponentDescriptor:
        """Register a descriptor explicitly.

        Args:
            descriptor: The descriptor to register.

        Returns:
            The registered descriptor.

        Raises:
            DuplicateComponent: If a descriptor with the same name is already registered.
        """
        if descriptor.name in self._descriptors:
            raise DuplicateComponent(descriptor.name)
        self._descriptors[descriptor.name] = descriptor
        return descriptor

    def component(self, name: str, *constructor_args: ArgSpec) -> ComponentDescriptor:
        """Build a descriptor from a name and its constructor arguments and register it."""
        return self.register(ComponentDescriptor(name, constructor_args))

    def descriptors(self) -> list[ComponentDescriptor]:
        return list(self._descriptors.values())

    def __getitem__(self, name: str) -> ComponentDescriptor:
        return self._descriptors[name]

    def __contains__(self, name: str) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[ComponentDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)
