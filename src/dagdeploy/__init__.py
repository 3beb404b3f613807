"""Dependency-ordered deployment of interdependent components.

dagdeploy deploys a set of components (in practice, smart contracts) whose
constructors take the addresses of other components in the same set. Each
component declares its constructor arguments; references to other
components form a dependency graph, which is validated and sorted into a
deterministic plan, then executed one deployment at a time against a ledger
client.

Basic Usage:
    >>> from dagdeploy.registry import ComponentDescriptorRegistry
    >>> from dagdeploy.domain import ComponentRef
    >>> from dagdeploy.builders import deploy
    >>>
    >>> registry = ComponentDescriptorRegistry()
    >>> registry.component("Roles")
    >>> registry.component("Policies", ComponentRef("Roles"))
    >>>
    >>> report = deploy(registry, ledger)
    >>> report.addresses()
    {'Roles': '0x...', 'Policies': '0x...'}

The package consists of several modules:
    - domain: Descriptors, argument kinds and deployed components
    - registry: Descriptor registration
    - graph: Dependency graph construction and cycle detection
    - planner: Deterministic topological ordering
    - resolver: Constructor argument resolution
    - executor: Sequential plan execution
    - report: Run outcomes
    - events: Progress events and sinks
    - ledger: The ledger client port
    - config: Settings and logging configuration
    - builders: High-level entry points
"""
