"""Descriptor table for the car insurance contract suite."""

from typing import Sequence

from dagdeploy.domain import AccountList, ComponentRef
from dagdeploy.registry import ComponentDescriptorRegistry

ROLE_REGISTRY = "RoleRegistry"
POLICY_REGISTRY = "PolicyRegistry"
PREMIUM_COLLECTION = "PremiumCollection"
CLAIM_PROCESSING = "ClaimProcessing"
PAYOUT_DISTRIBUTION = "PayoutDistribution"


def insurance_registry(admins: Sequence[str]) -> ComponentDescriptorRegistry:
    """Build the registry of insurance components.

    Args:
        admins: Accounts granted the administrator role by the role registry.
    """
    registry = ComponentDescriptorRegistry()
    registry.component(ROLE_REGISTRY, AccountList(admins))
    registry.component(POLICY_REGISTRY, ComponentRef(ROLE_REGISTRY))
    registry.component(
        PREMIUM_COLLECTION, ComponentRef(ROLE_REGISTRY), ComponentRef(POLICY_REGISTRY)
    )
    registry.component(
        CLAIM_PROCESSING, ComponentRef(ROLE_REGISTRY), ComponentRef(POLICY_REGISTRY)
    )
    registry.component(PAYOUT_DISTRIBUTION, ComponentRef(CLAIM_PROCESSING))
    return registry
