from support_resolver.services.policy.rules import (
    DEFAULT_POLICY_THRESHOLD,
    POLICIES,
    PolicyId,
    PolicyMatchMethod,
    PolicyOverrideResult,
    PolicyRule,
)
from support_resolver.services.policy.resolver import PolicyOverrideResolver

__all__ = [
    "DEFAULT_POLICY_THRESHOLD",
    "POLICIES",
    "PolicyId",
    "PolicyMatchMethod",
    "PolicyOverrideResult",
    "PolicyRule",
    "PolicyOverrideResolver",
]
