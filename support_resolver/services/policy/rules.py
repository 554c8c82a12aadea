"""
Strict policy answers.

These answers are contractual and must be returned verbatim, never
paraphrased by the generator. The set is fixed at build time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

DEFAULT_POLICY_THRESHOLD = 0.82
KEYWORD_SEPARATOR = " | "


class PolicyId(str, Enum):
    MEMBERSHIP = "membership"
    REFUNDS = "refunds"
    CREDIT_NOTES = "credit-notes"
    GIFT_VOUCHERS = "gift-vouchers"


class PolicyMatchMethod(str, Enum):
    REGEX = "regex"
    REGEX_FALLBACK = "regex-fallback"
    EMBEDDING = "embedding"


@dataclass(frozen=True)
class PolicyRule:
    id: PolicyId
    strict_answer: str
    keywords: Tuple[str, ...]
    threshold: float = DEFAULT_POLICY_THRESHOLD

    def __post_init__(self):
        if not 0 < self.threshold <= 1:
            raise ValueError(f"Policy {self.id.value}: threshold must be in (0, 1], got {self.threshold}")
        if not self.keywords:
            raise ValueError(f"Policy {self.id.value}: at least one keyword is required")

    @property
    def embedding_text(self) -> str:
        """Text embedded as the single representative vector of this rule."""
        return KEYWORD_SEPARATOR.join(self.keywords)


@dataclass(frozen=True)
class PolicyOverrideResult:
    hit: bool
    answer: Optional[str] = None
    policy_id: Optional[PolicyId] = None
    method: Optional[PolicyMatchMethod] = None
    score: Optional[float] = None

    @classmethod
    def miss(cls) -> "PolicyOverrideResult":
        return cls(hit=False)


POLICIES: Tuple[PolicyRule, ...] = (
    PolicyRule(
        id=PolicyId.MEMBERSHIP,
        strict_answer=(
            "Koala Living Luxe Memberships are non-refundable and cannot be cancelled or changed "
            "once purchased. If you need help with your account or benefits, please contact our "
            "customer support team."
        ),
        keywords=(
            "cancel membership",
            "how can i cancel",
            "how do i cancel",
            "terminate membership",
            "end membership",
            "change membership",
            "update membership",
            "modify membership",
            "membership cancellation",
            "luxe membership cancel",
        ),
    ),
    PolicyRule(
        id=PolicyId.REFUNDS,
        strict_answer=(
            "Koala Living does not offer refunds except where required by law. Instead, we provide "
            "Credit Notes or exchanges in line with our Returns Policy."
        ),
        keywords=("refund", "money back", "return for cash", "get my money", "refund policy"),
    ),
    PolicyRule(
        id=PolicyId.CREDIT_NOTES,
        strict_answer=(
            "Credit Notes are non-transferable, cannot be sold, and cannot be exchanged for cash. "
            "You may, however, use your Credit Note to place an order for someone else by entering "
            "their delivery address."
        ),
        keywords=("credit note transfer", "sell credit note", "give credit note", "family use credit note"),
    ),
    PolicyRule(
        id=PolicyId.GIFT_VOUCHERS,
        strict_answer="Gift Vouchers are intended for use by the recipient only and cannot be exchanged for cash.",
        keywords=("gift voucher cash", "sell gift voucher", "transfer gift voucher", "give voucher"),
    ),
)
