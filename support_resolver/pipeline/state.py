from typing import List, Optional, TypedDict

from support_resolver.services.faq.resolver import FaqMatch
from support_resolver.services.policy.rules import PolicyOverrideResult


class State(TypedDict, total=False):
    question: str
    policy: Optional[PolicyOverrideResult]
    matches: List[FaqMatch]
    answer: Optional[str]
