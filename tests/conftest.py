from typing import Dict, List

import pytest

from support_resolver.dataset.schema import FaqEntry
from support_resolver.services.policy.rules import PolicyId

from fakes import ASSEMBLY_Q, HOURS_Q, FakeEmbedder, FakeGenerator, policy_text


@pytest.fixture
def faq_entries() -> List[FaqEntry]:
    return [
        FaqEntry(category="Store", question=HOURS_Q, answer="9am-5pm daily"),
        FaqEntry(category="Store", question=ASSEMBLY_Q, answer="Most products assemble in minutes."),
    ]


@pytest.fixture
def vectors() -> Dict[str, List[float]]:
    return {
        HOURS_Q: [1.0, 0.0, 0.0, 0.0],
        ASSEMBLY_Q: [0.0, 1.0, 0.0, 0.0],
        policy_text(PolicyId.MEMBERSHIP): [0.0, 0.0, 1.0, 0.0],
        policy_text(PolicyId.REFUNDS): [0.0, 0.0, 0.0, 1.0],
        policy_text(PolicyId.CREDIT_NOTES): [0.0, 0.0, 0.6, 0.8],
        policy_text(PolicyId.GIFT_VOUCHERS): [0.0, 0.8, 0.0, 0.6],
    }


@pytest.fixture
def embedder(vectors) -> FakeEmbedder:
    return FakeEmbedder(vectors)


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()
