"""
Embedding Cache.

Holds the vectors for every FAQ question and every policy rule. The cache is
built once, asynchronously, at startup; afterwards it is read-only except for
``retry_failed`` which may append items whose first embedding attempt failed.

Readers wait on ``ensure_ready()``, an awaitable barrier that is released
when the build finishes, whether every item succeeded or not. Published
collections are tuples that are replaced, never mutated in place, so a
request always iterates a consistent snapshot.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from support_resolver.dataset.schema import FaqEntry
from support_resolver.exceptions import EmbeddingError
from support_resolver.integrations.embeddings import EmbeddingClient
from support_resolver.logging_config import logger
from support_resolver.services.policy.rules import POLICIES, PolicyId, PolicyRule


class FailureKind(str, Enum):
    FAQ = "faq"
    POLICY = "policy"


@dataclass(frozen=True)
class EmbeddedFaq:
    entry: FaqEntry
    embedding: Tuple[float, ...]

    @property
    def question(self) -> str:
        return self.entry.question


@dataclass(frozen=True)
class EmbeddedPolicy:
    rule: PolicyRule
    embedding: Tuple[float, ...]

    @property
    def id(self) -> PolicyId:
        return self.rule.id


@dataclass(frozen=True)
class EmbeddingFailure:
    kind: FailureKind
    key: str
    error: str


@dataclass
class CacheBuildReport:
    faq_loaded: int = 0
    policy_loaded: int = 0
    failures: List[EmbeddingFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class EmbeddingCache:
    def __init__(
        self,
        embedder: EmbeddingClient,
        entries: Iterable[FaqEntry],
        rules: Sequence[PolicyRule] = POLICIES,
    ):
        self._embedder = embedder
        self._entries: Tuple[FaqEntry, ...] = tuple(entries)
        self._rules: Tuple[PolicyRule, ...] = tuple(rules)

        self._faqs: Tuple[EmbeddedFaq, ...] = ()
        self._policies: Tuple[EmbeddedPolicy, ...] = ()
        self._failures: Tuple[EmbeddingFailure, ...] = ()
        self._dimension: Optional[int] = None

        self._ready = asyncio.Event()
        self._build_task: Optional[asyncio.Task] = None
        self._report: Optional[CacheBuildReport] = None
        self._retry_lock = asyncio.Lock()

    # === Read-only views ===

    @property
    def faq_embeddings(self) -> Tuple[EmbeddedFaq, ...]:
        return self._faqs

    @property
    def policy_embeddings(self) -> Tuple[EmbeddedPolicy, ...]:
        return self._policies

    @property
    def failures(self) -> Tuple[EmbeddingFailure, ...]:
        return self._failures

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    @property
    def rules(self) -> Tuple[PolicyRule, ...]:
        return self._rules

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def report(self) -> Optional[CacheBuildReport]:
        """Report of the initial build, None until it has finished."""
        return self._report

    def stats(self) -> Dict[str, Any]:
        return {
            "ready": self.is_ready,
            "faq_total": len(self._entries),
            "faq_embedded": len(self._faqs),
            "policy_total": len(self._rules),
            "policy_embedded": len(self._policies),
            "failures": len(self._failures),
            "dimension": self._dimension,
        }

    # === Lifecycle ===

    def start(self) -> "asyncio.Task[CacheBuildReport]":
        """Schedule the build on the running loop (only the first call does anything)."""
        if self._build_task is None:
            self._build_task = asyncio.create_task(self._build())
        return self._build_task

    async def build(self) -> CacheBuildReport:
        """Build the cache, or wait for the build already in progress."""
        return await self.start()

    async def ensure_ready(self) -> None:
        """Suspend until the initial build has finished. Safe to call concurrently and repeatedly."""
        if self._ready.is_set():
            return
        self.start()
        await self._ready.wait()

    async def retry_failed(self) -> CacheBuildReport:
        """
        Re-embed items that failed earlier and merge the ones that now succeed.

        Recovered items take their corpus / policy-list position, so tie-breaking
        by order is the same as if they had never failed. Concurrent calls run
        one after another.
        """
        await self.ensure_ready()
        async with self._retry_lock:
            report = CacheBuildReport()
            if not self._failures:
                return report

            failed_faqs = {f.key for f in self._failures if f.kind is FailureKind.FAQ}
            failed_policies = {f.key for f in self._failures if f.kind is FailureKind.POLICY}

            faqs = await self._embed_faqs([e for e in self._entries if e.question in failed_faqs], report)
            policies = await self._embed_policies([r for r in self._rules if r.id.value in failed_policies], report)

            self._faqs = tuple(sorted(self._faqs + tuple(faqs), key=lambda f: self._entries.index(f.entry)))
            self._policies = tuple(sorted(self._policies + tuple(policies), key=lambda p: self._rules.index(p.rule)))
            self._failures = tuple(report.failures)

        logger.info("Embedding retry finished", extra={
            "faq_recovered": report.faq_loaded,
            "policy_recovered": report.policy_loaded,
            "still_failing": len(report.failures),
        })
        return report

    # === Internals ===

    async def _build(self) -> CacheBuildReport:
        logger.info("Precomputing FAQ & policy embeddings", extra={
            "faqs": len(self._entries),
            "policies": len(self._rules),
        })
        report = CacheBuildReport()
        try:
            faqs = await self._embed_faqs(self._entries, report)
            policies = await self._embed_policies(self._rules, report)
            self._faqs = tuple(faqs)
            self._policies = tuple(policies)
            self._failures = tuple(report.failures)
            self._report = report
        finally:
            self._ready.set()

        logger.info("Embeddings ready", extra={
            "faq_loaded": report.faq_loaded,
            "policy_loaded": report.policy_loaded,
            "failures": len(report.failures),
        })
        return report

    async def _embed_faqs(self, entries: Iterable[FaqEntry], report: CacheBuildReport) -> List[EmbeddedFaq]:
        embedded = []
        for entry in entries:
            try:
                vector = self._validate(await self._embedder.embed(entry.question))
            except Exception as e:
                logger.warning("Failed FAQ embedding", extra={"question": entry.question, "error": str(e)})
                report.failures.append(EmbeddingFailure(FailureKind.FAQ, entry.question, str(e)))
                continue
            embedded.append(EmbeddedFaq(entry=entry, embedding=vector))
            report.faq_loaded += 1
        return embedded

    async def _embed_policies(self, rules: Iterable[PolicyRule], report: CacheBuildReport) -> List[EmbeddedPolicy]:
        embedded = []
        for rule in rules:
            try:
                vector = self._validate(await self._embedder.embed(rule.embedding_text))
            except Exception as e:
                logger.warning("Failed policy embedding", extra={"policy": rule.id.value, "error": str(e)})
                report.failures.append(EmbeddingFailure(FailureKind.POLICY, rule.id.value, str(e)))
                continue
            embedded.append(EmbeddedPolicy(rule=rule, embedding=vector))
            report.policy_loaded += 1
        return embedded

    def _validate(self, vector: Sequence[float]) -> Tuple[float, ...]:
        """All cached vectors must be non-empty and share one dimensionality."""
        vector = tuple(float(v) for v in vector)
        if not vector:
            raise EmbeddingError("Embedding is empty")
        if self._dimension is None:
            self._dimension = len(vector)
        elif len(vector) != self._dimension:
            raise EmbeddingError(f"Embedding dimension {len(vector)} != cache dimension {self._dimension}")
        return vector
