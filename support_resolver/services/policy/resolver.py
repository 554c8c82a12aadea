"""
Policy Override Resolver.

Decides whether user text must be answered with a strict policy answer.
Stages run in order and the first hit wins:

1. Regex gate: an action word AND a target word must both be present.
2. Exact keyword (gate open): first keyword contained in the normalized
   text, in policy order then keyword order -> method "regex".
3. Regex fallback (gate open, no keyword): the membership policy ->
   method "regex-fallback".
4. Embedding (everything else): best policy by cosine similarity, hit when
   score >= that policy's threshold -> method "embedding".

Embedding failures in stage 4 are logged and reported as a miss.
"""

import re
from typing import Optional, Sequence

from support_resolver.integrations.embeddings import EmbeddingClient
from support_resolver.logging_config import logger
from support_resolver.exceptions import PolicyConfigurationError
from support_resolver.services.embedding_cache import EmbeddedPolicy, EmbeddingCache
from support_resolver.services.policy.rules import (
    PolicyId,
    PolicyMatchMethod,
    PolicyOverrideResult,
    PolicyRule,
)
from support_resolver.services.similarity import cosine_similarity

ACTION_PATTERN = re.compile(r"\b(cancel|terminate|end|stop|withdraw|close|refund|change|modify)\w*\b", re.ASCII)
TARGET_PATTERN = re.compile(r"\b(member|membership|luxe|luxe membership|credit|voucher|refund|note)\b", re.ASCII)
_PUNCTUATION = re.compile(r"[^\w\s]", re.ASCII)

FALLBACK_POLICY_ID = PolicyId.MEMBERSHIP


def normalize_policy_text(text: Optional[str]) -> str:
    """Lowercase and replace punctuation with spaces."""
    return _PUNCTUATION.sub(" ", (text or "").lower())


def regex_gate_open(normalized: str) -> bool:
    return bool(ACTION_PATTERN.search(normalized)) and bool(TARGET_PATTERN.search(normalized))


class PolicyOverrideResolver:
    def __init__(self, cache: EmbeddingCache, embedder: EmbeddingClient):
        self.cache = cache
        self.embedder = embedder
        self.rules: Sequence[PolicyRule] = cache.rules

        fallback = next((r for r in self.rules if r.id == FALLBACK_POLICY_ID), None)
        if fallback is None:
            raise PolicyConfigurationError(
                f"Policy set must contain the '{FALLBACK_POLICY_ID.value}' fallback policy"
            )
        self.fallback_rule = fallback

    async def resolve(self, user_text: Optional[str]) -> PolicyOverrideResult:
        user_text = user_text or ""
        normalized = normalize_policy_text(user_text)

        if regex_gate_open(normalized):
            rule = self._match_keyword(normalized)
            if rule is not None:
                logger.info("Policy hit", extra={"policy": rule.id.value, "method": "regex", "user": user_text})
                return PolicyOverrideResult(
                    hit=True,
                    answer=rule.strict_answer,
                    policy_id=rule.id,
                    method=PolicyMatchMethod.REGEX,
                )

            logger.info("Policy hit", extra={
                "policy": self.fallback_rule.id.value,
                "method": "regex-fallback",
                "user": user_text,
            })
            return PolicyOverrideResult(
                hit=True,
                answer=self.fallback_rule.strict_answer,
                policy_id=self.fallback_rule.id,
                method=PolicyMatchMethod.REGEX_FALLBACK,
            )

        return await self._match_embedding(user_text)

    def _match_keyword(self, normalized: str) -> Optional[PolicyRule]:
        for rule in self.rules:
            for keyword in rule.keywords:
                if keyword in normalized:
                    return rule
        return None

    async def _match_embedding(self, user_text: str) -> PolicyOverrideResult:
        try:
            await self.cache.ensure_ready()
            user_embedding = await self.embedder.embed(user_text)

            best: Optional[EmbeddedPolicy] = None
            best_score = -1.0
            for policy in self.cache.policy_embeddings:
                score = cosine_similarity(user_embedding, policy.embedding)
                if score > best_score:
                    best, best_score = policy, score
        except Exception as e:
            logger.warning("Policy embedding check failed", extra={"error": str(e)})
            return PolicyOverrideResult.miss()

        if best is not None and best_score >= best.rule.threshold:
            logger.info("Policy hit", extra={
                "policy": best.id.value,
                "method": "embedding",
                "score": round(best_score, 3),
                "user": user_text,
            })
            return PolicyOverrideResult(
                hit=True,
                answer=best.rule.strict_answer,
                policy_id=best.id,
                method=PolicyMatchMethod.EMBEDDING,
                score=best_score,
            )

        logger.debug("No policy override", extra={"best_score": best_score})
        return PolicyOverrideResult.miss()
