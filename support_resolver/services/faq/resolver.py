"""
FAQ Match Resolver.

Splits a possibly multi-intent question into sub-questions and resolves each
to at most one FAQ entry:

a. lexical best match over all cached questions, accepted when rating > 0.55
b. otherwise embedding ranking, accepted when the top cosine score > 0.75

Matches are concatenated in sub-question order and deduplicated by question
text, keeping the first occurrence.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from support_resolver.integrations.embeddings import EmbeddingClient
from support_resolver.logging_config import logger
from support_resolver.services.embedding_cache import EmbeddedFaq, EmbeddingCache
from support_resolver.services.similarity import cosine_similarity, lexical_best_match

SUB_QUESTION_SEPARATORS = re.compile(r" and | or | also |,", re.IGNORECASE)

DEFAULT_LEXICAL_THRESHOLD = 0.55
DEFAULT_SEMANTIC_THRESHOLD = 0.75


@dataclass(frozen=True)
class FaqMatch:
    faq: EmbeddedFaq
    stage: str
    score: float
    sub_question: str

    @property
    def question(self) -> str:
        return self.faq.entry.question

    @property
    def answer(self) -> str:
        return self.faq.entry.answer

    @property
    def category(self) -> str:
        return self.faq.entry.category


def split_sub_questions(query: str) -> List[str]:
    """Split on " and ", " or ", " also " and commas; drop empty parts."""
    parts = [p.strip() for p in SUB_QUESTION_SEPARATORS.split(query or "")]
    return [p for p in parts if p]


def dedupe_matches(matches: List[FaqMatch]) -> List[FaqMatch]:
    seen = set()
    unique = []
    for match in matches:
        if match.question not in seen:
            seen.add(match.question)
            unique.append(match)
    return unique


class FaqMatchResolver:
    def __init__(
        self,
        cache: EmbeddingCache,
        embedder: EmbeddingClient,
        lexical_threshold: float = DEFAULT_LEXICAL_THRESHOLD,
        semantic_threshold: float = DEFAULT_SEMANTIC_THRESHOLD,
    ):
        self.cache = cache
        self.embedder = embedder
        self.lexical_threshold = lexical_threshold
        self.semantic_threshold = semantic_threshold

    async def find_matches(self, query: str) -> List[FaqMatch]:
        await self.cache.ensure_ready()
        faqs = self.cache.faq_embeddings

        results = []
        for part in split_sub_questions(query):
            match = await self._resolve_part(part, faqs)
            if match is not None:
                results.append(match)

        return dedupe_matches(results)

    async def _resolve_part(self, part: str, faqs) -> Optional[FaqMatch]:
        if not faqs:
            return None

        best = lexical_best_match(part, [f.question for f in faqs])
        if best is not None and best.rating > self.lexical_threshold:
            logger.info("FAQ match", extra={"stage": "lexical", "rating": round(best.rating, 3), "part": part})
            return FaqMatch(faq=faqs[best.index], stage="lexical", score=best.rating, sub_question=part)

        try:
            part_embedding = await self.embedder.embed(part)
            ranked = sorted(
                ((cosine_similarity(part_embedding, f.embedding), i) for i, f in enumerate(faqs)),
                key=lambda pair: (-pair[0], pair[1]),
            )
        except Exception as e:
            logger.warning("FAQ embedding match failed", extra={"part": part, "error": str(e)})
            return None

        top_score, top_index = ranked[0]
        if top_score > self.semantic_threshold:
            logger.info("FAQ match", extra={"stage": "semantic", "score": round(top_score, 3), "part": part})
            return FaqMatch(faq=faqs[top_index], stage="semantic", score=top_score, sub_question=part)

        logger.debug("No FAQ match", extra={"part": part, "top_score": round(top_score, 3)})
        return None
