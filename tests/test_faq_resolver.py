"""
Unit tests for the FAQ match resolver.

Tests:
- Multi-intent splitting
- Lexical shortcut (strictly greater than 0.55)
- Semantic fallback (strictly greater than 0.75)
- Deduplication and per-sub-question failure isolation
"""

import pytest

from support_resolver.dataset.schema import FaqEntry
from support_resolver.services.embedding_cache import EmbeddingCache
from support_resolver.services.faq.resolver import FaqMatchResolver, split_sub_questions

from fakes import ASSEMBLY_Q, HOURS_Q, FakeEmbedder


def make_resolver(embedder, entries) -> FaqMatchResolver:
    return FaqMatchResolver(EmbeddingCache(embedder, entries), embedder)


class TestSplitSubQuestions:
    @pytest.mark.parametrize("query, expected", [
        ("store hours and delivery", ["store hours", "delivery"]),
        ("store hours or delivery", ["store hours", "delivery"]),
        ("store hours also delivery", ["store hours", "delivery"]),
        ("store hours, delivery", ["store hours", "delivery"]),
        ("store hours AND delivery", ["store hours", "delivery"]),
        ("a and b, c or d", ["a", "b", "c", "d"]),
    ])
    def test_separators(self, query, expected):
        assert split_sub_questions(query) == expected

    def test_no_separator_is_whole_query(self):
        assert split_sub_questions("  What are your store hours?  ") == ["What are your store hours?"]

    def test_separator_must_be_a_word(self):
        assert split_sub_questions("brand new sandals") == ["brand new sandals"]

    def test_empty_parts_dropped(self):
        assert split_sub_questions("hours,, , delivery") == ["hours", "delivery"]
        assert split_sub_questions("") == []
        assert split_sub_questions(None) == []


@pytest.mark.asyncio
class TestFaqMatching:
    async def test_multi_intent_with_one_unknown(self, embedder, faq_entries):
        resolver = make_resolver(embedder, faq_entries)

        matches = await resolver.find_matches("what are your store hours and do you ship internationally")

        assert [m.question for m in matches] == [HOURS_Q]
        assert matches[0].stage == "lexical"
        assert matches[0].score > 0.55
        assert matches[0].answer == "9am-5pm daily"
        assert matches[0].category == "Store"
        # Lexical hit for the first part never touches the embedder
        assert "what are your store hours" not in embedder.calls
        assert "do you ship internationally" in embedder.calls

    async def test_semantic_fallback(self, vectors, faq_entries):
        vectors = dict(vectors)
        vectors["when do your showrooms open"] = [0.9, 0.1, 0.0, 0.0]
        resolver = make_resolver(FakeEmbedder(vectors), faq_entries)

        matches = await resolver.find_matches("when do your showrooms open")

        assert [m.question for m in matches] == [HOURS_Q]
        assert matches[0].stage == "semantic"
        assert matches[0].score > 0.75

    async def test_semantic_below_threshold(self, vectors, faq_entries):
        vectors = dict(vectors)
        # cosine ~0.707 against the hours question
        vectors["somewhat related"] = [0.7, 0.0, 0.7, 0.0]
        resolver = make_resolver(FakeEmbedder(vectors), faq_entries)

        assert await resolver.find_matches("somewhat related") == []

    async def test_lexical_rating_at_threshold_falls_through(self):
        entry = FaqEntry(category="Test", question="abcdefghijklmnopqrstuvwxyz0123", answer="A.")
        embedder = FakeEmbedder({entry.question: [1.0, 0.0, 0.0, 0.0]})
        resolver = make_resolver(embedder, [entry])

        # dice("abcdefghijkl", question) == 0.55 exactly
        matches = await resolver.find_matches("abcdefghijkl")

        assert matches == []
        assert embedder.calls[-1] == "abcdefghijkl"

    async def test_lexical_rating_at_threshold_can_still_match_semantically(self):
        entry = FaqEntry(category="Test", question="abcdefghijklmnopqrstuvwxyz0123", answer="A.")
        embedder = FakeEmbedder({entry.question: [1.0, 0.0, 0.0, 0.0], "abcdefghijkl": [1.0, 0.0, 0.0, 0.0]})
        resolver = make_resolver(embedder, [entry])

        matches = await resolver.find_matches("abcdefghijkl")

        assert [m.stage for m in matches] == ["semantic"]

    async def test_dedup_keeps_first_occurrence(self, embedder, faq_entries):
        resolver = make_resolver(embedder, faq_entries)

        matches = await resolver.find_matches(
            "do you offer assembly, what are your store hours, do you offer assembly?"
        )

        assert [m.question for m in matches] == [ASSEMBLY_Q, HOURS_Q]

    async def test_same_faq_twice_appears_once(self, embedder, faq_entries):
        resolver = make_resolver(embedder, faq_entries)

        matches = await resolver.find_matches("what are your store hours or store hours?")

        assert [m.question for m in matches] == [HOURS_Q]

    async def test_embedding_failure_isolated_to_one_part(self, vectors, faq_entries):
        embedder = FakeEmbedder(vectors, fail_on={"tell me about gift wrapping"})
        resolver = make_resolver(embedder, faq_entries)

        matches = await resolver.find_matches("tell me about gift wrapping and do you offer assembly")

        assert [m.question for m in matches] == [ASSEMBLY_Q]

    async def test_failed_faq_embedding_excludes_entry(self, vectors, faq_entries):
        embedder = FakeEmbedder(vectors, fail_on={HOURS_Q})
        resolver = make_resolver(embedder, faq_entries)

        matches = await resolver.find_matches("What are your store hours?")

        assert HOURS_Q not in [m.question for m in matches]

    async def test_empty_corpus(self, embedder):
        resolver = make_resolver(embedder, [])

        assert await resolver.find_matches("what are your store hours") == []
        # Only policy vectors were built, no query was embedded
        assert "what are your store hours" not in embedder.calls

    async def test_repeated_queries_are_identical(self, embedder, faq_entries):
        resolver = make_resolver(embedder, faq_entries)
        query = "what are your store hours and do you offer assembly"

        assert await resolver.find_matches(query) == await resolver.find_matches(query)
