"""
Unit tests for the embedding and generation capability wrappers.

Tests:
- Timeouts become EmbeddingError / GenerationError
- Backend failures are re-raised as the typed errors
- Missing API key is rejected at construction
"""

import asyncio
from types import SimpleNamespace

import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from support_resolver.config.settings import Settings
from support_resolver.exceptions import EmbeddingError, GenerationError
from support_resolver.integrations.embeddings import OpenAIEmbeddingClient
from support_resolver.integrations.llm import LangChainTextGenerator, get_text_generator


def embedding_client(create, timeout: float = 1.0) -> OpenAIEmbeddingClient:
    client = OpenAIEmbeddingClient(api_key="sk-test", timeout=timeout)
    client.client = SimpleNamespace(embeddings=SimpleNamespace(create=create))
    return client


@pytest.mark.asyncio
class TestOpenAIEmbeddingClient:
    async def test_returns_vector(self):
        async def create(input, model):
            assert input == ["two lines"]
            return SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])

        assert await embedding_client(create).embed("two\nlines") == [0.1, 0.2]

    async def test_timeout_is_embedding_error(self):
        async def create(input, model):
            await asyncio.sleep(1)

        with pytest.raises(EmbeddingError, match="timed out"):
            await embedding_client(create, timeout=0.01).embed("slow")

    async def test_backend_failure_is_embedding_error(self):
        async def create(input, model):
            raise ConnectionError("connection reset")

        with pytest.raises(EmbeddingError, match="connection reset"):
            await embedding_client(create).embed("boom")


class TestOpenAIEmbeddingClientConstruction:
    def test_missing_api_key(self):
        with pytest.raises(ValueError):
            OpenAIEmbeddingClient(api_key=None)


@pytest.mark.asyncio
class TestLangChainTextGenerator:
    async def test_returns_message_content(self):
        generator = LangChainTextGenerator(FakeListChatModel(responses=["We open at 9am."]))

        assert await generator.generate("Prompt with {braces}") == "We open at 9am."

    async def test_timeout_is_generation_error(self):
        async def slow_reply(prompt_value):
            await asyncio.sleep(1)
            return AIMessage(content="too late")

        generator = LangChainTextGenerator(RunnableLambda(slow_reply), timeout=0.01)

        with pytest.raises(GenerationError, match="timed out"):
            await generator.generate("slow")

    async def test_backend_failure_is_generation_error(self):
        async def broken_reply(prompt_value):
            raise RuntimeError("rate limited")

        generator = LangChainTextGenerator(RunnableLambda(broken_reply))

        with pytest.raises(GenerationError, match="rate limited"):
            await generator.generate("boom")


class TestTextGeneratorFactory:
    def test_missing_api_key(self):
        with pytest.raises(ValueError):
            get_text_generator(Settings(_env_file=None, OPENAI_API_KEY=None))
