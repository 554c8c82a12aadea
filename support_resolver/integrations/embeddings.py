import asyncio
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Protocol

from support_resolver.config.settings import Settings
from support_resolver.exceptions import EmbeddingError


class EmbeddingClient(Protocol):
    """Anything that turns text into a dense vector."""

    async def embed(self, text: str) -> List[float]:
        ...


class OpenAIEmbeddingClient:
    """
    Embeddings through the OpenAI API.

    Uses the langfuse drop-in AsyncOpenAI so calls are traced when
    Langfuse credentials are configured.
    """

    def __init__(self, api_key: Optional[str], model: str = "text-embedding-3-small", timeout: float = 10.0):
        if not api_key:
            raise ValueError("OPENAI_API_KEY is not set.")
        from langfuse.openai import AsyncOpenAI

        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.timeout = timeout

    async def embed(self, text: str) -> List[float]:
        text = text.replace("\n", " ")
        try:
            response = await asyncio.wait_for(
                self.client.embeddings.create(input=[text], model=self.model),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingError(f"Embedding request timed out after {self.timeout}s") from e
        except Exception as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e
        return list(response.data[0].embedding)


# Dedicated executor so local inference does not block the event loop
_executor = ThreadPoolExecutor(max_workers=min(32, (os.cpu_count() or 1) * 4))


class LocalEmbeddingClient:
    """Embeddings from a local sentence-transformers model (``local`` extra)."""

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", timeout: float = 10.0):
        from sentence_transformers import SentenceTransformer

        self.model = SentenceTransformer(model_name)
        self.timeout = timeout

    def _encode_sync(self, text: str) -> List[float]:
        vector = self.model.encode([text.replace("\n", " ")], normalize_embeddings=True)
        return vector[0].tolist()

    async def embed(self, text: str) -> List[float]:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(_executor, self._encode_sync, text),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingError(f"Local embedding timed out after {self.timeout}s") from e
        except Exception as e:
            raise EmbeddingError(f"Local embedding failed: {e}") from e


def get_embedding_client(settings: Settings) -> EmbeddingClient:
    """Build the embedding client selected by ``EMBEDDING_PROVIDER``."""
    if settings.EMBEDDING_PROVIDER == "local":
        return LocalEmbeddingClient(
            model_name=settings.LOCAL_EMBEDDING_MODEL,
            timeout=settings.EMBED_TIMEOUT_SECONDS,
        )
    return OpenAIEmbeddingClient(
        api_key=settings.OPENAI_API_KEY,
        model=settings.EMBEDDING_MODEL,
        timeout=settings.EMBED_TIMEOUT_SECONDS,
    )
