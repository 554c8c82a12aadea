from support_resolver.integrations.embeddings import (
    EmbeddingClient,
    LocalEmbeddingClient,
    OpenAIEmbeddingClient,
    get_embedding_client,
)
from support_resolver.integrations.llm import LangChainTextGenerator, TextGenerator, get_llm, get_text_generator

__all__ = [
    "EmbeddingClient",
    "LocalEmbeddingClient",
    "OpenAIEmbeddingClient",
    "get_embedding_client",
    "LangChainTextGenerator",
    "TextGenerator",
    "get_llm",
    "get_text_generator",
]
