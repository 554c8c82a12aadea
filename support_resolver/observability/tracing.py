from typing import Optional

from langfuse import Langfuse

from support_resolver.config.settings import Settings

try:
    from langfuse.decorators import observe
except ImportError:
    from langfuse import observe

__all__ = ["observe", "get_langfuse_client", "flush_traces"]

_client: Optional[Langfuse] = None


def get_langfuse_client(settings: Settings) -> Optional[Langfuse]:
    """
    Get or initialize the Langfuse client. Returns None when tracing is not configured.
    """
    global _client
    if _client:
        return _client

    if settings.LANGFUSE_PUBLIC_KEY and settings.LANGFUSE_SECRET_KEY:
        _client = Langfuse(
            public_key=settings.LANGFUSE_PUBLIC_KEY,
            secret_key=settings.LANGFUSE_SECRET_KEY,
            host=settings.LANGFUSE_HOST,
        )
    return _client


def flush_traces(settings: Settings) -> None:
    """Send buffered traces before the process exits."""
    client = get_langfuse_client(settings)
    if client is not None:
        client.flush()
