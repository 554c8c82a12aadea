"""
FastAPI entry point.

Run with:
    uvicorn support_resolver.main:app --port 3000
"""

from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from support_resolver.api.exceptions import generation_exception_handler, validation_exception_handler
from support_resolver.api.routes import router
from support_resolver.config.settings import Settings, settings as default_settings
from support_resolver.dataset.loader import load_faq_corpus
from support_resolver.dataset.schema import FaqEntry
from support_resolver.exceptions import GenerationError
from support_resolver.integrations.embeddings import EmbeddingClient, get_embedding_client
from support_resolver.integrations.llm import TextGenerator, get_text_generator
from support_resolver.logging_config import logger, setup_logging
from support_resolver.observability.tracing import flush_traces
from support_resolver.pipeline.graph import build_pipeline


def create_app(
    settings: Optional[Settings] = None,
    embedder: Optional[EmbeddingClient] = None,
    generator: Optional[TextGenerator] = None,
    entries: Optional[Iterable[FaqEntry]] = None,
) -> FastAPI:
    """
    Build the API. Capabilities and corpus default to the configured ones
    and are only constructed when the app starts.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL)
        logger.info("Starting support resolver", extra={"app": settings.APP_NAME})

        corpus = list(entries) if entries is not None else load_faq_corpus(settings.FAQ_DATA_PATH).entries
        pipeline = build_pipeline(
            settings,
            embedder=embedder or get_embedding_client(settings),
            generator=generator or get_text_generator(settings),
            entries=corpus,
        )
        app.state.pipeline = pipeline

        # Requests wait on the readiness barrier instead of blocking startup
        build_task = pipeline.cache.start()

        yield

        if not build_task.done():
            build_task.cancel()
        flush_traces(settings)
        logger.info("Shutting down support resolver")

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(GenerationError, generation_exception_handler)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
