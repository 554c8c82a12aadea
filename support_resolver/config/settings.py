from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Support Intent Resolver"
    LOG_LEVEL: str = "INFO"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None

    # Embeddings
    EMBEDDING_PROVIDER: Literal["openai", "local"] = "openai"
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    LOCAL_EMBEDDING_MODEL: str = "all-MiniLM-L6-v2"

    # Generation
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.3

    # Upper bound for every external call; a timeout counts as a failure
    EMBED_TIMEOUT_SECONDS: float = 10.0
    GENERATION_TIMEOUT_SECONDS: float = 30.0

    # Tracing (disabled unless both keys are set)
    LANGFUSE_PUBLIC_KEY: Optional[str] = None
    LANGFUSE_SECRET_KEY: Optional[str] = None
    LANGFUSE_HOST: str = "https://cloud.langfuse.com"

    # Corpus
    FAQ_DATA_PATH: str = "data/faqs.json"

    # Answer assembly
    EXACT_ANSWER: bool = False
    BRAND_NAME: str = "Koala Living"
    ANSWER_TONE: str = "Friendly and polite"
    ANSWER_CLARITY: str = "Clear and simple"
    ANSWER_FOCUS: str = "Customer-first"

    # FAQ matching (both strict "greater than")
    FAQ_LEXICAL_THRESHOLD: float = 0.55
    FAQ_SEMANTIC_THRESHOLD: float = 0.75

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


settings = Settings()
