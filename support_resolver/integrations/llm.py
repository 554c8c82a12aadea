import asyncio
from typing import Protocol

from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from support_resolver.config.settings import Settings
from support_resolver.exceptions import GenerationError


class TextGenerator(Protocol):
    """Anything that turns a prompt into free text."""

    async def generate(self, prompt: str) -> str:
        ...


def get_llm(settings: Settings) -> ChatOpenAI:
    """
    Get configured LLM client.
    """
    if not settings.OPENAI_API_KEY:
        raise ValueError("OPENAI_API_KEY is not set.")
    return ChatOpenAI(
        model=settings.LLM_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        api_key=settings.OPENAI_API_KEY,
    )


class LangChainTextGenerator:
    """Single-turn generation through a LangChain chat model."""

    def __init__(self, llm, timeout: float = 30.0):
        # The prompt travels as a variable so braces in FAQ answers are not parsed as placeholders
        self.chain = ChatPromptTemplate.from_messages([("human", "{prompt}")]) | llm
        self.timeout = timeout

    async def generate(self, prompt: str) -> str:
        try:
            response = await asyncio.wait_for(
                self.chain.ainvoke({"prompt": prompt}, config={"tags": ["answer_generation"]}),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Generation timed out after {self.timeout}s") from e
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}") from e
        return response.content if hasattr(response, "content") else str(response)


def get_text_generator(settings: Settings) -> LangChainTextGenerator:
    return LangChainTextGenerator(get_llm(settings), timeout=settings.GENERATION_TIMEOUT_SECONDS)
