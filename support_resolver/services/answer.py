"""
Answer Assembly.

Turns a resolved request into the final text: the strict policy answer when
one fired, the stored FAQ answers in verbatim mode, or a generated answer
grounded on the matched FAQ pairs.
"""

from dataclasses import dataclass
from typing import List, Sequence

from support_resolver.exceptions import GenerationError
from support_resolver.integrations.llm import TextGenerator
from support_resolver.logging_config import logger
from support_resolver.services.faq.resolver import FaqMatch
from support_resolver.utils.prompt_sanitization import sanitize_for_prompt

PROMPT_HEADER = """You are a {brand} customer support assistant.
Tone: {tone}
Clarity: {clarity}
Focus: {focus}
Answer length: 3-4 sentences max.

User asked: {question}
"""

GROUNDING_RULES = (
    "RULES: Treat the FAQ answers as the source of truth. If the FAQ directly answers the user, "
    "echo it closely and do not contradict policy.\n"
)

NO_MATCH_INSTRUCTION = "\nNo relevant FAQ found. Answer directly (concise).\n"

VERBATIM_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class AnswerStyle:
    brand: str = "Koala Living"
    tone: str = "Friendly and polite"
    clarity: str = "Clear and simple"
    focus: str = "Customer-first"


def build_prompt(question: str, matches: Sequence[FaqMatch], style: AnswerStyle) -> str:
    prompt = PROMPT_HEADER.format(
        brand=style.brand,
        tone=style.tone,
        clarity=style.clarity,
        focus=style.focus,
        question=sanitize_for_prompt(question),
    )

    if matches:
        prompt += "\nRelevant FAQ(s):\n"
        for i, match in enumerate(matches, start=1):
            prompt += f"Q{i}: {match.question}\nA{i}: {match.answer}\n\n"
        prompt += GROUNDING_RULES
    else:
        prompt += NO_MATCH_INSTRUCTION

    return prompt


def verbatim_answer(matches: Sequence[FaqMatch]) -> str:
    return VERBATIM_SEPARATOR.join(m.answer for m in matches)


class AnswerAssembler:
    def __init__(self, generator: TextGenerator, style: AnswerStyle = AnswerStyle(), exact_answer: bool = False):
        self.generator = generator
        self.style = style
        self.exact_answer = exact_answer

    async def assemble(self, question: str, matches: List[FaqMatch]) -> str:
        """
        Produce the answer for a request that no policy claimed.

        Raises:
            GenerationError: if the text generator fails; this is the only
                failure that is surfaced to the caller.
        """
        if self.exact_answer and matches:
            logger.info("Returning verbatim FAQ answers", extra={"matches": len(matches)})
            return verbatim_answer(matches)

        prompt = build_prompt(question, matches, self.style)
        try:
            return await self.generator.generate(prompt)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}") from e
