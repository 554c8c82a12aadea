"""
Ask the resolver a question from the command line.

    python scripts/ask.py "How can I cancel my membership?"
    echo "what are your store hours" | python scripts/ask.py -
"""
import argparse
import asyncio
import json
import sys
from dataclasses import asdict

from dotenv import load_dotenv
load_dotenv()

from support_resolver.config.settings import settings
from support_resolver.dataset.loader import load_faq_corpus
from support_resolver.exceptions import GenerationError
from support_resolver.integrations.embeddings import get_embedding_client
from support_resolver.integrations.llm import get_text_generator
from support_resolver.logging_config import setup_logging
from support_resolver.observability.tracing import flush_traces
from support_resolver.pipeline.graph import build_pipeline


async def run(questions, corpus_path: str, exact: bool) -> int:
    cfg = settings.model_copy(update={"EXACT_ANSWER": exact or settings.EXACT_ANSWER})
    corpus = load_faq_corpus(corpus_path)
    pipeline = build_pipeline(
        cfg,
        embedder=get_embedding_client(cfg),
        generator=get_text_generator(cfg),
        entries=corpus.entries,
    )
    report = await pipeline.cache.build()
    if report.failures:
        print(f"Warning: {len(report.failures)} embeddings failed", file=sys.stderr)

    exit_code = 0
    for question in questions:
        try:
            result = await pipeline.resolve(question)
            print(json.dumps({"question": question, **asdict(result)}, ensure_ascii=False))
        except GenerationError as e:
            print(json.dumps({"question": question, "error": e.message}, ensure_ascii=False))
            exit_code = 1

    flush_traces(cfg)
    return exit_code


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Resolve customer questions against the FAQ corpus.")
    parser.add_argument("question", help="Question text, or '-' to read one question per line from stdin")
    parser.add_argument("--file", type=str, default=settings.FAQ_DATA_PATH, help="Path to the FAQ corpus")
    parser.add_argument("--exact", action="store_true", help="Return stored FAQ answers verbatim when matched")
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args()

    setup_logging(args.log_level)
    if args.question == "-":
        questions = [line.strip() for line in sys.stdin if line.strip()]
    else:
        questions = [args.question]

    sys.exit(asyncio.run(run(questions, args.file, args.exact)))
