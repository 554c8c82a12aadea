"""Report malformed and duplicate questions in an FAQ corpus file."""
import argparse
import sys
from collections import Counter

from support_resolver.dataset.loader import load_faq_corpus
from support_resolver.exceptions import CorpusError


def check(file_path: str) -> int:
    try:
        result = load_faq_corpus(file_path)
    except CorpusError as e:
        print(f"Error: {e.message}")
        return 2

    print(f"Loaded {len(result.entries)} entries from {file_path}")
    for item in result.skipped:
        print(f"  skipped  category={item.category!r} index={item.index} ({item.reason})")

    # Matches are deduplicated by question text, so repeats across categories are ambiguous
    counts = Counter(e.question for e in result.entries)
    duplicates = [q for q, n in counts.items() if n > 1]
    for question in duplicates:
        categories = [e.category for e in result.entries if e.question == question]
        print(f"  duplicate question {question!r} in {categories}")

    return 1 if duplicates else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Validate an FAQ corpus file.")
    parser.add_argument("--file", type=str, default="data/faqs.json")
    args = parser.parse_args()
    sys.exit(check(args.file))
