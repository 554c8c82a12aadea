import json
from pathlib import Path
from typing import Any, List, Mapping, Union

import yaml
from pydantic import ValidationError

from support_resolver.dataset.schema import CorpusLoadResult, FaqEntry, RawFaqItem, SkippedItem
from support_resolver.exceptions import CorpusError
from support_resolver.logging_config import logger


def flatten_faqs(raw: List[Mapping[str, Any]]) -> CorpusLoadResult:
    """
    Flatten ``[{category: [{question, answer}, ...]}, ...]`` into FAQ entries.

    Malformed items are skipped and reported in ``CorpusLoadResult.skipped``;
    they never raise. Source order is preserved.
    """
    result = CorpusLoadResult()

    for block in raw:
        if not isinstance(block, Mapping):
            result.skipped.append(SkippedItem(category="", index=-1, reason="category block is not a mapping"))
            continue

        for category, items in block.items():
            if not isinstance(items, list):
                result.skipped.append(SkippedItem(category=str(category), index=-1, reason="items is not a list"))
                continue

            for index, item in enumerate(items):
                if not isinstance(item, Mapping):
                    result.skipped.append(SkippedItem(category=str(category), index=index, reason="item is not a mapping"))
                    continue
                try:
                    parsed = RawFaqItem.model_validate(item)
                except ValidationError as e:
                    fields = ",".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
                    result.skipped.append(SkippedItem(category=str(category), index=index, reason=f"invalid: {fields}"))
                    continue

                result.entries.append(FaqEntry(
                    category=str(category),
                    question=parsed.question,
                    answer=parsed.answer,
                ))

    if result.skipped:
        logger.debug("Skipped malformed FAQ items", extra={"skipped": len(result.skipped)})
    return result


def _read_raw(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_faq_corpus(file_path: Union[str, Path]) -> CorpusLoadResult:
    """
    Load and flatten an FAQ corpus from a JSON or YAML file.

    Raises:
        CorpusError: if the file is missing, unparsable or its root is not a list.
    """
    path = Path(file_path)
    if not path.exists():
        raise CorpusError(f"FAQ corpus not found at: {path}")

    try:
        data = _read_raw(path)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise CorpusError(f"Could not parse FAQ corpus {path}: {e}") from e

    if not isinstance(data, list):
        raise CorpusError(f"FAQ corpus root must be a list of categories, got {type(data).__name__}")

    result = flatten_faqs(data)
    logger.info("FAQ corpus loaded", extra={
        "path": str(path),
        "entries": len(result.entries),
        "skipped": len(result.skipped),
    })
    return result
