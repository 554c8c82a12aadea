from support_resolver.dataset.schema import CorpusLoadResult, FaqEntry, RawFaqItem, SkippedItem
from support_resolver.dataset.loader import flatten_faqs, load_faq_corpus

__all__ = [
    "CorpusLoadResult",
    "FaqEntry",
    "RawFaqItem",
    "SkippedItem",
    "flatten_faqs",
    "load_faq_corpus",
]
