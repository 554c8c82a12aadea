from support_resolver.services.faq.resolver import FaqMatch, FaqMatchResolver, dedupe_matches, split_sub_questions

__all__ = ["FaqMatch", "FaqMatchResolver", "dedupe_matches", "split_sub_questions"]
