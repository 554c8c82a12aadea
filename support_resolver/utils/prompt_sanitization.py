"""
Prompt Sanitization Utilities

User text is copied into the generation prompt, so it is cleaned first to
blunt prompt injection attempts.
"""

import re

_INJECTION_PATTERNS = [
    # Direct instruction overrides
    (r'(?i)(ignore|disregard|forget)\s+(all\s+)?(previous|prior|above|earlier)\s+(instructions|directives|commands|prompts)',
     r'[USER INPUT: \g<0>]'),

    # Role manipulation attempts
    (r'(?i)(you\s+are\s+now|act\s+as|pretend\s+to\s+be|assume\s+the\s+role)\s+(a\s+)?(\w+)',
     r'[USER INPUT: \g<0>]'),

    # Fake RULES / role headers
    (r'(?im)^\s*(system|assistant|rules)\s*:\s*',
     r'[USER INPUT: \g<0>]'),
]


def sanitize_for_prompt(text: str, max_length: int = 2000) -> str:
    """
    Sanitize user input before it is placed in an LLM prompt.

    1. Length limiting
    2. Control character removal
    3. Whitespace normalization
    4. Neutralizing common injection phrasings
    """
    if not text or not isinstance(text, str):
        return ""

    text = text[:max_length]

    # Remove null bytes and other control characters (except newlines and tabs)
    text = re.sub(r'[\x00-\x08\x0b-\x0c\x0e-\x1f\x7f]', '', text)

    text = re.sub(r'\n{3,}', '\n\n', text)
    text = re.sub(r' {2,}', ' ', text)

    for pattern, replacement in _INJECTION_PATTERNS:
        text = re.sub(pattern, replacement, text)

    return text.strip()
