"""Text normalization and tokenization shared by keyword scoring."""

import re
import unicodedata
from types import MappingProxyType

STOPWORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "if", "then", "else", "when", "while",
    "of", "at", "by", "for", "with", "about", "against", "between", "into",
    "through", "during", "before", "after", "to", "from", "in", "out", "on",
    "off", "over", "under", "again", "further", "once", "here", "there", "all",
    "any", "both", "each", "few", "more", "most", "other", "some", "such", "no",
    "nor", "not", "only", "own", "same", "so", "than", "too", "very", "can",
    "will", "just", "don", "should", "now", "is", "am", "are", "was", "were",
    "be", "been", "being", "have", "has", "had", "do", "does", "did", "doing",
    "this", "that", "these", "those", "as", "it", "its", "they", "them",
    "their", "we", "our", "you", "your", "i", "me", "my",
    # Resume filler
    "responsible", "responsibilities", "worked", "work", "years", "year",
    "experience", "including", "strong", "skills",
})

# Exact token aliases. Tokens are split on spaces first, so only
# single-token keys can ever match.
ALIASES: MappingProxyType = MappingProxyType({
    "ci/cd": "cicd",
    "ci-cd": "cicd",
    "unit-tests": "unit testing",
    "unit-test": "unit testing",
    "integration-tests": "integration testing",
    "e2e": "end to end",
    "end-to-end": "end to end",
    "apis": "api",
})

_QUOTES = str.maketrans({"‘": "'", "’": "'", "“": '"', "”": '"'})
_DISALLOWED_RE = re.compile(r"[^a-z0-9+/#\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMERIC_RE = re.compile(r"^\d+$")


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: str) -> str:
    """Lowercase, strip punctuation and diacritics, collapse whitespace."""
    lowered = _strip_diacritics((text or "").translate(_QUOTES)).lower()
    cleaned = _DISALLOWED_RE.sub(" ", lowered)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def apply_alias(token: str) -> str:
    return ALIASES.get(token, token)


def tokenize(text: str) -> list[str]:
    """Normalize text and split it into alias-resolved tokens."""
    normalized = normalize(text)
    return [apply_alias(t) for t in normalized.split(" ") if t]


def is_useful_token(token: str) -> bool:
    """Reject short tokens, stopwords and bare numbers."""
    if len(token) < 3:
        return False
    if token in STOPWORDS:
        return False
    if _NUMERIC_RE.match(token):
        return False
    return True
