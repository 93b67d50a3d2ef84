import re
from typing import List

# Characters removed before comparing or tokenizing text
PUNCTUATION_PATTERN = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")
WHITESPACE_PATTERN = re.compile(r"\s+")

STOPWORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to",
    "for", "with", "by", "about", "as", "of", "is", "are", "was", "were",
    "be", "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "shall", "should", "can", "could", "may", "might", "must", "i", "you",
    "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their", "this", "that", "these", "those",
])

# (suffix, guard) pairs in priority order; only the first match is stripped
SUFFIX_RULES = [
    ("ing", None),
    ("ed", None),
    ("s", "ss"),
    ("ly", None),
    ("ment", None),
    ("ness", None),
    ("ity", None),
    ("tion", None),
]


def normalize_text(text: str) -> str:
    """Lowercase, trim, drop punctuation and collapse runs of whitespace."""
    if not text:
        return ""
    cleaned = PUNCTUATION_PATTERN.sub("", text.lower().strip())
    return WHITESPACE_PATTERN.sub(" ", cleaned)


def tokenize(text: str) -> List[str]:
    """
    Splits text into content tokens.

    Tokens of two characters or fewer and stopwords are dropped, so the result
    never contains either.
    """
    if not text:
        return []
    clean_text = PUNCTUATION_PATTERN.sub("", text.lower())
    return [word for word in clean_text.split() if len(word) > 2 and word not in STOPWORDS]


def stem_word(word: str) -> str:
    """Strips at most one suffix, following SUFFIX_RULES order."""
    if not word or len(word) < 3:
        return word

    result = word.lower()
    for suffix, guard in SUFFIX_RULES:
        if result.endswith(suffix):
            if guard and result.endswith(guard):
                continue
            return result[:-len(suffix)]
    return result
