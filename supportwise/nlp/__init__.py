from .text_processing import normalize_text, tokenize, stem_word, STOPWORDS
from .entities import extract_entities, detect_topic, Entities
from .intent import detect_intent

__all__ = [
    "normalize_text",
    "tokenize",
    "stem_word",
    "STOPWORDS",
    "extract_entities",
    "detect_topic",
    "Entities",
    "detect_intent",
]
