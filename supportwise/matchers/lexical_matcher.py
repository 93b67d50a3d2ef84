from typing import List, Optional, Sequence
import logging

from supportwise.constants import LEXICAL_MATCH_THRESHOLD
from supportwise.data_models import KnowledgeItem, MatchResult
from supportwise.nlp.text_processing import normalize_text
from .matcher_interface import MatcherInterface

logger = logging.getLogger(__name__)


def containment_score(normalized_a: str, normalized_b: str) -> float:
    """Length ratio shorter/longer when one string fully contains the other, else 0."""
    if not normalized_a or not normalized_b:
        return 0.0
    if normalized_b in normalized_a:
        return len(normalized_b) / len(normalized_a)
    if normalized_a in normalized_b:
        return len(normalized_a) / len(normalized_b)
    return 0.0


def jaccard_score(normalized_a: str, normalized_b: str) -> float:
    words_a = set(normalized_a.split(" "))
    words_b = set(normalized_b.split(" "))
    common = len(words_a & words_b)
    if common == 0:
        return 0.0
    return common / (len(words_a) + len(words_b) - common)


class LexicalMatcher(MatcherInterface):
    """Cheap baseline: substring containment and word-overlap scoring over normalized text."""

    def __init__(self, threshold: float = LEXICAL_MATCH_THRESHOLD):
        self.threshold = threshold

    def score(self, query: str, item: KnowledgeItem) -> float:
        normalized_query = normalize_text(query)
        normalized_question = normalize_text(item.question)
        if normalized_query == normalized_question:
            return 1.0
        return max(
            containment_score(normalized_query, normalized_question),
            jaccard_score(normalized_query, normalized_question),
        )

    def rank(self, query: str, catalog: Sequence[KnowledgeItem]) -> List[MatchResult]:
        return [MatchResult(item=item, score=self.score(query, item)) for item in catalog]

    def find_best_match(self, query: str, catalog: Sequence[KnowledgeItem]) -> Optional[KnowledgeItem]:
        if not query or not catalog:
            return None

        normalized_query = normalize_text(query)
        for item in catalog:
            # Exact match short-circuits the scan
            if normalize_text(item.question) == normalized_query:
                logger.debug(f"Exact lexical match for '{query}': '{item.question}'")
                return item

        return super().find_best_match(query, catalog)


def find_best_match(query: str, catalog: Sequence[KnowledgeItem]) -> Optional[KnowledgeItem]:
    return LexicalMatcher().find_best_match(query, catalog)
