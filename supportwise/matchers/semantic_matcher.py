from collections import Counter
from typing import Dict, List, Optional, Sequence
import logging
import math

import numpy as np

from supportwise.constants import SEMANTIC_MATCH_THRESHOLD
from supportwise.data_models import KnowledgeItem, MatchResult
from supportwise.nlp.entities import detect_topic, extract_entities
from supportwise.nlp.text_processing import normalize_text, stem_word, tokenize
from .matcher_interface import MatcherInterface

logger = logging.getLogger(__name__)

# Score weights
QUESTION_SIMILARITY_WEIGHT = 40
AGENT_ENTITY_BONUS = 15
HEALTHCARE_ENTITY_BONUS = 10
TOPIC_BONUS = 20
ALTERNATIVE_SIMILARITY_WEIGHT = 30
STEMMED_EXACT_BONUS = 50


def item_document(item: KnowledgeItem) -> str:
    return f"{item.question} {item.answer} {' '.join(item.alternative_questions)}"


class TfIdfCorpus:
    """
    Document frequencies over a fixed list of documents.

    IDF(t) = ln(N / (df(t) + 1)), so a term present in every document gets a
    slightly negative weight. Term frequency is always taken from the text
    being vectorized, which need not be one of the corpus documents.
    """

    def __init__(self, documents: Sequence[str]):
        self.size = len(documents)
        self.document_frequency: Counter = Counter()
        for document in documents:
            self.document_frequency.update(set(tokenize(document)))
        self._idf_cache: Dict[str, float] = {}

    def idf(self, term: str) -> float:
        if not self.size:
            return 0.0
        if term not in self._idf_cache:
            self._idf_cache[term] = math.log(self.size / (self.document_frequency[term] + 1))
        return self._idf_cache[term]

    def vector(self, text: str, terms: Sequence[str]) -> np.ndarray:
        tokens = tokenize(text)
        if not tokens:
            return np.zeros(len(terms))
        counts = Counter(tokens)
        return np.array([counts[term] / len(tokens) * self.idf(term) for term in terms], dtype=float)

    def similarity(self, text_a: str, text_b: str) -> float:
        """Cosine similarity of the TF-IDF vectors, over the union of the two texts' tokens only."""
        tokens_a = tokenize(text_a)
        tokens_b = tokenize(text_b)
        if not tokens_a or not tokens_b:
            return 0.0

        terms = list(dict.fromkeys(tokens_a + tokens_b))
        vector_a = self.vector(text_a, terms)
        vector_b = self.vector(text_b, terms)

        magnitude_a = float(np.linalg.norm(vector_a))
        magnitude_b = float(np.linalg.norm(vector_b))
        if magnitude_a == 0 or magnitude_b == 0:
            return 0.0
        return float(np.dot(vector_a, vector_b)) / (magnitude_a * magnitude_b)


class SemanticMatcher(MatcherInterface):
    """
    Weighted scorer combining TF-IDF similarity with entity, topic and stemming bonuses.

    The corpus is rebuilt on every call from the catalog plus the query itself,
    so the query's own terms influence IDF.
    """

    def __init__(self, threshold: float = SEMANTIC_MATCH_THRESHOLD):
        self.threshold = threshold

    def build_corpus(self, query: str, catalog: Sequence[KnowledgeItem]) -> TfIdfCorpus:
        documents = [item_document(item) for item in catalog]
        documents.append(query)
        return TfIdfCorpus(documents)

    def score(self, query: str, item: KnowledgeItem, corpus: TfIdfCorpus) -> float:
        score = corpus.similarity(query, item.question) * QUESTION_SIMILARITY_WEIGHT

        query_entities = extract_entities(query)
        item_entities = extract_entities(f"{item.question} {item.answer}")
        if any(agent in item_entities["agents"] for agent in query_entities["agents"]):
            score += AGENT_ENTITY_BONUS
        if any(term in item_entities["healthcare"] for term in query_entities["healthcare"]):
            score += HEALTHCARE_ENTITY_BONUS

        item_topic = item.category.lower() if item.category else detect_topic(item.question)
        if detect_topic(query) == item_topic:
            score += TOPIC_BONUS

        for alternative in item.alternative_questions:
            score += corpus.similarity(query, alternative) * ALTERNATIVE_SIMILARITY_WEIGHT

        if stem_word(normalize_text(query)) == stem_word(normalize_text(item.question)):
            score += STEMMED_EXACT_BONUS

        return score

    def rank(self, query: str, catalog: Sequence[KnowledgeItem]) -> List[MatchResult]:
        if not query or not catalog:
            return []
        corpus = self.build_corpus(query, catalog)
        results = [MatchResult(item=item, score=self.score(query, item, corpus)) for item in catalog]
        logger.debug(f"Semantic scores for '{query}': {[round(result.score, 2) for result in results]}")
        return results


def enhanced_match(query: str, catalog: Sequence[KnowledgeItem]) -> Optional[KnowledgeItem]:
    return SemanticMatcher().find_best_match(query, catalog)
