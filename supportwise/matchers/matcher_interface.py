from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from supportwise.data_models import KnowledgeItem, MatchResult


class MatcherInterface(ABC):
    threshold: float

    @abstractmethod
    def rank(self, query: str, catalog: Sequence[KnowledgeItem]) -> List[MatchResult]:
        """Scores every catalog item against the query, in catalog order."""
        pass

    def find_best_match(self, query: str, catalog: Sequence[KnowledgeItem]) -> Optional[KnowledgeItem]:
        """
        Returns the highest-scoring item, or None when the best score is under `threshold`.

        Only a strictly greater score replaces the running best, so the first item in
        catalog order wins a tie.
        """
        if not query or not catalog:
            return None

        best_match: Optional[KnowledgeItem] = None
        highest_score = 0.0
        for result in self.rank(query, catalog):
            if result.score > highest_score:
                highest_score = result.score
                best_match = result.item

        return best_match if highest_score >= self.threshold else None
