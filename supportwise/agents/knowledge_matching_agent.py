from .base_agent import BaseAgent
import logging
from typing import List, Optional, Sequence, Tuple

from supportwise.constants import FOLLOW_UP_CONFIDENCE, MATCH_CONFIDENCE
from supportwise.data_models import KnowledgeItem
from supportwise.matchers import LexicalMatcher, MatcherInterface, SemanticMatcher

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class KnowledgeMatchingAgent(BaseAgent):
    """
    Finds the catalog item that answers a query.

    Cascade: a follow-up reuses the last matched item; otherwise the semantic
    matcher runs first and the lexical matcher backs it up. When both miss,
    the last two queries of the rolling history are joined and tried again.
    """

    def __init__(
        self,
        catalog: Sequence[KnowledgeItem],
        agent_id: str = "knowledge_matching_agent",
        semantic_matcher: Optional[MatcherInterface] = None,
        lexical_matcher: Optional[MatcherInterface] = None,
    ):
        self.agent_id = agent_id
        self.catalog: Tuple[KnowledgeItem, ...] = tuple(catalog)
        self.semantic_matcher = semantic_matcher or SemanticMatcher()
        self.lexical_matcher = lexical_matcher or LexicalMatcher()
        logger.info(f"{self.agent_id} initialized with {len(self.catalog)} catalog items.")

    def match(self, query: str) -> Optional[KnowledgeItem]:
        return (self.semantic_matcher.find_best_match(query, self.catalog)
                or self.lexical_matcher.find_best_match(query, self.catalog))

    async def process(self, data: dict) -> dict:
        """
        Args:
            data (dict): 'query_text' (str), optional 'is_follow_up' (bool),
                         'last_matched_item' (KnowledgeItem) and 'recent_queries' (List[str]).

        Returns:
            dict: 'matched_item' (KnowledgeItem or None), 'confidence' (float) and
                  'strategy' ('follow_up', 'direct', 'combined_history' or 'none').
        """
        query_text = data.get("query_text")
        if not query_text:
            logger.error("No query_text provided to KnowledgeMatchingAgent.")
            return {"error": "Missing query_text", "status": "failure"}

        last_matched_item: Optional[KnowledgeItem] = data.get("last_matched_item")
        if data.get("is_follow_up") and last_matched_item is not None:
            logger.info(f"Follow-up query '{query_text}' reuses '{last_matched_item.question}'.")
            return {"matched_item": last_matched_item, "confidence": FOLLOW_UP_CONFIDENCE, "strategy": "follow_up", "status": "success"}

        matched_item = self.match(query_text)
        strategy = "direct"

        recent_queries: List[str] = data.get("recent_queries") or []
        if matched_item is None and len(recent_queries) > 1:
            combined_query = " ".join(recent_queries[-2:])
            logger.info(f"No direct match, retrying with combined history: '{combined_query}'")
            matched_item = self.match(combined_query)
            strategy = "combined_history"

        if matched_item is None:
            logger.info(f"No catalog match for '{query_text}'.")
            return {"matched_item": None, "confidence": 0, "strategy": "none", "status": "success"}

        logger.info(f"Matched '{query_text}' to '{matched_item.question}' via {strategy}.")
        return {"matched_item": matched_item, "confidence": MATCH_CONFIDENCE, "strategy": strategy, "status": "success"}
