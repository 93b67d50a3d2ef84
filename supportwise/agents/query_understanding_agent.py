from .base_agent import BaseAgent
from .context_orchestration_agent import is_follow_up_query
from supportwise.nlp import detect_intent, detect_topic, extract_entities, tokenize
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class QueryUnderstandingAgent(BaseAgent):
    def __init__(self, agent_id: str = "query_understanding_agent"):
        self.agent_id = agent_id
        logger.info(f"{self.agent_id} initialized.")

    async def process(self, data: dict) -> dict:
        """
        Classifies a user message.

        Args:
            data (dict): 'query_text' (str), optional 'session_id' (str) and optional
                         'context' (ConversationContext) used for follow-up detection.

        Returns:
            dict: intent, topic, entities, keywords and is_follow_up for the message.
        """
        query_text = data.get("query_text")
        session_id = data.get("session_id")
        context = data.get("context")

        if not query_text:
            logger.error("No query_text provided to QueryUnderstandingAgent.")
            return {"error": "Missing query_text", "original_query": query_text, "session_id": session_id, "status": "failure"}

        logger.info(f"Processing query for session {session_id}: '{query_text}'")

        intent = detect_intent(query_text)
        topic = detect_topic(query_text)
        entities = extract_entities(query_text)
        keywords = list(dict.fromkeys(tokenize(query_text)))
        is_follow_up = is_follow_up_query(context, query_text) if context is not None else False

        logger.info(f"Intent: {intent}, topic: {topic}, follow-up: {is_follow_up}, keywords: {keywords}")

        return {
            "original_query": query_text,
            "intent": intent,
            "topic": topic,
            "entities": entities,
            "keywords": keywords,
            "is_follow_up": is_follow_up,
            "session_id": session_id,
            "status": "success",
        }
