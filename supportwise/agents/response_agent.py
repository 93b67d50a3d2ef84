from .base_agent import BaseAgent
from .context_orchestration_agent import analyze_user_preferences, is_follow_up_query
import logging
import random
from typing import Any, Dict, Optional

from supportwise import messages
from supportwise.constants import BRAND_KEYWORDS
from supportwise.data_models import ConversationContext
from supportwise.nlp import detect_intent, detect_topic, extract_entities
from supportwise.nlp.entities import AGENT_TOPICS
from supportwise.stores import ErrorLogStore, TelemetryStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Share of resource suggestions drawn from the canned pool; the rest are tailored to preferences
CANNED_SUGGESTION_CUTOFF = 0.3


class ResponseAgent(BaseAgent):
    """Composes the fallback reply for queries the catalog cannot answer."""

    def __init__(
        self,
        agent_id: str = "response_agent",
        rng: Optional[random.Random] = None,
        telemetry: Optional[TelemetryStore] = None,
        error_log: Optional[ErrorLogStore] = None,
    ):
        self.agent_id = agent_id
        self.rng = rng or random.Random()
        self.telemetry = telemetry
        self.error_log = error_log
        logger.info(f"{self.agent_id} initialized.")

    def _track(self, event_type: str, data: Dict[str, Any]) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.track_event(event_type, data)
        except Exception as e:
            logger.warning(f"Telemetry event '{event_type}' failed: {e}")

    def create_resource_suggestion(self, context: ConversationContext) -> str:
        try:
            context.resources_offered = True

            if self.rng.random() > CANNED_SUGGESTION_CUTOFF:
                return self.rng.choice(messages.RESOURCE_SUGGESTIONS)

            topic = context.current_topic or "general"
            preferences = analyze_user_preferences(context)
            self._track("resource_suggestion", {"topic": topic, "userPreferences": preferences})

            if preferences.get("prefersDetailedResponses"):
                return messages.DETAILED_RESOURCE_MESSAGE

            if preferences.get("interestedInAgent"):
                agent = preferences["interestedInAgent"].upper()
                return messages.AGENT_RESOURCE_TEMPLATE.format(agent=agent, slug=agent.lower())

            return messages.GENERIC_RESOURCE_MESSAGE
        except Exception as e:
            self._log_error(e, "create_resource_suggestion")
            return messages.RESOURCE_SUGGESTION_ERROR_MESSAGE

    def _log_error(self, error: Exception, component: str) -> bool:
        if self.error_log is not None:
            return self.error_log.log_error(error, component).recoverable
        logger.error(f"Error in {component}: {error}", exc_info=True)
        return True

    def generate(self, query: str, context: ConversationContext) -> str:
        """
        Picks the fallback reply for an unmatched query.

        A brand mention always gets a resource suggestion. Otherwise scripted
        intents answer directly, follow-ups elaborate on the current topic, and
        anything else gets an agent teaser or a resource suggestion.
        """
        try:
            intent = detect_intent(query)
            topic = detect_topic(query)
            is_follow_up = is_follow_up_query(context, query)
            self._track("generic_response", {
                "intent": intent,
                "topic": topic,
                "entities": extract_entities(query),
                "isFollowUp": is_follow_up,
            })

            lowercase_query = query.lower()
            if any(keyword in lowercase_query for keyword in BRAND_KEYWORDS):
                return self.create_resource_suggestion(context)

            if intent in messages.INTENT_RESPONSES:
                return messages.INTENT_RESPONSES[intent]

            if intent == "follow_up":
                if context.current_topic in messages.FOLLOW_UP_ELABORATIONS:
                    return messages.FOLLOW_UP_ELABORATIONS[context.current_topic]
                if context.resources_offered:
                    return messages.RESOURCES_ALREADY_SHARED_MESSAGE
                return self.create_resource_suggestion(context)

            if topic in AGENT_TOPICS:
                return messages.TOPIC_TEASERS[topic]

            return self.create_resource_suggestion(context)
        except Exception as e:
            if self._log_error(e, "generate_generic_response"):
                return messages.GENERATION_ERROR_MESSAGE
            raise

    async def process(self, data: dict) -> dict:
        query_text = data.get("query_text")
        context: Optional[ConversationContext] = data.get("context")

        if not query_text or context is None:
            logger.error("ResponseAgent requires 'query_text' and 'context'.")
            return {"error": "Missing query_text or context", "status": "failure"}

        return {"response_text": self.generate(query_text, context), "status": "success"}
