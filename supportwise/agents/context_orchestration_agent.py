from .base_agent import BaseAgent
from collections import Counter
import logging
import re
from typing import Any, Dict, Optional

from supportwise.constants import DETAIL_PHRASES, EXTENDED_FOLLOW_UP_PHRASES, REFERENCE_PRONOUNS
from supportwise.data_models import ConversationContext

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PRONOUN_PATTERNS = [re.compile(rf"\b{pronoun}\b") for pronoun in REFERENCE_PRONOUNS]


def is_follow_up_query(context: ConversationContext, query: str) -> bool:
    """
    Decides whether a query leans on the previous turn instead of standing alone.

    Never true for an empty conversation. Otherwise true on a follow-up phrase,
    on a very short query (three words or fewer), or on a whole-word pronoun.
    """
    if not context.turns:
        return False

    lowercase_query = query.lower()
    if any(phrase in lowercase_query for phrase in EXTENDED_FOLLOW_UP_PHRASES):
        return True

    if len(query.split()) <= 3:
        return True

    return any(pattern.search(lowercase_query) for pattern in PRONOUN_PATTERNS)


def analyze_user_preferences(context: ConversationContext) -> Dict[str, Any]:
    preferences = dict(context.user_preferences)
    queries = [turn.query.lower() for turn in context.turns]

    detail_count = sum(1 for query in queries if any(phrase in query for phrase in DETAIL_PHRASES))
    if detail_count >= 2:
        preferences["prefersDetailedResponses"] = True

    agent_counts = Counter(agent for turn in context.turns for agent in turn.entities.get("agents", []))
    # most_common is a stable descending sort: the first agent to reach the top count wins a tie
    most_mentioned = agent_counts.most_common(1)
    if most_mentioned:
        preferences["interestedInAgent"] = most_mentioned[0][0]

    return preferences


class ContextOrchestrationAgent(BaseAgent):
    def __init__(self, agent_id: str = "context_orchestration_agent", history_turns: int = 5):
        self.agent_id = agent_id
        # One context per session_id; a reset replaces it rather than reusing it
        self.session_contexts: Dict[str, ConversationContext] = {}
        self.history_turns = history_turns
        logger.info(f"{self.agent_id} initialized with history window {self.history_turns}.")

    def get_context(self, session_id: str) -> ConversationContext:
        if session_id not in self.session_contexts:
            self.session_contexts[session_id] = ConversationContext()
            logger.info(f"Initialized new context for session_id: {session_id}")
        return self.session_contexts[session_id]

    async def process(self, data: dict) -> dict:
        """
        Manages conversation context per session.

        Args:
            data (dict): Expected to contain 'session_id' (str) and 'action' (str), one of
                         'add_turn' (with 'query', 'response', 'intent' and optional
                         'matched_item'), 'get_context', 'get_history' (optional
                         'max_turns'), 'analyze_preferences' or 'end_context'.

        Returns:
            dict: The requested data or the status of the update.
        """
        session_id = data.get("session_id")
        action = data.get("action", "get_context")

        if not session_id:
            logger.error("No session_id provided to ContextOrchestrationAgent.")
            return {"error": "Missing session_id", "status": "failure"}

        if action == "end_context":
            context: Optional[ConversationContext] = self.session_contexts.pop(session_id, None)
            logger.info(f"Finalized context for session {session_id}.")
            return {"status": "success", "session_id": session_id, "context": context}

        context = self.get_context(session_id)

        if action == "add_turn":
            query = data.get("query")
            response = data.get("response")
            if not query or response is None:
                logger.warning(f"Incomplete turn for session {session_id}: query={query!r}, response={response!r}")
                return {"status": "failure", "session_id": session_id, "error": "Turn requires 'query' and 'response'."}
            turn = context.add_turn(
                query=query,
                response=response,
                matched_item=data.get("matched_item"),
                intent=data.get("intent", "question"),
            )
            logger.info(f"Added turn for session {session_id}. Turn count: {len(context.turns)}, topic: {context.current_topic}")
            return {"status": "success", "session_id": session_id, "turn": turn}

        elif action == "get_context":
            return {"status": "success", "session_id": session_id, "context": context}

        elif action == "get_history":
            max_turns = data.get("max_turns", self.history_turns)
            return {"status": "success", "session_id": session_id, "history": context.history(max_turns)}

        elif action == "analyze_preferences":
            return {"status": "success", "session_id": session_id, "preferences": analyze_user_preferences(context)}

        else:
            logger.warning(f"Unknown action '{action}' for session {session_id}.")
            return {"status": "failure", "session_id": session_id, "error": f"Unknown action: {action}"}
