from .base_agent import BaseAgent
from .query_understanding_agent import QueryUnderstandingAgent
from .context_orchestration_agent import ContextOrchestrationAgent, is_follow_up_query, analyze_user_preferences
from .knowledge_matching_agent import KnowledgeMatchingAgent
from .response_agent import ResponseAgent

__all__ = [
    "BaseAgent",
    "QueryUnderstandingAgent",
    "ContextOrchestrationAgent",
    "KnowledgeMatchingAgent",
    "ResponseAgent",
    "is_follow_up_query",
    "analyze_user_preferences",
]
