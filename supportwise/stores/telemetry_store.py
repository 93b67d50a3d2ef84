from .base_store import BaseStore
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supportwise.data_models import ConversationContext, KnowledgeItem

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AnalyticsEvent:
    type: str
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class QueryRecord:
    query_id: str
    query: str
    matched_item: Optional[KnowledgeItem]
    match_confidence: float
    response_time_ms: float
    session_id: Optional[str] = None
    helpful: Optional[bool] = None
    feedback: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class SessionRecord:
    session_id: str
    user_agent: Optional[str] = None
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None
    queries: List[QueryRecord] = field(default_factory=list)
    conversation_length: int = 0
    topics_discussed: List[str] = field(default_factory=list)


class TelemetryStore(BaseStore):
    """
    In-memory sink for usage analytics.

    Every recording method is best-effort: when the store is closed the call is
    dropped with a warning instead of raising, and ids come back empty.
    """

    def __init__(self, store_id: str = "telemetry_store"):
        self.store_id = store_id
        self.connected = False
        self.events: List[AnalyticsEvent] = []
        self.queries: Dict[str, QueryRecord] = {}
        self.sessions: Dict[str, SessionRecord] = {}

    async def connect(self):
        self.connected = True
        logger.info(f"{self.store_id}: Connected.")

    async def disconnect(self):
        self.connected = False
        logger.info(f"{self.store_id}: Disconnected. Events recorded: {len(self.events)}")

    def _accepting(self, what: str) -> bool:
        if not self.connected:
            logger.warning(f"{self.store_id}: Not connected, dropping {what}.")
        return self.connected

    def track_event(self, event_type: str, data: Optional[Dict[str, Any]] = None) -> None:
        if not self._accepting(f"event '{event_type}'"):
            return
        event = AnalyticsEvent(type=event_type, data=data or {})
        self.events.append(event)
        logger.debug(f"Analytics event: {event}")

    def track_query(
        self,
        query: str,
        matched_item: Optional[KnowledgeItem],
        match_confidence: float,
        response_time_ms: float,
        session_id: Optional[str] = None,
    ) -> str:
        if not self._accepting("query record"):
            return ""
        query_id = str(uuid.uuid4())
        self.queries[query_id] = QueryRecord(
            query_id=query_id,
            query=query,
            matched_item=matched_item,
            match_confidence=match_confidence,
            response_time_ms=response_time_ms,
            session_id=session_id,
        )
        self.track_event("query", {
            "queryId": query_id,
            "query": query,
            "matchedQuestion": matched_item.question if matched_item else None,
            "matchConfidence": match_confidence,
            "responseTime": response_time_ms,
        })
        return query_id

    def track_feedback(self, query_id: str, helpful: bool, comment: Optional[str] = None) -> None:
        if not self._accepting("feedback"):
            return
        record = self.queries.get(query_id)
        if record:
            record.helpful = helpful
            if comment:
                record.feedback = comment
        else:
            logger.warning(f"{self.store_id}: Feedback for unknown query id {query_id}.")
        self.track_event("feedback", {"queryId": query_id, "helpful": helpful, "feedback": comment})

    def start_session(self, user_agent: Optional[str] = None) -> str:
        if not self._accepting("session start"):
            return ""
        session_id = str(uuid.uuid4())
        self.sessions[session_id] = SessionRecord(session_id=session_id, user_agent=user_agent)
        self.track_event("session_start", {"sessionId": session_id, "userAgent": user_agent})
        return session_id

    def end_session(self, session_id: str, context: ConversationContext) -> None:
        if not self._accepting("session end"):
            return
        session = self.sessions.get(session_id)
        if session is None:
            logger.warning(f"{self.store_id}: end_session for unknown session {session_id}.")
            self.track_event("session_end", {"sessionId": session_id})
            return

        session.end_time = _utcnow()
        session.conversation_length = len(context.turns)
        session.topics_discussed = context.related_topics()
        session.queries = [record for record in self.queries.values() if record.session_id == session_id]

        self.track_event("session_end", {
            "sessionId": session_id,
            "duration": (session.end_time - session.start_time).total_seconds() * 1000,
            "queryCount": len(session.queries),
        })

    def get_faq_improvement_suggestions(self) -> List[Dict[str, Any]]:
        """Groups unmatched or unhelpful queries asked at least twice, most frequent first."""
        groups: Dict[str, List[QueryRecord]] = {}
        for record in self.queries.values():
            if record.matched_item is None or record.helpful is False:
                groups.setdefault(record.query.lower().strip(), []).append(record)

        suggestions = []
        for query_text, records in groups.items():
            if len(records) < 2:
                continue
            feedback = next((record.feedback for record in records if record.feedback), None)
            if feedback:
                suggestion = f'Add FAQ for "{query_text}". User feedback: {feedback}'
            else:
                suggestion = f'Add FAQ for "{query_text}" which was asked {len(records)} times without a good match'
            suggestions.append({"query": query_text, "count": len(records), "suggestion": suggestion})

        return sorted(suggestions, key=lambda s: s["count"], reverse=True)
