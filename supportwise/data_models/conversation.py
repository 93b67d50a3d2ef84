from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supportwise.constants import NON_SUBSTANTIVE_INTENTS
from supportwise.data_models.knowledge_item import KnowledgeItem
from supportwise.nlp.entities import Entities, detect_topic, extract_entities


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConversationTurn:
    query: str
    response: str
    matched_item: Optional[KnowledgeItem]
    timestamp: datetime
    intent: str
    topic: str
    entities: Entities


@dataclass
class ConversationContext:
    """
    Conversation state for a single chat session.

    Turns are append-only and chronological. `current_topic` only moves on
    substantive intents, and `last_matched_item` stays None until a turn
    produces a real catalog hit. `resources_offered` is sticky: once set it
    only goes away with a brand-new context.
    """
    turns: List[ConversationTurn] = field(default_factory=list)
    current_topic: Optional[str] = None
    previous_topics: List[str] = field(default_factory=list)
    last_matched_item: Optional[KnowledgeItem] = None
    user_preferences: Dict[str, Any] = field(default_factory=dict)
    session_start_time: datetime = field(default_factory=_utcnow)
    resources_offered: bool = False

    def add_turn(
        self,
        query: str,
        response: str,
        matched_item: Optional[KnowledgeItem],
        intent: str,
        timestamp: Optional[datetime] = None,
    ) -> ConversationTurn:
        """
        Records a turn and updates the derived topic and match fields.

        Args:
            query (str): The user's message.
            response (str): The bot reply that was delivered.
            matched_item (Optional[KnowledgeItem]): Catalog hit, if any.
            intent (str): Intent label detected for the query.
            timestamp (Optional[datetime]): Defaults to now. A timestamp earlier than the
                                            last turn is clamped to keep the log monotonic.

        Returns:
            ConversationTurn: The appended turn.
        """
        timestamp = timestamp or _utcnow()
        if self.turns and timestamp < self.turns[-1].timestamp:
            timestamp = self.turns[-1].timestamp

        topic = detect_topic(query)
        turn = ConversationTurn(
            query=query,
            response=response,
            matched_item=matched_item,
            timestamp=timestamp,
            intent=intent,
            topic=topic,
            entities=extract_entities(query),
        )
        self.turns.append(turn)

        if intent not in NON_SUBSTANTIVE_INTENTS:
            if self.current_topic and self.current_topic != topic:
                self.previous_topics.append(self.current_topic)
            self.current_topic = topic

        if matched_item is not None:
            self.last_matched_item = matched_item

        return turn

    def history(self, max_turns: int = 5) -> str:
        recent_turns = self.turns[-max_turns:] if max_turns > 0 else []
        return "\n\n".join(f"User: {turn.query}\nBot: {turn.response}" for turn in recent_turns)

    def related_topics(self) -> List[str]:
        topics = [turn.topic for turn in self.turns if turn.topic != "general"]
        return list(dict.fromkeys(topics))
