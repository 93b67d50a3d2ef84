from .knowledge_item import KnowledgeItem, MatchResult
from .conversation import ConversationTurn, ConversationContext
from .markup import LinkSpan, RichText, parse_markup

__all__ = [
    "KnowledgeItem",
    "MatchResult",
    "ConversationTurn",
    "ConversationContext",
    "LinkSpan",
    "RichText",
    "parse_markup",
]
