from supportwise.constants import FAREWELL_KEYWORDS, FOLLOW_UP_PHRASES
from supportwise.nlp.text_processing import normalize_text

# Evaluated top to bottom; the first rule with a matching keyword wins.
INTENT_RULES = [
    ("farewell", FAREWELL_KEYWORDS),
    ("follow_up", FOLLOW_UP_PHRASES),
    ("greeting", ["hello", "hi"]),
    ("thanks", ["thank"]),
    ("help", ["help", "assist"]),
    ("contact", ["contact", "email", "phone", "call", "support"]),
]
DEFAULT_INTENT = "question"


def detect_intent(message: str) -> str:
    normalized_message = normalize_text(message)
    for intent, keywords in INTENT_RULES:
        if any(keyword in normalized_message for keyword in keywords):
            return intent
    return DEFAULT_INTENT
