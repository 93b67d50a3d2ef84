# Timing constants
CHECK_IN_TIMEOUT_MS = 300000  # 5 minutes
TYPING_SPEED_MIN_MS = 500
TYPING_SPEED_MAX_MS = 3000
TYPING_SPEED_PER_CHAR = 20
WELCOME_DELAY_MS = 500
RESET_WELCOME_DELAY_MS = 1000
RETRY_MAX_ATTEMPTS = 3
RETRY_DELAY_MS = 1000

# Persisted visitor flag key
LS_KEY_VISITED = "thoughtful_ai_visited"

# Conversation constants
FAREWELL_KEYWORDS = ["bye", "goodbye", "see you", "farewell", "thanks", "thank you"]
FOLLOW_UP_PHRASES = [
    "tell me more",
    "more information",
    "elaborate",
    "explain further",
    "details",
    "examples",
    "what about",
    "how about",
]
# Looser list used when deciding whether a query leans on the previous turn
EXTENDED_FOLLOW_UP_PHRASES = FOLLOW_UP_PHRASES + ["and", "also", "too", "as well"]
REFERENCE_PRONOUNS = ["it", "this", "that", "they", "them", "these", "those"]
DETAIL_PHRASES = ["detail", "explain", "elaborate", "more", "specific"]
CONTEXT_HISTORY_SIZE = 5  # Number of previous queries to keep for context

# Intents that never move the current topic
NON_SUBSTANTIVE_INTENTS = ("greeting", "farewell", "thanks")

BRAND_KEYWORDS = ["thoughtful ai", "thoughtful"]

# Match thresholds
LEXICAL_MATCH_THRESHOLD = 0.3
SEMANTIC_MATCH_THRESHOLD = 15
FOLLOW_UP_CONFIDENCE = 0.9
MATCH_CONFIDENCE = 0.7
