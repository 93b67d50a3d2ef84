from typing import Dict, List

Entities = Dict[str, List[str]]

AGENT_NAMES = ["eva", "cam", "phil"]

HEALTHCARE_TERMS = [
    "patient",
    "hospital",
    "clinic",
    "doctor",
    "healthcare",
    "medical",
    "insurance",
    "claim",
    "billing",
    "reimbursement",
    "eligibility",
]

ACTION_VERBS = [
    "help",
    "explain",
    "tell",
    "show",
    "find",
    "get",
    "need",
    "want",
    "looking for",
    "searching",
    "how to",
    "how do",
]

ENTITY_KEYWORDS = {
    "agents": AGENT_NAMES,
    "healthcare": HEALTHCARE_TERMS,
    "actions": ACTION_VERBS,
}

# Topics with a dedicated product agent, in detection precedence order
AGENT_TOPICS = ["eligibility_verification", "claims_processing", "payment_posting"]
KNOWN_TOPICS = AGENT_TOPICS + ["agents", "benefits", "pricing", "contact", "general"]


def extract_entities(text: str) -> Entities:
    """
    Collects every keyword from ENTITY_KEYWORDS that occurs in the text.

    Matching is a case-insensitive substring test, so "cam" also fires on
    "camera". Keywords keep the order of their source list.
    """
    lowercase_text = (text or "").lower()
    return {
        category: [keyword for keyword in keywords if keyword in lowercase_text]
        for category, keywords in ENTITY_KEYWORDS.items()
    }


def _contains_any(text: str, keywords: List[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def detect_topic(text: str) -> str:
    """Returns the first topic label whose keyword condition holds."""
    entities = extract_entities(text)
    lowercase_text = (text or "").lower()
    agents = entities["agents"]

    if "eva" in agents or _contains_any(lowercase_text, ["eligibility", "verification"]):
        return "eligibility_verification"
    if "cam" in agents or _contains_any(lowercase_text, ["claim", "claims"]):
        return "claims_processing"
    if "phil" in agents or _contains_any(lowercase_text, ["payment", "posting"]):
        return "payment_posting"
    if agents or "agent" in lowercase_text:
        return "agents"
    if _contains_any(lowercase_text, ["benefit", "advantage"]):
        return "benefits"
    if _contains_any(lowercase_text, ["price", "cost", "pricing"]):
        return "pricing"
    if _contains_any(lowercase_text, ["contact", "support", "help"]):
        return "contact"
    return "general"
