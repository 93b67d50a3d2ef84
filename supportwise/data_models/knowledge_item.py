from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class KnowledgeItem:
    question: str
    answer: str  # may embed <a href="...">label</a> anchors, see data_models.markup
    category: Optional[str] = None  # e.g., 'eligibility_verification', 'pricing'
    alternative_questions: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnowledgeItem":
        return cls(
            question=data["question"],
            answer=data["answer"],
            category=data.get("category"),
            alternative_questions=tuple(data.get("alternativeQuestions") or data.get("alternative_questions") or ()),
        )


@dataclass(frozen=True)
class MatchResult:
    item: Optional[KnowledgeItem]
    score: float
