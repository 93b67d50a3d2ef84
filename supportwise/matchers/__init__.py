from .matcher_interface import MatcherInterface
from .lexical_matcher import LexicalMatcher, find_best_match
from .semantic_matcher import SemanticMatcher, TfIdfCorpus, enhanced_match

__all__ = [
    "MatcherInterface",
    "LexicalMatcher",
    "SemanticMatcher",
    "TfIdfCorpus",
    "find_best_match",
    "enhanced_match",
]
