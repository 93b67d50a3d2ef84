import pytest
from unittest.mock import MagicMock
from supportwise.agents import KnowledgeMatchingAgent
from supportwise.data_models import KnowledgeItem

EVA = KnowledgeItem(question="What is EVA?", answer="EVA verifies eligibility.", category="eligibility_verification")
PRICING = KnowledgeItem(question="How much does it cost?", answer="Pricing depends on volume.", category="pricing")
CATALOG = (EVA, PRICING)

def stub_matcher(result=None):
    matcher = MagicMock()
    matcher.find_best_match.return_value = result
    return matcher

@pytest.mark.asyncio
async def test_kma_follow_up_reuses_last_match():
    semantic = stub_matcher(PRICING)
    agent = KnowledgeMatchingAgent(CATALOG, semantic_matcher=semantic)
    result = await agent.process({"query_text": "tell me more", "is_follow_up": True, "last_matched_item": EVA})
    assert result["matched_item"] is EVA
    assert result["confidence"] == 0.9
    assert result["strategy"] == "follow_up"
    semantic.find_best_match.assert_not_called()

@pytest.mark.asyncio
async def test_kma_follow_up_without_previous_match_searches():
    agent = KnowledgeMatchingAgent(CATALOG)
    result = await agent.process({"query_text": "What is EVA?", "is_follow_up": True, "last_matched_item": None})
    assert result["matched_item"] is EVA
    assert result["strategy"] == "direct"

@pytest.mark.asyncio
async def test_kma_semantic_first_then_lexical():
    semantic = stub_matcher(None)
    lexical = stub_matcher(PRICING)
    agent = KnowledgeMatchingAgent(CATALOG, semantic_matcher=semantic, lexical_matcher=lexical)
    result = await agent.process({"query_text": "cost"})
    assert result["matched_item"] is PRICING
    assert result["confidence"] == 0.7
    semantic.find_best_match.assert_called_once_with("cost", agent.catalog)
    lexical.find_best_match.assert_called_once_with("cost", agent.catalog)

@pytest.mark.asyncio
async def test_kma_combines_last_two_history_entries():
    semantic = MagicMock()
    semantic.find_best_match.side_effect = lambda query, catalog: EVA if query == "what is eva? tell me" else None
    agent = KnowledgeMatchingAgent(CATALOG, semantic_matcher=semantic, lexical_matcher=stub_matcher(None))
    result = await agent.process({
        "query_text": "tell me",
        "recent_queries": ["hello", "what is eva?", "tell me"],
    })
    assert result["matched_item"] is EVA
    assert result["strategy"] == "combined_history"

@pytest.mark.asyncio
async def test_kma_single_history_entry_is_not_combined():
    semantic = stub_matcher(None)
    agent = KnowledgeMatchingAgent(CATALOG, semantic_matcher=semantic, lexical_matcher=stub_matcher(None))
    result = await agent.process({"query_text": "zebra", "recent_queries": ["zebra"]})
    assert result["matched_item"] is None
    assert result["confidence"] == 0
    assert result["strategy"] == "none"
    assert semantic.find_best_match.call_count == 1

@pytest.mark.asyncio
async def test_kma_missing_query_text():
    agent = KnowledgeMatchingAgent(CATALOG)
    result = await agent.process({})
    assert result["status"] == "failure"
    assert result["error"] == "Missing query_text"
