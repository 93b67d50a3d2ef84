import pytest
from supportwise.agents import ContextOrchestrationAgent, analyze_user_preferences, is_follow_up_query
from supportwise.data_models import ConversationContext, KnowledgeItem

EVA = KnowledgeItem(question="What is EVA?", answer="EVA verifies eligibility.")

def make_context(*queries):
    context = ConversationContext()
    for query in queries:
        context.add_turn(query, "response", None, "question")
    return context

def test_follow_up_false_without_turns():
    assert is_follow_up_query(ConversationContext(), "it") is False

def test_follow_up_true_for_pronoun_after_any_turn():
    assert is_follow_up_query(make_context("What is EVA?"), "it") is True

@pytest.mark.parametrize("query, expected", [
    ("Can you tell me more about the rollout plan for hospitals", True),   # follow-up phrase
    ("Does it integrate with Epic and Cerner systems", True),              # "and"
    ("pricing?", True),                                                    # three words or fewer
    ("How long would those integrations usually take overall", True),      # whole-word pronoun
    ("Please describe the pricing model of the platform in full", False),
])
def test_follow_up_detection(query, expected):
    assert is_follow_up_query(make_context("What is EVA?"), query) is expected

def test_pronoun_must_be_a_whole_word():
    # "item" contains "it" but is not the pronoun
    assert is_follow_up_query(make_context("What is EVA?"), "Which item should our billing office review first") is False

def test_preferences_pick_most_mentioned_agent():
    context = make_context("What is EVA?", "Does EVA work nights?", "Is CAM faster?", "EVA pricing please")
    assert analyze_user_preferences(context)["interestedInAgent"] == "eva"

def test_preferences_tie_goes_to_first_mentioned_agent():
    context = make_context("Tell me about CAM", "Tell me about EVA")
    assert analyze_user_preferences(context)["interestedInAgent"] == "cam"

def test_preferences_detail_requires_two_queries():
    assert "prefersDetailedResponses" not in analyze_user_preferences(make_context("explain EVA"))
    context = make_context("explain EVA", "more specific please")
    assert analyze_user_preferences(context)["prefersDetailedResponses"] is True

def test_preferences_absent_agent():
    preferences = analyze_user_preferences(make_context("hello", "pricing"))
    assert "interestedInAgent" not in preferences

def test_preferences_keep_base_mapping():
    context = make_context("hello")
    context.user_preferences["language"] = "en"
    assert analyze_user_preferences(context)["language"] == "en"

@pytest.mark.asyncio
async def test_coa_initialization():
    agent = ContextOrchestrationAgent(agent_id="test_coa", history_turns=3)
    assert agent.agent_id == "test_coa"
    assert agent.history_turns == 3

@pytest.mark.asyncio
async def test_coa_add_turn_and_get_context():
    agent = ContextOrchestrationAgent()
    result = await agent.process({
        "session_id": "s1", "action": "add_turn",
        "query": "What is EVA?", "response": EVA.answer, "matched_item": EVA, "intent": "question",
    })
    assert result["status"] == "success"
    assert result["turn"].topic == "eligibility_verification"

    context_result = await agent.process({"session_id": "s1", "action": "get_context"})
    context = context_result["context"]
    assert len(context.turns) == 1
    assert context.last_matched_item is EVA

@pytest.mark.asyncio
async def test_coa_add_turn_requires_query_and_response():
    agent = ContextOrchestrationAgent()
    result = await agent.process({"session_id": "s1", "action": "add_turn", "query": "hi"})
    assert result["status"] == "failure"
    assert len(agent.get_context("s1").turns) == 0

@pytest.mark.asyncio
async def test_coa_history_and_preferences():
    agent = ContextOrchestrationAgent(history_turns=1)
    for query in ["What is EVA?", "Is EVA fast?"]:
        await agent.process({"session_id": "s2", "action": "add_turn", "query": query, "response": "ok"})

    history = await agent.process({"session_id": "s2", "action": "get_history"})
    assert history["history"] == "User: Is EVA fast?\nBot: ok"

    preferences = await agent.process({"session_id": "s2", "action": "analyze_preferences"})
    assert preferences["preferences"]["interestedInAgent"] == "eva"

@pytest.mark.asyncio
async def test_coa_end_context_discards_it():
    agent = ContextOrchestrationAgent()
    original = agent.get_context("s3")
    result = await agent.process({"session_id": "s3", "action": "end_context"})
    assert result["context"] is original
    assert agent.get_context("s3") is not original

@pytest.mark.asyncio
async def test_coa_missing_session_id():
    agent = ContextOrchestrationAgent()
    result = await agent.process({"action": "get_context"})
    assert result["status"] == "failure"
    assert result["error"] == "Missing session_id"

@pytest.mark.asyncio
async def test_coa_unknown_action():
    agent = ContextOrchestrationAgent()
    result = await agent.process({"session_id": "s4", "action": "unknown_action"})
    assert result["status"] == "failure"
    assert "Unknown action" in result["error"]
