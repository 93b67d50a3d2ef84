from datetime import datetime, timedelta, timezone
from supportwise.data_models import ConversationContext, KnowledgeItem

EVA = KnowledgeItem(question="What is EVA?", answer="EVA verifies eligibility.", category="eligibility_verification")

def test_new_context_is_empty():
    context = ConversationContext()
    assert context.turns == []
    assert context.current_topic is None
    assert context.last_matched_item is None
    assert context.resources_offered is False

def test_add_turn_records_topic_and_entities():
    context = ConversationContext()
    turn = context.add_turn("What is EVA?", EVA.answer, EVA, "question")
    assert turn.topic == "eligibility_verification"
    assert turn.entities["agents"] == ["eva"]
    assert context.current_topic == "eligibility_verification"
    assert context.last_matched_item is EVA

def test_topic_changes_push_previous_topic():
    context = ConversationContext()
    context.add_turn("What is EVA?", "...", None, "question")
    context.add_turn("How much does it cost?", "...", None, "question")
    assert context.current_topic == "pricing"
    assert context.previous_topics == ["eligibility_verification"]

def test_non_substantive_intents_keep_current_topic():
    context = ConversationContext()
    context.add_turn("Tell me about claims", "...", None, "question")
    context.add_turn("hello agent", "...", None, "greeting")
    assert context.current_topic == "claims_processing"
    assert context.previous_topics == []

def test_last_matched_item_survives_unmatched_turns():
    context = ConversationContext()
    context.add_turn("What is EVA?", EVA.answer, EVA, "question")
    context.add_turn("zebra stripes", "no idea", None, "question")
    assert context.last_matched_item is EVA

def test_timestamps_are_clamped_to_stay_monotonic():
    context = ConversationContext()
    now = datetime.now(timezone.utc)
    context.add_turn("first", "r1", None, "question", timestamp=now)
    turn = context.add_turn("second", "r2", None, "question", timestamp=now - timedelta(seconds=30))
    assert turn.timestamp == now

def test_history_formats_recent_turns():
    context = ConversationContext()
    for i in range(7):
        context.add_turn(f"q{i}", f"a{i}", None, "question")
    assert context.history(2) == "User: q5\nBot: a5\n\nUser: q6\nBot: a6"
    assert context.history().count("User:") == 5
    assert context.history(0) == ""

def test_related_topics_are_unique_and_skip_general():
    context = ConversationContext()
    context.add_turn("What is EVA?", "...", None, "question")
    context.add_turn("random chatter", "...", None, "question")
    context.add_turn("Tell me about claims", "...", None, "question")
    context.add_turn("EVA again", "...", None, "question")
    assert context.related_topics() == ["eligibility_verification", "claims_processing"]
