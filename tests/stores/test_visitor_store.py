import json
import pytest
from supportwise.constants import LS_KEY_VISITED
from supportwise.stores import VisitorFlagStore

@pytest.mark.asyncio
async def test_first_visit_then_returning_in_memory():
    store = VisitorFlagStore()
    await store.connect()
    assert store.check_and_mark_visited() is False
    assert store.check_and_mark_visited() is True

@pytest.mark.asyncio
async def test_flag_persists_across_instances(tmp_path):
    path = tmp_path / "state" / "visitor.json"
    first = VisitorFlagStore(path)
    await first.connect()
    assert first.check_and_mark_visited() is False
    assert json.loads(path.read_text()) == {LS_KEY_VISITED: True}

    second = VisitorFlagStore(path)
    await second.connect()
    assert second.check_and_mark_visited() is True

@pytest.mark.asyncio
async def test_corrupt_flag_file_counts_as_first_visit(tmp_path):
    path = tmp_path / "visitor.json"
    path.write_text("not json")
    store = VisitorFlagStore(path)
    await store.connect()
    assert store.check_and_mark_visited() is False
    assert json.loads(path.read_text()) == {LS_KEY_VISITED: True}
