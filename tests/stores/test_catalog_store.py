import json
import pytest
from supportwise.stores import KnowledgeCatalogStore

@pytest.mark.asyncio
async def test_catalog_connect_loads_shipped_catalog():
    store = KnowledgeCatalogStore()
    assert not store.connected
    await store.connect()
    assert store.connected
    assert len(store.items) == 21
    assert store.items[0].question == "What is Thoughtful AI?"
    eva = next(item for item in store.items if item.question == "What is EVA?")
    assert eva.category == "eligibility_verification"
    assert "Tell me about EVA" in eva.alternative_questions
    await store.disconnect()
    assert not store.connected

@pytest.mark.asyncio
async def test_catalog_items_require_connection():
    store = KnowledgeCatalogStore()
    with pytest.raises(ConnectionError):
        store.items

@pytest.mark.asyncio
async def test_catalog_skips_incomplete_entries(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {"question": "Q1", "answer": "A1", "alternativeQuestions": ["Q one"]},
        {"question": "Q2"},
        {"answer": "A3"},
        "not an object",
    ]))
    store = KnowledgeCatalogStore(data_path=path)
    await store.connect()
    assert [item.question for item in store.items] == ["Q1"]
    assert store.items[0].alternative_questions == ("Q one",)

@pytest.mark.asyncio
async def test_catalog_invalid_json_gives_empty_catalog(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    store = KnowledgeCatalogStore(data_path=path)
    await store.connect()
    assert store.items == ()

@pytest.mark.asyncio
async def test_catalog_missing_file_gives_empty_catalog(tmp_path):
    store = KnowledgeCatalogStore(data_path=tmp_path / "missing.json")
    await store.connect()
    assert store.items == ()
