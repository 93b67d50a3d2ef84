from .base_store import BaseStore
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from supportwise.config import DEFAULT_CATALOG_PATH
from supportwise.data_models import KnowledgeItem

logger = logging.getLogger(__name__)


class KnowledgeCatalogStore(BaseStore):
    """Loads the curated FAQ catalog once into an immutable, ordered tuple."""

    def __init__(self, store_id: str = "knowledge_catalog_store", data_path: Union[str, Path] = DEFAULT_CATALOG_PATH):
        self.store_id = store_id
        self.connected = False
        self.data_path = Path(data_path)
        self._items: Tuple[KnowledgeItem, ...] = ()

    def _load_catalog(self) -> Tuple[KnowledgeItem, ...]:
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                entries: List[Dict[str, Any]] = json.load(f)
        except FileNotFoundError:
            logger.error(f"Catalog file not found at {self.data_path}. Store will use an empty catalog.")
            return ()
        except json.JSONDecodeError:
            logger.error(f"Error decoding JSON from {self.data_path}. Store will use an empty catalog.")
            return ()

        if not isinstance(entries, list):
            logger.error(f"Catalog at {self.data_path} is not a JSON list. Store will use an empty catalog.")
            return ()

        items = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("question") or not entry.get("answer"):
                logger.warning(f"Catalog entry missing 'question' or 'answer' in {self.data_path}, skipping: {entry}")
                continue
            items.append(KnowledgeItem.from_dict(entry))
        logger.info(f"Successfully loaded {len(items)} knowledge items from {self.data_path}")
        return tuple(items)

    async def connect(self):
        logger.info(f"{self.store_id}: Loading catalog...")
        if not self._items:
            self._items = self._load_catalog()
        self.connected = True
        logger.info(f"{self.store_id}: Connected. Item count: {len(self._items)}")

    async def disconnect(self):
        self.connected = False
        logger.info(f"{self.store_id}: Disconnected.")

    @property
    def items(self) -> Tuple[KnowledgeItem, ...]:
        if not self.connected:
            raise ConnectionError(f"{self.store_id} is not connected. Call connect() first.")
        return self._items
