from .base_store import BaseStore
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from supportwise.constants import LS_KEY_VISITED

logger = logging.getLogger(__name__)


class VisitorFlagStore(BaseStore):
    """
    Returning-visitor flag, optionally backed by a small JSON file.

    Without a path the flag lives only as long as the store instance.
    """

    def __init__(self, path: Optional[Path] = None, key: str = LS_KEY_VISITED):
        self.connected = False
        self._path = Path(path) if path else None
        self._key = key
        self._flags: Dict[str, bool] = {}

    def _load(self) -> None:
        if not self._path or not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.error(f"Error decoding visitor flags from {self._path}. Starting with no flags.")
            return
        if isinstance(data, dict):
            self._flags = {str(k): bool(v) for k, v in data.items()}

    def _persist(self) -> None:
        if not self._path:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._flags, indent=2), encoding="utf-8")

    async def connect(self):
        self._load()
        self.connected = True

    async def disconnect(self):
        self.connected = False

    def check_and_mark_visited(self) -> bool:
        """Returns True for a returning visitor; marks first-time visitors as seen."""
        if self._flags.get(self._key):
            return True
        self._flags[self._key] = True
        self._persist()
        return False
