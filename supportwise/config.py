from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from supportwise import constants

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CATALOG_PATH = PACKAGE_DIR / "data" / "faq_catalog.json"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration shared by the CLI and the API."""
    catalog_path: Path
    visitor_flag_path: Optional[Path]
    log_level: str
    simulate_typing: bool
    retry_max_attempts: int
    retry_delay_ms: int
    random_seed: Optional[int]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Build Settings from environment variables, falling back to the packaged defaults.

    Invalid integer values (RETRY_MAX_ATTEMPTS, RETRY_DELAY_MS, RANDOM_SEED) raise ValueError.
    """
    catalog_path = os.getenv("SUPPORTWISE_CATALOG_PATH")
    visitor_flag_path = os.getenv("SUPPORTWISE_VISITOR_FLAG_PATH")
    random_seed = os.getenv("RANDOM_SEED", "").strip()

    return Settings(
        catalog_path=Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH,
        visitor_flag_path=Path(visitor_flag_path) if visitor_flag_path else None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        simulate_typing=_env_bool("SIMULATE_TYPING", "true"),
        retry_max_attempts=int(os.getenv("RETRY_MAX_ATTEMPTS", str(constants.RETRY_MAX_ATTEMPTS))),
        retry_delay_ms=int(os.getenv("RETRY_DELAY_MS", str(constants.RETRY_DELAY_MS))),
        random_seed=int(random_seed) if random_seed else None,
    )
