from .base_store import BaseStore
from .catalog_store import KnowledgeCatalogStore
from .telemetry_store import TelemetryStore
from .error_log_store import ErrorLogStore, ErrorDetails
from .visitor_store import VisitorFlagStore

__all__ = [
    "BaseStore",
    "KnowledgeCatalogStore",
    "TelemetryStore",
    "ErrorLogStore",
    "ErrorDetails",
    "VisitorFlagStore",
]
