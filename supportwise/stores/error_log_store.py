from .base_store import BaseStore
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from .telemetry_store import TelemetryStore

logger = logging.getLogger(__name__)


@dataclass
class ErrorDetails:
    message: str
    code: Optional[str] = None
    component: Optional[str] = None
    # TODO: split fatal from recoverable once the rendering layer reports its own failures
    recoverable: bool = True
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    context: Optional[Dict[str, Any]] = None


class ErrorLogStore(BaseStore):
    def __init__(self, store_id: str = "error_log_store", telemetry: Optional[TelemetryStore] = None):
        self.store_id = store_id
        self.connected = False
        self.telemetry = telemetry
        self.errors: List[ErrorDetails] = []

    async def connect(self):
        self.connected = True
        logger.info(f"{self.store_id}: Connected.")

    async def disconnect(self):
        self.connected = False
        logger.info(f"{self.store_id}: Disconnected. Errors recorded: {len(self.errors)}")

    def log_error(
        self,
        error: Union[BaseException, str],
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorDetails:
        """
        Records an error under a component tag before any recovery action is taken.

        Args:
            error (Union[BaseException, str]): The exception, or a plain message.
            component (Optional[str]): Tag naming where the error happened, e.g. 'message_retry'.
            context (Optional[Dict[str, Any]]): Extra structured details (attempt number, etc.).

        Returns:
            ErrorDetails: The stored record. Every error is currently marked recoverable.
        """
        if isinstance(error, str):
            message, code = error, None
        else:
            message, code = str(error), getattr(error, "code", None)

        details = ErrorDetails(message=message, code=code, component=component, context=context)
        if self.connected:
            self.errors.append(details)
        else:
            logger.warning(f"{self.store_id}: Not connected, error kept in the log stream only.")

        if self.telemetry is not None:
            try:
                self.telemetry.track_event("error", {
                    "message": message,
                    "component": component,
                    "code": code,
                    "context": context,
                })
            except Exception as e:
                logger.warning(f"Failed to forward error to telemetry: {e}")

        logger.error(f"Error logged [{component}]: {message} (context: {context})")
        return details
