import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from supportwise import constants
from supportwise.stores.error_log_store import ErrorLogStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

OnRetry = Callable[[int, Exception], Optional[Awaitable[None]]]


class OperationCancelled(Exception):
    """Raised when a retry loop is abandoned because its session generation was invalidated."""


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = constants.RETRY_MAX_ATTEMPTS,
    delay_ms: int = constants.RETRY_DELAY_MS,
    on_retry: Optional[OnRetry] = None,
    *,
    error_log: Optional[ErrorLogStore] = None,
    is_cancelled: Optional[Callable[[], bool]] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Runs `operation` up to `max_attempts` times with a fixed delay between attempts.

    Each failure is logged and reported to `on_retry(attempt, error)` (awaited when it
    returns an awaitable). No delay follows the last attempt; its error is re-raised.

    Args:
        operation: Zero-argument coroutine function to attempt.
        max_attempts (int): Total attempts, including the first.
        delay_ms (int): Pause between attempts in milliseconds.
        on_retry: Optional callback invoked after every failed attempt.
        error_log (Optional[ErrorLogStore]): Where failures are recorded under 'retry_operation'.
        is_cancelled: Polled before each attempt and after each failure. Once it returns True
                      the loop stops with OperationCancelled and runs no further side effects.
        sleep: Awaitable sleep used for the inter-attempt delay.

    Returns:
        The operation's result from the first successful attempt.
    """
    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        if is_cancelled and is_cancelled():
            raise OperationCancelled(f"Cancelled before attempt {attempt}")
        try:
            return await operation()
        except OperationCancelled:
            raise
        except Exception as e:
            last_error = e
            if is_cancelled and is_cancelled():
                raise OperationCancelled(f"Cancelled after failed attempt {attempt}") from e

            if error_log is not None:
                error_log.log_error(e, "retry_operation", {"attempt": attempt, "max_attempts": max_attempts})
            else:
                logger.warning(f"Attempt {attempt}/{max_attempts} failed: {e}")

            if on_retry is not None:
                result = on_retry(attempt, e)
                if inspect.isawaitable(result):
                    await result

            if attempt == max_attempts:
                break

            await sleep(delay_ms / 1000)

    if last_error is None:
        raise ValueError("retry_operation requires max_attempts >= 1")
    raise last_error


async def with_fallback(
    operation: Callable[[], Awaitable[T]],
    fallback_value: T,
    component: Optional[str] = None,
    error_log: Optional[ErrorLogStore] = None,
) -> T:
    try:
        return await operation()
    except Exception as e:
        if error_log is not None:
            error_log.log_error(e, component, {"usedFallback": True})
        else:
            logger.error(f"Operation in {component} failed, using fallback: {e}", exc_info=True)
        return fallback_value


def get_graceful_degradation_message(error: Union[BaseException, str]) -> str:
    error_message = error if isinstance(error, str) else str(error)

    if any(marker in error_message for marker in ("network", "fetch", "connection")):
        return ("I'm having trouble connecting to our knowledge base. Let me try to help with what I know, "
                "or please try again in a moment.")

    if "timeout" in error_message or "timed out" in error_message:
        return "It's taking longer than expected to process your request. Let me try a simpler approach to help you."

    if any(marker in error_message for marker in ("data", "parse", "JSON")):
        return "I'm having trouble processing some information. Let me try to answer more generally."

    return "I encountered a small hiccup while processing your request. Let me try to help in a different way."


def typing_delay_ms(
    text: Optional[str],
    per_char_ms: int = constants.TYPING_SPEED_PER_CHAR,
    min_ms: int = constants.TYPING_SPEED_MIN_MS,
    max_ms: int = constants.TYPING_SPEED_MAX_MS,
) -> int:
    text_length = len(text or "")
    return min(max(text_length * per_char_ms, min_ms), max_ms)
