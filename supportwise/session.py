import asyncio
import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set, Tuple

from supportwise import constants, messages
from supportwise.agents import (
    ContextOrchestrationAgent,
    KnowledgeMatchingAgent,
    QueryUnderstandingAgent,
    ResponseAgent,
)
from supportwise.data_models import ConversationContext, KnowledgeItem
from supportwise.error_recovery import (
    OperationCancelled,
    get_graceful_degradation_message,
    retry_operation,
    typing_delay_ms,
    with_fallback,
)
from supportwise.nlp import detect_intent
from supportwise.stores import ErrorLogStore, TelemetryStore, VisitorFlagStore

logger = logging.getLogger(__name__)


class TurnState(Enum):
    IDLE = "idle"
    SENDING = "sending"
    MATCHING = "matching"
    TYPING = "typing"
    DELIVERED = "delivered"
    ERROR = "error"
    RECOVERABLE_RETRY = "recoverable_retry"
    FATAL = "fatal"


@dataclass
class Message:
    id: str
    content: str
    type: str  # "user" or "bot"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    feedback: Optional[Dict[str, Any]] = None
    query_id: Optional[str] = None
    intent: Optional[str] = None
    matched_question: Optional[str] = None


@dataclass
class SessionState:
    farewell_shown: bool = False
    previous_queries: List[str] = field(default_factory=list)
    retry_count: int = 0
    returning_user: bool = False
    last_activity: float = 0.0


class ChatSession:
    """
    Drives one chat conversation end to end.

    Each user message runs query understanding, catalog matching and (on a miss)
    the fallback response agent inside a retry loop, then delivers the reply
    outside it. Timers (welcome, idle check-in) and the in-flight turn belong to
    the generation they were started in; `reset()` bumps the generation and
    cancels them, so anything left over from before the reset does nothing.
    """

    def __init__(
        self,
        catalog: Sequence[KnowledgeItem],
        telemetry: Optional[TelemetryStore] = None,
        error_log: Optional[ErrorLogStore] = None,
        visitor_store: Optional[VisitorFlagStore] = None,
        *,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        simulate_typing: bool = True,
        retry_max_attempts: int = constants.RETRY_MAX_ATTEMPTS,
        retry_delay_ms: int = constants.RETRY_DELAY_MS,
        check_in_timeout_ms: int = constants.CHECK_IN_TIMEOUT_MS,
        on_message: Optional[Callable[[Message], None]] = None,
        user_agent: Optional[str] = None,
        query_agent: Optional[QueryUnderstandingAgent] = None,
        context_agent: Optional[ContextOrchestrationAgent] = None,
        matching_agent: Optional[KnowledgeMatchingAgent] = None,
        response_agent: Optional[ResponseAgent] = None,
    ):
        self.telemetry = telemetry
        self.error_log = error_log
        self.visitor_store = visitor_store
        self.rng = rng or random.Random()
        self._sleep = sleep
        self._clock = clock
        self.simulate_typing = simulate_typing
        self.retry_max_attempts = retry_max_attempts
        self.retry_delay_ms = retry_delay_ms
        self.check_in_timeout_ms = check_in_timeout_ms
        self.on_message = on_message
        self.user_agent = user_agent

        self.query_agent = query_agent or QueryUnderstandingAgent()
        self.context_agent = context_agent or ContextOrchestrationAgent()
        self.matching_agent = matching_agent or KnowledgeMatchingAgent(catalog)
        self.response_agent = response_agent or ResponseAgent(
            rng=self.rng, telemetry=telemetry, error_log=error_log
        )

        self.session_id: str = ""
        self.generation = 0
        self.messages: List[Message] = []
        self.state = SessionState(last_activity=self._clock())
        self.turn_state = TurnState.IDLE
        self.closed = False

        self._lock = asyncio.Lock()
        self._timers: Set[asyncio.Task] = set()
        self._check_in_task: Optional[asyncio.Task] = None
        self._turn_task: Optional[asyncio.Task] = None

    @property
    def context(self) -> ConversationContext:
        return self.context_agent.get_context(self.session_id)

    # --- telemetry and error helpers ---

    def _track(self, event_type: str, data: Optional[Dict[str, Any]] = None) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.track_event(event_type, data)
        except Exception as e:
            logger.warning(f"Telemetry event '{event_type}' failed: {e}")

    def _log_error(self, error: Exception, component: str, context: Optional[Dict[str, Any]] = None) -> None:
        if self.error_log is not None:
            self.error_log.log_error(error, component, context)
        else:
            logger.error(f"Error in {component}: {error} (context: {context})", exc_info=True)

    def _start_telemetry_session(self) -> str:
        session_id = ""
        if self.telemetry is not None:
            try:
                session_id = self.telemetry.start_session(self.user_agent)
            except Exception as e:
                logger.warning(f"Could not start telemetry session: {e}")
        return session_id or str(uuid.uuid4())

    def _end_telemetry_session(self, session_id: str, context: ConversationContext) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry.end_session(session_id, context)
        except Exception as e:
            logger.warning(f"Could not end telemetry session {session_id}: {e}")

    # --- timers ---

    def _is_stale(self, generation: int) -> bool:
        return self.closed or generation != self.generation

    def _ensure_current(self, generation: int) -> None:
        if self._is_stale(generation):
            raise OperationCancelled(f"Session generation {generation} is no longer current")

    def _schedule(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.Task:
        generation = self.generation

        async def fire():
            await self._sleep(delay_ms / 1000)
            if self._is_stale(generation):
                return
            callback()

        task = asyncio.create_task(fire())
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)
        return task

    def _cancel_timers(self) -> None:
        current = asyncio.current_task()
        for task in list(self._timers):
            if task is not current:
                task.cancel()
        self._check_in_task = None
        # The in-flight turn is dropped too so it stops holding the send lock
        if self._turn_task is not None and self._turn_task is not current and not self._turn_task.done():
            self._turn_task.cancel()

    def _arm_check_in(self) -> None:
        if self.closed:
            return
        previous = self._check_in_task
        if previous is not None and previous is not asyncio.current_task():
            previous.cancel()
        self._check_in_task = self._schedule(self.check_in_timeout_ms, self._check_in)

    def _check_in(self) -> None:
        try:
            idle_ms = (self._clock() - self.state.last_activity) * 1000
            if idle_ms >= self.check_in_timeout_ms and len(self.messages) > 1 and not self.state.farewell_shown:
                self._add_message(self.rng.choice(messages.CHECK_IN_MESSAGES), "bot")
                self._track("check_in_message")
        except Exception as e:
            self._log_error(e, "check_in_timeout")

    def _send_welcome(self) -> None:
        pool = messages.WELCOME_BACK_MESSAGES if self.state.returning_user else messages.WELCOME_MESSAGES
        self._add_message(self.rng.choice(pool), "bot")

    # --- messages ---

    def _add_message(self, content: str, message_type: str, **extra: Any) -> Optional[Message]:
        if not content:
            return None
        message = Message(id=str(uuid.uuid4()), content=content, type=message_type, **extra)
        self.messages.append(message)
        self.state.last_activity = self._clock()

        self._track("user_message" if message_type == "user" else "bot_message", {
            "messageId": message.id,
            "contentLength": len(content),
        })
        if self.on_message is not None:
            self.on_message(message)

        self._arm_check_in()
        return message

    async def _simulate_typing(self, text: str, generation: int) -> None:
        if self.simulate_typing:
            self.turn_state = TurnState.TYPING
            await self._sleep(typing_delay_ms(text) / 1000)
        self._ensure_current(generation)

    # --- lifecycle ---

    async def start(self) -> str:
        """Opens the telemetry session, reads the visitor flag and schedules the welcome message."""
        self.session_id = self._start_telemetry_session()
        self._track("page_view", {"sessionId": self.session_id, "page": "chat"})

        if self.visitor_store is not None:
            try:
                self.state.returning_user = self.visitor_store.check_and_mark_visited()
            except OSError as e:
                logger.error(f"Error accessing visitor flag: {e}")
        self._track("returning_user" if self.state.returning_user else "new_user")

        self._schedule(constants.WELCOME_DELAY_MS, self._send_welcome)
        logger.info(f"Chat session {self.session_id} started (returning user: {self.state.returning_user}).")
        return self.session_id

    async def handle_send_message(self, text: Optional[str]) -> Optional[Message]:
        """
        Processes one user message and returns the bot message that answered it.

        Blank input is ignored and returns None. So does a message whose turn
        was overtaken by a reset or close before it could be delivered.
        """
        text = (text or "").strip()
        if not text:
            return None

        async with self._lock:
            generation = self.generation
            turn = asyncio.create_task(self._send(text, generation))
            self._turn_task = turn
            try:
                message = await turn
            except OperationCancelled:
                return None
            except asyncio.CancelledError:
                # reset() and close() cancel the turn itself; anything else is the caller being cancelled
                if turn.cancelled() and self._is_stale(generation):
                    return None
                raise
            except Exception:
                self.turn_state = TurnState.FATAL
                raise
            finally:
                if self._turn_task is turn:
                    self._turn_task = None

            if not self._is_stale(generation):
                self.turn_state = TurnState.IDLE
            return message

    async def _send(self, text: str, generation: int) -> Optional[Message]:
        self.turn_state = TurnState.SENDING
        self._add_message(text, "user")
        self.state.retry_count = 0

        self.state.previous_queries.append(text.lower())
        if len(self.state.previous_queries) > constants.CONTEXT_HISTORY_SIZE:
            self.state.previous_queries.pop(0)

        intent = detect_intent(text)

        if intent == "farewell" and not self.state.farewell_shown:
            self.state.farewell_shown = True
            farewell = self.rng.choice(messages.FAREWELL_MESSAGES)
            await self._simulate_typing(farewell, generation)
            message = self._add_message(farewell, "bot", intent=intent)
            self._track("farewell")
            return message

        start_time = self._clock()
        notices: List[asyncio.Task] = []

        def on_retry(attempt: int, error: Exception) -> None:
            self.turn_state = TurnState.RECOVERABLE_RETRY
            self.state.retry_count = attempt
            self._log_error(error, "message_retry", {"attempt": attempt})
            if attempt >= 2:
                degradation = get_graceful_degradation_message(error)
                delay_ms = typing_delay_ms(degradation) if self.simulate_typing else 0
                notices.append(self._schedule(delay_ms, lambda: self._add_message(degradation, "bot")))

        try:
            response_text, matched_item, query_id = await retry_operation(
                lambda: self._answer(text, intent, start_time, generation),
                self.retry_max_attempts,
                self.retry_delay_ms,
                on_retry,
                error_log=self.error_log,
                is_cancelled=lambda: self._is_stale(generation),
                sleep=self._sleep,
            )
        except OperationCancelled:
            raise
        except Exception as e:
            await self._flush_notices(notices, generation)
            self.turn_state = TurnState.ERROR
            self._log_error(e, "send_message")
            await self._simulate_typing(messages.APOLOGY_MESSAGE, generation)
            return self._add_message(messages.APOLOGY_MESSAGE, "bot", intent=intent)

        # Delivery runs outside the retry loop: a failing renderer is fatal, not a pipeline error
        await self._flush_notices(notices, generation)
        await self._simulate_typing(response_text, generation)
        message = self._add_message(
            response_text,
            "bot",
            query_id=query_id,
            intent=intent,
            matched_question=matched_item.question if matched_item else None,
        )
        self.turn_state = TurnState.DELIVERED
        return message

    async def _flush_notices(self, notices: List[asyncio.Task], generation: int) -> None:
        """Waits for scheduled degradation notices so they land before the final reply."""
        if not notices:
            return
        results = await asyncio.gather(*notices, return_exceptions=True)
        self._ensure_current(generation)
        for result in results:
            if isinstance(result, Exception):
                raise result

    async def _generate_fallback(self, text: str, context: ConversationContext) -> str:
        response = await self.response_agent.process({"query_text": text, "context": context})
        if response.get("status") != "success":
            raise RuntimeError(f"Response generation failed: {response.get('error')}")
        return response["response_text"]

    async def _answer(
        self, text: str, intent: str, start_time: float, generation: int
    ) -> Tuple[str, Optional[KnowledgeItem], Optional[str]]:
        """Matches or generates the reply and commits the turn. Returns (text, matched item, query id)."""
        self.turn_state = TurnState.MATCHING
        context = self.context

        understanding = await self.query_agent.process({
            "query_text": text,
            "session_id": self.session_id,
            "context": context,
        })
        if understanding.get("status") != "success":
            raise RuntimeError(f"Query understanding failed: {understanding.get('error')}")

        match = await self.matching_agent.process({
            "query_text": text,
            "is_follow_up": understanding.get("is_follow_up", False),
            "last_matched_item": context.last_matched_item,
            "recent_queries": list(self.state.previous_queries),
        })
        if match.get("status") != "success":
            raise RuntimeError(f"Knowledge matching failed: {match.get('error')}")

        matched_item: Optional[KnowledgeItem] = match["matched_item"]
        if matched_item is not None:
            response_text = matched_item.answer
        else:
            response_text = await with_fallback(
                lambda: self._generate_fallback(text, context),
                messages.GENERATION_ERROR_MESSAGE,
                "generate_generic_response",
                self.error_log,
            )

        self._ensure_current(generation)
        await self.context_agent.process({
            "session_id": self.session_id,
            "action": "add_turn",
            "query": text,
            "response": response_text,
            "matched_item": matched_item,
            "intent": intent,
        })

        response_time_ms = (self._clock() - start_time) * 1000
        query_id = None
        if self.telemetry is not None:
            try:
                query_id = self.telemetry.track_query(
                    text, matched_item, match["confidence"], response_time_ms, self.session_id
                ) or None
            except Exception as e:
                logger.warning(f"Could not record query analytics: {e}")

        return response_text, matched_item, query_id

    def update_message_feedback(self, message_id: str, helpful: bool, comment: Optional[str] = None) -> bool:
        try:
            message = next((m for m in self.messages if m.id == message_id), None)
            if message is None:
                logger.warning(f"Feedback for unknown message {message_id} in session {self.session_id}.")
                return False

            message.feedback = {"helpful": helpful, "comment": comment}
            if self.telemetry is not None:
                self.telemetry.track_feedback(message.query_id or message.id, helpful, comment)
            return True
        except Exception as e:
            self._log_error(e, "update_message_feedback")
            return False

    async def reset(self) -> str:
        """Finalizes the current conversation and starts a fresh one. Returns the new session id."""
        old_session_id = self.session_id
        old_context = self.context
        conversation_duration = (datetime.now(timezone.utc) - old_context.session_start_time).total_seconds() * 1000
        self._track("reset_chat", {
            "messageCount": len(self.messages),
            "conversationDuration": conversation_duration,
        })

        self.generation += 1
        self._cancel_timers()

        self._end_telemetry_session(old_session_id, old_context)
        await self.context_agent.process({"session_id": old_session_id, "action": "end_context"})
        self.session_id = self._start_telemetry_session()

        self.messages = []
        self.state = SessionState(returning_user=self.state.returning_user, last_activity=self._clock())
        self.turn_state = TurnState.IDLE

        self._add_message(self.rng.choice(messages.FAREWELL_MESSAGES), "bot")
        self._schedule(constants.RESET_WELCOME_DELAY_MS, self._send_welcome)
        logger.info(f"Chat session {old_session_id} reset; new session {self.session_id}.")
        return self.session_id

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        pending = [task for task in self._timers if task is not asyncio.current_task()]
        self._cancel_timers()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._end_telemetry_session(self.session_id, self.context)
        await self.context_agent.process({"session_id": self.session_id, "action": "end_context"})
        logger.info(f"Chat session {self.session_id} closed.")
