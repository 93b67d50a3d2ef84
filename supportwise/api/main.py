from fastapi import FastAPI, HTTPException, Body
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from datetime import datetime
import html
import logging
import random

from supportwise.config import Settings, load_settings
from supportwise.data_models import parse_markup
from supportwise.session import ChatSession, Message
from supportwise.stores import ErrorLogStore, KnowledgeCatalogStore, TelemetryStore, VisitorFlagStore

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SupportWise API",
    description="API for chatting with the SupportWise FAQ assistant.",
    version="0.1.0"
)

# --- Global Variables / Shared Resources ---
settings: Optional[Settings] = None
catalog_store: Optional[KnowledgeCatalogStore] = None
telemetry: Optional[TelemetryStore] = None
error_log: Optional[ErrorLogStore] = None
visitor_store: Optional[VisitorFlagStore] = None
# Keyed by the id handed to the client; stays stable across resets
sessions: Dict[str, ChatSession] = {}


# --- Pydantic Models ---
class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, description="The user's message.")
    session_id: Optional[str] = Field(default=None, description="Existing session ID. A new session is created when omitted.")

class LinkModel(BaseModel):
    label: str
    url: str

class ChatResponse(BaseModel):
    session_id: str
    message_id: str
    reply: str
    reply_html: str
    links: List[LinkModel]
    intent: Optional[str] = None
    matched_question: Optional[str] = None

class FeedbackRequest(BaseModel):
    session_id: str
    message_id: str
    helpful: bool
    comment: Optional[str] = None

class MessageModel(BaseModel):
    id: str
    type: str
    content: str
    content_html: str
    timestamp: datetime
    feedback: Optional[Dict[str, Any]] = None

class SessionResponse(BaseModel):
    session_id: str
    messages: List[MessageModel] = []

class SuggestionModel(BaseModel):
    query: str
    count: int
    suggestion: str


def _to_message_model(message: Message) -> MessageModel:
    # Only bot text may carry anchors; user input is always inert
    if message.type == "user":
        content, content_html = message.content, html.escape(message.content)
    else:
        rich_text = parse_markup(message.content)
        content, content_html = rich_text.plain_text, rich_text.to_html()
    return MessageModel(
        id=message.id,
        type=message.type,
        content=content,
        content_html=content_html,
        timestamp=message.timestamp,
        feedback=message.feedback,
    )


def _get_session(session_id: str) -> ChatSession:
    session = sessions.get(session_id)
    if session is None:
        logger.warning(f"Unknown session requested: {session_id}")
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found.")
    return session


def _require_services():
    if not all([settings, catalog_store, telemetry, error_log]) or not catalog_store.connected:
        detail = "Chat services are not available."
        logger.error(detail)
        raise HTTPException(status_code=503, detail=detail)


async def _create_session() -> str:
    _require_services()
    session = ChatSession(
        catalog_store.items,
        telemetry,
        error_log,
        visitor_store,
        rng=random.Random(settings.random_seed),
        simulate_typing=settings.simulate_typing,
        retry_max_attempts=settings.retry_max_attempts,
        retry_delay_ms=settings.retry_delay_ms,
        user_agent="supportwise-api",
    )
    session_id = await session.start()
    sessions[session_id] = session
    return session_id


# --- Application Startup / Shutdown Events ---
@app.on_event("startup")
async def startup_event():
    global settings, catalog_store, telemetry, error_log, visitor_store

    logger.info("FastAPI application startup...")
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)

    catalog_store = KnowledgeCatalogStore(data_path=settings.catalog_path)
    await catalog_store.connect()

    telemetry = TelemetryStore()
    await telemetry.connect()

    error_log = ErrorLogStore(telemetry=telemetry)
    await error_log.connect()

    visitor_store = VisitorFlagStore(settings.visitor_flag_path)
    await visitor_store.connect()
    logger.info(f"FastAPI startup complete. Catalog items: {len(catalog_store.items)}")

@app.on_event("shutdown")
async def shutdown_event():
    for session in list(sessions.values()):
        await session.close()
    sessions.clear()
    for store in (visitor_store, error_log, telemetry, catalog_store):
        if store is not None:
            await store.disconnect()
    logger.info("FastAPI shutdown complete.")


# --- API Endpoints ---
@app.post("/api/sessions", response_model=SessionResponse)
async def create_session_api():
    session_id = await _create_session()
    return SessionResponse(session_id=session_id, messages=[_to_message_model(m) for m in sessions[session_id].messages])

@app.post("/api/chat", response_model=ChatResponse)
async def chat_api(request: ChatRequest = Body(...)):
    logger.info(f"Chat request: Message='{request.message}', Session_ID='{request.session_id}'")

    if not request.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be blank.")

    session_id = request.session_id or await _create_session()
    session = _get_session(session_id)

    reply = await session.handle_send_message(request.message)
    if reply is None:
        raise HTTPException(status_code=409, detail="The conversation was reset before a reply was delivered.")

    rich_text = parse_markup(reply.content)
    return ChatResponse(
        session_id=session_id,
        message_id=reply.id,
        reply=rich_text.plain_text,
        reply_html=rich_text.to_html(),
        links=[LinkModel(label=link.label, url=link.url) for link in rich_text.links],
        intent=reply.intent,
        matched_question=reply.matched_question,
    )

@app.post("/api/feedback")
async def feedback_api(request: FeedbackRequest = Body(...)):
    session = _get_session(request.session_id)
    if not session.update_message_feedback(request.message_id, request.helpful, request.comment):
        raise HTTPException(status_code=404, detail=f"Message '{request.message_id}' not found.")
    return {"status": "success"}

@app.post("/api/sessions/{session_id}/reset", response_model=SessionResponse)
async def reset_session_api(session_id: str):
    session = _get_session(session_id)
    await session.reset()
    return SessionResponse(session_id=session_id, messages=[_to_message_model(m) for m in session.messages])

@app.get("/api/sessions/{session_id}/messages", response_model=List[MessageModel])
async def list_messages_api(session_id: str):
    session = _get_session(session_id)
    return [_to_message_model(m) for m in session.messages]

@app.get("/api/analytics/suggestions", response_model=List[SuggestionModel])
async def suggestions_api():
    _require_services()
    return telemetry.get_faq_improvement_suggestions()

if __name__ == "__main__":
    import uvicorn
    print("Attempting to run Uvicorn server for SupportWise API...")
    uvicorn.run("supportwise.api.main:app", host="0.0.0.0", port=8000, reload=True)
