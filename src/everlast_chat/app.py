# ============================================================
# Everlast Chat FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Style classifier + knowledge retriever + prompt composer
#   - Anthropic, OpenAI, Ollama or Echo completion clients
#   - Supabase or local FAISS similarity backends
# The orchestrator is stateless: the caller threads history and style.
# ============================================================

from functools import lru_cache
from typing import List, Literal, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from everlast_chat import __version__
from everlast_chat.errors import CompletionFailed, EverlastChatError, InvalidInput, RetrievalUnavailable
from everlast_chat.generate import (
    ConversationStyle,
    Message,
    OrchestrationResult,
    ResponseOrchestrator,
    Sender,
    build_orchestrator,
)
from everlast_chat.logs import get_logger
from everlast_chat.settings import settings

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_orchestrator() -> ResponseOrchestrator:
    return build_orchestrator(settings)


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="Everlast Chat API", version=__version__)

_STATUS_FOR_ERROR = {
    InvalidInput: 400,
    CompletionFailed: 502,
    RetrievalUnavailable: 503,
}


@app.exception_handler(EverlastChatError)
async def pipeline_error_handler(request: Request, exc: EverlastChatError):
    status = _STATUS_FOR_ERROR.get(type(exc), 500)
    logger.warning(f"{exc.kind} on {request.url.path}: {exc}")
    return JSONResponse(status_code=status, content={"detail": exc.kind})


# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class ChatMessage(BaseModel):
    # "app" is the sender name older clients use for assistant turns
    sender: Literal["user", "assistant", "app"]
    text: str

    def to_message(self) -> Message:
        return Message(sender=Sender.USER if self.sender == "user" else Sender.ASSISTANT, text=self.text)


class ChatRequest(BaseModel):
    message: str
    messageHistory: List[ChatMessage] = Field(default_factory=list)
    style: ConversationStyle = ConversationStyle.DEFAULT


class SearchResultPayload(BaseModel):
    content: str
    score: float
    source: str


class StyleDetectionPayload(BaseModel):
    requestingStyle: bool
    confidence: float
    suggestedStyle: Optional[ConversationStyle] = None
    explanation: str


class ChatPayload(BaseModel):
    answer: str
    newStyle: Optional[ConversationStyle] = None
    searchResults: List[SearchResultPayload]
    styleDetection: StyleDetectionPayload


class RetrieveResponse(BaseModel):
    query: str
    docs: List[SearchResultPayload]


def to_payload(result: OrchestrationResult) -> ChatPayload:
    return ChatPayload(
        answer=result.answer,
        newStyle=result.new_style,
        searchResults=[SearchResultPayload(content=r.content, score=r.score, source=r.source)
                       for r in result.search_results],
        styleDetection=StyleDetectionPayload(**result.style_detection.model_dump(by_alias=True)),
    )


# ------------------------------------------------------------
# 💬 Main chat route
# ------------------------------------------------------------
@app.post("/chat", response_model=ChatPayload, response_model_exclude_none=True)
async def chat(req: ChatRequest, orchestrator: ResponseOrchestrator = Depends(get_orchestrator)):
    history = [m.to_message() for m in req.messageHistory]
    result = await orchestrator.handle_turn(req.message, history, req.style)
    return to_payload(result)


# ------------------------------------------------------------
# 🔎 Retrieval-only route
# ------------------------------------------------------------
@app.get("/retrieve", response_model=RetrieveResponse)
def retrieve_endpoint(
    q: str = Query(..., description="Search query"),
    orchestrator: ResponseOrchestrator = Depends(get_orchestrator),
):
    out = orchestrator.retriever.retrieve(q)
    docs = [SearchResultPayload(content=r.content, score=r.score, source=r.source) for r in out.results]
    return RetrieveResponse(query=q, docs=docs)


# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
    }


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}


@app.get("/")
def hello():
    return {"message": f"{settings.app_name} service running."}
