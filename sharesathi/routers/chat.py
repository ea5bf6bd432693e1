"""
Chat assistant API routes
"""
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sharesathi.dependencies import get_chat_service
from sharesathi.exceptions import ShareSathiException
from sharesathi.schemas.watchlist import CamelModel
from sharesathi.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["Chat"])


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ContextStock(CamelModel):
    symbol: str
    name: str
    price: float
    change_percent: float


class ChatContext(BaseModel):
    stocks: List[ContextStock] = []


class ChatRequest(CamelModel):
    messages: List[ChatMessage] = []
    context: Optional[ChatContext] = None
    custom_prompt: Optional[str] = None


class ChatResponse(CamelModel):
    response: str
    unavailable: bool = False


@router.post("", response_model=ChatResponse, summary="Ask the assistant")
async def chat(
    data: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    One assistant turn

    Falls back to canned answers when the LLM is unreachable;
    unavailable is true when the provider quota ran out.
    """
    if not data.messages:
        raise ShareSathiException("No messages provided", "NO_MESSAGES")

    context_stocks = [s.model_dump() for s in data.context.stocks] if data.context else None
    result = await service.reply(
        [m.model_dump() for m in data.messages],
        context_stocks=context_stocks,
        custom_prompt=data.custom_prompt,
    )
    return ChatResponse(**result)


@router.get("", summary="Assistant status")
def chat_status(service: ChatService = Depends(get_chat_service)):
    return {
        "available": service.client.enabled,
        "model": service.model,
    }
