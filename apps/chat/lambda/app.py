"""Search chat API backend using FastAPI + Mangum for AWS Lambda."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from mangum import Mangum

from search_chat.channels import EventChannel, format_sse
from search_chat.infra.runtime import (
    build_chat_service,
    cors_allow_origins,
    flush_langsmith_traces,
)
from search_chat.orchestration.base import finish
from search_chat.schemas import ProviderMetadata
from search_chat.services.chat_service import ChatService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
router = APIRouter(prefix="/api")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

_background_tasks: set[asyncio.Task[None]] = set()


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return build_chat_service()


def _decode_body(raw_body: bytes) -> Any:
    if not raw_body:
        return None
    try:
        return json.loads(raw_body)
    except ValueError:
        logger.warning("Chat request body is not valid JSON")
        return None


async def _produce(payload: Any, channel: EventChannel) -> None:
    try:
        service = await run_in_threadpool(get_chat_service)
        await service.stream_chat(payload, channel)
    except Exception as e:
        logger.exception("Chat stream producer failed")
        await finish(channel, e)
    finally:
        try:
            await run_in_threadpool(flush_langsmith_traces)
        finally:
            await channel.complete()


@router.post("/chat")
async def chat(request: Request) -> StreamingResponse:
    """Stream the answer to a chat message as server-sent events."""
    payload = _decode_body(await request.body())
    channel = EventChannel()
    task = asyncio.create_task(_produce(payload, channel))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    async def event_stream() -> AsyncIterator[str]:
        completed = False
        try:
            async for event in channel:
                yield format_sse(event)
            completed = True
        finally:
            if not completed:
                logger.info("Client disconnected during stream")
                channel.close()

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/models", response_model=list[ProviderMetadata], response_model_by_alias=True)
def list_models() -> list[ProviderMetadata]:
    """List configured providers with their model tiers and search tool."""
    return get_chat_service().list_providers()


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
