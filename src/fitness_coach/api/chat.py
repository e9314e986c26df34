"""Coaching chat endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from fitness_coach.api.auth import current_user_id
from fitness_coach.api.schemas import ChatRequest  # noqa: TC001

if TYPE_CHECKING:
    from fitness_coach.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("")
async def send_chat_message(
    body: ChatRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> JSONResponse:
    """Send a message to the coach and return its reply."""
    container: AppContainer = request.app.state.container
    try:
        response = await container.agent_service.send_message(user_id, body.message)
    except Exception as exc:
        logger.exception("Chat turn failed", extra={"user_id": str(user_id)})
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": "chat_failed",
                "message": f"failed to process message: {exc}",
                "code": "CHAT_FAILED",
            },
        )
    return JSONResponse(content=jsonable_encoder(response))


@router.get("/history")
async def chat_history(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[dict[str, object]]:
    """Return messages of the caller's current conversation."""
    container: AppContainer = request.app.state.container
    messages = container.agent_service.get_history(user_id, limit, offset)
    return jsonable_encoder(messages)
