"""
Chat endpoints.

- POST /Chat - One-shot question (form field `message`)
- POST /MaintenanceCopilotChat - Message within a copilot session
- DELETE /MaintenanceCopilotChat/{session_id} - Forget a session
"""
import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query, Request, Response, status
from fastapi.responses import PlainTextResponse

from copilot.agent.copilot import MaintenanceCopilot
from copilot.dependencies import get_copilot
from copilot.errors import InvalidInput

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Copilot"])

CopilotDep = Annotated[MaintenanceCopilot, Depends(get_copilot)]


async def read_message(request: Request) -> str:
    """Message body as raw text, or a JSON string when sent as application/json."""
    raw = (await request.body()).decode("utf-8", errors="replace")
    if "application/json" not in request.headers.get("content-type", ""):
        return raw
    try:
        message = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidInput("Request body is not valid JSON") from e
    if not isinstance(message, str):
        raise InvalidInput("Request body must be a JSON string")
    return message


@router.post("/Chat", response_class=PlainTextResponse, summary="Ask a one-off question")
async def chat(copilot: CopilotDep, message: str = Form(...)) -> str:
    logger.info("Received chat request")
    reply = await copilot.ask(message)
    logger.info("Received chat completion")
    return reply


@router.post(
    "/MaintenanceCopilotChat",
    response_class=PlainTextResponse,
    summary="Chat with the maintenance copilot",
)
async def maintenance_copilot_chat(
    copilot: CopilotDep,
    message: Annotated[str, Depends(read_message)],
    session_id: str = Query("default", min_length=1, max_length=128),
) -> str:
    logger.info(f"Received request to chat with the maintenance copilot (session '{session_id}')")
    return await copilot.chat(session_id, message)


@router.delete(
    "/MaintenanceCopilotChat/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset a copilot session",
)
async def reset_maintenance_copilot_chat(session_id: str, copilot: CopilotDep) -> Response:
    await copilot.reset(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
