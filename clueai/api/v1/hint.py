"""
clueai/api/v1/hint.py

Coaching endpoints:
  POST /api/v1/help         non-spoiler hints for the student's work
  POST /api/v1/help/locate  likely line ranges to inspect, as a LINES/NOTE block

Both are stateless proxies: compile a prompt, call the model once, return
``{aiText}``. Model failures come back as ``500 {error}``; the client shows
hint failures to the student and treats locate failures as non-fatal.
"""

from fastapi import APIRouter, status

from clueai.api.errors import error_response
from clueai.core.logging import get_logger
from clueai.schemas.assist import AssistResponse, ErrorResponse, HelpRequest, LocateRequest
from clueai.services.llm import LLMError, generate_hint, locate_lines

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/help",
    response_model=AssistResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Coaching-only hints for an assignment",
)
async def ask_help(body: HelpRequest):
    """Return 2–4 location-specific leads without giving the answer."""
    logger.info(
        "hint_request",
        subject_mode=body.subject_mode,
        code_length=len(body.code or ""),
        image_count=len(body.images),
        has_ask=bool(body.ask and body.ask.strip()),
    )

    try:
        ai_text = await generate_hint(
            code=body.code,
            ask=body.ask,
            images=body.images,
            subject_mode=body.subject_mode,
        )
    except LLMError as exc:
        logger.error("hint_failed", error=str(exc))
        return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return AssistResponse(aiText=ai_text)


@router.post(
    "/help/locate",
    response_model=AssistResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Likely line ranges to inspect",
)
async def locate(body: LocateRequest):
    """Return the model's LINES/NOTE block untouched; the client parses it."""
    logger.info(
        "locate_request",
        subject_mode=body.subject_mode,
        code_length=len(body.code or ""),
    )

    try:
        ai_text = await locate_lines(
            code=body.code,
            ask=body.ask,
            subject_mode=body.subject_mode,
        )
    except LLMError as exc:
        logger.error("locate_failed", error=str(exc))
        return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return AssistResponse(aiText=ai_text)
