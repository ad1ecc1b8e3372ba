"""
clueai/api/v1/extract.py

POST /api/v1/extract: transcribe the student's work from uploaded images.

Flow:
  1. Reject requests without images (400).
  2. Compile the transcription prompt and call the vision model.
  3. Strip a whole-reply code fence.
  4. Return ``{aiText}``; an empty transcription is a 422 so the client
     aborts the submission instead of asking for hints on nothing.
"""

from fastapi import APIRouter, status

from clueai.api.errors import error_response
from clueai.core.logging import get_logger
from clueai.schemas.assist import AssistResponse, ErrorResponse, ExtractRequest
from clueai.services.llm import LLMError, extract_text

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/extract",
    response_model=AssistResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Transcribe text/code from images",
)
async def extract(body: ExtractRequest):
    """Return the verbatim text found in the uploaded images."""
    if not body.images:
        logger.warning("extract_rejected", reason="no_images")
        return error_response("No images provided", status.HTTP_400_BAD_REQUEST)

    logger.info(
        "extract_request",
        image_count=len(body.images),
        subject_mode=body.subject_mode,
        has_ask=bool(body.ask and body.ask.strip()),
    )

    try:
        ai_text = await extract_text(
            images=body.images,
            ask=body.ask,
            subject_mode=body.subject_mode,
        )
    except LLMError as exc:
        logger.error("extract_failed", error=str(exc))
        return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not ai_text:
        logger.warning("extract_empty")
        return error_response("No text extracted", status.HTTP_422_UNPROCESSABLE_ENTITY)

    logger.info("extract_complete", text_length=len(ai_text))
    return AssistResponse(aiText=ai_text)
