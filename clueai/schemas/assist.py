"""
clueai/schemas/assist.py

Pydantic v2 models shared by the Assist API endpoints and the client.

Wire contract (JSON, camelCase where the browser client expects it):
  POST /api/v1/extract      {images, ask, subjectMode}  → {aiText} | {error}
  POST /api/v1/help         {code, ask, images, subjectMode} → {aiText} | {error}
  POST /api/v1/help/locate  {code, ask, subjectMode}     → {aiText} | {error}

Request models use ``extra="ignore"`` so the browser can send extra UI
fields without breaking validation.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SubjectMode(str, Enum):
    """Closed set of assignment subjects. Selects prompt phrasing only."""

    CS = "cs"
    MATH = "math"
    SCIENCE = "science"
    ENGLISH = "english"
    OTHER = "other"

    @property
    def label(self) -> str:
        return SUBJECT_LABELS[self]


SUBJECT_LABELS: dict[SubjectMode, str] = {
    SubjectMode.CS: "Computer Science",
    SubjectMode.MATH: "Math",
    SubjectMode.SCIENCE: "Science",
    SubjectMode.ENGLISH: "English",
    SubjectMode.OTHER: "Other",
}

UNSPECIFIED_SUBJECT = "Not specified"


def readable_subject(subject_mode: str | None) -> str:
    """Prompt label for a raw ``subjectMode`` value; unknown values are not an error."""
    try:
        return SubjectMode(subject_mode).label
    except ValueError:
        return UNSPECIFIED_SUBJECT


# ── Request models ─────────────────────────────────────────────────────────────


class ImageAttachment(BaseModel):
    """One uploaded image. ``src`` is a data URI (or https URL)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    src: str = ""


class ExtractRequest(BaseModel):
    """Body of POST /api/v1/extract."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    images: list[ImageAttachment] = Field(default_factory=list)
    ask: str | None = None
    subject_mode: str | None = Field(default=None, alias="subjectMode")


class HelpRequest(BaseModel):
    """Body of POST /api/v1/help."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: str | None = None
    ask: str | None = None
    images: list[ImageAttachment] = Field(default_factory=list)
    subject_mode: str | None = Field(default=None, alias="subjectMode")


class LocateRequest(BaseModel):
    """Body of POST /api/v1/help/locate."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: str | None = None
    ask: str | None = None
    subject_mode: str | None = Field(default=None, alias="subjectMode")


# ── Response models ────────────────────────────────────────────────────────────


class AssistResponse(BaseModel):
    """Successful reply from any of the three endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    ai_text: str = Field(..., alias="aiText")


class ErrorResponse(BaseModel):
    """Failure reply from any endpoint, sent with a non-2xx status."""

    error: str
