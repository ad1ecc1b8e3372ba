"""
clueai/client/orchestrator.py

Submission workflow: the sequence behind the "Provide Guidance" button.

Phases (one submission at a time):

    IDLE ─▶ EXTRACTING? ─▶ REQUESTING_HINT ─▶ REQUESTING_LOCATION ─▶ DONE
                 │                 │
                 └────────┬────────┘
                          ▼
                        FAILED

  - EXTRACTING runs only when images are attached and no text was typed.
    The transcription becomes the working text and replaces the input.
  - Extraction or hint failure aborts: the student sees "Oops — <message>"
    and the failure is recorded in history.
  - Locate failure is not a submission failure; it only leaves a note on
    the highlight overlay.
  - A second submit() while one is running raises
    SubmissionInProgressError, as does reset().

All remote calls are awaited one after another; nothing runs in parallel
and nothing is retried.
"""

from dataclasses import dataclass, field
from enum import Enum

from clueai.client.api_client import AssistClient, AssistServiceError
from clueai.client.highlight import LineClass, classify_lines, split_lines
from clueai.client.history import HistoryStore
from clueai.client.locator import LineHint, display_note, parse_locator_text
from clueai.client.preferences import ThemePreference
from clueai.client.storage import JsonFileStorage
from clueai.core.config import Settings, get_settings
from clueai.core.logging import get_logger
from clueai.schemas.assist import ImageAttachment, SubjectMode

logger = get_logger(__name__)

ERROR_PREFIX = "Oops — "
GENERIC_ERROR = "something went wrong."
NO_RANGES_NOTE = "No line ranges returned."
LOCATE_ERROR_PREFIX = "Could not locate lines: "


class SubmissionPhase(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    REQUESTING_HINT = "requesting_hint"
    REQUESTING_LOCATION = "requesting_location"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_busy(self) -> bool:
        return self in _BUSY_PHASES


_BUSY_PHASES = frozenset(
    {
        SubmissionPhase.EXTRACTING,
        SubmissionPhase.REQUESTING_HINT,
        SubmissionPhase.REQUESTING_LOCATION,
    }
)


class SubmissionInProgressError(RuntimeError):
    """Raised when an action needs the orchestrator idle and it is not."""

    pass


@dataclass
class WorkingState:
    """Everything the page shows for the current prompt (not the history)."""

    code: str = ""
    ask: str = ""
    images: list[ImageAttachment] = field(default_factory=list)
    subject_mode: SubjectMode = SubjectMode.CS
    ai_text: str = ""
    line_hints: list[LineHint] = field(default_factory=list)
    line_hint_note: str = ""
    is_locating: bool = False


class SubmissionOrchestrator:
    def __init__(
        self,
        client: AssistClient,
        history: HistoryStore,
        state: WorkingState | None = None,
    ) -> None:
        self.client = client
        self.history = history
        self.state = state if state is not None else WorkingState()
        self._phase = SubmissionPhase.IDLE

    @property
    def phase(self) -> SubmissionPhase:
        return self._phase

    @property
    def is_busy(self) -> bool:
        return self._phase.is_busy

    def _enter(self, phase: SubmissionPhase) -> None:
        logger.debug("submission_phase", previous=self._phase.value, phase=phase.value)
        self._phase = phase

    def _guard(self, action: str) -> None:
        if self.is_busy:
            logger.warning("submission_rejected", action=action, phase=self._phase.value)
            raise SubmissionInProgressError(
                f"Cannot {action} while a submission is in progress ({self._phase.value})"
            )

    async def submit(self) -> SubmissionPhase:
        """Run one extract → hint → locate workflow on the current state.

        Returns:
            ``DONE`` or ``FAILED``.

        Raises:
            SubmissionInProgressError: If a submission is already running.
        """
        self._guard("submit")
        state = self.state
        state.ai_text = ""
        # Inputs as they were when the button was pressed.
        code, ask, mode = state.code, state.ask, state.subject_mode
        images = list(state.images)
        working_code = code

        logger.info(
            "submission_start",
            subject_mode=mode.value,
            code_length=len(code),
            image_count=len(images),
        )

        try:
            if images and not code.strip():
                self._enter(SubmissionPhase.EXTRACTING)
                working_code = await self.client.extract(images=images, ask=ask, subject_mode=mode)
                state.code = working_code

            self._enter(SubmissionPhase.REQUESTING_HINT)
            hint = await self.client.help(
                code=working_code, ask=ask, images=images, subject_mode=mode
            )
        except AssistServiceError as exc:
            message = f"{ERROR_PREFIX}{str(exc) or GENERIC_ERROR}"
            state.ai_text = message
            self.history.record(mode=mode, ask=ask, code=working_code, images=images, ai_text=message)
            logger.warning(
                "submission_failed",
                phase=self._phase.value,
                error=str(exc),
                status_code=exc.status_code,
            )
            self._enter(SubmissionPhase.FAILED)
            return self._phase
        except BaseException:
            # Unexpected errors propagate, but the busy indicator must clear.
            self._enter(SubmissionPhase.FAILED)
            raise

        state.ai_text = hint.lstrip()
        self.history.record(mode=mode, ask=ask, code=working_code, images=images, ai_text=state.ai_text)

        self._enter(SubmissionPhase.REQUESTING_LOCATION)
        try:
            await self.locate_lines(working_code, ask=ask, subject_mode=mode)
        finally:
            self._enter(SubmissionPhase.DONE)

        logger.info(
            "submission_complete",
            response_length=len(state.ai_text),
            line_hints=len(state.line_hints),
        )
        return self._phase

    async def locate_lines(
        self,
        code: str | None = None,
        *,
        ask: str | None = None,
        subject_mode: SubjectMode | None = None,
    ) -> None:
        """Refresh the line-hint overlay for ``code`` (default: the current text).

        ``ask`` and ``subject_mode`` default to the current state; a submission
        passes the values it sent with the hint request.

        Never raises for service failures; they become the overlay note.
        """
        state = self.state
        text = state.code if code is None else code
        ask = state.ask if ask is None else ask
        subject_mode = state.subject_mode if subject_mode is None else subject_mode

        state.line_hints = []
        state.line_hint_note = ""
        if not text:
            return

        lines = split_lines(text)
        state.is_locating = True
        try:
            reply = await self.client.locate(code=text, ask=ask, subject_mode=subject_mode)
            result = parse_locator_text(reply, len(lines) or 1)
            state.line_hints = list(result.ranges)
            state.line_hint_note = result.note or ("" if result.ranges else NO_RANGES_NOTE)
            logger.info("locate_complete", ranges=len(result.ranges), has_note=bool(result.note))
        except AssistServiceError as exc:
            state.line_hints = []
            state.line_hint_note = f"{LOCATE_ERROR_PREFIX}{str(exc) or 'unknown error'}"
            logger.warning("locate_failed", error=str(exc), status_code=exc.status_code)
        finally:
            state.is_locating = False

    def clear_line_hints(self) -> None:
        self.state.line_hints = []
        self.state.line_hint_note = ""

    def reset(self) -> None:
        """Clear the current prompt and response. History is untouched.

        Raises:
            SubmissionInProgressError: If a submission is running.
        """
        self._guard("reset")
        state = self.state
        state.code = ""
        state.ask = ""
        state.images = []
        state.ai_text = ""
        state.line_hints = []
        state.line_hint_note = ""
        state.is_locating = False
        self._enter(SubmissionPhase.IDLE)
        logger.info("working_state_reset")

    def clear_history(self) -> None:
        """Empty the history log and its persisted copy. Working state is untouched."""
        self.history.clear()

    def highlights(self) -> list[tuple[int, str, LineClass]]:
        return classify_lines(self.state.code, self.state.line_hints)

    @property
    def display_note(self) -> str:
        """Overlay note as shown; a bare "none" from the model is hidden."""
        return display_note(self.state.line_hint_note)


@dataclass
class ClientSession:
    """Orchestrator plus the stores it shares a state file with."""

    orchestrator: SubmissionOrchestrator
    theme: ThemePreference

    async def aclose(self) -> None:
        await self.orchestrator.client.aclose()


def create_session(settings: Settings | None = None) -> ClientSession:
    """Build a client session from settings: file-backed stores plus an API client."""
    settings = settings or get_settings()
    storage = JsonFileStorage(settings.client_state_path)
    client = AssistClient(settings.api_base_url, timeout=settings.client_timeout)
    orchestrator = SubmissionOrchestrator(client=client, history=HistoryStore(storage))
    logger.info(
        "client_session_created",
        api_base_url=settings.api_base_url,
        state_path=str(settings.client_state_path),
    )
    return ClientSession(orchestrator=orchestrator, theme=ThemePreference(storage))
