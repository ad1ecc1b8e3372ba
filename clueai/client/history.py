"""
clueai/client/history.py

Capped, newest-first log of past submissions.

Rules:
  - At most ``HISTORY_LIMIT`` items; recording an 11th drops the oldest.
  - Items are frozen snapshots. Images are copied at record time, so editing
    the live inputs afterwards never changes a stored item.
  - Loaded once at construction, persisted after every change. Storage
    failures are logged and otherwise ignored: the in-memory log stays
    authoritative and nothing is retried.

Stored format (under ``HISTORY_KEY``): a JSON array of objects with keys
``id, timestamp, mode, ask, code, images, aiText``.
"""

import json
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import ValidationError

from clueai.client.storage import KeyValueStorage, StorageError
from clueai.core.logging import get_logger
from clueai.schemas.assist import ImageAttachment, SubjectMode

logger = get_logger(__name__)

HISTORY_KEY = "clueai-history-v1"
HISTORY_LIMIT = 10

TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


@dataclass(frozen=True)
class HistoryItem:
    id: int
    timestamp: str
    mode: SubjectMode
    ask: str
    code: str
    images: tuple[ImageAttachment, ...] = field(default_factory=tuple)
    ai_text: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "mode": self.mode.value,
            "ask": self.ask,
            "code": self.code,
            "images": [image.model_dump() for image in self.images],
            "aiText": self.ai_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryItem":
        return cls(
            id=int(data["id"]),
            timestamp=str(data.get("timestamp", "")),
            mode=SubjectMode(data.get("mode", SubjectMode.OTHER.value)),
            ask=str(data.get("ask", "")),
            code=str(data.get("code", "")),
            images=tuple(ImageAttachment.model_validate(img) for img in data.get("images") or []),
            ai_text=str(data.get("aiText", "")),
        )


def _millis() -> int:
    return time.time_ns() // 1_000_000


class HistoryStore:
    """History log backed by an injected ``KeyValueStorage``."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        limit: int = HISTORY_LIMIT,
        clock: Callable[[], int] = _millis,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._limit = limit
        self._clock = clock
        self._now = now
        self._items: list[HistoryItem] = self._load()

    @property
    def items(self) -> tuple[HistoryItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def _load(self) -> list[HistoryItem]:
        try:
            raw = self._storage.read(HISTORY_KEY)
        except StorageError as exc:
            logger.error("history_load_failed", error=str(exc))
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
            items = [HistoryItem.from_dict(entry) for entry in data]
        except (TypeError, KeyError, ValueError, ValidationError) as exc:
            logger.error("history_load_failed", error=str(exc), error_type=type(exc).__name__)
            return []
        logger.debug("history_loaded", count=len(items))
        return items[: self._limit]

    def _persist(self) -> None:
        try:
            self._storage.write(HISTORY_KEY, json.dumps([item.to_dict() for item in self._items]))
        except StorageError as exc:
            logger.error("history_save_failed", error=str(exc))

    def _next_id(self) -> int:
        # Two records in the same millisecond still get distinct ids.
        candidate = self._clock()
        if self._items and candidate <= self._items[0].id:
            candidate = self._items[0].id + 1
        return candidate

    def record(
        self,
        *,
        mode: SubjectMode,
        ask: str,
        code: str,
        images: Iterable[ImageAttachment],
        ai_text: str,
    ) -> HistoryItem:
        """Snapshot one interaction at the front of the log and persist."""
        item = HistoryItem(
            id=self._next_id(),
            timestamp=self._now().strftime(TIMESTAMP_FORMAT),
            mode=mode,
            ask=ask,
            code=code,
            images=tuple(ImageAttachment(name=img.name, src=img.src) for img in images),
            ai_text=ai_text,
        )
        self._items = [item, *self._items][: self._limit]
        logger.info("history_recorded", history_id=item.id, count=len(self._items))
        self._persist()
        return item

    def clear(self) -> None:
        """Empty the log and remove its persisted copy."""
        self._items = []
        try:
            self._storage.clear(HISTORY_KEY)
        except StorageError as exc:
            logger.error("history_clear_failed", error=str(exc))
        logger.info("history_cleared")
