# app/database.py
"""
File-backed store for site reviews. All reviews live in one JSON document,
newest first. Uses a file lock so concurrent submissions do not lose each
other's writes.

Usage:
    from app.database import FileBackedReviewStore
    store = FileBackedReviewStore(settings.reviews_path)
    store.read_all()
    store.append(review)
"""

from pathlib import Path
from typing import Any, List
import json
import logging
import os
import tempfile
from filelock import FileLock

from app.core.exceptions import StorageReadError
from app.models.review import Review, ReviewSource

logger = logging.getLogger(__name__)


def decode_document(raw: str) -> List[Any]:
    """
    Decode the reviews document. Two shapes are accepted:
      [ {...}, ... ]               (what we write)
      { "reviews": [ {...}, ... ] }  (older files)
    Raises StorageReadError for malformed JSON or any other shape.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise StorageReadError(f"malformed JSON: {e}") from e
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("reviews"), list):
        return data["reviews"]
    raise StorageReadError(f"unexpected document shape: {type(data).__name__}")


class FileBackedReviewStore:
    """
    Owns the site reviews document at `path`.
    Reads never raise; writes report failure through the return value.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _lock(self) -> FileLock:
        return FileLock(str(self.path) + ".lock")

    def _read_records(self) -> List[Any]:
        if not self.path.exists():
            logger.debug("Reviews file %s does not exist yet", self.path)
            return []
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read reviews file %s: %s", self.path, e)
            return []
        if not raw:
            return []
        try:
            return decode_document(raw)
        except StorageReadError as e:
            logger.warning("Ignoring reviews file %s: %s", self.path, e)
            return []

    def _write_records_nolock(self, records: List[dict]) -> None:
        """
        Render the whole document, then move it over the target.
        Use this only when the caller already holds the lock.
        """
        body = json.dumps(records, indent=2, ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=".reviews-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    # --- public API ---

    def read_all(self) -> List[Review]:
        reviews = []
        for i, record in enumerate(self._read_records()):
            if not isinstance(record, dict):
                continue
            try:
                reviews.append(Review.from_dict(record, source=ReviewSource.SITE))
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning("Skipping unreadable review #%d in %s: %s", i, self.path, e)
        return reviews

    def count(self) -> int:
        return len(self.read_all())

    def append(self, review: Review) -> bool:
        """
        Insert `review` at the front and rewrite the document.
        Returns False if the document could not be written.
        """
        try:
            with self._lock():
                records = [r for r in self._read_records() if isinstance(r, dict)]
                records.insert(0, review.to_dict())
                self._write_records_nolock(records)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write reviews file %s", self.path)
            return False
