# app/models/review.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
import math
import re

RATING_MIN = 0
RATING_MAX = 5

# epoch values above this are milliseconds, not seconds
_MS_THRESHOLD = 1e12
# Google sends nanosecond fractions; datetime keeps microseconds
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


class ReviewSource(str, Enum):
    SITE = "site"
    EXTERNAL = "external"


def parse_iso_timestamp(value: Any) -> int:
    """
    Parse an ISO-8601 string (e.g. "2024-05-01T12:00:00.123456789Z") into
    epoch seconds. Naive values are taken as UTC. Returns 0 if unparsable.
    """
    if not value:
        return 0
    try:
        dt = datetime.fromisoformat(_EXTRA_FRACTION.sub(r"\1", str(value).strip()))
    except ValueError:
        return 0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def normalize_time(value: Any) -> float:
    """
    Normalize a stored timestamp to epoch seconds.
    Accepts seconds, milliseconds or ISO-8601 strings; anything else is 0.
    Non-finite numbers are passed through so the feed can drop them.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        return parse_iso_timestamp(value)
    if isinstance(value, float) and not math.isfinite(value):
        return value
    if isinstance(value, (int, float)):
        if value > _MS_THRESHOLD:
            return int(value // 1000)
        return int(value)
    return 0


def clamp_rating(value: Any) -> int:
    """Coerce to a number (non-numeric -> 0) and clamp into [0, 5]."""
    if isinstance(value, int):
        # ints of any size compare without a float conversion
        num = value
    else:
        try:
            num = float(value) if value not in (None, "") else 0.0
        except (TypeError, ValueError, OverflowError):
            num = 0.0
        if math.isnan(num):
            num = 0.0
    num = max(RATING_MIN, min(RATING_MAX, num))
    return int(num)


@dataclass
class Review:
    """
    A rated, authored, timestamped customer review.
    Site reviews are persisted; external reviews only live for one request.
    """
    source: ReviewSource = ReviewSource.SITE
    author_name: str = "Customer"
    text: str = ""
    rating: int = 0
    time: float = 0

    @classmethod
    def from_dict(cls, d: Dict[str, Any], source: Optional[ReviewSource] = None) -> "Review":
        """
        Build a Review from a stored record. Missing fields get defaults, the
        rating is clamped and the time normalized to epoch seconds.
        """
        if d is None:
            raise ValueError("Cannot construct Review from None")
        if source is None:
            try:
                source = ReviewSource(d.get("source") or ReviewSource.SITE)
            except ValueError:
                source = ReviewSource.SITE
        return cls(
            source=source,
            author_name=str(d.get("author_name") or "Customer"),
            text=str(d.get("text") or ""),
            rating=clamp_rating(d.get("rating")),
            time=normalize_time(d.get("time")),
        )

    def has_valid_time(self) -> bool:
        t = self.time
        if isinstance(t, bool) or not isinstance(t, (int, float)):
            return False
        if isinstance(t, float) and not math.isfinite(t):
            return False
        return t >= 0

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["source"] = self.source.value
        return out
