from typing import Iterable, List

from app.models.review import Review

FEED_LIMIT = 10


def merge(external: Iterable[Review], site: Iterable[Review], limit: int = FEED_LIMIT) -> List[Review]:
    """
    Build the public feed: external reviews first, then site reviews,
    minus anything without a usable time, newest first, capped at `limit`.
    sorted() is stable, so equal times keep their concatenation order.
    """
    combined = [r for r in [*external, *site] if r is not None and r.has_valid_time()]
    combined = sorted(combined, key=lambda r: r.time, reverse=True)
    return combined[:limit]
