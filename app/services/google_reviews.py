"""
Google Places (v1) review fetcher.

Best effort only: any failure yields an empty list and a warning so the
feed can fall back to site reviews.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from app.core.exceptions import UpstreamUnavailable
from app.models.review import Review, ReviewSource, clamp_rating, parse_iso_timestamp

logger = logging.getLogger(__name__)

DEFAULT_PLACES_URL = "https://places.googleapis.com/v1/places"
# Places v1 never returns more than this
MAX_REVIEWS = 5


class GoogleReviewsClient:
    """
    Fetches the most recent reviews for a place.

    USAGE:
        client = GoogleReviewsClient(timeout=5)
        reviews = client.fetch_recent(place_id, api_key)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PLACES_URL,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_recent(self, place_id: Optional[str], api_key: Optional[str]) -> List[Review]:
        if not place_id or not api_key:
            return []
        try:
            data = self._get_place(place_id, api_key)
            items = self._extract_reviews(data)
            reviews = [self._to_review(item) for item in items[:MAX_REVIEWS] if isinstance(item, dict)]
        except UpstreamUnavailable as e:
            logger.warning("Google reviews fetch failed; returning site-only: %s", e)
            return []
        except Exception as e:
            logger.exception(f"Unexpected error reading Google reviews: {e}")
            return []

        reviews.sort(key=lambda r: r.time, reverse=True)
        return reviews

    def _get_place(self, place_id: str, api_key: str) -> Any:
        url = f"{self._base_url}/{quote(place_id, safe='')}"
        try:
            response = self._session.get(
                url,
                params={"fields": "reviews", "key": api_key},
                timeout=self._timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            raise UpstreamUnavailable(f"timeout after {self._timeout}s") from e
        except requests.RequestException as e:
            raise UpstreamUnavailable(str(e)) from e
        except ValueError as e:
            # body was not JSON
            raise UpstreamUnavailable(f"invalid JSON: {e}") from e

    def _extract_reviews(self, data: Any) -> List[Any]:
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"unexpected response shape: {type(data).__name__}")
        items = data.get("reviews") or []
        if not isinstance(items, list):
            raise UpstreamUnavailable("'reviews' is not a list")
        return items

    def _to_review(self, item: Dict[str, Any]) -> Review:
        attribution = item.get("authorAttribution") or {}
        text = item.get("text") or {}
        return Review(
            source=ReviewSource.EXTERNAL,
            author_name=str((attribution.get("displayName") if isinstance(attribution, dict) else None) or "Google User"),
            text=str((text.get("text") if isinstance(text, dict) else None) or ""),
            rating=clamp_rating(item.get("rating")),
            time=parse_iso_timestamp(item.get("publishTime")),
        )
