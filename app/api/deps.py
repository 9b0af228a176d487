# app/api/deps.py
from functools import lru_cache

from fastapi import Depends

from app.config import Settings, get_settings
from app.database import FileBackedReviewStore
from app.services.google_reviews import GoogleReviewsClient


@lru_cache()
def _store_for(path: str) -> FileBackedReviewStore:
    return FileBackedReviewStore(path)


def get_store(settings: Settings = Depends(get_settings)) -> FileBackedReviewStore:
    """
    Dependency that returns the site reviews store for the configured file.
    Usage:
        store = Depends(get_store)
    """
    return _store_for(str(settings.reviews_path))


@lru_cache()
def _google_client_for(base_url: str, timeout: float) -> GoogleReviewsClient:
    # one client (and requests.Session) per configuration
    return GoogleReviewsClient(base_url=base_url, timeout=timeout)


def get_google_client(settings: Settings = Depends(get_settings)) -> GoogleReviewsClient:
    return _google_client_for(settings.GOOGLE_PLACES_URL, settings.GOOGLE_TIMEOUT_SECONDS)
