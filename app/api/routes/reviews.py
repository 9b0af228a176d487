import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from app.api.deps import get_google_client, get_store
from app.api.schemas.reviews import build_site_review, review_to_out
from app.config import Settings, get_settings
from app.core.exceptions import ReviewValidationError, StorageWriteError
from app.database import FileBackedReviewStore
from app.services.aggregator import merge
from app.services.google_reviews import GoogleReviewsClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


@router.get("/reviews")
def list_reviews(
    store: FileBackedReviewStore = Depends(get_store),
    google: GoogleReviewsClient = Depends(get_google_client),
    settings: Settings = Depends(get_settings),
):
    """
    Newest reviews, Google and site combined, newest first.
    Google failures degrade to site-only; storage problems to an empty site list.
    """
    headers = {"Cache-Control": "no-store"}
    try:
        site = store.read_all()
        external = google.fetch_recent(settings.GOOGLE_PLACE_ID, settings.GOOGLE_API_KEY)
        feed = merge(external, site, limit=settings.FEED_LIMIT)
        body = [review_to_out(r) for r in feed]
    except Exception:
        logger.exception("Failed to build reviews feed")
        return JSONResponse(status_code=500, content={"error": "Failed to load reviews"}, headers=headers)
    return JSONResponse(content=body, headers=headers)


@router.post("/reviews/site", status_code=201)
async def create_site_review(request: Request, store: FileBackedReviewStore = Depends(get_store)):
    """
    Save a review submitted from the site form.
    Body: { "author_name": str, "text": str, "rating": number }
    A body that is not a JSON object counts as an empty submission.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    review = build_site_review(payload)
    try:
        saved = await run_in_threadpool(store.append, review)
    except Exception as e:
        logger.exception("Unexpected error while saving review")
        raise StorageWriteError(str(e)) from e
    if not saved:
        raise StorageWriteError(f"could not persist review to {store.path}")
    logger.info("Saved site review from %r (rating %s)", review.author_name, review.rating)
    return {"ok": True}


async def validation_error_handler(request: Request, exc: ReviewValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.code})


async def storage_write_error_handler(request: Request, exc: StorageWriteError) -> JSONResponse:
    logger.error("Review not saved: %s", exc)
    return JSONResponse(status_code=500, content={"error": "Failed to save review"})


EXCEPTION_HANDLERS: Dict[type, Any] = {
    ReviewValidationError: validation_error_handler,
    StorageWriteError: storage_write_error_handler,
}
