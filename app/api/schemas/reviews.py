import time
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, constr, field_validator

from app.core.exceptions import ReviewValidationError
from app.models.review import Review, ReviewSource, clamp_rating


class ReviewCreate(BaseModel):
    """Body of POST /reviews/site. Client-supplied `time` and `source` are ignored."""

    author_name: constr(strip_whitespace=True, min_length=1) = Field("Customer", description="Defaults to Customer when absent")
    text: constr(strip_whitespace=True, min_length=1) = Field(..., description="Non-empty review text")
    rating: int = Field(0, description="Clamped into 0-5")

    model_config = ConfigDict(extra="ignore")

    @field_validator("author_name", mode="before")
    @classmethod
    def default_author(cls, v):
        # null behaves like a missing name; anything else must survive trimming
        return "Customer" if v is None else str(v)

    @field_validator("text", mode="before")
    @classmethod
    def text_as_str(cls, v):
        return "" if v is None else str(v)

    @field_validator("rating", mode="before")
    @classmethod
    def clamp(cls, v):
        return clamp_rating(v)


class ReviewOut(BaseModel):
    source: ReviewSource
    author_name: str
    text: str
    rating: int
    time: int


def build_site_review(payload: Any, now: float = None) -> Review:
    """
    Validate a submission and stamp it with the server time.
    Raises ReviewValidationError if the name or text is blank.
    """
    if not isinstance(payload, dict):
        payload = {}
    try:
        data = ReviewCreate.model_validate(payload)
    except ValidationError as e:
        raise ReviewValidationError("name_and_text_required") from e
    return Review(
        source=ReviewSource.SITE,
        author_name=data.author_name,
        text=data.text,
        rating=data.rating,
        time=int(time.time() if now is None else now),
    )


def review_to_out(review: Review) -> Dict[str, Any]:
    return ReviewOut(**review.to_dict()).model_dump(mode="json")
