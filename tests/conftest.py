# tests/conftest.py
import json
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.api.deps import get_google_client  # noqa: E402
from app.config import Settings  # noqa: E402
from app.database import FileBackedReviewStore  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models.review import Review, ReviewSource  # noqa: E402


class FakeGoogleClient:
    """Stands in for GoogleReviewsClient; records the credentials it was called with."""

    def __init__(self, reviews=None):
        self.reviews = list(reviews or [])
        self.calls = []

    def fetch_recent(self, place_id, api_key):
        self.calls.append((place_id, api_key))
        return list(self.reviews)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error

    def raise_for_status(self):
        import requests
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload


class FakeSession:
    """Minimal requests.Session double: returns `response` or raises `error`."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def public_dir(tmp_path):
    """A tiny static site: index.html plus one stylesheet."""
    d = tmp_path / "public"
    (d / "css").mkdir(parents=True)
    (d / "index.html").write_text("<!doctype html><title>Home</title>", encoding="utf-8")
    (d / "css" / "site.css").write_text("body { margin: 0; }", encoding="utf-8")
    return d


@pytest.fixture
def settings(data_dir, public_dir):
    return Settings(
        _env_file=None,
        DATA_DIR=data_dir,
        PUBLIC_DIR=public_dir,
        GOOGLE_PLACE_ID=None,
        GOOGLE_API_KEY=None,
    )


@pytest.fixture
def reviews_file(settings) -> Path:
    return settings.reviews_path


@pytest.fixture
def store(settings):
    return FileBackedReviewStore(settings.reviews_path)


@pytest.fixture
def write_reviews(reviews_file):
    """
    Write raw content (a JSON-able object, or a str written verbatim) to the reviews file.
    Usage: write_reviews([{"author_name": "A", "text": "t", "rating": 5, "time": 1}])
    """
    def _fn(content):
        if isinstance(content, str):
            reviews_file.write_text(content, encoding="utf-8")
        else:
            reviews_file.write_text(json.dumps(content), encoding="utf-8")
        return reviews_file
    return _fn


@pytest.fixture
def fake_google():
    return FakeGoogleClient()


@pytest.fixture
def app(settings, fake_google):
    application = create_app(settings)
    application.dependency_overrides[get_google_client] = lambda: fake_google
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_review():
    """
    Build a Review with sensible defaults.
    Usage: r = make_review(time=100, source=ReviewSource.EXTERNAL)
    """
    def _fn(time=0, source=ReviewSource.SITE, author_name="Customer", text="Nice", rating=5):
        return Review(source=source, author_name=author_name, text=text, rating=rating, time=time)
    return _fn
