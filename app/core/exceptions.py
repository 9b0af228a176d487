from __future__ import annotations


class ReviewError(Exception):
    pass


class ReviewValidationError(ReviewError, ValueError):
    """
    Submitted review is incomplete. `code` is the machine-readable reason
    returned to the client as {"error": code}.
    """

    def __init__(self, code: str = "name_and_text_required"):
        super().__init__(code)
        self.code = code


class UpstreamUnavailable(ReviewError):
    pass


class StorageReadError(ReviewError):
    pass


class StorageWriteError(ReviewError):
    pass
