from __future__ import annotations

from typing import Optional


class CrawlerError(Exception):
    """Base class for every failure raised by the crawler."""


class RetrievalError(CrawlerError):
    """
    A request failed or returned a non-2xx status.

    Carries whatever context the raising layer knows: the HTTP client fills
    url/status_code, the crawler re-raises with gallery and page/post number.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        gallery_id: Optional[str] = None,
        page: Optional[int] = None,
        post_no: Optional[str] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.gallery_id = gallery_id
        self.page = page
        self.post_no = post_no


class ParseError(CrawlerError):
    """Response received but the expected markup is absent."""


class EmptyResultError(ParseError):
    """The page parsed but holds no post (deleted or blinded)."""


class InputValidationError(CrawlerError, ValueError):
    """Caller-supplied gallery id, page, range or post numbers are malformed."""
