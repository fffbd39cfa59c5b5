from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence
from urllib.parse import urlencode

from dcinside_crawler.errors import InputValidationError, RetrievalError
from dcinside_crawler.http_client import HttpClient
from dcinside_crawler.models import BoardType, PostRecord
from dcinside_crawler.parsing import parse_listing, parse_post

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

DEFAULT_BASE_URL = "https://gall.dcinside.com"
DEFAULT_DELAY_SEC = 0.1

_GALLERY_ID_RE = re.compile(r"^[A-Za-z0-9_]+$")


@dataclass(frozen=True)
class BatchOptions:
    """
    Options for a sequential batch fetch.

    - delay_sec: minimum time between the starts of two consecutive attempts
    - on_progress: called after every attempt with (completed, total)
    """

    delay_sec: float = DEFAULT_DELAY_SEC
    on_progress: Optional[ProgressCallback] = None

    def __post_init__(self) -> None:
        if isinstance(self.delay_sec, bool) or not isinstance(self.delay_sec, (int, float)):
            raise InputValidationError(f"delay_sec must be a number, got {self.delay_sec!r}")
        if self.delay_sec < 0:
            raise InputValidationError(f"delay_sec must be >= 0, got {self.delay_sec}")
        if self.on_progress is not None and not callable(self.on_progress):
            raise InputValidationError("on_progress must be callable")


def post_number_range(start: int, end: int) -> list[str]:
    """Inclusive post number range as identifiers; reversed bounds are swapped."""
    start = _positive_int(start, "start")
    end = _positive_int(end, "end")
    if start > end:
        start, end = end, start
    return [str(no) for no in range(start, end + 1)]


def dedupe(post_numbers: Iterable[str]) -> list[str]:
    """Drop repeated identifiers, keeping the first occurrence."""
    return list(dict.fromkeys(post_numbers))


class DcinsideCrawler:
    """
    Crawler for gall.dcinside.com galleries.

    Scope:
    - Listing page: /board/lists/?id=<gallery>&page=<n>[&exception_mode=recommend|notice]
    - Post view page: /board/view/?id=<gallery>&no=<post_no>

    Every fetch is a single attempt. Batch methods run strictly sequentially,
    skip failed items and keep a minimum spacing between request starts.
    """

    def __init__(
        self,
        http: HttpClient,
        base_url: str = DEFAULT_BASE_URL,
        *,
        log: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.log = log or logger
        self._sleep = sleep
        self._clock = clock

    # -------------------------
    # Single requests
    # -------------------------

    def list_post_ids(
        self,
        gallery_id: str,
        page: int = 1,
        board_type: BoardType | str = BoardType.ALL,
    ) -> list[str]:
        """
        Fetch one listing page and return its post numbers in page order.

        Raises:
            InputValidationError: bad gallery id, page or board type
            RetrievalError: request failed
            ParseError: listing table absent
        """
        gallery_id = _gallery_id(gallery_id)
        page = _positive_int(page, "page")
        board_type = _board_type(board_type)

        url = self.build_list_url(gallery_id, page, board_type)
        self.log.debug("Fetching listing: gallery_id=%s page=%s url=%s", gallery_id, page, url)
        try:
            html = self.http.get_text(url)
        except RetrievalError as e:
            raise RetrievalError(
                f"Listing fetch failed: gallery_id={gallery_id} page={page}: {e}",
                url=e.url or url,
                status_code=e.status_code,
                gallery_id=gallery_id,
                page=page,
            ) from e
        return parse_listing(html, board_type)

    def fetch_post(self, gallery_id: str, post_no: str | int) -> PostRecord:
        """
        Fetch and parse a post view page.

        Raises:
            InputValidationError: bad gallery id or post number
            RetrievalError: request failed
            ParseError / EmptyResultError: page holds no parsable post
        """
        gallery_id = _gallery_id(gallery_id)
        post_no = _post_no(post_no)

        url = self.build_post_url(gallery_id, post_no)
        self.log.debug("Fetching post: gallery_id=%s post_no=%s url=%s", gallery_id, post_no, url)
        try:
            html = self.http.get_text(url)
        except RetrievalError as e:
            raise RetrievalError(
                f"Post fetch failed: gallery_id={gallery_id} post_no={post_no}: {e}",
                url=e.url or url,
                status_code=e.status_code,
                gallery_id=gallery_id,
                post_no=post_no,
            ) from e
        return parse_post(html, gallery_id, post_no, url)

    # -------------------------
    # Batches
    # -------------------------

    def fetch_posts(
        self,
        gallery_id: str,
        post_numbers: Sequence[str | int],
        options: Optional[BatchOptions] = None,
    ) -> list[PostRecord]:
        """
        Fetch posts one by one in input order.

        A failed item is logged and skipped; the rest of the batch still runs.
        Returns records of successful fetches only, in attempt order.
        """
        options = options or BatchOptions()
        gallery_id = _gallery_id(gallery_id)
        post_numbers = [_post_no(no) for no in post_numbers]

        posts: list[PostRecord] = []
        total = len(post_numbers)

        for i, post_no in enumerate(post_numbers):
            started = self._clock()
            try:
                posts.append(self.fetch_post(gallery_id, post_no))
            except Exception as e:
                self.log.warning(
                    "Skipping post due to error: gallery_id=%s post_no=%s err=%s",
                    gallery_id,
                    post_no,
                    e,
                )

            if options.on_progress is not None:
                options.on_progress(i + 1, total)

            if i < total - 1:
                self._wait_remaining(started, options.delay_sec)

        self.log.info("Fetched posts: gallery_id=%s ok=%s total=%s", gallery_id, len(posts), total)
        return posts

    def collect_post_ids(
        self,
        gallery_id: str,
        start_page: int,
        end_page: int,
        board_type: BoardType | str = BoardType.ALL,
    ) -> list[str]:
        """
        List every page in the inclusive range (ascending) and merge the results.

        A failing page is logged and contributes nothing. The merged list keeps
        the first occurrence of each post number.
        """
        gallery_id = _gallery_id(gallery_id)
        start_page = _positive_int(start_page, "start_page")
        end_page = _positive_int(end_page, "end_page")
        board_type = _board_type(board_type)
        if start_page > end_page:
            start_page, end_page = end_page, start_page

        collected: list[str] = []
        for page in range(start_page, end_page + 1):
            try:
                collected.extend(self.list_post_ids(gallery_id, page, board_type))
            except Exception as e:
                self.log.warning(
                    "Skipping listing page due to error: gallery_id=%s page=%s err=%s",
                    gallery_id,
                    page,
                    e,
                )

        post_ids = dedupe(collected)
        self.log.info(
            "Collected post ids: gallery_id=%s pages=%s-%s count=%s",
            gallery_id,
            start_page,
            end_page,
            len(post_ids),
        )
        return post_ids

    def crawl_range(
        self,
        gallery_id: str,
        start_no: int,
        end_no: int,
        options: Optional[BatchOptions] = None,
    ) -> list[PostRecord]:
        return self.fetch_posts(gallery_id, post_number_range(start_no, end_no), options)

    def crawl_pages(
        self,
        gallery_id: str,
        start_page: int,
        end_page: int,
        board_type: BoardType | str = BoardType.ALL,
        options: Optional[BatchOptions] = None,
    ) -> list[PostRecord]:
        post_ids = self.collect_post_ids(gallery_id, start_page, end_page, board_type)
        return self.fetch_posts(gallery_id, post_ids, options)

    # -------------------------
    # Helpers
    # -------------------------

    def build_list_url(self, gallery_id: str, page: int, board_type: BoardType) -> str:
        query: dict[str, str] = {"id": gallery_id, "page": str(page)}
        if board_type is not BoardType.ALL:
            query["exception_mode"] = board_type.value
        return f"{self.base_url}/board/lists/?{urlencode(query)}"

    def build_post_url(self, gallery_id: str, post_no: str) -> str:
        return f"{self.base_url}/board/view/?{urlencode({'id': gallery_id, 'no': post_no})}"

    def _wait_remaining(self, started: float, delay_sec: float) -> None:
        elapsed = self._clock() - started
        if elapsed < delay_sec:
            self._sleep(delay_sec - elapsed)


# -------------------------
# Input validation
# -------------------------

def _gallery_id(value: str) -> str:
    if not isinstance(value, str) or not _GALLERY_ID_RE.match(value.strip()):
        raise InputValidationError(f"Invalid gallery id: {value!r}")
    return value.strip()


def _positive_int(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InputValidationError(f"{name} must be a positive integer, got {value!r}")
    return value


def _post_no(value: str | int) -> str:
    if isinstance(value, bool):
        raise InputValidationError(f"Invalid post number: {value!r}")
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()) or int(text) < 1:
        raise InputValidationError(f"Invalid post number: {value!r}")
    return text


def _board_type(value: BoardType | str) -> BoardType:
    try:
        return BoardType(value)
    except ValueError:
        raise InputValidationError(f"Unknown board type: {value!r}") from None
