from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from dcinside_crawler.crawler import BatchOptions, DcinsideCrawler
from dcinside_crawler.errors import EmptyResultError
from dcinside_crawler.http_client import HttpClient, HttpConfig
from dcinside_crawler.models import BoardType, PostRecord
from dcinside_crawler.settings import load_settings

logger = logging.getLogger(__name__)


def build_crawler() -> DcinsideCrawler:
    """Crawler wired from environment settings."""
    s = load_settings()
    http = HttpClient(HttpConfig(timeout_sec=s.request_timeout_sec, referer=s.base_url))
    return DcinsideCrawler(http, base_url=s.base_url)


@contextmanager
def _crawler_for_call(crawler: Optional[DcinsideCrawler]) -> Iterator[DcinsideCrawler]:
    # A caller-supplied crawler stays open; one built here is closed after the call.
    if crawler is not None:
        yield crawler
        return

    own = build_crawler()
    try:
        yield own
    finally:
        own.http.close()


def get_post_list(
    gallery_id: str,
    page: int = 1,
    board_type: BoardType | str = BoardType.ALL,
    *,
    crawler: Optional[DcinsideCrawler] = None,
) -> list[str]:
    """Post numbers listed on one page of a gallery."""
    with _crawler_for_call(crawler) as c:
        return c.list_post_ids(gallery_id, page, board_type)


def get_post(
    gallery_id: str,
    post_no: str | int,
    *,
    crawler: Optional[DcinsideCrawler] = None,
) -> Optional[PostRecord]:
    """
    Fetch one post.

    Returns None when the post page holds nothing (deleted or blinded post).
    Retrieval and other parse failures propagate.
    """
    with _crawler_for_call(crawler) as c:
        try:
            return c.fetch_post(gallery_id, post_no)
        except EmptyResultError as e:
            logger.info("Empty post: gallery_id=%s post_no=%s err=%s", gallery_id, post_no, e)
            return None


def get_posts(
    gallery_id: str,
    post_numbers: Sequence[str | int],
    options: Optional[BatchOptions] = None,
    *,
    crawler: Optional[DcinsideCrawler] = None,
) -> list[PostRecord]:
    """Fetch many posts sequentially; failed posts are logged and left out."""
    if options is None:
        options = BatchOptions(delay_sec=load_settings().request_delay_sec)
    with _crawler_for_call(crawler) as c:
        return c.fetch_posts(gallery_id, post_numbers, options)


# Older name kept for callers of the first release.
get_post_numbers = get_post_list
