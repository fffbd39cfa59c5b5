"""
Gallery crawler for gall.dcinside.com.

Library entry points: get_post_list, get_post, get_posts.
"""

from dcinside_crawler.api import get_post, get_post_list, get_post_numbers, get_posts
from dcinside_crawler.crawler import BatchOptions, DcinsideCrawler
from dcinside_crawler.errors import (
    CrawlerError,
    EmptyResultError,
    InputValidationError,
    ParseError,
    RetrievalError,
)
from dcinside_crawler.http_client import random_user_agent
from dcinside_crawler.models import BoardType, PostRecord

__all__ = [
    "BatchOptions",
    "BoardType",
    "CrawlerError",
    "DcinsideCrawler",
    "EmptyResultError",
    "InputValidationError",
    "ParseError",
    "PostRecord",
    "RetrievalError",
    "get_post",
    "get_post_list",
    "get_post_numbers",
    "get_posts",
    "random_user_agent",
]
