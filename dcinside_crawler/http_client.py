from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

import requests

from dcinside_crawler.errors import RetrievalError

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_2) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)


def random_user_agent() -> str:
    return random.choice(USER_AGENTS)


@dataclass(frozen=True)
class HttpConfig:
    timeout_sec: float
    referer: Optional[str] = None
    user_agent: Optional[str] = None  # None -> rotate through USER_AGENTS


class HttpClient:
    """
    Thin HTTP client wrapper:
    - Timeout on every request
    - User-Agent rotation (or a fixed one from config)
    - Maps every failure to RetrievalError

    Single attempt per call. Pacing and retry policy belong to the caller.
    """

    def __init__(self, config: HttpConfig, session: Optional[requests.Session] = None):
        self._cfg = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
            }
        )
        if self._cfg.referer:
            self._session.headers["Referer"] = self._cfg.referer

    def get_text(self, url: str) -> str:
        """
        GET an URL and return response body as text.

        Raises:
            RetrievalError: network error, timeout or non-2xx status
        """
        headers = {"User-Agent": self._cfg.user_agent or random_user_agent()}
        try:
            resp = self._session.get(url, headers=headers, timeout=self._cfg.timeout_sec)
        except requests.RequestException as e:
            logger.debug("HTTP GET failed: url=%s err=%s", url, e)
            raise RetrievalError(f"Request failed: url={url} err={e}", url=url) from e

        if not resp.ok:
            logger.debug("HTTP GET bad status: url=%s status=%s", url, resp.status_code)
            raise RetrievalError(
                f"Unexpected status: status={resp.status_code} url={url}",
                url=url,
                status_code=resp.status_code,
            )

        resp.encoding = "utf-8"
        return resp.text

    def close(self) -> None:
        self._session.close()
