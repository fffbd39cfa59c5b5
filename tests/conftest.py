from __future__ import annotations

from typing import Callable, Optional, Union
from urllib.parse import parse_qs, urlparse

import pytest

from dcinside_crawler.crawler import DcinsideCrawler
from dcinside_crawler.errors import RetrievalError
from dcinside_crawler.http_client import HttpClient, HttpConfig

Responder = Callable[[str], str]

LIST_HTML_TEMPLATE = """
<html><body>
<table class="gall_list">
  <tbody class="listwrap2">
  {rows}
  </tbody>
</table>
</body></html>
"""

POST_HTML_TEMPLATE = """
<html><body>
<div class="view_content_wrap">
  <header>
    <div class="gallview_head clear ub-content">
      <h3 class="title ub-word">
        <span class="title_headtext">[일반]</span>
        <span class="title_subject">{title}</span>
      </h3>
      <div class="gall_writer ub-writer" data-nick="ㅇㅇ" data-uid="" data-ip="118.235">
        <div class="fl">
          <span class="nickname"><em>ㅇㅇ</em></span>
          <span class="ip">(118.235)</span>
          <span class="gall_date" title="2026-01-28 13:28:48">01.28 13:28</span>
        </div>
        <div class="fr">
          <span class="gall_count">조회 1,234</span>
          <span class="gall_reply_num">추천 5</span>
          <span class="gall_comment"><a href="#">댓글 7</a></span>
        </div>
      </div>
    </div>
  </header>
  <div class="writing_view_box">
    <div class="write_div">
      <p>{body}</p>
      <p><img src="https://dcimg8.dcinside.co.kr/viewimage.php?id=abc&amp;no=1"></p>
    </div>
  </div>
</div>
</body></html>
"""


def list_row(no: str, *, notice: bool = False) -> str:
    data_type = "icon_notice" if notice else "icon_txt"
    num = "공지" if notice else no
    return (
        f'<tr class="ub-content us-post" data-no="{no}" data-type="{data_type}">'
        f'<td class="gall_num">{num}</td>'
        f'<td class="gall_tit ub-word"><a href="/board/view/?id=test&no={no}">post {no}</a></td>'
        "</tr>"
    )


def list_html(*post_nos: str, notices: tuple[str, ...] = ()) -> str:
    rows = [list_row(no, notice=True) for no in notices] + [list_row(no) for no in post_nos]
    return LIST_HTML_TEMPLATE.format(rows="\n".join(rows))


def post_html(title: str = "테스트 제목", body: str = "본문 내용") -> str:
    return POST_HTML_TEMPLATE.format(title=title, body=body)


class FakeHttp(HttpClient):
    """HttpClient that serves canned bodies instead of hitting the network."""

    def __init__(self, responder: Responder, clock: Optional[Callable[[], float]] = None):
        super().__init__(HttpConfig(timeout_sec=1.0, user_agent="test"))
        self._responder = responder
        self._clock = clock
        self.urls: list[str] = []
        self.started_at: list[float] = []
        self.closed = False

    def get_text(self, url: str) -> str:
        self.urls.append(url)
        if self._clock is not None:
            self.started_at.append(self._clock())
        return self._responder(url)

    def close(self) -> None:
        self.closed = True
        super().close()


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def query_param(url: str, name: str) -> Union[str, None]:
    values = parse_qs(urlparse(url).query).get(name)
    return values[0] if values else None


def fail(url: str) -> str:
    raise RetrievalError(f"Unexpected status: status=500 url={url}", url=url, status_code=500)


@pytest.fixture
def list_page():
    return list_html


@pytest.fixture
def post_page():
    return post_html


@pytest.fixture
def param():
    return query_param


@pytest.fixture
def failing_request():
    return fail


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_crawler(fake_clock):
    """Build a crawler over FakeHttp; both share the test's fake clock."""

    def _make(responder: Responder, **kwargs) -> tuple[DcinsideCrawler, FakeHttp]:
        http = FakeHttp(responder, clock=fake_clock)
        crawler = DcinsideCrawler(http, sleep=fake_clock.sleep, clock=fake_clock, **kwargs)
        return crawler, http

    return _make
