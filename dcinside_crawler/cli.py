from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Prompt

from dcinside_crawler.crawler import BatchOptions, DcinsideCrawler
from dcinside_crawler.errors import InputValidationError
from dcinside_crawler.http_client import HttpClient, HttpConfig
from dcinside_crawler.inputs import parse_board_type, parse_number, parse_post_numbers
from dcinside_crawler.models import PostRecord
from dcinside_crawler.settings import CrawlerSettings, load_settings
from dcinside_crawler.storage import PREVIEW_SIZE, preview_posts, write_posts_json

logger = logging.getLogger(__name__)

MODE_NUMBER_RANGE = "1"
MODE_PAGE_RANGE = "2"
MODE_NUMBER_LIST = "3"


def _setup_logging(level: str, console: Console) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@dataclass
class PromptIO:
    """Console plus input stream of one interactive session."""

    console: Console
    stream: Optional[TextIO] = None

    def ask(self, prompt: str) -> str:
        answer = Prompt.ask(
            prompt,
            console=self.console,
            default="",
            show_default=False,
            stream=self.stream,
        )
        return answer.strip()

    def say(self, message: str = "") -> None:
        self.console.print(message)


@contextmanager
def interactive_session(
    settings: CrawlerSettings,
    *,
    console: Optional[Console] = None,
    stream: Optional[TextIO] = None,
) -> Iterator[tuple[PromptIO, DcinsideCrawler]]:
    http = HttpClient(HttpConfig(timeout_sec=settings.request_timeout_sec, referer=settings.base_url))
    try:
        yield PromptIO(console or Console(), stream), DcinsideCrawler(http, base_url=settings.base_url)
    finally:
        http.close()


def _crawl_with_progress(
    io: PromptIO,
    description: str,
    delay_sec: float,
    run: Callable[[BatchOptions], list[PostRecord]],
) -> list[PostRecord]:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}", justify="right"),
        TimeElapsedColumn(),
        console=io.console,
    ) as progress:
        task = progress.add_task(description, total=None)

        def on_progress(completed: int, total: int) -> None:
            progress.update(task, completed=completed, total=total)

        return run(BatchOptions(delay_sec=delay_sec, on_progress=on_progress))


def run_session(
    io: PromptIO,
    crawler: DcinsideCrawler,
    settings: CrawlerSettings,
) -> Optional[list[PostRecord]]:
    """
    Ask for gallery and mode, crawl, and return the posts.

    Returns None when the user picked an unknown option or typed bad input.
    """
    io.say("DCInside 갤러리 크롤링 프로그램")
    io.say("크롤링할 갤러리 ID를 입력하세요:")
    gallery_id = io.ask(f"갤러리 ID(기본:{settings.default_gallery_id})") or settings.default_gallery_id

    io.say("==========================")
    io.say("옵션을 선택하세요(기본:1):")
    io.say("1: 게시글 번호 범위로 크롤링")
    io.say("2: 게시판 페이지 범위로 크롤링")
    io.say("3: 게시글 번호로 크롤링")
    option = io.ask("옵션 선택 (1~3)") or MODE_NUMBER_RANGE
    if option not in (MODE_NUMBER_RANGE, MODE_PAGE_RANGE, MODE_NUMBER_LIST):
        io.say("올바르지 않은 옵션입니다.")
        return None

    delay = settings.request_delay_sec
    try:
        if option == MODE_NUMBER_RANGE:
            start_no = parse_number(io.ask("시작 게시글 번호"), 1)
            end_no = parse_number(io.ask("끝 게시글 번호"), start_no)
            return _crawl_with_progress(
                io,
                "게시글 번호 크롤링",
                delay,
                lambda opts: crawler.crawl_range(gallery_id, start_no, end_no, opts),
            )

        if option == MODE_PAGE_RANGE:
            io.say("==========================")
            io.say("게시판을 선택하세요(기본:1):")
            io.say("1: 전체글")
            io.say("2: 개념글")
            io.say("3: 공지")
            board_type = parse_board_type(io.ask("게시판 선택 (1~3)"))
            start_page = parse_number(io.ask("시작 페이지 번호"), 1)
            end_page = parse_number(io.ask("끝 페이지 번호"), start_page)

            with io.console.status("게시판 페이지 수집 중"):
                post_ids = crawler.collect_post_ids(gallery_id, start_page, end_page, board_type)
            return _crawl_with_progress(
                io,
                "게시글 크롤링",
                delay,
                lambda opts: crawler.fetch_posts(gallery_id, post_ids, opts),
            )

        post_numbers = parse_post_numbers(io.ask("게시글 번호를 쉼표로 구분하여 입력하세요"))
        return _crawl_with_progress(
            io,
            "게시글 크롤링",
            delay,
            lambda opts: crawler.fetch_posts(gallery_id, post_numbers, opts),
        )
    except InputValidationError as e:
        logger.error("Invalid input: %s", e)
        return None


def report(io: PromptIO, posts: Sequence[PostRecord], output_dir: str | Path) -> Path:
    io.say("크롤링 완료!")
    if len(posts) > PREVIEW_SIZE:
        io.say(f"게시글 개수: {len(posts)}")
        io.say("게시글 일부 미리보기:")
    io.console.print_json(data=preview_posts(posts), ensure_ascii=False)

    path = write_posts_json(posts, output_dir)
    io.say(f"크롤링 결과가 {path} 파일에 저장되었습니다.")
    return path


def main() -> None:
    s = load_settings()
    console = Console()
    _setup_logging(s.log_level, console)

    try:
        with interactive_session(s, console=console) as (io, crawler):
            posts = run_session(io, crawler, s)
            if posts is not None:
                report(io, posts, s.output_dir)
    except Exception:
        logger.exception("Crawler run failed")


if __name__ == "__main__":
    main()
