from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from dcinside_crawler.errors import EmptyResultError, ParseError
from dcinside_crawler.models import BoardType, PostRecord

_DIGITS_RE = re.compile(r"\d[\d,]*")
_NOTICE_MARKERS = ("공지", "notice")


# -------------------------
# Listing page
# -------------------------

def parse_listing(html: str, board_type: BoardType = BoardType.ALL) -> list[str]:
    """
    Extract post numbers from a gallery listing page, in page order.

    Rows without a numeric post number (ads, surveys) are skipped. Notice rows
    pinned at the top are kept for ALL/RECOMMEND; NOTICE keeps only them.

    Raises:
        ParseError: if the listing table is missing entirely
    """
    soup = BeautifulSoup(html, "lxml")
    rows = soup.select("tr.ub-content")
    if not rows and soup.select_one("table.gall_list") is None:
        raise ParseError("Listing table not found")

    out: list[str] = []
    seen: set[str] = set()
    for row in rows:
        post_no = _row_post_no(row)
        if post_no is None or post_no in seen:
            continue
        if board_type is BoardType.NOTICE and not _is_notice_row(row):
            continue
        seen.add(post_no)
        out.append(post_no)
    return out


def _row_post_no(row: Tag) -> Optional[str]:
    data_no = (row.get("data-no") or "").strip()
    if data_no.isascii() and data_no.isdigit():
        return data_no

    num_cell = row.select_one("td.gall_num")
    if num_cell is not None:
        text = num_cell.get_text(strip=True)
        if text.isascii() and text.isdigit():
            return text
    return None


def _is_notice_row(row: Tag) -> bool:
    data_type = (row.get("data-type") or "").lower()
    if "notice" in data_type:
        return True
    for selector in ("td.gall_num", "td.gall_subject"):
        cell = row.select_one(selector)
        if cell is not None and cell.get_text(strip=True) in _NOTICE_MARKERS:
            return True
    return False


# -------------------------
# Post view page
# -------------------------

def parse_post(html: str, gallery_id: str, post_no: str, url: str) -> PostRecord:
    """
    Parse a post view page into a PostRecord.

    Raises:
        EmptyResultError: the page carries no post title (deleted/blinded post)
        ParseError: title present but the body container is missing
    """
    soup = BeautifulSoup(html, "lxml")

    subject = soup.select_one("span.title_subject")
    if subject is None:
        raise EmptyResultError(f"No post on page: gallery_id={gallery_id} post_no={post_no}")
    title = subject.get_text(" ", strip=True)

    body = soup.select_one("div.write_div")
    if body is None:
        raise ParseError(f"Post body not found: gallery_id={gallery_id} post_no={post_no}")

    headtext = soup.select_one("span.title_headtext")
    category = _strip_brackets(headtext.get_text(strip=True)) if headtext else None

    writer = soup.select_one("div.gallview_head .gall_writer") or soup.select_one(".gall_writer")
    author, author_id, author_ip = _extract_writer(writer)

    return PostRecord(
        gallery_id=gallery_id,
        post_no=post_no,
        url=url,
        title=title,
        category=category or None,
        author=author,
        author_id=author_id,
        author_ip=author_ip,
        created_at=_extract_created_at(soup),
        view_count=_count(soup, "span.gall_count"),
        recommend_count=_count(soup, "span.gall_reply_num"),
        comment_count=_count(soup, "span.gall_comment"),
        content=body.get_text("\n", strip=True),
        images=_extract_images(body, url),
    )


def _strip_brackets(text: str) -> str:
    return text.strip().strip("[]").strip()


def _extract_writer(writer: Optional[Tag]) -> tuple[Optional[str], Optional[str], Optional[str]]:
    if writer is None:
        return None, None, None

    nick = (writer.get("data-nick") or "").strip()
    if not nick:
        nick_el = writer.select_one(".nickname")
        nick = nick_el.get_text(strip=True) if nick_el else ""

    uid = (writer.get("data-uid") or "").strip()
    ip = (writer.get("data-ip") or "").strip()
    if not ip:
        ip_el = writer.select_one(".ip")
        ip = ip_el.get_text(strip=True).strip("()") if ip_el else ""

    return nick or None, uid or None, ip or None


def _extract_created_at(soup: BeautifulSoup) -> Optional[str]:
    el = soup.select_one("span.gall_date")
    if el is None:
        return None
    # title holds the full timestamp; text may be shortened
    value = (el.get("title") or "").strip() or el.get_text(strip=True)
    return value or None


def _count(soup: BeautifulSoup, selector: str) -> Optional[int]:
    el = soup.select_one(selector)
    if el is None:
        return None
    m = _DIGITS_RE.search(el.get_text(" ", strip=True))
    if not m:
        return None
    return int(m.group(0).replace(",", ""))


def _extract_images(body: Tag, page_url: str) -> tuple[str, ...]:
    images: list[str] = []
    for img in body.find_all("img"):
        src = (img.get("data-original") or img.get("src") or "").strip()
        if not src or src.startswith("data:"):
            continue
        abs_src = urljoin(page_url, src)
        if abs_src not in images:
            images.append(abs_src)
    return tuple(images)
