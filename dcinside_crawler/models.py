from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class BoardType(str, Enum):
    """Listing view selector: every post, recommended (개념글) posts, or notices."""

    ALL = "all"
    RECOMMEND = "recommend"
    NOTICE = "notice"


@dataclass(frozen=True)
class PostRecord:
    """Full post object parsed from a post view page."""

    gallery_id: str
    post_no: str
    url: str
    title: str
    category: Optional[str]
    author: Optional[str]
    author_id: Optional[str]
    author_ip: Optional[str]
    created_at: Optional[str]
    view_count: Optional[int]
    recommend_count: Optional[int]
    comment_count: Optional[int]
    content: str
    images: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["images"] = list(self.images)
        return data
