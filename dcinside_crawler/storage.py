from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from dcinside_crawler.models import PostRecord

logger = logging.getLogger(__name__)

PREVIEW_SIZE = 3


def result_filename(now: Optional[datetime] = None) -> str:
    # UTC timestamp, e.g. 20260117093015.json
    now = now or datetime.now(timezone.utc)
    return f"{now.astimezone(timezone.utc).strftime('%Y%m%d%H%M%S')}.json"


def posts_to_json(posts: Sequence[PostRecord]) -> str:
    return json.dumps([p.to_dict() for p in posts], ensure_ascii=False, indent=2)


def write_posts_json(
    posts: Sequence[PostRecord],
    output_dir: str | Path,
    now: Optional[datetime] = None,
) -> Path:
    """
    Write posts as a JSON array into `output_dir`, creating it if missing.

    Returns:
        Path of the written file.
    """
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    path = out_dir / result_filename(now)
    path.write_text(posts_to_json(posts), encoding="utf-8")
    logger.info("Wrote posts: count=%s path=%s", len(posts), path)
    return path


def preview_posts(posts: Sequence[PostRecord]) -> list[dict[str, Any]]:
    return [p.to_dict() for p in posts[:PREVIEW_SIZE]]
