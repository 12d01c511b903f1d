from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
LOG_DIR = PROJECT_ROOT / "logs"

LOG_FILE_PREFIX = "assembly"
LOG_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
LOG_RETENTION_DAYS = 5

TOC_MARKER = "[TOC]"
PAGE_BREAK_MARKER = "\\pagebreak"
RAW_PAGE_BREAK_MARKER = "pagebreak"
COMMENT_MARKER = "COMMENT:"
DEFAULT_TOC_TITLE = "Table of Contents"
HEADING_ANCHOR_PREFIX = "heading_"

NUMBERED_LIST_REFERENCE_PREFIX = "numbered-list-"
NUMBERING_LEVEL_COUNT = 9
NUMBERING_INDENT_STEP = 360
NUMBERING_HANGING_INDENT = 260

# A4 portrait with 1 inch margins, in twips.
DEFAULT_PAGE_WIDTH = 11906
DEFAULT_PAGE_HEIGHT = 16838
DEFAULT_PAGE_MARGIN = 1440
DEFAULT_PAGE_CONTENT_WIDTH = 9026


def ensure_base_dirs() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def build_log_path(started: datetime | None = None) -> Path:
    stamp = (started or datetime.now()).strftime(LOG_TIMESTAMP_FORMAT)
    return LOG_DIR / f"{LOG_FILE_PREFIX}_{stamp}.log"


def cleanup_logs(retention_days: int = LOG_RETENTION_DAYS, now: datetime | None = None) -> int:
    """Delete assembly logs last modified before the retention window.

    Returns the number of files removed. Files that vanish or cannot be
    removed are skipped.
    """
    if retention_days <= 0 or not LOG_DIR.is_dir():
        return 0
    cutoff = (now or datetime.now()) - timedelta(days=retention_days)
    expired = [
        path
        for path in LOG_DIR.glob(f"{LOG_FILE_PREFIX}_*.log")
        if _modified_before(path, cutoff)
    ]
    removed = 0
    for path in expired:
        try:
            path.unlink()
        except OSError:
            continue
        removed += 1
    return removed


def _modified_before(path: Path, cutoff: datetime) -> bool:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime) < cutoff
    except OSError:
        return False
