from __future__ import annotations

import logging
import sys
from pathlib import Path

log = logging.getLogger(__name__)


def find_git_root(start: Path) -> Path | None:
    cur = Path(start)
    for _ in range(200):
        if (cur / ".git").exists():
            return cur
        if cur.parent == cur:
            return None
        cur = cur.parent
    return None


def assert_safe_data_path(data_path: Path, allow_repo_data_path: bool) -> None:
    # refuse if data lives inside any git repo (unless overridden)
    git_root = find_git_root(data_path.parent)
    if not git_root:
        return
    if allow_repo_data_path:
        log.warning("using journal inside git repo %s (override active)", git_root)
        return

    print("🚫 Refusing to keep a mood journal inside a git repo.", file=sys.stderr)
    print(f"   data_path: {data_path}", file=sys.stderr)
    print(f"   repo_root: {git_root}", file=sys.stderr)
    print(
        "   Fix: use ~/.config/heartspace/*.json or pass --allow-repo-data-path",
        file=sys.stderr,
    )
    raise SystemExit(2)
