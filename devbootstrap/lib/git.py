from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..session import Session


def git_config_get(sess: "Session", key: str) -> Optional[str]:
    """Global git config value, or None when unset (git exits 1)."""

    # Reading is harmless, so it happens even in dry-run.
    r = sess.run(["git", "config", "--global", key], check=False, dry_run=False)
    if not r.ok:
        return None
    value = r.stdout.strip()
    return value or None


def git_config_set(sess: "Session", key: str, value: str) -> None:
    sess.run(["git", "config", "--global", key, value])


def git_clone(sess: "Session", url: str, dest: str) -> None:
    sess.run(["git", "clone", url, dest])


def git_pull_rebase(sess: "Session", repo_dir: str) -> None:
    sess.run(["git", "pull", "--rebase"], cwd=repo_dir)
