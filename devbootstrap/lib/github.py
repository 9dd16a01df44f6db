from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..session import Session

logger = logging.getLogger(__name__)


def auth_login(sess: "Session") -> None:
    """Browser login for the gh CLI; blocks until the operator finishes it."""

    sess.run(
        ["gh", "auth", "login", "--hostname", sess.cfg.github_host, "--git-protocol", "ssh", "--web"],
        interactive=True,
    )


def list_repos(sess: "Session", owner: str, *, limit: int) -> List[str]:
    """`owner/name` for up to ``limit`` repositories, in the order gh returns them."""

    r = sess.run(["gh", "repo", "list", owner, "--limit", str(limit), "--json", "nameWithOwner"])
    if not r.stdout.strip():
        return []
    data = json.loads(r.stdout)
    if not isinstance(data, list):
        raise RuntimeError(f"Unexpected gh repo list output: {type(data)}")
    return [str(item["nameWithOwner"]) for item in data if item.get("nameWithOwner")]


def repo_dir_name(name_with_owner: str) -> str:
    return name_with_owner.rstrip("/").rsplit("/", 1)[-1]
