from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from ..session import Session

logger = logging.getLogger(__name__)

_AGENT_VAR_RE = re.compile(r"^(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;]+);", re.MULTILINE)


def generate_ed25519(sess: "Session", key_path: str, comment: str) -> None:
    """ssh-keygen with an empty passphrase. Creates the key directory (0700) first."""

    d = Path(key_path).parent
    if not sess.dry_run:
        d.mkdir(mode=0o700, parents=True, exist_ok=True)
    sess.run(["ssh-keygen", "-t", "ed25519", "-C", comment, "-f", key_path, "-N", ""])


def parse_agent_output(out: str) -> Dict[str, str]:
    """Pick SSH_AUTH_SOCK / SSH_AGENT_PID out of `ssh-agent -s` output."""

    return {m.group(1): m.group(2) for m in _AGENT_VAR_RE.finditer(out)}


def ensure_agent(sess: "Session") -> None:
    sock = sess.env.get("SSH_AUTH_SOCK") or os.environ.get("SSH_AUTH_SOCK")
    if sock:
        logger.info("Reusing ssh-agent at %s", sock)
        return
    r = sess.run(["ssh-agent", "-s"])
    agent_env = parse_agent_output(r.stdout)
    if agent_env:
        sess.env.update(agent_env)
        logger.info("Started ssh-agent (pid=%s)", agent_env.get("SSH_AGENT_PID"))


def add_key(sess: "Session", key_path: str, *, keychain: bool = True) -> None:
    argv = ["ssh-add"]
    if keychain:
        argv.append("--apple-use-keychain")
    sess.run([*argv, key_path])
