from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Sequence

if TYPE_CHECKING:
    from ..session import Session

logger = logging.getLogger(__name__)

# Set by bash itself, not by `brew shellenv`.
_SUBSHELL_VARS = frozenset({"SHLVL", "_", "PWD", "OLDPWD"})


def locate_brew(sess: "Session") -> Optional[str]:
    """Return the brew binary: known install prefixes first, then PATH."""

    for prefix in sess.cfg.homebrew_prefixes:
        candidate = Path(prefix) / "bin" / "brew"
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return sess.which("brew")


def install_homebrew(sess: "Session") -> None:
    """Fetch the pinned install script and run it (it may ask for sudo)."""

    r = sess.run(["curl", "-fsSL", sess.cfg.homebrew_install_url])
    if sess.dry_run:
        return
    if not r.stdout.strip():
        raise RuntimeError(f"Empty Homebrew install script from {sess.cfg.homebrew_install_url}")
    sess.run(["/bin/bash", "-c", r.stdout], interactive=True)


def parse_env0(blob: str) -> Dict[str, str]:
    """Parse `env -0` output."""

    out: Dict[str, str] = {}
    for entry in blob.split("\0"):
        if not entry or "=" not in entry:
            continue
        k, v = entry.split("=", 1)
        out[k] = v
    return out


def shellenv(sess: "Session", brew: str) -> Dict[str, str]:
    """Evaluate `brew shellenv` in a subshell and return the variables it changed."""

    script = f'eval "$({shlex.quote(brew)} shellenv)" && env -0'
    r = sess.run(["/bin/bash", "-c", script])
    after = parse_env0(r.stdout)
    before = dict(os.environ, **sess.env)
    return {k: v for k, v in after.items() if k not in _SUBSHELL_VARS and before.get(k) != v}


def shellenv_line(brew: str) -> str:
    return f'eval "$({brew} shellenv)"'


def persist_shellenv(profile_path: str, brew: str, *, dry_run: bool = False) -> bool:
    """Append the shellenv line to the login profile unless already there.

    Returns True when the profile was changed.
    """
    p = Path(profile_path)
    line = shellenv_line(brew)
    existing = p.read_text(encoding="utf-8") if p.exists() else ""
    if line in existing.splitlines():
        logger.info("%s already activates Homebrew", p)
        return False
    if dry_run:
        logger.info("Would append %r to %s", line, p)
        return True
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        f.write(line + "\n")
    logger.info("Appended Homebrew activation to %s", p)
    return True


def brew_update(sess: "Session") -> None:
    sess.run(["brew", "update"])


def brew_upgrade(sess: "Session") -> None:
    sess.run(["brew", "upgrade"])


def brew_install(sess: "Session", formulae: Sequence[str]) -> None:
    if not formulae:
        return
    sess.run(["brew", "install", *formulae])


def cask_installed(sess: "Session", token: str) -> bool:
    return sess.run(["brew", "list", "--cask", token], check=False, dry_run=False).ok


def cask_install(sess: "Session", token: str) -> None:
    sess.run(["brew", "install", "--cask", token, "--no-quarantine"])


def brew_cleanup(sess: "Session") -> None:
    sess.run(["brew", "cleanup"])
