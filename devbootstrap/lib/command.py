from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """A command exited non-zero (or could not be started / timed out)."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {_fmt_argv(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    dry_run: bool = False,
    interactive: bool = False,
    timeout: float | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr unless ``interactive`` is set, in which case the
      child shares the terminal (browser logins, installers asking for sudo).
    - ``timeout`` only applies to captured commands.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s%s", _fmt_argv(argv_list), f" (cwd={cwd})" if cwd else "")

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    full_env = dict(os.environ, **(env or {}))
    try:
        if interactive:
            p = subprocess.run(argv_list, cwd=cwd, env=full_env)
            stdout, stderr = "", ""
        else:
            p = subprocess.run(
                argv_list,
                input=input_text,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=full_env,
                timeout=timeout,
            )
            stdout, stderr = p.stdout or "", p.stderr or ""
    except FileNotFoundError as e:
        if check:
            raise CommandError(argv_list, 127, str(e)) from e
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))
    except subprocess.TimeoutExpired as e:
        if check:
            raise CommandError(argv_list, 124, f"timed out after {timeout}s") from e
        return CmdResult(argv=argv_list, returncode=124, stdout="", stderr=f"timed out after {timeout}s")

    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)


def which(name: str, env: Mapping[str, str] | None = None) -> Optional[str]:
    """Resolve an executable against the PATH of ``env`` (falls back to os.environ)."""

    path = (env or {}).get("PATH") or os.environ.get("PATH")
    return shutil.which(name, path=path)
