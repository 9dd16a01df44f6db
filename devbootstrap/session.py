from __future__ import annotations

import contextlib
import enum
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, Mapping, Optional, Sequence

from .config import BootstrapConfig
from .lib.command import CmdResult, run_cmd, which
from .lib.prompt import Prompter


class ExtensionOutcome(str, enum.Enum):
    INSTALLED = "installed"
    # Deep link handed to the editor; nobody confirms it finished.
    DEFERRED = "deferred"
    FAILED = "failed"


Runner = Callable[..., CmdResult]


@dataclass
class Session:
    """Everything a stage needs: config, operator I/O, and the environment
    that later commands inherit (Homebrew shellenv, ssh-agent sockets)."""

    cfg: BootstrapConfig
    prompter: Prompter
    dry_run: bool = False
    env: Dict[str, str] = field(default_factory=dict)
    runner: Runner = run_cmd
    extension_outcomes: Dict[str, ExtensionOutcome] = field(default_factory=dict)

    def run(self, argv: Sequence[str], **kwargs) -> CmdResult:
        kwargs.setdefault("env", dict(self.env))
        kwargs.setdefault("dry_run", self.dry_run)
        if not kwargs.get("interactive"):
            kwargs.setdefault("timeout", self.cfg.command_timeout)
        return self.runner(argv, **kwargs)

    def which(self, name: str) -> Optional[str]:
        return which(name, self.env)

    @contextlib.contextmanager
    def overlay_env(self, extra: Mapping[str, str]) -> Iterator[None]:
        """Temporarily add variables to the session environment."""
        saved = {k: self.env[k] for k in extra if k in self.env}
        self.env.update(extra)
        try:
            yield
        finally:
            for k in extra:
                if k in saved:
                    self.env[k] = saved[k]
                else:
                    self.env.pop(k, None)
