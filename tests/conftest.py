from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from devbootstrap.config import BootstrapConfig
from devbootstrap.lib.command import CmdResult, CommandError
from devbootstrap.session import Session


class FakeRunner:
    """Stands in for run_cmd: records every call, answers from prefix rules."""

    def __init__(self) -> None:
        self.calls: List[Tuple[List[str], Dict[str, Any]]] = []
        self._rules: List[Tuple[Tuple[str, ...], int, str]] = []

    def on(self, prefix: Sequence[str], *, returncode: int = 0, stdout: str = "") -> "FakeRunner":
        # Later rules win over earlier ones.
        self._rules.insert(0, (tuple(prefix), returncode, stdout))
        return self

    def __call__(self, argv: Sequence[str], **kwargs: Any) -> CmdResult:
        argv_list = list(argv)
        self.calls.append((argv_list, kwargs))
        returncode, stdout = 0, ""
        for prefix, rc, out in self._rules:
            if tuple(argv_list[: len(prefix)]) == prefix:
                returncode, stdout = rc, out
                break
        if kwargs.get("check", True) and returncode != 0:
            raise CommandError(argv_list, returncode, "boom")
        return CmdResult(argv=argv_list, returncode=returncode, stdout=stdout, stderr="")

    @property
    def argvs(self) -> List[List[str]]:
        return [a for a, _ in self.calls]

    def called(self, *prefix: str) -> List[List[str]]:
        return [a for a in self.argvs if tuple(a[: len(prefix)]) == prefix]


class ScriptedPrompter:
    def __init__(self, answers: Optional[Dict[str, str]] = None) -> None:
        self.answers = dict(answers or {})
        self.asked: List[str] = []
        self.paused: List[str] = []
        self.shown: List[str] = []

    def ask(self, message: str, *, key: Optional[str] = None) -> str:
        self.asked.append(key or message)
        return self.answers.get(key or message, "")

    def pause(self, message: str) -> None:
        self.paused.append(message)

    def show(self, text: str, *, title: Optional[str] = None) -> None:
        self.shown.append(text)


def make_exe(bin_dir: Path, name: str) -> Path:
    bin_dir.mkdir(parents=True, exist_ok=True)
    p = bin_dir / name
    p.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    os.chmod(p, 0o755)
    return p


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def make_session(tmp_path: Path, runner: FakeRunner, prompter: ScriptedPrompter, bin_dir: Path):
    def _make(**raw: Any) -> Session:
        base: Dict[str, Any] = {
            "homebrew": {
                "prefixes": [str(tmp_path / "homebrew")],
                "profile_path": str(tmp_path / ".zprofile"),
            },
            "applications_dir": str(tmp_path / "Applications"),
            "link_dir": str(tmp_path / "usr-local-bin"),
            "link_with_sudo": False,
            "ssh": {"key_path": str(tmp_path / ".ssh" / "id_ed25519")},
            "dev_root": str(tmp_path / "development"),
            "editor": {"config_dir": str(tmp_path / "Code" / "User")},
        }
        for k, v in raw.items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                base[k] = {**base[k], **v}
            else:
                base[k] = v
        return Session(
            cfg=BootstrapConfig(raw=base),
            prompter=prompter,
            env={"PATH": str(bin_dir)},
            runner=runner,
        )

    return _make
