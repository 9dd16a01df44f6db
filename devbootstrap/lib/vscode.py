from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..session import ExtensionOutcome
from .command import CommandError

if TYPE_CHECKING:
    from ..session import Session

logger = logging.getLogger(__name__)


def deep_link(extension_id: str) -> str:
    return f"vscode:extension/{extension_id}"


def install_extension(sess: "Session", cli: str, extension_id: str) -> ExtensionOutcome:
    """Install silently through the CLI; on failure hand a deep link to the editor's own UI."""

    try:
        sess.run([cli, "--install-extension", extension_id])
        return ExtensionOutcome.INSTALLED
    except CommandError as e:
        logger.warning("WARN extension %s did not install via CLI (%s); opening deep link", extension_id, e.returncode)

    try:
        sess.run([sess.cfg.editor_opener, deep_link(extension_id)])
    except CommandError as e:
        logger.warning("WARN could not open deep link for %s: %s", extension_id, e)
        return ExtensionOutcome.FAILED
    return ExtensionOutcome.DEFERRED


def render_json(doc: Any) -> str:
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


def write_json_doc(path: Path, doc: Any, *, dry_run: bool = False) -> None:
    """Overwrite ``path`` with ``doc``; prior content is discarded."""

    if dry_run:
        logger.info("Would write %s", path)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_json(doc), encoding="utf-8")
    logger.info("Wrote %s", path)
