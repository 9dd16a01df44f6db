from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..lib.vscode import install_extension, write_json_doc
from ..session import ExtensionOutcome, Session

logger = logging.getLogger(__name__)

ENABLE_CLI_HINT = (
    "Open VS Code, press Cmd+Shift+P and run \"Shell Command: Install 'code' command in PATH\". "
    "Press Enter when done..."
)


class EditorStep:
    step_id = "60_editor"
    fatal = False

    def _resolve_cli(self, sess: Session) -> Optional[str]:
        cli = sess.which(sess.cfg.editor_cli)
        if cli:
            return cli
        sess.prompter.pause(ENABLE_CLI_HINT)
        return sess.which(sess.cfg.editor_cli)

    def run(self, sess: Session) -> None:
        cli = self._resolve_cli(sess)
        if not cli:
            logger.warning("WARN `%s` CLI not found; skipping extensions and settings", sess.cfg.editor_cli)
            return

        for ext in sess.cfg.editor_extensions:
            sess.extension_outcomes[ext] = install_extension(sess, cli, ext)

        deferred = [e for e, o in sess.extension_outcomes.items() if o is ExtensionOutcome.DEFERRED]
        if deferred:
            logger.info("Finish installing in the editor: %s", ", ".join(deferred))

        config_dir = Path(sess.cfg.editor_config_dir)
        write_json_doc(config_dir / "settings.json", sess.cfg.editor_settings, dry_run=sess.dry_run)
        write_json_doc(config_dir / "keybindings.json", sess.cfg.editor_keybindings, dry_run=sess.dry_run)
