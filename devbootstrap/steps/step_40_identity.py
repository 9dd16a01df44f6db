from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..lib.command import CommandError
from ..lib.git import git_config_get, git_config_set
from ..lib.ssh import add_key, ensure_agent, generate_ed25519
from ..session import Session

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = [
    # (git key, prompt, answers key)
    ("user.name", "Enter your Git name", "git_name"),
    ("user.email", "Enter your Git email", "git_email"),
]


class IdentityStep:
    step_id = "40_identity"
    fatal = False

    def _resolve_field(self, sess: Session, key: str, prompt: str, answer_key: str) -> str:
        current = git_config_get(sess, key)
        if current is not None:
            return current
        value = sess.prompter.ask(prompt, key=answer_key)
        if value:
            git_config_set(sess, key, value)
        else:
            logger.warning("WARN %s left unset", key)
        return value

    def _ensure_key(self, sess: Session, email: Optional[str]) -> None:
        key_path = sess.cfg.ssh_key_path
        if Path(key_path).exists():
            logger.info("SSH key already exists at %s", key_path)
            return

        logger.info("Generating new SSH key at %s", key_path)
        generate_ed25519(sess, key_path, email or "")
        try:
            ensure_agent(sess)
        except CommandError as e:
            logger.warning("WARN could not start ssh-agent; key not added: %s", e)
            return
        try:
            add_key(sess, key_path, keychain=sess.cfg.ssh_use_keychain)
        except CommandError as e:
            logger.warning("WARN could not add key to agent: %s", e)

    def _show_public_key(self, sess: Session) -> None:
        pub = Path(sess.cfg.ssh_key_path + ".pub")
        if pub.exists():
            sess.prompter.show(
                pub.read_text(encoding="utf-8"),
                title=f"Public SSH key (add it at https://{sess.cfg.github_host}/settings/keys)",
            )
        else:
            logger.warning("WARN public key %s not found", pub)
        sess.prompter.pause("Once added, press Enter to continue...")

    def run(self, sess: Session) -> None:
        values = {}
        for key, prompt, answer_key in IDENTITY_FIELDS:
            values[key] = self._resolve_field(sess, key, prompt, answer_key)

        git_config_set(sess, "core.editor", sess.cfg.git_editor)
        git_config_set(sess, "init.defaultBranch", sess.cfg.git_default_branch)
        logger.info("Git configured for %s <%s>", values["user.name"], values["user.email"])

        try:
            self._ensure_key(sess, values["user.email"])
        finally:
            self._show_public_key(sess)
