from __future__ import annotations

import logging

from ..lib.brew import (
    brew_update,
    brew_upgrade,
    install_homebrew,
    locate_brew,
    persist_shellenv,
    shellenv,
)
from ..lib.command import CommandError
from ..pipeline import FatalStepError
from ..session import Session

logger = logging.getLogger(__name__)


class PackageManagerStep:
    step_id = "20_package_manager"
    fatal = True

    def _ensure_installed(self, sess: Session) -> str:
        brew = locate_brew(sess)
        if brew:
            logger.info("Homebrew already installed at %s", brew)
            return brew

        logger.info("Installing Homebrew from %s", sess.cfg.homebrew_install_url)
        try:
            install_homebrew(sess)
        except RuntimeError as e:
            raise FatalStepError(f"Homebrew installation failed: {e}") from e

        brew = locate_brew(sess)
        if brew:
            return brew
        if sess.dry_run:
            return "brew"
        raise FatalStepError(
            "Homebrew installer finished but no brew binary was found under "
            + ", ".join(sess.cfg.homebrew_prefixes)
        )

    def run(self, sess: Session) -> None:
        brew = self._ensure_installed(sess)

        try:
            changed = shellenv(sess, brew)
        except CommandError as e:
            raise FatalStepError(f"Could not evaluate `{brew} shellenv`: {e}") from e
        sess.env.update(changed)
        logger.info("Activated Homebrew in session (%s)", ", ".join(sorted(changed)) or "no changes")

        if sess.cfg.persist_shellenv:
            persist_shellenv(sess.cfg.profile_path, brew, dry_run=sess.dry_run)

        for refresh in (brew_update, brew_upgrade):
            try:
                refresh(sess)
            except CommandError as e:
                logger.warning("WARN %s failed: %s", refresh.__name__.replace("_", " "), e)
