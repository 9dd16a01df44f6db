from __future__ import annotations

import logging
from pathlib import Path

from ..config import CaskSpec
from ..lib.brew import brew_install, cask_install, cask_installed
from ..lib.command import CommandError
from ..session import Session

logger = logging.getLogger(__name__)

QUIET_BREW_ENV = {
    "HOMEBREW_NO_AUTO_UPDATE": "1",
    "HOMEBREW_NO_INSTALL_CLEANUP": "1",
}


class InstallToolsStep:
    step_id = "30_install_tools"
    fatal = False

    def _install_formulae(self, sess: Session) -> None:
        formulae = sess.cfg.formulae
        if not formulae:
            return
        try:
            brew_install(sess, formulae)
            logger.info("Installed formulae: %s", ", ".join(formulae))
            return
        except CommandError as e:
            logger.warning("WARN batch install failed (%s); retrying one at a time", e.returncode)

        for name in formulae:
            try:
                brew_install(sess, [name])
            except CommandError as e:
                logger.warning("WARN skipped formula %s: %s", name, e)

    def _cask_present(self, sess: Session, cask: CaskSpec) -> bool:
        app_path = Path(sess.cfg.applications_dir) / f"{cask.app_name}.app"
        if app_path.is_dir():
            logger.info("%s already present in %s", cask.app_name, sess.cfg.applications_dir)
            return True
        if cask_installed(sess, cask.token):
            logger.info("%s already installed via Homebrew Cask", cask.app_name)
            return True
        return False

    def _install_casks(self, sess: Session) -> None:
        for cask in sess.cfg.casks:
            if self._cask_present(sess, cask):
                continue
            logger.info("Installing %s (%s)", cask.app_name, cask.token)
            try:
                cask_install(sess, cask.token)
            except CommandError as e:
                logger.warning("WARN skipped %s: %s", cask.app_name, e)

    def _ensure_aliases(self, sess: Session) -> None:
        for alias, target in sess.cfg.command_aliases.items():
            if sess.which(alias):
                continue
            resolved = sess.which(target)
            if not resolved:
                logger.info("Neither %s nor %s resolves; no alias created", alias, target)
                continue
            link = str(Path(sess.cfg.link_dir) / alias)
            argv = ["ln", "-sf", resolved, link]
            if sess.cfg.link_with_sudo:
                argv = ["sudo", *argv]
            try:
                sess.run(argv, interactive=sess.cfg.link_with_sudo)
                logger.info("Linked %s -> %s", link, resolved)
            except CommandError as e:
                logger.warning("WARN could not link %s: %s", link, e)

    def run(self, sess: Session) -> None:
        with sess.overlay_env(QUIET_BREW_ENV):
            self._install_formulae(sess)
            self._ensure_aliases(sess)
            self._install_casks(sess)
        logger.info("Developer tools and desktop applications ready")
