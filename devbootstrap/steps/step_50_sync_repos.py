from __future__ import annotations

import logging
from pathlib import Path

from ..lib.command import CommandError
from ..lib.git import git_clone, git_pull_rebase
from ..lib.github import auth_login, list_repos, repo_dir_name
from ..session import Session

logger = logging.getLogger(__name__)


class SyncReposStep:
    step_id = "50_sync_repos"
    fatal = False

    def _sync_one(self, sess: Session, dev_root: Path, repo: str) -> None:
        name = repo_dir_name(repo)
        dest = dev_root / name
        if (dest / ".git").is_dir():
            logger.info("Updating %s", name)
            try:
                git_pull_rebase(sess, str(dest))
            except CommandError as e:
                logger.warning("WARN could not update %s: %s", name, e)
        else:
            logger.info("Cloning %s", repo)
            try:
                git_clone(sess, sess.cfg.clone_url.format(repo=repo), str(dest))
            except CommandError as e:
                logger.warning("WARN skipped %s: %s", name, e)

    def run(self, sess: Session) -> None:
        user = sess.prompter.ask(
            "Enter your GitHub username (or leave blank to skip cloning)", key="github_user"
        ).strip()
        if not user:
            logger.info("Skipped cloning GitHub repos")
            return

        try:
            auth_login(sess)
        except CommandError as e:
            logger.warning("WARN GitHub CLI authentication failed; skipping repositories: %s", e)
            return

        dev_root = Path(sess.cfg.dev_root)
        if not sess.dry_run:
            dev_root.mkdir(parents=True, exist_ok=True)

        try:
            repos = list_repos(sess, user, limit=sess.cfg.repo_limit)
        except (RuntimeError, ValueError) as e:
            logger.warning("WARN could not list repositories for %s: %s", user, e)
            return

        logger.info("Cloning or updating %d repositories in %s", len(repos), dev_root)
        for repo in repos:
            self._sync_one(sess, dev_root, repo)
        logger.info("Repositories ready in %s", dev_root)
