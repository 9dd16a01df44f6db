from __future__ import annotations

import logging

from ..lib.brew import brew_cleanup
from ..lib.command import CommandError
from ..session import Session

logger = logging.getLogger(__name__)


class CleanupStep:
    step_id = "70_cleanup"
    fatal = False

    def run(self, sess: Session) -> None:
        try:
            brew_cleanup(sess)
        except CommandError as e:
            logger.warning("WARN brew cleanup failed: %s", e)
