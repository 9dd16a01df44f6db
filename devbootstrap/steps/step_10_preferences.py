from __future__ import annotations

import logging

from ..lib.command import CommandError
from ..lib.defaults import restart_service, write_preference
from ..session import Session

logger = logging.getLogger(__name__)


class PreferencesStep:
    step_id = "10_preferences"
    fatal = False

    def run(self, sess: Session) -> None:
        prefs = sess.cfg.preferences
        written = 0
        for pref in prefs:
            try:
                write_preference(sess, pref)
                written += 1
            except CommandError as e:
                logger.warning("WARN could not set %s %s: %s", pref.domain, pref.key, e)

        # cfprefsd caches the values; Dock/SystemUIServer only read them at launch.
        for service in sess.cfg.restart_services:
            restart_service(sess, service)

        logger.info("Preferences applied (%d/%d); log out/in to fully apply", written, len(prefs))
