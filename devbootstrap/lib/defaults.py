from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import PreferenceSetting

if TYPE_CHECKING:
    from ..session import Session

logger = logging.getLogger(__name__)


def write_preference(sess: "Session", pref: PreferenceSetting) -> None:
    """`defaults write` one key. Unconditional; the store is last-write-wins."""

    sess.run(["defaults", "write", pref.domain, pref.key, f"-{pref.value_type}", pref.defaults_value()])


def restart_service(sess: "Session", name: str) -> bool:
    """killall a UI service so it rereads its preferences.

    A non-zero exit usually means the process was not running.
    """
    r = sess.run(["killall", name], check=False)
    if not r.ok:
        logger.info("killall %s returned %s (not running?)", name, r.returncode)
    return r.ok
