from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from .config import ConfigError
from .session import Session

logger = logging.getLogger(__name__)


class FatalStepError(RuntimeError):
    """A stage failed in a way that leaves nothing for later stages to work with."""


class Step(Protocol):
    """A single idempotent stage."""

    step_id: str
    fatal: bool

    def run(self, sess: Session) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str] = field(default_factory=list)
    failed_steps: List[str] = field(default_factory=list)


def run_pipeline(
    *,
    sess: Session,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order. Fatal steps abort the run; others are logged and skipped past."""

    known = [s.step_id for s in steps]
    for bound in (start_at, stop_after):
        if bound is not None and bound not in known:
            raise ValueError(f"Unknown step id {bound!r} (known: {', '.join(known)})")

    ran: List[str] = []
    failed: List[str] = []

    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        logger.info("Running step %s", step.step_id)
        try:
            step.run(sess)
        except FatalStepError:
            logger.error("Step %s failed; aborting", step.step_id)
            raise
        except ConfigError:
            logger.error("Step %s hit invalid configuration; aborting", step.step_id)
            raise
        except Exception as e:
            if step.fatal:
                logger.error("Step %s failed; aborting", step.step_id)
                raise FatalStepError(f"{step.step_id}: {e}") from e
            logger.exception("WARN step %s failed; continuing", step.step_id)
            failed.append(step.step_id)
        else:
            ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(ran_steps=ran, failed_steps=failed)
