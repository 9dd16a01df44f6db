from __future__ import annotations

import argparse
import logging
from typing import Optional

from .config import ConfigError, load_config
from .lib.prompt import Prompter, RichPrompter
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import FatalStepError, PipelineResult, run_pipeline
from .session import Session
from .steps import (
    CleanupStep,
    EditorStep,
    IdentityStep,
    InstallToolsStep,
    PackageManagerStep,
    PreferencesStep,
    SyncReposStep,
)

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "~/.config/devbootstrap/config.yaml"


def build_steps():
    return [
        PreferencesStep(),
        PackageManagerStep(),
        InstallToolsStep(),
        IdentityStep(),
        SyncReposStep(),
        EditorStep(),
        CleanupStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    prompter: Optional[Prompter] = None,
) -> PipelineResult:
    """Run the bootstrap stages top to bottom."""

    actual_log_path = configure_logging(log_path=log_path)

    cfg = load_config(config_path or DEFAULT_CONFIG_PATH, required=config_path is not None)
    sess = Session(
        cfg=cfg,
        prompter=prompter or RichPrompter(answers=cfg.answers),
        dry_run=dry_run,
    )

    logger.info("=== Starting macOS setup (dry_run=%s) ===", dry_run)
    result = run_pipeline(sess=sess, steps=build_steps(), start_at=start_at, stop_after=stop_after)

    logger.info("Setup complete! Repositories are in %s", cfg.dev_root)
    logger.info("Run `source %s` or restart the terminal to pick up Homebrew", cfg.profile_path)
    logger.info("Full log: %s", actual_log_path)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="devbootstrap", description="Bootstrap a macOS developer workstation.")
    p.add_argument("--config", default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the bootstrap log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_sync_repos)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
        )
    except (ConfigError, FileNotFoundError, ValueError) as e:
        logger.error("Invalid arguments or configuration: %s", e)
        return 2
    except FatalStepError as e:
        logger.error("Bootstrap aborted: %s", e)
        return 1
    return 0
