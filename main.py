#!/usr/bin/env python
"""CLI for the Checkmate content verification pipeline."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from checkmate.config import create_from_config, get_default_config_path, load_config
from checkmate.data import ProcessingContext
from checkmate.errors import to_failure
from checkmate.url import detect_platform, sanitize_url, validate_url

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    url: str
    config: Path
    user_id: str | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run(args: CLIArgs) -> int:
    """Verify one URL and print the result as JSON.

    Args:
        args: Validated CLI arguments.

    Returns:
        Process exit code.
    """
    logger.info(f"Verifying: {args.url}")
    logger.info(f"Config: {args.config}")

    try:
        config = load_config(args.config)
        pipeline, run_logger = create_from_config(
            config,
            log_override=args.log if args.log else None,
            log_dir_override=args.log_dir if args.log_dir != "logs" else None,
        )
        context = None
        if args.user_id:
            url = sanitize_url(validate_url(args.url))
            context = ProcessingContext.create(url, detect_platform(url), user_id=args.user_id)
        result = await pipeline.process(args.url, context)
    except Exception as e:
        # Typed errors keep their code. Anything else is logged and reported as internal.
        print(json.dumps({"success": False, "error": to_failure(e)}, indent=2))
        return 1

    print(json.dumps({"success": True, "data": result.to_dict()}, indent=2, ensure_ascii=False))

    if result.fact_check is not None:
        logger.info(
            f"\nVerdict: {result.fact_check.verdict} ({result.fact_check.confidence}% confidence)"
        )
    if result.creator_credibility_rating is not None:
        logger.info(f"Creator credibility: {result.creator_credibility_rating}/10")
        for factor in result.credibility_factors:
            logger.info(f"  - {factor}")
    for timing in result.stage_timings:
        status = "ok" if timing.succeeded else f"failed: {timing.error}"
        logger.info(f"{timing.stage}: {timing.duration_seconds:.2f}s ({status})")

    # Log file path if logging was enabled (pipeline calls finish_run internally)
    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")
    return 0


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Fact-check and rate the credibility of online content."
    )
    parser.add_argument(
        "url",
        help="TikTok, Twitter/X or web article URL",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        default=None,
        help="Authenticated user ID used for rate limiting",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable per-stage pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show debug output from pipeline components",
    )

    ns = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            url=ns.url,
            config=config_path,
            user_id=ns.user_id,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
