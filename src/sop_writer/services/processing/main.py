#!/usr/bin/env python3
"""
SOP Writer command line

Runs the prompt pass, the SOP pass, both, or a one-off prompt for a single course.
Usage: sop-writer prompts | sops | run | single "<URL_or_course_text>" [options]
"""

import argparse
import asyncio
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ...config import Settings, load_settings
from ...errors import ConfigurationError
from ...logging_config import redact_secrets, set_level, setup_logging
from .pipeline import ApplicationPipeline
from .single_prompt import generate_single_prompt

logger = setup_logging(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sop-writer",
        description="Generate Statement-of-Purpose prompts and drafts for university applications.",
    )
    parser.add_argument("--base-dir", help="Directory holding data/, prompts/, resume/ and sops/")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("prompts", help="Build prompts for new applications in the CSV")
    subparsers.add_parser("sops", help="Generate SOPs for applications that have a prompt")
    subparsers.add_parser("run", help="Build prompts, then generate SOPs")

    single = subparsers.add_parser("single", help="Build one prompt without touching the CSV")
    single.add_argument("input", help="Course URL or course description text")
    single.add_argument("--resume", help="Resume file in the resume folder, e.g. my_resume for my_resume.pdf")
    single.add_argument("--output", help="Custom output file name, e.g. custom_sop.txt")
    single.add_argument("--model", help="Gemini model to use")
    single.add_argument("--temperature", type=float, help="Controls randomness (0.0-1.0)")
    single.add_argument("--max-tokens", type=int, help="Max response length")
    single.add_argument("--top-k", type=int, help="Top-K sampling value")
    single.add_argument("--top-p", type=float, help="Top-P sampling value")
    return parser


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map command line options onto Settings fields."""
    mapping = {
        "base_dir": "base_dir",
        "model": "gemini_model",
        "temperature": "gemini_temperature",
        "max_tokens": "gemini_max_output_tokens",
        "top_k": "gemini_top_k",
        "top_p": "gemini_top_p",
    }
    overrides = {}
    for option, field in mapping.items():
        value = getattr(args, option, None)
        if value is not None:
            overrides[field] = value
    return overrides


async def run_command(args: argparse.Namespace, settings: Settings) -> None:
    if args.command == "single":
        await generate_single_prompt(
            settings, args.input, resume_file=args.resume, output_name=args.output
        )
        return

    pipeline = ApplicationPipeline.from_settings(settings)
    if args.command in ("prompts", "run"):
        await pipeline.generate_prompts()
    if args.command in ("sops", "run"):
        await pipeline.generate_sops()


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``sop-writer`` console script."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    # Loggers were configured at import time, before .env was loaded
    log_level = args.log_level or os.getenv("LOG_LEVEL")
    if log_level:
        set_level(log_level)

    try:
        settings = load_settings(**settings_overrides(args))
    except ConfigurationError as e:
        logger.error(f"FATAL ERROR: {e}")
        return 1
    redact_secrets(*settings.secret_values())

    try:
        asyncio.run(run_command(args, settings))
    except Exception:
        logger.critical("An unexpected fatal error occurred in the main process.", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
