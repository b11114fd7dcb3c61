# -*- coding: utf-8 -*-
"""
Command-line helpers.

Usage:
    python -m trackpg.cli check-model [model ...]
    python -m trackpg.cli show <learning|food|water|exercise|puzzles>
    python -m trackpg.cli reset-day <food|water|exercise>
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

DOMAINS = ("learning", "food", "water", "exercise", "puzzles")
RESETTABLE = ("food", "water", "exercise")


def cmd_check_model(args: argparse.Namespace) -> int:
    """Probe one or more vision models with a trivial prompt."""
    from .errors import ExternalAnalysisError
    from .food.vision import check_model, resolve_vision_settings

    cfg = resolve_vision_settings()
    models = args.models or [cfg.model]
    failures = 0
    for name in models:
        print(f"Testing model: {name}...")
        try:
            reply = check_model(name, cfg=cfg)
        except ExternalAnalysisError as exc:
            failures += 1
            print(f"  FAILED: {exc.message} ({exc.details})")
            continue
        print(f"  OK: {reply}")
    return 1 if failures else 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the current aggregate for a domain as JSON."""
    from .services import build_services

    services = build_services()
    if args.domain == "puzzles":
        view = services.puzzles.stats()
    else:
        view = getattr(services, args.domain).current()
    print(json.dumps(view.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


def cmd_reset_day(args: argparse.Namespace) -> int:
    """Clear today's entries for a date-scoped domain."""
    from .services import build_services

    services = build_services()
    view = getattr(services, args.domain).reset()
    if not view.persisted:
        print(f"Error: failed to persist reset of {args.domain}")
        return 1
    print(f"Cleared {args.domain} log for {view.date}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trackpg", description="TrackPG maintenance commands")
    parser.add_argument("--log-level", default=None, help="Override TRACKPG_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check-model", help="Check that vision models respond")
    p_check.add_argument("models", nargs="*", help="Model names (default: GEMINI_MODEL)")
    p_check.set_defaults(func=cmd_check_model)

    p_show = sub.add_parser("show", help="Print today's aggregate for a domain")
    p_show.add_argument("domain", choices=DOMAINS)
    p_show.set_defaults(func=cmd_show)

    p_reset = sub.add_parser("reset-day", help="Clear today's entries for a domain")
    p_reset.add_argument("domain", choices=RESETTABLE)
    p_reset.set_defaults(func=cmd_reset_day)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from .logging_setup import configure_logging

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
