"""Command-line interface for startup-guardian.

Provides subcommands for checking a startup, maintaining the local report
cache and showing configuration.  Each subcommand imports its dependencies
lazily so that ``startup-guardian info`` works even when the model
integration is not installed.

Entry point
-----------
The ``main()`` function is registered as a console script in
``pyproject.toml``::

    [project.scripts]
    startup-guardian = "startup_guardian.cli:main"

Usage examples::

    startup-guardian check "Stripe"
    startup-guardian check "Ramp vs Brex" --json
    startup-guardian check "Stripe" --weight 1=40 --weight 4=0
    startup-guardian cache purge
    startup-guardian info
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _weight_override(text: str) -> tuple[int, int]:
    """Parse ``ID=PCT`` (e.g. ``1=40``) into ``(1, 40)``."""
    pillar, sep, value = text.partition("=")
    try:
        if not sep:
            raise ValueError(text)
        return int(pillar), int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected PILLAR_ID=PERCENT (e.g. 1=40), got {text!r}"
        ) from None


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="startup-guardian",
        description=(
            "Is this startup safe to join? Ask a web-searching model, score "
            "the answer across ten pillars, and re-weigh it locally."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=False,
        help="Show version and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- check -------------------------------------------------------------
    check_parser = subparsers.add_parser(
        "check",
        help="Analyse a startup or compare several.",
        description=(
            "Analyse one company ('Stripe') or compare several "
            "('Stripe vs Uber'). Results are cached for 7 days."
        ),
    )
    check_parser.add_argument("query", help="Company name or comparison.")
    check_parser.add_argument(
        "--weight",
        type=_weight_override,
        action="append",
        default=[],
        metavar="ID=PCT",
        help="Override one pillar's weight; repeatable. Switches to the local score.",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the result as JSON instead of tables.",
    )
    check_parser.add_argument(
        "--no-cache",
        action="store_true",
        default=False,
        help="Ignore any cached result and ask the model again.",
    )

    # -- cache -------------------------------------------------------------
    cache_parser = subparsers.add_parser(
        "cache",
        help="Maintain the local report cache.",
    )
    cache_parser.add_argument(
        "action",
        choices=["clear", "purge"],
        help="'clear' removes every cached report; 'purge' only expired ones.",
    )

    # -- info --------------------------------------------------------------
    subparsers.add_parser("info", help="Show version, schema and cache settings.")

    return parser


# =========================================================================
# Wiring
# =========================================================================

def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def _build_cache(config: Any) -> Any:
    from startup_guardian.infrastructure.cache import FileStore, MemoryStore, ReportCache

    store = FileStore(config.cache_dir) if config.cache_dir else MemoryStore()
    return ReportCache(store)


def _build_backend(config: Any) -> Any:
    from startup_guardian.infrastructure.llm.chat_backend import (
        ChatModelBackend,
        build_chat_model,
    )

    return ChatModelBackend(build_chat_model(config))


# =========================================================================
# Subcommands
# =========================================================================

def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the ``check`` subcommand."""
    from startup_guardian.domain.exceptions import AcquisitionError
    from startup_guardian.domain.values import SafetyReport
    from startup_guardian.infrastructure.config import GuardianConfig
    from startup_guardian.infrastructure.serialization import report_to_dict
    from startup_guardian.presentation.console import ReportConsole
    from startup_guardian.services.acquisition import ReportAcquisitionOrchestrator
    from startup_guardian.services.scoring import WeightSession

    query = args.query.strip()
    if not query:
        print("Error: query must not be empty", file=sys.stderr)
        return 2

    config = GuardianConfig.from_env()
    orchestrator = ReportAcquisitionOrchestrator(
        backend=_build_backend(config),
        cache=_build_cache(config),
    )

    try:
        result = asyncio.run(orchestrator.acquire(query, use_cache=not args.no_cache))
    except AcquisitionError as exc:
        logger.debug("Acquisition failed: %r", exc)
        ReportConsole(file=sys.stderr).print_error(
            f"Could not analyse {query!r}. Please try again. ({exc})"
        )
        return 1

    session = None
    if isinstance(result, SafetyReport):
        session = WeightSession.from_report(result)
        for pillar_id, value in args.weight:
            try:
                session.set_weight(pillar_id, value)
            except KeyError as exc:
                ReportConsole(file=sys.stderr).print_error(f"Error: {exc.args[0]}")
                return 2
    elif args.weight:
        print("Note: --weight only applies to single-company reports.", file=sys.stderr)

    if args.json:
        payload = report_to_dict(result)
        if session is not None and not session.use_ai:
            score = session.score()
            payload["customScore"] = {
                "weights": {str(k): v for k, v in session.weights.items()},
                "score": score.score,
                "riskLevel": score.risk_level.value,
                "verdict": score.verdict.value,
            }
        print(json.dumps(payload, indent=2))
    else:
        ReportConsole().print_result(result, session)

    return 0


def _cmd_cache(args: argparse.Namespace) -> int:
    """Handle the ``cache`` subcommand."""
    from startup_guardian.infrastructure.config import GuardianConfig

    cache = _build_cache(GuardianConfig.from_env())
    if args.action == "clear":
        removed = cache.clear()
    else:
        removed = cache.purge_expired()
    print(f"Removed {removed} cached report(s).")
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    """Handle the ``info`` subcommand."""
    from startup_guardian import __version__
    from startup_guardian.infrastructure.cache import CACHE_TTL_MS
    from startup_guardian.infrastructure.config import GuardianConfig
    from startup_guardian.services.prompts import CACHE_KEY_PREFIX, SCHEMA_VERSION

    config = GuardianConfig.from_env()
    print(f"startup-guardian v{__version__}")
    print()
    print(f"Schema version:  v{SCHEMA_VERSION} (cache prefix {CACHE_KEY_PREFIX!r})")
    print(f"Cache TTL:       {CACHE_TTL_MS // (24 * 60 * 60 * 1000)} days")
    print(f"Cache location:  {config.cache_dir or '(in memory)'}")
    print(f"Model:           {config.model}")
    print()

    optional_deps = {
        "langchain_anthropic": "Default model integration (anthropic extra)",
        "rich": "Console rendering",
        "numpy": "Score computation",
    }
    print("Dependencies:")
    for pkg, desc in optional_deps.items():
        try:
            mod = __import__(pkg)
            version = getattr(mod, "__version__", "unknown")
            print(f"  [installed] {pkg} {version} -- {desc}")
        except ImportError:
            print(f"  [missing]   {pkg} -- {desc}")
    return 0


# =========================================================================
# Main entry point
# =========================================================================

def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  Defaults to ``sys.argv[1:]``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from startup_guardian import __version__
        print(f"startup-guardian {__version__}")
        sys.exit(0)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _configure_logging(args.verbose)

    handlers: dict[str, Any] = {
        "check": _cmd_check,
        "cache": _cmd_cache,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        exit_code = 130
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)
