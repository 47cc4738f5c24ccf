"""CLI entry point for the SPAC OS rule engine."""

import argparse
import json
import logging
import sys
from pathlib import Path

from spac_os.config import settings
from spac_os.exceptions import SpacOSError
from spac_os.models import AcquisitionCriteria, FitScore, TargetProfile
from spac_os.rules import FitScoreCalculator, StatusTransitionValidator

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_score_input(path: Path) -> tuple[TargetProfile, AcquisitionCriteria]:
    """Load a {"target": ..., "criteria": ...} JSON file."""
    with open(path, "r") as f:
        data = json.load(f)
    return TargetProfile(**data.get("target", {})), AcquisitionCriteria(**data.get("criteria", {}))


def print_fit_score(score: FitScore):
    """Print a fit score breakdown to console."""
    print("\n" + "=" * 60)
    print(f"FIT SCORE: {score.overall_score}/100")
    print("=" * 60)
    for criterion, value in score.breakdown().items():
        print(f"   {criterion.capitalize():<10} {value:>3}")
    print("-" * 60)
    print(score.summary)
    print(score.recommendation)
    print("=" * 60)


def cmd_transitions(args) -> int:
    validator = StatusTransitionValidator()
    allowed = validator.allowed_transitions(args.entity.upper(), args.status.upper())
    if allowed:
        print("\n".join(allowed))
    else:
        print(f"{args.status.upper()} is terminal")
    return 0


def cmd_validate(args) -> int:
    validator = StatusTransitionValidator()
    result = validator.validate(args.entity.upper(), args.current.upper(), args.requested.upper())
    if result.accepted:
        print(f"OK: {result.current} -> {result.requested}")
        return 0
    print(f"REJECTED: {result.reason}")
    return 1


def cmd_score(args) -> int:
    if not args.input.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    target, criteria = load_score_input(args.input)
    score = FitScoreCalculator().calculate(target, criteria)

    if args.json:
        print(score.model_dump_json(indent=2))
    else:
        print_fit_score(score)
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run(
        "spac_os.api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SPAC OS - status workflows and target fit scoring"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transitions = subparsers.add_parser("transitions", help="List allowed next statuses")
    transitions.add_argument("entity", help="Entity type: SPAC or FILING")
    transitions.add_argument("status", help="Current status")
    transitions.set_defaults(func=cmd_transitions)

    validate = subparsers.add_parser("validate", help="Check a status transition")
    validate.add_argument("entity", help="Entity type: SPAC or FILING")
    validate.add_argument("current", help="Current status")
    validate.add_argument("requested", help="Requested status")
    validate.set_defaults(func=cmd_validate)

    score = subparsers.add_parser("score", help="Score a target against SPAC criteria")
    score.add_argument(
        "input",
        type=Path,
        help='JSON file with {"target": {...}, "criteria": {...}}',
    )
    score.add_argument("--json", action="store_true", help="Print the score as JSON")
    score.set_defaults(func=cmd_score)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Bind port")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return args.func(args)
    except SpacOSError as e:
        logger.error(e.message)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
