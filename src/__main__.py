"""Main entry point for Signal-Fuse."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from src import __version__
from src.config.settings import Settings
from src.utils.logging import configure_logging


def _load_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def _dump_json(payload: object) -> str:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    return json.dumps(payload, indent=2, default=_default, ensure_ascii=False)


def _emit(payload: object, output: Path | None) -> None:
    text = _dump_json(payload)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote: {output}")
    else:
        print(text)


def _tags(value: str) -> list[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="signal-fuse",
        description="Signal-Fuse: profile fact fusion and compatibility signals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src normalize input.json --candidates candidates.json
  python -m src signals member.yaml
  python -m src score --a-title "CTO" --a-tags ai,fintech --b-title "CEO" --b-tags ai
  python -m src anonymize "VP Engineering" "Acme Corporation"
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    # Normalize
    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Build a canonical profile plus recommendations",
    )
    normalize_parser.add_argument(
        "input",
        type=Path,
        help="Path to the normalizer input JSON",
    )
    normalize_parser.add_argument(
        "--candidates",
        type=Path,
        default=None,
        help="JSON mapping of field name to a list of candidate values",
    )
    normalize_parser.add_argument(
        "--prior",
        type=Path,
        default=None,
        help="JSON of the member's previous canonical profile",
    )
    normalize_parser.add_argument(
        "--members",
        type=Path,
        default=None,
        help="JSON list of member index entries for connection targets",
    )
    normalize_parser.add_argument(
        "--sponsors",
        type=Path,
        default=None,
        help="JSON list of sponsor index entries for sponsor targets",
    )
    normalize_parser.add_argument(
        "--no-reasoning",
        action="store_true",
        help="Resolve near-ties deterministically without the reasoning service",
    )
    normalize_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result JSON to this path instead of stdout",
    )

    # Signals
    signals_parser = subparsers.add_parser(
        "signals",
        help="Generate match signals for a member profile and store them",
    )
    signals_parser.add_argument(
        "profile",
        type=Path,
        help="Path to a member profile (YAML or JSON)",
    )
    signals_parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite store path (overrides SIGNALS_DB_PATH)",
    )
    signals_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the signals without storing them",
    )
    signals_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the signals JSON to this path instead of stdout",
    )

    # Score
    score_parser = subparsers.add_parser(
        "score",
        help="Score compatibility between two members",
    )
    score_parser.add_argument("--a-title", default=None, help="First member's title")
    score_parser.add_argument(
        "--a-tags", type=_tags, default=[], help="First member's comma-separated tags"
    )
    score_parser.add_argument("--b-title", default=None, help="Second member's title")
    score_parser.add_argument(
        "--b-tags", type=_tags, default=[], help="Second member's comma-separated tags"
    )
    score_parser.add_argument(
        "--a-user",
        default=None,
        help="Use the first member's stored signals as tags (by user id)",
    )
    score_parser.add_argument(
        "--b-user",
        default=None,
        help="Use the second member's stored signals as tags (by user id)",
    )
    score_parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite store path for --a-user/--b-user",
    )

    # Anonymize
    anonymize_parser = subparsers.add_parser(
        "anonymize",
        help="Build a pre-reveal preview handle",
    )
    anonymize_parser.add_argument("title", nargs="?", default=None, help="Member title")
    anonymize_parser.add_argument("company", nargs="?", default=None, help="Member company")

    return parser


def _run_normalize(parsed: argparse.Namespace, logger) -> int:
    from src.normalizer import (
        CanonicalProfile,
        MemberIndexEntry,
        NormalizerInput,
        ProfileNormalizer,
        SponsorIndexEntry,
    )
    from src.resolver import FieldResolver, ReasoningClient, get_resolver_config
    from src.utils.outcome import OutcomeStatus

    if not parsed.input.exists():
        print(f"Error: input file not found: {parsed.input}", file=sys.stderr)
        return 1

    try:
        payload = NormalizerInput.from_dict(_load_json(parsed.input))
        candidates = _load_json(parsed.candidates) if parsed.candidates else None
        prior = CanonicalProfile.from_dict(_load_json(parsed.prior)) if parsed.prior else None
        members = (
            [MemberIndexEntry.model_validate(m) for m in _load_json(parsed.members)]
            if parsed.members
            else []
        )
        sponsors = (
            [SponsorIndexEntry.model_validate(s) for s in _load_json(parsed.sponsors)]
            if parsed.sponsors
            else []
        )
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error: invalid input: {e}", file=sys.stderr)
        return 1

    config = get_resolver_config()
    if parsed.no_reasoning:
        config = config.model_copy(update={"reasoning_enabled": False})
    client = ReasoningClient(config) if config.reasoning_enabled else None

    normalizer = ProfileNormalizer(FieldResolver(config=config, client=client))
    outcome = normalizer.normalize(
        payload,
        candidates=candidates,
        prior=prior,
        member_index=members,
        sponsor_index=sponsors,
    )

    _emit(
        {
            "status": outcome.status.value,
            "degradations": [d.to_dict() for d in outcome.degradations],
            "profile": outcome.value.to_dict(),
        },
        parsed.output,
    )
    if outcome.status == OutcomeStatus.FAILED:
        logger.error("Profile build failed")
        return 1
    return 0


def _run_signals(parsed: argparse.Namespace, settings: Settings, logger) -> int:
    from src.signals import MemberProfileLoader, SignalGenerator, SignalRepository
    from src.signals.service import SignalService
    from src.utils.outcome import StoreFailure

    loader = MemberProfileLoader()
    try:
        member = loader.load(parsed.profile)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, ValidationError) as e:
        print(f"Error: invalid member profile: {e}", file=sys.stderr)
        return 1

    for warning in loader.validate(member):
        logger.warning(warning)

    generator = SignalGenerator()
    if parsed.dry_run:
        _emit(generator.generate(member), parsed.output)
        return 0

    async def _store():
        repository = SignalRepository(parsed.db or settings.signals_db_path)
        try:
            await repository.initialize()
            return await SignalService(repository, generator).regenerate(member)
        finally:
            await repository.close()

    try:
        stored = asyncio.run(_store())
    except StoreFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit(stored, parsed.output)
    return 0


def _run_score(parsed: argparse.Namespace, settings: Settings) -> int:
    from src.compatibility import ScoringSubject, score_pair
    from src.signals import SignalRepository
    from src.utils.outcome import StoreFailure

    left = ScoringSubject(title=parsed.a_title, tags=list(parsed.a_tags))
    right = ScoringSubject(title=parsed.b_title, tags=list(parsed.b_tags))

    if parsed.a_user or parsed.b_user:

        async def _fetch():
            repository = SignalRepository(parsed.db or settings.signals_db_path)
            try:
                await repository.initialize()
                a = await repository.get_by_user_id(parsed.a_user) if parsed.a_user else None
                b = await repository.get_by_user_id(parsed.b_user) if parsed.b_user else None
                return a, b
            finally:
                await repository.close()

        try:
            signals_a, signals_b = asyncio.run(_fetch())
        except StoreFailure as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        for user_id, signals in ((parsed.a_user, signals_a), (parsed.b_user, signals_b)):
            if user_id and signals is None:
                print(f"Error: no stored signals for {user_id}", file=sys.stderr)
                return 1
        if signals_a is not None:
            left = ScoringSubject.from_signals(signals_a, title=parsed.a_title)
        if signals_b is not None:
            right = ScoringSubject.from_signals(signals_b, title=parsed.b_title)

    result = score_pair(left, right)
    print(f"Score: {result.score}")
    print("Reasons:")
    for reason in result.reasons:
        print(f"- {reason}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    # If no mode specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info(f"Signal-Fuse v{__version__} running {parsed.mode}")

    if parsed.mode == "normalize":
        return _run_normalize(parsed, logger)

    if parsed.mode == "signals":
        return _run_signals(parsed, settings, logger)

    if parsed.mode == "score":
        return _run_score(parsed, settings)

    if parsed.mode == "anonymize":
        from src.compatibility import anonymize

        preview = anonymize(parsed.title, parsed.company)
        print(f"Handle: {preview.handle}")
        print(f"Location: {preview.location}")
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
