"""Command-line interface for followcheck.

Provides commands for checking GitHub follow relationships from the terminal.

Usage:
    followcheck check octocat
    followcheck check octocat --direction not-followed-back
    followcheck check octocat --token ghp_... --format json
"""

import argparse
import asyncio
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from followcheck import __version__
from followcheck.config import settings
from followcheck.models import Direction, ResultEnvelope
from followcheck.pipeline.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=1)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="followcheck",
        description="followcheck: find GitHub follow asymmetries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  followcheck check octocat
  followcheck check octocat --direction not-followed-back
  followcheck check octocat --token ghp_... --format json

Set GITHUB_TOKEN in the environment or .env to raise the API quota.
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="List follow asymmetries for a GitHub user",
        description="Compare a user's following and followers lists",
    )
    check_parser.add_argument(
        "username",
        type=str,
        help="GitHub username (e.g., octocat)",
    )
    check_parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="GitHub token (default: GITHUB_TOKEN from environment)",
    )
    check_parser.add_argument(
        "--direction",
        type=str,
        choices=[d.value for d in Direction],
        default=Direction.FOLLOWING_BUT_NOT_FOLLOWED_BACK.value,
        help=(
            "not-following-back: users you follow who don't follow you back; "
            "not-followed-back: followers you don't follow back "
            "(default: not-following-back)"
        ),
    )
    check_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def _run_async(coro):
    """Run an async coroutine from synchronous CLI context.

    Spins up a new event loop in a dedicated thread to avoid conflicts
    with any existing event loop.
    """
    def _target():
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()

    future = _executor.submit(_target)
    return future.result()


def format_text(envelope: ResultEnvelope, direction: Direction) -> str:
    """Render a successful envelope as one line per user."""
    users = envelope.users or []
    lines = [f"{direction.get_description()}: {len(users)}"]
    for user in users:
        line = f"  {user.login:<39} {user.profile_url}"
        if user.has_details:
            counts = [
                ("followers", user.follower_count),
                ("following", user.following_count),
                ("repos", user.public_repo_count),
                ("gists", user.public_gist_count),
            ]
            line += "  " + " ".join(f"{k}={v}" for k, v in counts if v is not None)
        lines.append(line)
    return "\n".join(lines)


def cmd_check(args: argparse.Namespace) -> int:
    """Execute the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        direction = Direction(args.direction)
        credential = args.token or settings.github_token

        logger.info(
            "Checking %s (%s, authenticated=%s)",
            args.username, direction.value, bool(credential),
        )

        orchestrator = Orchestrator()
        envelope = _run_async(
            orchestrator.run(
                username=args.username,
                credential=credential,
                direction=direction,
            )
        )

        if args.format == "json":
            print(json.dumps(envelope.to_dict(), indent=2))
        elif envelope.ok:
            print(format_text(envelope, direction))

        if not envelope.ok:
            if args.format == "text":
                print(f"Error: {envelope.error_message}", file=sys.stderr)
                if envelope.is_rate_limit_error:
                    print("Hint: pass --token or set GITHUB_TOKEN.", file=sys.stderr)
            return 1

        if envelope.has_partial_data_error and args.format == "text":
            print(f"Note: {envelope.error_message}", file=sys.stderr)

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    print(f"followcheck v{__version__}")
    print("GitHub follower asymmetry checker")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    # Route to command handler
    if args.command == "check":
        return cmd_check(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        # No command specified
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
