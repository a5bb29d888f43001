"""StaffDesk entry point.

Usage:
    python -m staffdesk --user ID [OPTIONS]

Options:
    --user ID        Staff ID the messages are sent as
    --message TEXT   Handle one message and exit
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --dry-run        Load config and exit
    --help           Show this help message
    --version        Show version
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from . import __version__
from .config import StaffDeskConfig
from .config.loader import load_config
from .config.profiles import detect_profile
from .router.action_router import ActionRouter, InboundMessage
from .storage.client import MongoStorageClient
from .storage.store import RecordStore

QUIT_COMMANDS = frozenset({"quit", "exit"})


def load_environment() -> None:
    """Load a .env file from the project root, or the current directory."""
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="staffdesk",
        description="StaffDesk - conversational assistant for agency records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staffdesk --user staff-1 --message "finance"
  python -m staffdesk --user staff-1                      # Read messages from stdin
  python -m staffdesk --profile prod --user staff-1
  python -m staffdesk --config my.yaml --dry-run

Environment:
  STAFFDESK_PROFILE    Set profile (dev, prod, test)
  ANTHROPIC_API_KEY    API key for answering open questions
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--user",
        help="Staff ID of the acting user",
        metavar="ID",
    )

    parser.add_argument(
        "--message",
        help="Handle a single message and exit",
        metavar="TEXT",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"StaffDesk v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    return parser.parse_args(argv)


def run_conversation(router: ActionRouter, user_id: str) -> None:
    """Read messages from stdin until EOF or "quit", printing each reply."""
    for line in sys.stdin:
        text = line.strip()
        if not text:
            continue
        if text.lower() in QUIT_COMMANDS:
            break
        print(router.handle(InboundMessage(text=text, acting_user_id=user_id)))
        print()


def create_storage(config: StaffDeskConfig) -> MongoStorageClient:
    store = config.store
    return MongoStorageClient(
        uri=store.uri,
        database_name=store.database,
        max_pool_size=store.max_pool_size,
        min_pool_size=store.min_pool_size,
        connect_timeout_ms=store.connect_timeout_ms,
        server_selection_timeout_ms=store.server_selection_timeout_ms,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for StaffDesk.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_environment()
    args = parse_args(argv)
    profile = args.profile or detect_profile().value

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except (TypeError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("staffdesk")

    logger.info("StaffDesk v%s", __version__)
    logger.info("Profile: %s", profile)
    logger.info("Log level: %s", config.logging.level)

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info("Database: %s", config.store.database)
        logger.info("Display timezone: %s", config.display.timezone)
        logger.info("Roster: %s", ", ".join(sorted(config.roster)) or "(empty)")
        return 0

    if not args.user:
        print("Error: --user is required", file=sys.stderr)
        return 2

    storage = create_storage(config)
    try:
        storage.connect()
    except PyMongoError as e:
        logger.error("Failed to connect to MongoDB: %s", e)
        print(f"\nError: cannot reach MongoDB at {config.store.uri}: {e}", file=sys.stderr)
        return 1

    try:
        router = ActionRouter(RecordStore(storage.database), config)
        if args.message is not None:
            print(router.handle(InboundMessage(text=args.message, acting_user_id=args.user)))
        else:
            run_conversation(router, args.user)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        storage.disconnect()

    return 0


if __name__ == "__main__":
    sys.exit(main())
