"""
Beat Buddy CLI - chat with the music recommender from a terminal.

Usage:
    beat-buddy                      # interactive session
    beat-buddy --message "Find me the song Yesterday"
"""

import argparse
import asyncio
import logging
import sqlite3
import sys
from typing import Callable, List, Optional

from openai import AsyncOpenAI

from . import __version__
from .backend import MusicBackend
from .config import BeatBuddyConfig
from .conversation import ConversationLoop
from .dispatcher import Dispatcher
from .exceptions import CommunicationError
from .lastfm import LastFM, LastFMCache
from .logger import setup_logging
from .models import Message
from .playlist import Playlist

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit"}


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="beat-buddy",
        description="Conversational music recommender and playlist builder",
        epilog='Example: beat-buddy --message "Find me the song Yesterday"',
    )
    parser.add_argument(
        "--message",
        "-m",
        type=str,
        metavar="TEXT",
        help="Send a single message and exit instead of starting a session",
    )
    parser.add_argument(
        "--model",
        type=str,
        metavar="NAME",
        help="OpenAI chat model (overrides OPENAI_MODEL)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def build_conversation(config: BeatBuddyConfig, client: AsyncOpenAI, lastfm: LastFM) -> ConversationLoop:
    """
    Wire the conversation loop to its collaborators.

    Args:
        config: Loaded configuration
        client: OpenAI client owned by the caller
        lastfm: LastFM client owned by the caller

    Returns:
        ConversationLoop ready to take user turns
    """
    backend = MusicBackend(lastfm=lastfm, playlist=Playlist())
    return ConversationLoop(
        client=client,
        dispatcher=Dispatcher(backend),
        model=config.openai_model,
        max_tokens=config.max_tokens,
        final_max_tokens=config.final_max_tokens,
        temperature=config.temperature,
    )


async def run_interactive(
    conversation: ConversationLoop,
    read_input: Callable[[str], str] = input,
) -> None:
    """
    Read user turns until EOF or an exit command.

    A failed turn is reported and the session continues with the history as
    it stood after the failure.
    """
    history: List[Message] = []
    print("Beat Buddy is ready. Type 'exit' to leave.")
    while True:
        try:
            user_input = (await asyncio.to_thread(read_input, "You: ")).strip()
        except EOFError:
            print()
            break

        if user_input.lower() in EXIT_COMMANDS:
            break
        if not user_input:
            continue

        try:
            result = await conversation.send_message(user_input, history)
        except CommunicationError as e:
            print(f"Beat Buddy: sorry, something went wrong ({e})")
            continue
        print(f"Beat Buddy: {result.response}")


async def async_main(args: argparse.Namespace) -> int:
    """
    Async main function.

    Args:
        args: Parsed CLI arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = BeatBuddyConfig.from_environment()
        if args.model:
            config.openai_model = args.model
        config.validate()
    except (EnvironmentError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Loaded {config!r}")

    try:
        cache = LastFMCache(config.lastfm_cache_file)
    except sqlite3.Error as e:
        print(f"Cannot open LastFM cache {config.lastfm_cache_file}: {e}", file=sys.stderr)
        return 1

    lastfm = LastFM(
        api_key=config.lastfm_api_key,
        api_secret=config.lastfm_api_secret,
        cache=cache,
    )
    with lastfm:
        client = AsyncOpenAI(api_key=config.openai_api_key)
        try:
            conversation = build_conversation(config, client, lastfm)
            if args.message:
                try:
                    result = await conversation.send_message(args.message)
                except CommunicationError as e:
                    print(f"Error: {e}", file=sys.stderr)
                    if args.verbose:
                        logger.exception("Detailed error traceback:")
                    return 1
                print(result.response)
                return 0

            await run_interactive(conversation)
            return 0
        finally:
            await client.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        print()
        print("Session cancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
