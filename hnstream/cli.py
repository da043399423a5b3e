"""Command-line entry point: stream the newest stories to stdout.

Usage:
    python -m hnstream.cli [--max N] [--output html|json]

Environment variables:
    HN_API_BASE    default: https://hacker-news.firebaseio.com/v0/
    HTTP_TIMEOUT   default: 30.0
"""

import argparse
import asyncio
import logging
import sys

from hnstream.config import RequestConfig, get_config
from hnstream.errors import ConfigurationError
from hnstream.stream import create_story_stream

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream the newest Hacker News stories.")
    parser.add_argument("--max", dest="max_stories", type=int, default=10)
    parser.add_argument("--output", default="html", help='"html" or "json"')
    return parser.parse_args(argv)


async def write_stories(max_stories: int, output: str, config: RequestConfig, out=None) -> None:
    """Write each chunk to ``out`` as soon as it arrives."""
    out = out or sys.stdout
    async with create_story_stream(max_stories, output, config=config) as stream:
        async for chunk in stream:
            out.write(chunk)
            out.flush()
    out.write("\n")


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    args = parse_args(argv)
    try:
        config = get_config()
        asyncio.run(write_stories(args.max_stories, args.output, config))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2
    except Exception:
        logger.exception("Story stream failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
