import os
import sys
import logging
from typing import Optional

from . import (
    cli,
    const,
    server,
    vt100,
)


class logger:
    @staticmethod
    def debug() -> bool:
        return os.environ.get(const.DEBUG_ENV, "") in ("1", "true", "True", "y", "yes", "Y", "Yes")

    @staticmethod
    def setup():
        logging.basicConfig(
            level=logging.DEBUG if logger.debug() else logging.INFO,
            format=f"{vt100.CYAN}%(asctime)s{vt100.RESET} {vt100.YELLOW}%(levelname)s{vt100.RESET} %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def main(argv: Optional[list[str]] = None) -> int:
    iterator = cli.ArgsIterator(sys.argv if argv is None else argv)
    args = cli.Args(iterator)

    try:
        args.parse()
    except (cli.CliError, ValueError) as e:
        vt100.error(f"Invalid argument '{iterator.current}' ({type(e).__name__})")
        return 1

    if args.help:
        print(const.HELP_MESSAGE, end="")
        return 0

    logger.setup()

    try:
        server.start(args.path, args.port, args.threads, args.workers)
        return 0

    except (OSError, OverflowError) as e:
        logging.debug(e, exc_info=True)
        vt100.error(f"Could not start the server: {e}")
        return 1

    except KeyboardInterrupt:
        print()
        return 0
