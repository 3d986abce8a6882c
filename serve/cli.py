from enum import Enum
import re
import dataclasses as dt

from typing import Optional, Sequence
from serve import const

# --- Errors ---------------------------------------------------------------- #


class CliError(Exception):
    """
    Base class for the errors raised while scanning the argument vector.
    """

    pass


class UnknownOption(CliError):
    pass


class MissingValue(CliError):
    pass


class InvalidShortArgument(CliError):
    pass


class InvalidCharacter(ValueError):
    pass


class Overflow(ValueError):
    pass


# --- Iterator -------------------------------------------------------------- #


class ArgsIterator:
    """
    A forward-only cursor over a list of command-line arguments.
    """

    _items: Sequence[str]
    _index: int
    current: str

    def __init__(self, items: Sequence[str]):
        """
        Initializes a new `ArgsIterator` object.

        Args:
            items: The raw argument vector, program name included.
        """
        self._items = items
        self._index = 0
        self.current = ""

    def skip(self) -> bool:
        """
        Advances past one argument without making it the current one.

        Returns:
            True if an argument was skipped, False if the list is exhausted.
        """
        if self._index == len(self._items):
            return False
        self._index += 1
        return True

    def next(self) -> Optional[str]:
        """
        Advances to the next argument.

        Returns:
            The new current argument, or None if the list is exhausted.
        """
        if self._index == len(self._items):
            return None

        self.current = self._items[self._index]
        self._index += 1
        return self.current

    def takeNext(self) -> str:
        """
        Advances to the next argument, which must exist.

        Raises:
            MissingValue: If the list is exhausted.
        """
        item = self.next()
        if item is None:
            raise MissingValue(f"Expected a value after '{self.current}'")
        return item


# --- Options --------------------------------------------------------------- #


class Match(Enum):
    """
    How a token matched an option.
    """

    NONE = 0
    SHORT = 1
    LONG = 2


@dt.dataclass(frozen=True)
class Option:
    """
    A known option and its spellings.

    Attributes:
        short: The short name (e.g., "p" for "-p").
        long: The long name (e.g., "port" for "--port").
    """

    short: str
    long: str = ""

    def matches(self, token: str) -> Match:
        """
        Checks whether the token names this option.

        Both forms are prefix matches so that attached values are accepted:
        "-p8000" matches as short, "--port=8000" as long. This also means
        "--portextra" is taken as "--port".
        """
        if len(token) == 0:
            return Match.NONE

        if (
            len(self.short) > 0
            and token.startswith("-")
            and not token.startswith("--")
            and token[1:].startswith(self.short)
        ):
            return Match.SHORT

        if len(self.long) == 0 or len(token) < 2:
            return Match.NONE

        if token.startswith("--") and token[2:].startswith(self.long):
            return Match.LONG

        return Match.NONE


# --- Values ---------------------------------------------------------------- #

Bounds = tuple[int, int]

I16: Bounds = (-(2**15), 2**15 - 1)
USIZE: Bounds = (0, 2**64 - 1)

_INT_RE = re.compile(r"[+-]?[0-9]+(?:_+[0-9]+)*")


def parseInt(src: str, bounds: Bounds) -> int:
    """Parses a base-10 integer and checks it against the given bounds."""
    if not _INT_RE.fullmatch(src):
        raise InvalidCharacter(f"Invalid integer '{src}'")

    lo, hi = bounds
    sign = "-" if src.startswith("-") else ""
    digits = src.lstrip("+-").replace("_", "").lstrip("0") or "0"

    # keeps int() below its string conversion limit
    if len(digits) > max(len(str(abs(lo))), len(str(hi))):
        raise Overflow(f"Integer '{src}' is out of range [{lo}, {hi}]")

    value = int(sign + digits)
    if value < lo or value > hi:
        raise Overflow(f"Integer '{src}' is out of range [{lo}, {hi}]")
    return value


# --- Parser ---------------------------------------------------------------- #


@dt.dataclass
class Args:
    """
    The server configuration, filled in by `parse`.
    """

    iterator: ArgsIterator = dt.field(repr=False, compare=False)
    path: str = const.DEFAULT_PATH
    port: int = const.DEFAULT_PORT
    threads: int = const.DEFAULT_THREADS
    workers: int = const.DEFAULT_WORKERS
    help: bool = False

    def parse(self):
        """
        Scans the arguments until they are exhausted or help is requested.

        On error, `iterator.current` holds the offending argument.
        """
        skipped = self.iterator.skip()
        assert skipped, "Expected the program name in the argument vector"

        options: list[tuple[Option, str, Bounds]] = [
            (Option("p", "port"), "port", USIZE),
            (Option("t", "threads"), "threads", I16),
            (Option("w", "workers"), "workers", I16),
        ]

        while (arg := self.iterator.next()) is not None:
            if not arg.startswith("-"):
                self.path = arg
                continue

            if arg == "-h" or arg == "--help":
                self.help = True
                return

            for option, name, bounds in options:
                match = option.matches(arg)
                if match != Match.NONE:
                    setattr(self, name, self._parseArg(option, match, bounds))
                    break
            else:
                raise UnknownOption(f"Unknown option '{arg}'")

    def _parseArg(self, option: Option, match: Match, bounds: Bounds) -> int:
        """Extracts the value of a matched option and converts it."""
        current = self.iterator.current
        eq = current.find("=")

        if match == Match.SHORT:
            if eq >= 0:
                raise InvalidShortArgument(
                    f"Short option '-{option.short}' does not accept '='"
                )

            if current[1:] != option.short:
                return parseInt(current[len(option.short) + 1 :], bounds)

            return parseInt(self.iterator.takeNext(), bounds)

        if eq >= 0:
            return parseInt(current[eq + 1 :], bounds)

        return parseInt(self.iterator.takeNext(), bounds)
