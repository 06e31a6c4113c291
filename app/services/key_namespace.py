import re
import time
from collections.abc import Callable

from app.core.constants import BUCKET_ROUTES, LogicalType

# Returns unix time in milliseconds.
Clock = Callable[[], int]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def system_clock() -> int:
    return time.time_ns() // 1_000_000


def _underscores(match: re.Match) -> str:
    # one per UTF-16 code unit, so astral characters become two
    return "_" * (len(match.group().encode("utf-16-le")) // 2)


def sanitize_filename(filename: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub(_underscores, filename or "")


def derive_key(owner_id: str, filename: str, clock: Clock = system_clock) -> str:
    """Build ``{owner}/{unix_millis}-{sanitized filename}``.

    Two requests from the same owner within one millisecond with the same
    filename map to the same key; the later upload overwrites the earlier.
    """
    return f"{owner_id}/{clock()}-{sanitize_filename(filename)}"


def owner_prefix(owner_id: str) -> str:
    return f"{owner_id}/"


def route_bucket(logical_type: LogicalType | str | None) -> str:
    return BUCKET_ROUTES[LogicalType.parse(logical_type)].value
