import math
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def now() -> datetime:
    return datetime.now(UTC)


def total_pages(total: int, size: int) -> int:
    return math.ceil(total / size) if size > 0 else 0
