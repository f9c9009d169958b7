import logging
from datetime import date, datetime, time, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_cutoff(value: str) -> Optional[datetime]:
    """
    解析截止时间。

    纯日期（``YYYY-MM-DD`` 或 ``YYYYMMDD``）表示当天结束 (23:59:59 UTC，含当天)；
    完整的 ISO-8601 时间按原样使用，不带时区的按 UTC 处理。无法解析时返回 None。
    """
    value = (value or "").strip()
    if not value:
        return None
    try:
        day = date.fromisoformat(value)
    except ValueError:
        day = None
    if day is not None:
        return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
    try:
        cutoff = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=timezone.utc)
    return cutoff


class ExpiryGate:
    """Kill-switch: once the cutoff has passed, report generation is refused."""

    def __init__(self, cutoff: str, clock: Clock = utc_now):
        self.raw_cutoff = cutoff
        self.cutoff = parse_cutoff(cutoff)
        self.clock = clock

    def is_expired(self) -> bool:
        if self.cutoff is None:
            # fail open
            logger.error(f"Invalid EXPIRY_DATE configured: {self.raw_cutoff!r}; treating service as active")
            return False
        return self.clock() > self.cutoff
