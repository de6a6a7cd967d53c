"""Conversion between dataset microsecond timestamps and output times.

Dataset timestamps are unsigned microseconds since the Unix epoch. The
output container stores time as unsigned 32-bit seconds plus nanoseconds,
so anything on or after 4294967296000000 us (2106-02-07 06:28:16 UTC)
cannot be written.
"""

from typing import NamedTuple

ONE_THOUSAND = 1000
ONE_MILLION = 1000000
MAX_OUTPUT_SECONDS = 2**32 - 1
MAX_UINT64 = 2**64 - 1


class OutputTime(NamedTuple):
    """Output timestamp. Tuple ordering is chronological."""
    secs: int
    nsecs: int

    def to_sec(self) -> float:
        return self.secs + self.nsecs * 1e-9

    def __str__(self) -> str:
        return f"{self.secs}.{self.nsecs:09d}"


def _check_domain(us: int) -> int:
    us = int(us)
    if us < 0 or us > MAX_UINT64:
        raise ValueError(f"Timestamp {us} is not an unsigned 64-bit microsecond count")
    return us


def is_representable(us: int) -> bool:
    """True if `us` fits in the 32-bit seconds field of an output time."""
    us = int(us)
    if us < 0 or us > MAX_UINT64:
        return False
    return (us // ONE_MILLION) <= MAX_OUTPUT_SECONDS


def to_output_time(us: int) -> OutputTime:
    """
    Split a microsecond timestamp into (seconds, nanoseconds).

    No range check is done on the seconds; call is_representable() first
    when the result has to fit the output container.

    Example:
        >>> to_output_time(1_500_000)
        OutputTime(secs=1, nsecs=500000000)
    """
    us = _check_domain(us)
    secs = us // ONE_MILLION
    mu_secs = us - secs * ONE_MILLION
    return OutputTime(secs, mu_secs * ONE_THOUSAND)


def to_microseconds(time: OutputTime) -> int:
    """Inverse of to_output_time() for whole-microsecond times."""
    return int(time.secs) * ONE_MILLION + int(time.nsecs) // ONE_THOUSAND
