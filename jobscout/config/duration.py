"""Parsing of polling interval strings such as ``"6h"`` or ``"PT30M"``."""

import re

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

_ISO_PATTERN = re.compile(
    r"^P(?:(?P<d>\d+)D)?(?:T(?:(?P<h>\d+)H)?(?:(?P<m>\d+)M)?(?:(?P<s>\d+)S)?)?$"
)
_HUMAN_PATTERN = re.compile(r"(\d+)([smhd])")


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(duration_str: str) -> int:
    """
    Convert a duration string to seconds.

    Accepts compact forms (``30s``, ``15m``, ``6h``, ``1d``, ``1h30m``) and the
    ISO-8601 subset ``P[n]DT[n]H[n]M[n]S``.

    Raises:
        DurationParseError: If the string is empty, malformed or zero
    """
    text = re.sub(r"\s+", "", duration_str or "")
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text.upper().startswith("P"):
        match = _ISO_PATTERN.match(text.upper())
        if not match or not any(match.groupdict().values()):
            raise DurationParseError(
                f"Invalid ISO-8601 duration: '{duration_str}'. "
                "Expected something like 'P1D', 'PT6H' or 'PT30M'"
            )
        total = sum(
            int(value) * _UNIT_SECONDS[unit.lower()]
            for unit, value in match.groupdict().items()
            if value
        )
    else:
        lowered = text.lower()
        parts = _HUMAN_PATTERN.findall(lowered)
        if not parts or "".join(n + u for n, u in parts) != lowered:
            raise DurationParseError(
                f"Invalid duration: '{duration_str}'. "
                "Use digits followed by s, m, h or d (e.g. '15m', '6h', '1h30m')"
            )
        total = sum(int(n) * _UNIT_SECONDS[u] for n, u in parts)

    if total == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")
    return total


def validate_duration_range(
    duration_seconds: int, min_seconds: int = 300, max_seconds: int = 86400
) -> None:
    """Raise DurationParseError when the duration falls outside [min, max]."""
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"Scan interval too short: {humanize_seconds(duration_seconds)}. "
            f"Minimum is {humanize_seconds(min_seconds)}."
        )
    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"Scan interval too long: {humanize_seconds(duration_seconds)}. "
            f"Maximum is {humanize_seconds(max_seconds)}."
        )


def humanize_seconds(seconds: int) -> str:
    """Render seconds in the largest whole unit, e.g. ``"2 hours"``."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size and seconds % size == 0:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
