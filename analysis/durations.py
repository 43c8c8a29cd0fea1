"""Parse `H:MM:SS` duration strings as found in time tracker exports."""

from __future__ import annotations


def parse_hms(raw: str) -> int:
    """Parse an `H:MM:SS` duration into whole seconds.

    Hours may exceed 24 (e.g. `"26:00:00"`).

    Args:
        raw: Duration string.

    Returns:
        Total seconds.

    Raises:
        ValueError: When the value is not three non-negative integer parts.
    """

    parts = raw.strip().split(":")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid duration: {raw!r}")
    hours, minutes, seconds = (int(part) for part in parts)
    return hours * 3600 + minutes * 60 + seconds
