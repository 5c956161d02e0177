"""Conversion between ``HH:mm`` clock strings and minutes since midnight."""

MINUTES_PER_DAY = 24 * 60


class MalformedTimeError(ValueError):
    """A time-of-day string that is not a valid 24h ``HH:mm`` value."""


def parse_time_of_day(text: str) -> int:
    """Return the minute offset of ``text`` from midnight.

    Examples:
        >>> parse_time_of_day("00:00")
        0
        >>> parse_time_of_day("07:30")
        450
        >>> parse_time_of_day("23:59")
        1439

    Raises:
        MalformedTimeError: If ``text`` is not a string, does not have exactly
            two colon-separated fields, a field is not an integer, or the value
            is outside 00:00-23:59.
    """
    if not isinstance(text, str):
        raise MalformedTimeError(
            f"Invalid time format: expected string but got {type(text).__name__}"
        )

    fields = text.split(":")
    if len(fields) != 2:
        raise MalformedTimeError(f'Invalid time string: "{text}". Expected format HH:mm')

    hours_str, minutes_str = fields
    if not all(field.isascii() and field.isdigit() for field in fields):
        raise MalformedTimeError(f'Invalid time string: "{text}". Expected format HH:mm')

    hours, minutes = int(hours_str), int(minutes_str)
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise MalformedTimeError(
            f'Invalid time string: "{text}". Hours must be 0-23 and minutes 0-59'
        )

    return hours * 60 + minutes


def format_time_of_day(minutes: int) -> str:
    """Inverse of :func:`parse_time_of_day`."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute offset {minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
