import re
from datetime import timedelta

_UNITS = {
    'h': timedelta(hours=1),
    'm': timedelta(minutes=1),
    's': timedelta(seconds=1),
    'ms': timedelta(milliseconds=1),
    'us': timedelta(microseconds=1),
    'µs': timedelta(microseconds=1),
}

_COMPONENT = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(h|ms|m|s|us|µs)')


def parse_duration(value: str) -> timedelta:
    """
    Parse durations such as "10m", "1h30m", "90s" or "250ms".

    A bare number is read as seconds.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration")

    try:
        total = timedelta(seconds=float(text))
    except (ValueError, OverflowError):
        total = timedelta(0)
        position = 0
        for match in _COMPONENT.finditer(text):
            if match.start() != position:
                break
            total += float(match.group(1)) * _UNITS[match.group(2)]
            position = match.end()

        if position == 0 or position != len(text):
            raise ValueError(f"invalid duration '{value}'")

    if total < timedelta(0):
        raise ValueError(f"duration must not be negative: '{value}'")
    return total
