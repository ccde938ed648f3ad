import re

MAX_FIELD_LENGTH = 1000

_ANGLE_BRACKETS = re.compile(r"[<>]")


def sanitize_input(value: str, max_length: int = MAX_FIELD_LENGTH) -> str:
    # trim -> drop angle brackets -> truncate, in that order
    cleaned = _ANGLE_BRACKETS.sub("", value.strip())
    return cleaned[:max_length]
