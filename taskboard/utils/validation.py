import re

from fastapi import HTTPException, status

# Simple email shape check, no deeper RFC validation
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

VALID_PRIORITIES = ("low", "medium", "high")
PRIORITY_ERROR = "Priority must be low, medium, or high"

# Range of the INTEGER id columns
MIN_ID = -2**31
MAX_ID = 2**31 - 1

DIGITS = re.compile(r"[0-9]+")
SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")


def sanitize_string(v):
    if not isinstance(v, str):
        return v
    # Strip HTML tags, then trim whitespace
    v = re.sub(r'<[^>]*>', '', v)
    return v.strip()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def is_valid_priority(value) -> bool:
    return value in VALID_PRIORITIES


def _exceeds_id_range(digits: str) -> bool:
    # Length check first so huge inputs never reach int()
    significant = digits.lstrip("0")
    return len(significant) > 10 or int(significant or "0") > MAX_ID


def parse_positive_id(raw, error_message: str, not_found_message: str | None = None) -> int:
    """
    Parse a path identifier.

    Anything but a positive ASCII integer is a 400 with ``error_message``.
    An id beyond the INTEGER key range cannot exist, so it is reported as a
    404 with ``not_found_message`` when one is given.
    """
    value = str(raw).strip()
    if not DIGITS.fullmatch(value) or not value.strip("0"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)
    if _exceeds_id_range(value):
        if not_found_message:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)
    return int(value)


def parse_id_filter(raw, error_message: str) -> int | None:
    """
    Parse an integer query filter, sign allowed.

    Returns None when the value lies outside the INTEGER id range, since
    no row can match it.
    """
    value = str(raw).strip()
    if not SIGNED_DIGITS.fullmatch(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)
    if _exceeds_id_range(value.lstrip("+-")):
        return None
    return int(value)


def id_in_range(value: int) -> bool:
    return MIN_ID <= value <= MAX_ID



def completion_rate(completed, total) -> float:
    if not total:
        return 0
    return round((completed or 0) / total * 100, 2)
