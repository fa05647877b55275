"""Status code parsing and the canonical description table."""

import re
from typing import Dict, Optional

# int() alone would also accept whitespace and "1_00"
_INTEGER = re.compile(r"[+-]?[0-9]+")

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

UNKNOWN_STATUS = "Unknown Status"

STATUS_DESCRIPTIONS: Dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    500: "Internal Server Error",
}


def parse_int(raw: str) -> Optional[int]:
    """Parses an optionally signed run of ASCII digits; anything else is None."""
    if not _INTEGER.fullmatch(raw):
        return None
    return int(raw)


def parse_status_code(raw: str) -> Optional[int]:
    """Returns the status code in `raw`, or None if it is not an integer in [100, 599]."""
    code = parse_int(raw)
    if code is None or code < MIN_STATUS_CODE or code > MAX_STATUS_CODE:
        return None
    return code


def describe_status(code: int) -> str:
    return STATUS_DESCRIPTIONS.get(code, UNKNOWN_STATUS)
