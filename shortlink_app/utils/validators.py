"""
Input validation helpers shared by the registry and the API layer.
"""

import re
from numbers import Real

from pydantic import AnyUrl, TypeAdapter, ValidationError

SHORTCODE_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")

# Paths served by the app itself; a shortcode with one of these names would be unreachable
RESERVED_SHORTCODES = {"health", "shorturls", "docs", "redoc", "openapi.json"}

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_url(value) -> bool:
    """True if value parses as an absolute URL (scheme required)"""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_positive_number(value) -> bool:
    # bool is a Real subclass; True is not a validity
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return value > 0


def is_valid_shortcode(value) -> bool:
    if not isinstance(value, str):
        return False
    return bool(SHORTCODE_PATTERN.match(value)) and value.lower() not in RESERVED_SHORTCODES
