from .clock import Clock, utc_now, to_iso
from .validators import is_valid_url, is_positive_number, is_valid_shortcode

__all__ = [
    "Clock",
    "utc_now",
    "to_iso",
    "is_valid_url",
    "is_positive_number",
    "is_valid_shortcode",
]
