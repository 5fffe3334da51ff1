"""Google Maps link services."""

from .expander import ShortLinkExpander
from .parser import DirectionsParser, PlaceParser, is_short_link, parse_directions_url, parse_link, parse_place_url

__all__ = [
    "ShortLinkExpander",
    "DirectionsParser",
    "PlaceParser",
    "is_short_link",
    "parse_link",
    "parse_directions_url",
    "parse_place_url",
]
