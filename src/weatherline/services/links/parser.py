"""Google Maps link parsing into place tokens.

Two link families are understood:

* directions links, either the documented ``/maps/dir/?api=1&origin=...`` form
  or the path form ``/maps/dir/Origin/Waypoint/Destination/@lat,lon,zoom``;
* single-place links (``/maps/place/<name>``, ``/maps/search/<name>``,
  ``/maps/search/?api=1&query=...`` or any ``/maps`` URL carrying ``q=``).

Parsers are tried in order by :func:`parse_link`. A parser raises
:class:`ParseError` when the URL is not its shape and
:class:`MalformedLinkError` when it is its shape but unusable; the latter stops
the dispatch so the user sees the specific problem.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Protocol, Union
from urllib.parse import parse_qs, unquote, urlsplit, SplitResult

from ...config import settings
from ...errors import MalformedLinkError, ParseError
from ...models.domain import ParsedDirections, ParsedPlace, Place

_WHITESPACE = re.compile(r"\s+")
_AT_COORDINATES = re.compile(r"^@(-?\d+(?:\.\d+)?),(-?\d+(?:\.\d+)?)")

ParsedLink = Union[ParsedDirections, ParsedPlace]


def normalize_token(raw: str) -> str:
    return _WHITESPACE.sub(" ", str(raw).replace("+", " ")).strip()


def _split(url: str) -> SplitResult:
    try:
        parts = urlsplit(url.strip())
    except ValueError as exc:
        raise MalformedLinkError("Invalid URL.") from exc
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise MalformedLinkError("Invalid URL.")
    return parts


def is_short_link(url: str, hosts: Iterable[str] | None = None) -> bool:
    """True for ``maps.app.goo.gl`` links and legacy ``goo.gl/maps/...`` links."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    host = (parts.hostname or "").lower()
    allowed = set(hosts if hosts is not None else settings.short_link_hosts)
    if host not in allowed:
        return False
    if host == "goo.gl":
        return parts.path.startswith("/maps")
    return True


def _query(parts: SplitResult) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(parts.query).items() if values}


def _token(value: str) -> str:
    return normalize_token(unquote(value))


def parse_directions_url(url: str) -> ParsedDirections:
    parts = _split(url)
    if is_short_link(url):
        raise ParseError("Short link: it must be expanded before parsing.")
    params = _query(parts)
    path = parts.path

    if params.get("api") == "1" and (path.startswith("/maps") or path.startswith("/dir")):
        origin = params.get("origin")
        destination = params.get("destination")
        if not origin and not destination and "query" in params:
            raise ParseError("Not a directions link.")
        if not origin or not destination:
            raise MalformedLinkError("The link is missing origin/destination.")
        places = [Place(raw_token=_token(origin))]
        waypoints = params.get("waypoints")
        if waypoints:
            places.extend(Place(raw_token=_token(item)) for item in waypoints.split("|") if item.strip())
        places.append(Place(raw_token=_token(destination)))
        return ParsedDirections(places=tuple(places), mode=params.get("travelmode"))

    if path.startswith("/maps/dir/"):
        segments = [segment for segment in path.split("/") if segment]
        places: list[Place] = []
        for segment in segments[segments.index("dir") + 1:]:
            if segment.startswith("@"):
                break
            if ":" in segment:
                continue
            token = _token(segment)
            if token:
                places.append(Place(raw_token=token))
        if len(places) < 2:
            raise MalformedLinkError("Unable to determine origin/destination from the link.")
        return ParsedDirections(places=tuple(places), mode=params.get("travelmode"))

    raise ParseError("This does not look like a Google Maps directions link.")


def parse_place_url(url: str) -> ParsedPlace:
    parts = _split(url)
    if is_short_link(url):
        raise ParseError("Short link: it must be expanded before parsing.")
    params = _query(parts)
    path = parts.path
    if not path.startswith("/maps"):
        raise ParseError("This does not look like a Google Maps place link.")

    if params.get("api") == "1" and path.startswith("/maps/search"):
        query = params.get("query")
        if not query or not _token(query):
            raise MalformedLinkError("The place link is missing its query.")
        return ParsedPlace(place=Place(raw_token=_token(query)))

    segments = [segment for segment in path.split("/") if segment]
    if len(segments) >= 2 and segments[1] in {"place", "search"}:
        for segment in segments[2:]:
            if segment.startswith("@"):
                match = _AT_COORDINATES.match(segment)
                if match:
                    return ParsedPlace(place=Place(raw_token=f"{match.group(1)},{match.group(2)}"))
                break
            if segment.startswith("data="):
                break
            token = _token(segment)
            if token:
                return ParsedPlace(place=Place(raw_token=token))
        raise MalformedLinkError("Unable to determine the place from the link.")

    query = params.get("q")
    if query and _token(query):
        return ParsedPlace(place=Place(raw_token=_token(query)))

    raise ParseError("This does not look like a Google Maps place link.")


class LinkParser(Protocol):
    kind: str

    def parse(self, url: str) -> ParsedLink:
        ...


class DirectionsParser:
    kind = "directions"

    def parse(self, url: str) -> ParsedDirections:
        return parse_directions_url(url)


class PlaceParser:
    kind = "place"

    def parse(self, url: str) -> ParsedPlace:
        return parse_place_url(url)


DEFAULT_PARSERS: tuple[LinkParser, ...] = (DirectionsParser(), PlaceParser())


def parse_link(url: str, parsers: Optional[Iterable[LinkParser]] = None) -> ParsedLink:
    """Try each parser variant in order and return the first successful result."""
    for parser in parsers if parsers is not None else DEFAULT_PARSERS:
        try:
            return parser.parse(url)
        except MalformedLinkError:
            raise
        except ParseError:
            continue
    raise ParseError("This does not look like a Google Maps directions or place link.")
