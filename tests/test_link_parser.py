import pytest

from weatherline.errors import MalformedLinkError, ParseError
from weatherline.models.domain import ParsedDirections, ParsedPlace
from weatherline.services.links.parser import (
    is_short_link,
    normalize_token,
    parse_directions_url,
    parse_link,
    parse_place_url,
)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://maps.app.goo.gl/abc", True),
        ("https://goo.gl/maps/abcd", True),
        ("https://goo.gl/other", False),
        ("https://www.google.com/maps/dir/?api=1&origin=Milano&destination=Torino", False),
        ("not a url", False),
    ],
)
def test_is_short_link(url, expected):
    assert is_short_link(url) is expected


def test_normalize_token_collapses_plus_and_whitespace():
    assert normalize_token("  Piazza+del   Duomo ") == "Piazza del Duomo"


def test_parse_api_directions_link():
    parsed = parse_directions_url(
        "https://www.google.com/maps/dir/?api=1&origin=Milano&destination=Torino&travelmode=driving"
    )

    assert [place.raw_token for place in parsed.places] == ["Milano", "Torino"]
    assert parsed.mode == "driving"


def test_parse_api_directions_link_with_waypoints():
    parsed = parse_directions_url(
        "https://www.google.com/maps/dir/?api=1&origin=Roma&destination=Napoli"
        "&waypoints=Cassino%7CCaserta&travelmode=driving"
    )

    assert [place.raw_token for place in parsed.places] == ["Roma", "Cassino", "Caserta", "Napoli"]


def test_parse_api_directions_link_with_coordinates_and_encoding():
    parsed = parse_directions_url(
        "https://www.google.com/maps/dir/?api=1&origin=45.4642,9.1900"
        "&destination=Piazza+Castello%2C+Torino"
    )

    assert [place.raw_token for place in parsed.places] == ["45.4642,9.1900", "Piazza Castello, Torino"]
    assert parsed.mode is None


def test_parse_path_directions_link_stops_at_viewport():
    parsed = parse_directions_url(
        "https://www.google.com/maps/dir/Milano/Novara/Torino/@45.2,8.4,9z/data=!3m1!4b1"
    )

    assert [place.raw_token for place in parsed.places] == ["Milano", "Novara", "Torino"]


def test_parse_path_directions_link_skips_segments_with_colon():
    parsed = parse_directions_url("https://www.google.com/maps/dir/Milano/x:y/Torino")

    assert [place.raw_token for place in parsed.places] == ["Milano", "Torino"]


def test_directions_link_missing_destination_is_malformed():
    with pytest.raises(MalformedLinkError):
        parse_directions_url("https://www.google.com/maps/dir/?api=1&origin=Milano")


def test_path_directions_link_with_one_place_is_malformed():
    with pytest.raises(MalformedLinkError):
        parse_directions_url("https://www.google.com/maps/dir/Milano/@45.4,9.1,10z")


def test_non_directions_link_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_directions_url("https://www.google.com/maps/place/Colosseo")

    assert not isinstance(excinfo.value, MalformedLinkError)


@pytest.mark.parametrize(
    "url, token",
    [
        ("https://www.google.com/maps/place/Colosseo/@41.8902,12.4922,17z/data=!3m1", "Colosseo"),
        ("https://www.google.com/maps/place/Duomo+di+Milano/", "Duomo di Milano"),
        ("https://www.google.com/maps/search/?api=1&query=Mole+Antonelliana", "Mole Antonelliana"),
        ("https://www.google.com/maps/search/Lago+di+Como", "Lago di Como"),
        ("https://www.google.com/maps/place/@41.8902,12.4922,17z", "41.8902,12.4922"),
        ("https://maps.google.com/maps?q=Bologna", "Bologna"),
    ],
)
def test_parse_place_links(url, token):
    assert parse_place_url(url).place.raw_token == token


def test_place_search_without_query_is_malformed():
    with pytest.raises(MalformedLinkError):
        parse_place_url("https://www.google.com/maps/search/?api=1")


def test_parse_link_dispatches_to_directions_first():
    parsed = parse_link("https://www.google.com/maps/dir/Milano/Torino")

    assert isinstance(parsed, ParsedDirections)


def test_parse_link_falls_back_to_place_parser():
    parsed = parse_link("https://www.google.com/maps/place/Colosseo/@41.8902,12.4922,17z")

    assert isinstance(parsed, ParsedPlace)
    assert parsed.place.raw_token == "Colosseo"


def test_parse_link_stops_on_malformed_directions():
    with pytest.raises(MalformedLinkError) as excinfo:
        parse_link("https://www.google.com/maps/dir/?api=1&destination=Torino")

    assert "origin/destination" in excinfo.value.message


def test_parse_link_rejects_unrelated_urls():
    with pytest.raises(ParseError) as excinfo:
        parse_link("https://example.com/some/page")

    assert excinfo.value.code == "parse_error"


def test_parse_link_rejects_invalid_urls():
    with pytest.raises(ParseError):
        parse_link("Milano to Torino")
