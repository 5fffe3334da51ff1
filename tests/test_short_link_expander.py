import httpx

from weatherline.services.links.expander import ShortLinkExpander

FULL_URL = "https://www.google.com/maps/dir/Milano/Torino/@45.2,8.4,9z"


def _expander(handler) -> ShortLinkExpander:
    return ShortLinkExpander(max_redirects=5, timeout=2.0, transport=httpx.MockTransport(handler))


def test_expand_follows_redirect_off_short_host():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(302, headers={"Location": FULL_URL})

    assert _expander(handler).expand("https://maps.app.goo.gl/AbCd123") == FULL_URL
    assert requested == ["https://maps.app.goo.gl/AbCd123"]


def test_expand_follows_chain_with_relative_location():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "goo.gl":
            return httpx.Response(301, headers={"Location": "https://maps.app.goo.gl/step"})
        if request.url.path == "/step":
            return httpx.Response(302, headers={"Location": "/final"})
        return httpx.Response(302, headers={"Location": FULL_URL})

    assert _expander(handler).expand("https://goo.gl/maps/xyz") == FULL_URL


def test_embedded_link_parameter_is_used_without_requests():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    url = "https://maps.app.goo.gl/?link=https%3A%2F%2Fwww.google.com%2Fmaps%2Fplace%2FColosseo"

    assert _expander(handler).expand(url) == "https://www.google.com/maps/place/Colosseo"


def test_doubly_encoded_embedded_link_is_decoded():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    url = "https://maps.app.goo.gl/?link=https%253A%252F%252Fwww.google.com%252Fmaps%252Fplace%252FColosseo"

    assert _expander(handler).expand(url) == "https://www.google.com/maps/place/Colosseo"


def test_expand_returns_none_when_no_redirect_is_exposed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>consent</html>")

    assert _expander(handler).expand("https://maps.app.goo.gl/AbCd123") is None


def test_expand_gives_up_after_max_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": "https://maps.app.goo.gl/loop"})

    assert _expander(handler).expand("https://maps.app.goo.gl/AbCd123") is None


def test_expand_refuses_non_short_hosts():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _expander(handler).expand("https://evil.example.com/maps") is None


def test_network_errors_are_reported_as_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert _expander(handler).expand("https://maps.app.goo.gl/AbCd123") is None
