"""Link expansion and parsing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...errors import ParseError
from ...models.domain import ParsedPlace
from ...schemas.timeline import ExpandResponse, LinkPreviewResponse
from ...services.links.expander import ShortLinkExpander
from ...services.links.parser import is_short_link, parse_link
from ..errors import to_http_exception

router = APIRouter(prefix="/links", tags=["links"])


@router.get("/expand", response_model=ExpandResponse, status_code=status.HTTP_200_OK)
def expand(u: str = Query(default="", description="Short Google Maps link to expand")) -> ExpandResponse:
    url = u.strip()
    if not url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing u param")
    if not is_short_link(url):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Host not allowed")
    expanded = ShortLinkExpander().expand(url)
    if not expanded:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not expand (no redirect exposed)",
        )
    return ExpandResponse(url=expanded)


@router.get("/parse", response_model=LinkPreviewResponse, status_code=status.HTTP_200_OK)
def parse(url: str = Query(..., min_length=1)) -> LinkPreviewResponse:
    """Preview what a link resolves to without geocoding or routing it."""
    try:
        parsed = parse_link(url)
    except ParseError as exc:
        raise to_http_exception(exc) from exc
    if isinstance(parsed, ParsedPlace):
        return LinkPreviewResponse(kind="place", places=[parsed.place.raw_token])
    return LinkPreviewResponse(
        kind="directions",
        places=[place.raw_token for place in parsed.places],
        mode=parsed.mode,
    )
