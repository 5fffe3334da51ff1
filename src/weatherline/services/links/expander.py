"""Resolve Google Maps short links to their canonical URL."""

from __future__ import annotations

import logging
from typing import Iterable, Optional
from urllib.parse import parse_qs, unquote, urljoin, urlsplit

import httpx

from ...config import settings
from .parser import is_short_link

logger = logging.getLogger(__name__)


class ShortLinkExpander:
    """Follows ``maps.app.goo.gl`` redirects by hand until they leave the short hosts.

    :meth:`expand` never raises: any failure is logged and reported as ``None``
    so the caller can ask the user for the full link instead.
    """

    def __init__(
        self,
        hosts: Iterable[str] | None = None,
        max_redirects: int | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.hosts = tuple(hosts if hosts is not None else settings.short_link_hosts)
        self.max_redirects = max_redirects or settings.max_redirects
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=False,
            headers={"User-Agent": settings.user_agent},
            transport=self._transport,
        )

    def _is_short_host(self, url: str) -> bool:
        return (urlsplit(url).hostname or "").lower() in self.hosts

    def expand(self, short_url: str) -> Optional[str]:
        url = short_url.strip()
        if not is_short_link(url, self.hosts):
            logger.warning(f"Refusing to expand non-short link: {url}")
            return None

        embedded = parse_qs(urlsplit(url).query).get("link")
        if embedded and embedded[0]:
            return unquote(embedded[0])

        client = self._get_client()
        current = url
        try:
            for _ in range(self.max_redirects):
                response = client.get(current)
                location = response.headers.get("location")
                if location:
                    current = urljoin(current, location)
                    if not self._is_short_host(current):
                        logger.info(f"Expanded short link {url} -> {current}")
                        return current
                    continue
                final_url = str(response.url)
                if final_url and not self._is_short_host(final_url):
                    return final_url
                break
        except httpx.HTTPError as exc:
            logger.warning(f"Short link expansion failed for {url}: {exc}")
            return None
        finally:
            client.close()

        logger.warning(f"Could not expand {url}: no redirect exposed")
        return None
