"""URL metadata fetch — title and reference number for a ticket URL.

Best-effort: any failure returns whatever can be derived from the URL alone
(the ``?id=`` query parameter), else empty values. Never raises.

Fetch safeguards:
- Allowed URL schemes: https:// and http:// only.
- Hostname resolved and checked against private/loopback/link-local ranges
  before any connection is made, and again for every redirect target.
- Content-Type whitelist: text/html and text/plain only.
- Max response body: 2 MB. Timeout: 15 seconds. Max redirects: 3.
"""

from __future__ import annotations

import http.client
import ipaddress
import re
import socket
import urllib.error
import urllib.parse
import urllib.request
from typing import Callable

import html2text
import structlog
from bs4 import BeautifulSoup

from faqdesk.core.errors import ExternalServiceError
from faqdesk.core.models import UrlMetadata

logger = structlog.get_logger(__name__)

_USER_AGENT = "faqdesk/0.1"
_MAX_BYTES = 2 * 1024 * 1024  # 2 MB
_TIMEOUT = 15  # seconds
_MAX_REDIRECTS = 3
_ALLOWED_SCHEMES = {"https", "http"}
_ALLOWED_CONTENT_TYPES = {"text/html", "text/plain"}

_PF_PREFIX_RE = re.compile(r"^PF\s*(\d+)\s*-\s*", re.IGNORECASE)
_PF_ANYWHERE_RE = re.compile(r"PF\s*(\d+)", re.IGNORECASE)
_VENDOR_SUFFIX_RE = re.compile(r"\s*-\s*Secullum.*$", re.IGNORECASE)

# html2text converter
_h2t = html2text.HTML2Text()
_h2t.ignore_links = True
_h2t.ignore_images = True
_h2t.body_width = 0

Fetcher = Callable[[str], tuple[bytes, str]]


class SsrfError(ExternalServiceError):
    """Raised when a URL resolves to a private or reserved address."""


def fetch_metadata(url: str, fetcher: Fetcher | None = None) -> UrlMetadata:
    """Return (title, reference number, page text) for *url*, best-effort.

    Args:
        url: External ticket URL.
        fetcher: Override for the HTTP fetch (tests); returns (body, content_type).
    """
    reference_from_url = _reference_from_query(url)
    fetch = fetcher or _fetch
    try:
        _validate_scheme(url)
        if fetcher is None:
            _check_ssrf(url)
        body, content_type = fetch(url)
    except (ExternalServiceError, ValueError, OSError, http.client.HTTPException) as exc:
        logger.warning("metadata_fetch_failed", url=url, error=str(exc))
        return UrlMetadata(reference_number=reference_from_url)

    raw_title, text = _parse(body, content_type)
    title, reference_from_title = clean_title(raw_title)
    return UrlMetadata(
        title=title,
        reference_number=reference_from_url or reference_from_title,
        text=text,
    )


def clean_title(raw_title: str) -> tuple[str, str]:
    """Strip the ``PF 123 -`` prefix and vendor suffix; return (title, reference)."""
    raw_title = " ".join(raw_title.split())
    match = _PF_ANYWHERE_RE.search(raw_title)
    reference = match.group(1) if match else ""
    title = _PF_PREFIX_RE.sub("", raw_title)
    title = _VENDOR_SUFFIX_RE.sub("", title).strip()
    return title, reference


# ------------------------------------------------------------------
# Fetch pipeline
# ------------------------------------------------------------------


def _reference_from_query(url: str) -> str:
    try:
        query = urllib.parse.parse_qs(urllib.parse.urlparse(url).query)
    except ValueError:
        return ""
    values = query.get("id") or [""]
    return values[0].strip()


def _validate_scheme(url: str) -> None:
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise ValueError(
            f"Unsupported URL scheme '{parsed.scheme}'. Only https:// and http:// are allowed."
        )


def _check_ssrf(url: str) -> None:
    """Resolve the hostname and block private/reserved IP ranges."""
    hostname = urllib.parse.urlparse(url).hostname
    if not hostname:
        raise ValueError(f"URL has no hostname: {url}")

    try:
        addrinfos = socket.getaddrinfo(hostname, None)
    except socket.gaierror as exc:
        raise ValueError(f"DNS resolution failed for '{hostname}': {exc}") from exc

    for addrinfo in addrinfos:
        try:
            ip = ipaddress.ip_address(addrinfo[4][0])
        except ValueError:
            continue
        if (
            ip.is_private
            or ip.is_loopback
            or ip.is_link_local
            or ip.is_reserved
            or ip.is_multicast
            or ip.is_unspecified
        ):
            raise SsrfError(
                f"URL resolves to private address ({ip}). "
                "Access to internal network addresses is not allowed."
            )


def _fetch(url: str) -> tuple[bytes, str]:
    """Fetch *url* with timeout, redirect limit, size cap, and Content-Type check."""
    request = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    opener = urllib.request.build_opener(_LimitedRedirectHandler(_MAX_REDIRECTS))

    try:
        response = opener.open(request, timeout=_TIMEOUT)
    except urllib.error.URLError as exc:
        raise ExternalServiceError(f"Failed to fetch URL '{url}': {exc}") from exc

    with response:
        ct = response.headers.get("Content-Type", "text/html").split(";")[0].strip().lower()
        if ct not in _ALLOWED_CONTENT_TYPES:
            raise ExternalServiceError(f"Unsupported Content-Type '{ct}' for URL '{url}'.")
        body = response.read(_MAX_BYTES + 1)

    if len(body) > _MAX_BYTES:
        raise ExternalServiceError(
            f"Response body exceeds {_MAX_BYTES // (1024 * 1024)} MB limit for URL '{url}'."
        )
    return body, ct


def _parse(body: bytes, content_type: str) -> tuple[str, str]:
    """Return (raw page title, plain-text body)."""
    text = body.decode("utf-8", errors="replace")
    if content_type == "text/plain":
        first_line = text.strip().split("\n", 1)[0]
        return first_line, text.strip()

    soup = BeautifulSoup(text, "html.parser")
    title = ""
    if soup.title and soup.title.string:
        title = soup.title.string
    else:
        heading = soup.find("h1")
        if heading:
            title = heading.get_text(" ", strip=True)
    for tag in soup.find_all(["script", "style", "nav", "footer", "head"]):
        tag.decompose()
    return title, _h2t.handle(str(soup)).strip()


class _LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Cap redirects at *max_redirects* and re-check every target address."""

    def __init__(self, max_redirects: int) -> None:
        self._max_redirects = max_redirects
        self._count = 0

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        self._count += 1
        if self._count > self._max_redirects:
            raise ExternalServiceError(
                f"Too many redirects (>{self._max_redirects}) for URL '{req.full_url}'."
            )
        _validate_scheme(newurl)
        _check_ssrf(newurl)
        return super().redirect_request(req, fp, code, msg, headers, newurl)
