"""Tests for URL metadata fetch."""

from __future__ import annotations

import http.client
import socket

import pytest

from faqdesk.core.errors import ExternalServiceError
from faqdesk.services import metadata
from faqdesk.services.metadata import SsrfError, clean_title, fetch_metadata

_PAGE = b"""
<html><head><title>PF 685 - Erro ao comunicar com Henry - Secullum Suporte</title>
<script>var x = 1;</script></head>
<body><nav>menu</nav><h1>Heading</h1><p>Verifique o cabeamento.</p></body></html>
"""


def _fetcher(body: bytes = _PAGE, content_type: str = "text/html"):
    def fetch(url: str):
        return body, content_type
    return fetch


def _failing_fetcher(url: str):
    raise ExternalServiceError("boom")


# ------------------------------------------------------------------
# clean_title
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("PF 685 - Erro Henry - Secullum", ("Erro Henry", "685")),
        ("pf123-Instalação", ("Instalação", "123")),
        ("Erro Henry - Secullum Tecnologia", ("Erro Henry", "")),
        ("  Só   título  ", ("Só título", "")),
        ("", ("", "")),
    ],
)
def test_clean_title(raw, expected):
    assert clean_title(raw) == expected


# ------------------------------------------------------------------
# fetch_metadata
# ------------------------------------------------------------------


def test_title_text_and_query_reference():
    meta = fetch_metadata("https://example.com/pf?id=700", fetcher=_fetcher())
    assert meta.title == "Erro ao comunicar com Henry"
    assert meta.reference_number == "700"
    assert "Verifique o cabeamento." in meta.text
    assert "var x" not in meta.text
    assert "menu" not in meta.text


def test_reference_from_title_when_no_query():
    meta = fetch_metadata("https://example.com/pf/685", fetcher=_fetcher())
    assert meta.reference_number == "685"


def test_h1_used_when_no_title():
    body = b"<html><body><h1>PF 9 - Cabo</h1></body></html>"
    meta = fetch_metadata("https://example.com/x", fetcher=_fetcher(body))
    assert meta.title == "Cabo"
    assert meta.reference_number == "9"


def test_plain_text_first_line_is_title():
    meta = fetch_metadata(
        "https://example.com/x", fetcher=_fetcher(b"PF 3 - Linha\nresto", "text/plain")
    )
    assert meta.title == "Linha"
    assert meta.text == "PF 3 - Linha\nresto"


def test_failure_keeps_reference_from_url():
    meta = fetch_metadata("https://example.com/pf?id=685", fetcher=_failing_fetcher)
    assert meta.title == ""
    assert meta.reference_number == "685"
    assert meta.text == ""


def test_truncated_response_keeps_reference_from_url():
    def fetch(url: str):
        raise http.client.IncompleteRead(b"partial")

    meta = fetch_metadata("https://example.com/pf?id=685", fetcher=fetch)
    assert (meta.title, meta.reference_number, meta.text) == ("", "685", "")


def test_bad_scheme_returns_empty():
    meta = fetch_metadata("ftp://example.com/file", fetcher=_fetcher())
    assert (meta.title, meta.reference_number) == ("", "")


def test_private_address_is_blocked(monkeypatch):
    monkeypatch.setattr(
        socket, "getaddrinfo", lambda host, port: [(None, None, None, "", ("10.0.0.5", 0))]
    )
    with pytest.raises(SsrfError):
        metadata._check_ssrf("http://intranet.local/pf?id=1")

    called = []
    monkeypatch.setattr(metadata, "_fetch", lambda url: called.append(url))
    meta = fetch_metadata("http://intranet.local/pf?id=1")
    assert meta.reference_number == "1"
    assert called == []


def test_redirect_to_private_address_is_blocked(monkeypatch):
    monkeypatch.setattr(
        socket, "getaddrinfo", lambda host, port: [(None, None, None, "", ("127.0.0.1", 0))]
    )
    handler = metadata._LimitedRedirectHandler(3)
    with pytest.raises(SsrfError):
        handler.redirect_request(None, None, 302, "Found", {}, "http://localhost/admin")


def test_redirect_limit():
    handler = metadata._LimitedRedirectHandler(0)

    class _Req:
        full_url = "https://example.com/pf?id=1"

    with pytest.raises(ExternalServiceError, match="Too many redirects"):
        handler.redirect_request(_Req(), None, 302, "Found", {}, "https://example.com/x")
