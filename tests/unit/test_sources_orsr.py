"""
Unit tests for orsr_parser.sources.orsr module.

HTTP calls are mocked with a MagicMock session.
"""

from unittest.mock import MagicMock

import pytest
import requests

from orsr_parser.domain.models import DetailId
from orsr_parser.exceptions import FetchError
from orsr_parser.sources.orsr import (
    OrsrFetcher,
    detail_url,
    encode_query_value,
    search_by_ico_url,
    search_by_name_url,
    search_by_person_url,
)

BASE = "http://www.orsr.sk"


def _response(status_code=200, content=b"<html></html>"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    return response


@pytest.fixture
def session():
    mock_session = MagicMock()
    mock_session.headers = {}
    mock_session.get.return_value = _response()
    return mock_session


@pytest.fixture
def throttle():
    return MagicMock()


class TestUrls:
    """Tests for URL builders."""

    def test_encode_query_value_uses_legacy_codepage(self):
        assert encode_query_value("Kováč") == "Kov%E1%E8"
        assert encode_query_value(" Matador s.r.o. ") == "Matador+s.r.o."
        assert encode_query_value(None) == ""

    def test_detail_url(self):
        assert detail_url(BASE, DetailId(54190, 7)) == "http://www.orsr.sk/vypis.asp?ID=54190&SID=7&P=0"

    def test_search_urls(self):
        assert search_by_name_url(BASE, "Matador") == "http://www.orsr.sk/hladaj_subjekt.asp?OBMENO=Matador&PF=0&R=on"
        assert search_by_ico_url(BASE, "36294268") == "http://www.orsr.sk/hladaj_ico.asp?ICO=36294268&SID=0"
        assert search_by_person_url(BASE, "Kováč", "Ján") == (
            "http://www.orsr.sk/hladaj_osoba.asp?PR=Kov%E1%E8&MENO=J%E1n&SID=0&T=f0&R=on"
        )


class TestOrsrFetcher:
    """Tests for OrsrFetcher."""

    def test_user_agent_set(self, session, settings, throttle):
        OrsrFetcher(session=session, settings=settings, throttle=throttle)
        assert session.headers["User-Agent"] == settings.user_agent

    def test_fetch_returns_bytes(self, session, settings, throttle):
        session.get.return_value = _response(content=b"page")
        fetcher = OrsrFetcher(session=session, settings=settings, throttle=throttle)

        assert fetcher.fetch("http://www.orsr.sk/vypis.asp?ID=1&SID=0&P=0") == b"page"
        session.get.assert_called_once_with(
            "http://www.orsr.sk/vypis.asp?ID=1&SID=0&P=0", timeout=settings.request_timeout
        )
        throttle.assert_called_once()

    def test_http_error(self, session, settings, throttle):
        session.get.return_value = _response(status_code=503)
        fetcher = OrsrFetcher(session=session, settings=settings, throttle=throttle)

        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("http://www.orsr.sk/x")
        assert exc_info.value.status_code == 503
        assert exc_info.value.url == "http://www.orsr.sk/x"

    def test_empty_body(self, session, settings, throttle):
        session.get.return_value = _response(content=b"")
        fetcher = OrsrFetcher(session=session, settings=settings, throttle=throttle)

        with pytest.raises(FetchError, match="empty response"):
            fetcher.fetch("http://www.orsr.sk/x")

    def test_network_error(self, session, settings, throttle):
        session.get.side_effect = requests.ConnectionError("refused")
        fetcher = OrsrFetcher(session=session, settings=settings, throttle=throttle)

        with pytest.raises(FetchError, match="refused"):
            fetcher.fetch("http://www.orsr.sk/x")

    def test_fetch_detail(self, session, settings, throttle):
        fetcher = OrsrFetcher(session=session, settings=settings, throttle=throttle)
        fetcher.fetch_detail(DetailId(54190, 7, full=True))
        assert session.get.call_args.args[0] == f"{settings.base_url}/vypis.asp?ID=54190&SID=7&P=1"

    def test_cache_hit_skips_request(self, session, settings, throttle):
        cache = MagicMock()
        cache.get.return_value = b"cached page"
        fetcher = OrsrFetcher(session=session, settings=settings, cache=cache, throttle=throttle)

        assert fetcher.fetch_detail(DetailId(54190, 7)) == b"cached page"
        cache.get.assert_called_once_with("detail", "54190-7-0")
        session.get.assert_not_called()
        throttle.assert_not_called()

    def test_cache_miss_stores_page(self, session, settings, throttle):
        cache = MagicMock()
        cache.get.return_value = None
        session.get.return_value = _response(content=b"fresh page")
        fetcher = OrsrFetcher(session=session, settings=settings, cache=cache, throttle=throttle)

        fetcher.fetch_search_by_ico("36294268")
        cache.set.assert_called_once_with(
            "search", "ico-36294268", b"fresh page", ttl_days=settings.cache_ttl_days
        )

    def test_search_cache_keys(self, session, settings, throttle):
        cache = MagicMock()
        cache.get.return_value = None
        fetcher = OrsrFetcher(session=session, settings=settings, cache=cache, throttle=throttle)

        fetcher.fetch_search_by_name(" Matador ")
        fetcher.fetch_search_by_person("Kováč", "Ján")
        keys = [call.args[1] for call in cache.get.call_args_list]
        assert keys == ["name-matador", "person-kováč-ján"]

    def test_no_cache_when_disabled(self, session, settings, throttle):
        fetcher = OrsrFetcher(session=session, settings=settings, throttle=throttle)
        assert fetcher.cache is None

    def test_close(self, session, settings, throttle):
        OrsrFetcher(session=session, settings=settings, throttle=throttle).close()
        session.close.assert_called_once()
