"""
Register web site source.

Builds the detail / search URLs of www.orsr.sk and fetches pages with a
throttled requests.Session, optionally backed by the disk cache. Pages are
returned as raw windows-1250 bytes; decoding is left to the markup loader.
"""

import logging
from urllib.parse import quote_plus

import requests

from orsr_parser.config import Settings, get_settings
from orsr_parser.constants import (
    CACHE_NAMESPACE_DETAIL,
    CACHE_NAMESPACE_SEARCH,
    SEARCH_ICO_PATH,
    SEARCH_NAME_PATH,
    SEARCH_PERSON_PATH,
    SOURCE_ENCODING,
)
from orsr_parser.domain.models import DetailId
from orsr_parser.exceptions import FetchError
from orsr_parser.utils.rate_limiting import RequestThrottle

logger = logging.getLogger(__name__)


def encode_query_value(value: str) -> str:
    """Percent-encode a query value in the register's codepage ("Kováč" -> "Kov%E1%E8")."""
    return quote_plus((value or "").strip(), encoding=SOURCE_ENCODING, errors="replace")


def detail_url(base_url: str, detail_id: DetailId) -> str:
    """e.g. http://www.orsr.sk/vypis.asp?ID=54190&SID=7&P=0"""
    return f"{base_url}/{detail_id.to_link()}"


def search_by_name_url(base_url: str, name: str) -> str:
    """
    Search by company name.

    PF=0 is any legal form, R=on restricts the search to current records.
    """
    return f"{base_url}/{SEARCH_NAME_PATH}?OBMENO={encode_query_value(name)}&PF=0&R=on"


def search_by_ico_url(base_url: str, ico: str) -> str:
    """Search by IČO in any court (SID=0); finds at most one entity."""
    return f"{base_url}/{SEARCH_ICO_PATH}?ICO={ico}&SID=0"


def search_by_person_url(base_url: str, surname: str, name: str = "") -> str:
    """Search by surname and optional first name in current records of any court."""
    return (
        f"{base_url}/{SEARCH_PERSON_PATH}?PR={encode_query_value(surname)}"
        f"&MENO={encode_query_value(name)}&SID=0&T=f0&R=on"
    )


class OrsrFetcher:
    """
    Fetch register pages.

    Args:
        session: requests.Session to use (default: new session with the configured User-Agent)
        settings: Settings instance (default: get_settings())
        cache: AppCache for page caching (default: shared cache when cache_enabled)
        throttle: RequestThrottle (default: built from settings)

    Example:
        fetcher = OrsrFetcher()
        page = fetcher.fetch(detail_url(fetcher.base_url, DetailId(54190, 7)), cache_key="54190-7-0")
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        settings: Settings | None = None,
        cache=None,
        throttle: RequestThrottle | None = None,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.settings.user_agent})
        self.throttle = throttle or RequestThrottle.from_settings(self.settings)

        if cache is None and self.settings.cache_enabled:
            from orsr_parser.cache import get_cache

            cache = get_cache(self.settings.cache_dir)
        self.cache = cache

    @property
    def base_url(self) -> str:
        return self.settings.base_url

    def fetch(self, url: str, cache_key: str | None = None, namespace: str = CACHE_NAMESPACE_DETAIL) -> bytes:
        """
        Fetch a page, reading and writing the cache when a key is given.

        Args:
            url: Absolute page URL
            cache_key: Key of the page in the cache namespace (None = no caching)
            namespace: Cache namespace ("detail" or "search")

        Returns:
            Raw page bytes

        Raises:
            FetchError: On network errors, non-200 responses or an empty body
        """
        if self.cache is not None and cache_key:
            cached = self.cache.get(namespace, cache_key)
            if cached:
                logger.debug(f"Cache hit {namespace}:{cache_key}")
                return cached

        self.throttle()
        try:
            response = self.session.get(url, timeout=self.settings.request_timeout)
        except requests.RequestException as e:
            raise FetchError(f"Failed loading data: {e}", url=url) from e

        if response.status_code != 200:
            raise FetchError(
                f"Failed loading data: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        if not response.content:
            raise FetchError("Failed loading data: empty response", url=url, status_code=response.status_code)

        logger.debug(f"Fetched {url} ({len(response.content):,} bytes)")
        if self.cache is not None and cache_key:
            self.cache.set(namespace, cache_key, response.content, ttl_days=self.settings.cache_ttl_days)
        return response.content

    def fetch_detail(self, detail_id: DetailId) -> bytes:
        """Fetch the detail page of an entity."""
        return self.fetch(detail_url(self.base_url, detail_id), cache_key=detail_id.cache_key)

    def fetch_search_by_name(self, name: str) -> bytes:
        return self.fetch(
            search_by_name_url(self.base_url, name),
            cache_key=f"name-{name.strip().lower()}",
            namespace=CACHE_NAMESPACE_SEARCH,
        )

    def fetch_search_by_ico(self, ico: str) -> bytes:
        return self.fetch(
            search_by_ico_url(self.base_url, ico),
            cache_key=f"ico-{ico}",
            namespace=CACHE_NAMESPACE_SEARCH,
        )

    def fetch_search_by_person(self, surname: str, name: str = "") -> bytes:
        return self.fetch(
            search_by_person_url(self.base_url, surname, name),
            cache_key=f"person-{surname.strip().lower()}-{name.strip().lower()}",
            namespace=CACHE_NAMESPACE_SEARCH,
        )

    def close(self) -> None:
        self.session.close()

