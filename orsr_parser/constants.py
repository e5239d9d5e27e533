"""
Constants for orsr_parser package.

Centralizes magic numbers, URLs and fixed vocabulary of the register.
"""

API_VERSION = "1.1.0"

# Register endpoints (relative to base URL)
URL_BASE = "http://www.orsr.sk"
DETAIL_PATH = "vypis.asp"
SEARCH_NAME_PATH = "hladaj_subjekt.asp"
SEARCH_ICO_PATH = "hladaj_ico.asp"
SEARCH_PERSON_PATH = "hladaj_osoba.asp"

# Register pages are served in the legacy central-european codepage
SOURCE_ENCODING = "windows-1250"

# Court (SID) identifiers, 0 = any court
COURT_ANY = 0
COURT_IDS = range(0, 10)

# ICO is always 8 digits
ICO_LENGTH = 8

# Entity categories
TYP_OSOBY_PRAVNICKA = "pravnicka"
TYP_OSOBY_FYZICKA = "fyzicka"

# Court types
TYP_SUDU_OKRESNY = "okresny"
TYP_SUDU_MESTSKY = "mestsky"

# Legacy currency: fixed conversion rate SKK -> EUR (1.1.2009)
SKK_PER_EUR = 30.1260
CURRENCY_EUR = "EUR"

# Leading top-level blocks of a detail page holding page furniture
DETAIL_SKIP_BLOCKS = 1

# Search results table position
SEARCH_RESULTS_XPATH = "/html/body/table[3]/tr/td[2]"

# Default country of residence for supervisory board members without one
DEFAULT_COUNTRY = "Slovenská republika"

# Throttling defaults (requests per second, pause after every Nth request)
ORSR_RATE_LIMIT = 2.0
ORSR_REQUEST_DELAY = 0.5
ORSR_DELAY_EVERY = 1
ORSR_REQUEST_TIMEOUT = 10.0

# Cache namespaces and TTL (days)
CACHE_NAMESPACE_DETAIL = "detail"
CACHE_NAMESPACE_SEARCH = "search"
CACHE_TTL_PAGES = 7

# Output formats recognized by the serializer boundary
OUTPUT_FORMATS = ("json", "xml", "raw", "")
