"""
ORSR Parser - structured records from the Slovak commercial register.

This package provides utilities for:
- Loading and repairing register HTML pages (windows-1250)
- Extracting entity details (name, address, officers, capital, dates)
- Extracting search result listings
- Fetching pages with throttling and an optional disk cache
- Rendering records as JSON, XML or a raw dump
"""

import logging

# Set up NullHandler to prevent "No handler found" warnings
# when used as a library. Applications should configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

from orsr_parser.constants import (
    API_VERSION,
    SKK_PER_EUR,
    TYP_OSOBY_FYZICKA,
    TYP_OSOBY_PRAVNICKA,
    TYP_SUDU_MESTSKY,
    TYP_SUDU_OKRESNY,
)
from orsr_parser.exceptions import (
    FetchError,
    InvalidIdentifierError,
    MarkupError,
    OrsrError,
    OutputFormatError,
)
from orsr_parser.parsing.detail import extract_detail
from orsr_parser.parsing.search import extract_search_results

__version__ = API_VERSION

__all__ = [
    "__version__",
    # Entry points
    "extract_detail",
    "extract_search_results",
    # Constants
    "API_VERSION",
    "SKK_PER_EUR",
    "TYP_OSOBY_FYZICKA",
    "TYP_OSOBY_PRAVNICKA",
    "TYP_SUDU_MESTSKY",
    "TYP_SUDU_OKRESNY",
    # Errors
    "OrsrError",
    "MarkupError",
    "FetchError",
    "InvalidIdentifierError",
    "OutputFormatError",
]
