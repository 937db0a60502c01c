"""cmrquery: a small client for NASA's Common Metadata Repository search API.

Quick Start:
    ```python
    from cmrquery import Query

    query = Query("collections", "CMR_UAT").parameters(provider="POCLOUD")
    entries = query.get(500)
    ```
"""

import logging

from .exceptions import CMRDecodeError, CMRError, CMRSearchError, InvalidBaseURL
from .pagination import MAX_PAGE_SIZE, Page, fetch_page, get_results
from .query import VALID_FORMATS, Query
from .system import PROD, SIT, UAT, System
from .validation import ValidationError, ValidationResult

logger = logging.getLogger(__name__)

__all__ = [
    # query.py
    "Query",
    "VALID_FORMATS",
    # pagination.py
    "Page",
    "fetch_page",
    "get_results",
    "MAX_PAGE_SIZE",
    # system.py
    "System",
    "PROD",
    "UAT",
    "SIT",
    # validation.py
    "ValidationError",
    "ValidationResult",
    # exceptions.py
    "CMRError",
    "CMRSearchError",
    "CMRDecodeError",
    "InvalidBaseURL",
]
