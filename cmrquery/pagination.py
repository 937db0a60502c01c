"""Paging through CMR search results.

CMR returns at most `MAX_PAGE_SIZE` records per request. Longer result sets
are walked with the search-after cursor: every response carries a
``cmr-search-after`` header whose value, sent back on the next request,
resumes the search where the previous page ended.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import requests

from .exceptions import CMRDecodeError, CMRSearchError

if TYPE_CHECKING:
    from .query import Query

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 2000
SEARCH_AFTER_HEADER = "cmr-search-after"
HITS_HEADER = "CMR-Hits"


@dataclass(frozen=True)
class Page:
    """One page of a CMR response.

    Attributes:
        entries: Records of the page, in response order.
        search_after: Cursor to send with the next request, if CMR sent one.
    """

    entries: List[Any] = field(default_factory=list)
    search_after: Optional[str] = None

    @classmethod
    def from_response(cls, response: requests.Response, output_format: str) -> "Page":
        """Build a page from a successful response.

        JSON bodies are unwrapped to their ``feed.entry`` array; any other
        format is kept as a single raw text entry. A feed or entry of the
        wrong shape counts as an empty page.

        Raises:
            CMRDecodeError: If a JSON body cannot be decoded.
        """
        if output_format == "json":
            try:
                payload = response.json()
            except ValueError as ex:
                raise CMRDecodeError(
                    f"Invalid JSON in response from {response.url}"
                ) from ex
            feed = payload.get("feed") if isinstance(payload, dict) else None
            entry = feed.get("entry") if isinstance(feed, dict) else None
            entries = list(entry) if isinstance(entry, list) else []
        else:
            entries = [response.text]

        return cls(
            entries=entries,
            search_after=response.headers.get(SEARCH_AFTER_HEADER),
        )


def _request_headers(query: "Query", search_after: Optional[str]) -> Dict[str, str]:
    headers = {
        key: value
        for key, value in query.headers.items()
        if key.lower() != SEARCH_AFTER_HEADER
    }
    if search_after:
        headers[SEARCH_AFTER_HEADER] = search_after
    return headers


def _send(
    session: requests.Session,
    query: "Query",
    page_size: int,
    search_after: Optional[str] = None,
) -> requests.Response:
    url = query.build_url()
    logger.debug("GET %s page_size=%s search_after=%s", url, page_size, search_after)
    response = session.get(
        url,
        headers=_request_headers(query, search_after),
        params={"page_size": page_size},
    )

    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as ex:
        logger.error("CMR search failed with status %s: %s", response.status_code, url)
        raise CMRSearchError(
            ex.response.text, status_code=ex.response.status_code, body=ex.response.text
        ) from ex
    return response


def fetch_page(
    session: requests.Session,
    query: "Query",
    page_size: int,
    search_after: Optional[str] = None,
) -> Page:
    """Fetch a single page of results.

    Parameters:
        session: HTTP session for making requests
        query: The query whose URL, headers and format are used
        page_size: Number of records to request
        search_after: Cursor returned with the previous page, if any

    Returns:
        The parsed page
    """
    response = _send(session, query, page_size, search_after)
    page = Page.from_response(response, query.output_format)
    logger.debug("Received %s entries", len(page.entries))
    return page


def get_results(session: requests.Session, query: "Query", limit: int = 2000) -> List[Any]:
    """Fetch up to `limit` results, following the search-after cursor.

    Every page asks for the remaining count, capped at `MAX_PAGE_SIZE` and
    at the previous page's size. Paging stops once `limit` entries are
    collected, a page comes back shorter than requested, or a full page
    carries no cursor.

    Parameters:
        session: HTTP session for making requests
        query: The query to run
        limit: Maximum number of results to return

    Returns:
        List of result entries

    Raises:
        CMRSearchError: If CMR answers with a non-success status
        CMRDecodeError: If a JSON response cannot be decoded
    """
    results: List[Any] = []
    if limit <= 0:
        return results

    page_size = min(limit, MAX_PAGE_SIZE)
    search_after: Optional[str] = None

    try:
        while True:
            page_size = min(limit - len(results), page_size)
            page = fetch_page(session, query, page_size, search_after)
            results.extend(page.entries[: limit - len(results)])

            if len(page.entries) < page_size or len(results) >= limit:
                break

            # Without a cursor the next request would start over at page one.
            if not page.search_after:
                logger.warning(
                    "Full page from %s without a %s header, stopping at %s results",
                    query.route,
                    SEARCH_AFTER_HEADER,
                    len(results),
                )
                break
            search_after = page.search_after
    finally:
        # A cursor left behind would make a reused query resume mid-search.
        for key in [k for k in query.headers if k.lower() == SEARCH_AFTER_HEADER]:
            del query.headers[key]

    logger.info("Fetched %s results from %s", len(results), query.route)
    return results


def get_hits(session: requests.Session, query: "Query") -> int:
    """Return the number of records matching `query`, without fetching any.

    Raises:
        CMRDecodeError: If the hit count header is not a number
    """
    response = _send(session, query, 0)
    hits = response.headers.get(HITS_HEADER, "0")
    try:
        return int(hits)
    except ValueError as ex:
        raise CMRDecodeError(f"Invalid {HITS_HEADER} header: {hits!r}") from ex
