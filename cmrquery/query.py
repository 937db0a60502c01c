"""The Query object: search parameters for one CMR route and the URL they form."""

import json
import logging
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence, Union
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

import requests
from typing_extensions import Self

from .exceptions import InvalidBaseURL
from .pagination import get_hits, get_results
from .system import PROD, SystemLike, resolve_system
from .validation import ValidationResult, validate_choice, validate_prefix

logger = logging.getLogger(__name__)

VALID_FORMATS = (
    "json",
    "xml",
    "echo10",
    "iso",
    "iso19115",
    "csv",
    "atom",
    "kml",
    "native",
)

# Parameters the paginator sends on every request.
RESERVED_PARAMS = ("page_size",)

# First letter of the concept ids each route serves.
CONCEPT_ID_PREFIXES: Dict[str, List[str]] = {
    "collections": ["C"],
    "granules": ["G"],
    "services": ["S"],
    "tools": ["T"],
    "variables": ["V"],
}


def _render_value(value: Any) -> str:
    """Render a JSON-typed parameter value as a single query string value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(_render_value(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class Query:
    """Parameters of a search against one CMR route.

    A query is built once per logical search, configured with parameters,
    options and headers, and then fetched with `get`. All configuration
    methods return `self` so they can be chained:

        >>> query = Query("collections", "CMR_UAT").parameters(provider="POCLOUD")
        >>> entries = query.get(100)  # doctest: +SKIP

    Parameters:
        route: The searched resource, e.g. ``"collections"`` or ``"granules"``.
        system: A `System` or one of the mode strings ``"CMR_OPS"``,
            ``"CMR_UAT"``, ``"CMR_SIT"``. Anything else selects production.
        format: Response format, one of `VALID_FORMATS`.
        session: HTTP session used for every request. A new one is created
            when omitted and closed by `close` or on leaving a `with` block;
            a session passed in is left open for its owner.
        headers: Request headers sent with every page request.
    """

    def __init__(
        self,
        route: str,
        system: SystemLike = PROD,
        *,
        format: str = "json",
        session: Optional[requests.Session] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.system = resolve_system(system)
        self.base_url = self.system.cmr_base_url
        self.route = route
        self._format = format
        self.params: Dict[str, Any] = {}
        self.options: Dict[str, Dict[str, Any]] = {}
        self.headers: MutableMapping[str, str] = dict(headers or {})
        self.concept_id_chars: List[str] = list(
            CONCEPT_ID_PREFIXES.get(route.split(".")[0], [])
        )
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    @property
    def output_format(self) -> str:
        """The response format requests are parsed as."""
        return self._format

    def format(self, output_format: str = "json") -> Self:
        """Set the response format.

        Only ``"json"`` responses are decoded; every other format is returned
        as the raw response text.

        Raises:
            ValueError: If the format is not one of `VALID_FORMATS`.
        """
        validate_choice(output_format, VALID_FORMATS, "format").raise_if_invalid()
        self._format = output_format
        return self

    def set_param(self, key: str, value: Any) -> Self:
        """Set one query parameter, replacing any previous value.

        Raises:
            ValueError: For `RESERVED_PARAMS`, which paging sets itself.
        """
        if key in RESERVED_PARAMS:
            raise ValueError(f"{key} is set per page and cannot be a query parameter")
        self.params[key] = value
        return self

    def parameters(self, **kwargs: Any) -> Self:
        """Set several query parameters at once.

        Example:
            >>> Query("granules").parameters(short_name="ATL03", version="006")
            Query(route='granules', short_name='ATL03', version='006')
        """
        for key, value in kwargs.items():
            self.set_param(key, value)
        return self

    def option(self, parameter: str, option: str, value: Any = True) -> Self:
        """Set a CMR option for a parameter, e.g. ``option("short_name", "pattern")``.

        Options are sent as ``options[parameter][option]=value``.
        """
        self.options.setdefault(parameter, {})[option] = value
        return self

    def concept_id(self, ids: Union[str, Sequence[str]]) -> Self:
        """Restrict the search to one or more concept ids.

        Raises:
            ValueError: If an id does not belong to this query's route.
        """
        if isinstance(ids, str):
            ids = [ids]
        validate_prefix(ids, self.concept_id_chars, "concept_id").raise_if_invalid()
        self.params["concept_id"] = list(ids)
        return self

    def __getitem__(self, key: str) -> Any:
        return self.params[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set_param(key, value)

    def validate(self) -> ValidationResult:
        """Check the format and any concept ids set directly through `params`."""
        result = ValidationResult()
        validate_choice(self._format, VALID_FORMATS, "format", result)

        concept_ids = self.params.get("concept_id")
        if concept_ids is not None:
            if isinstance(concept_ids, str):
                concept_ids = [concept_ids]
            validate_prefix(concept_ids, self.concept_id_chars, "concept_id", result)

        for key in RESERVED_PARAMS:
            if key in self.params:
                result.add_error(key, "is set per page and cannot be a query parameter")

        if not self.route:
            result.add_error("route", "must not be empty", self.route)
        return result

    def _query_pairs(self) -> List[tuple]:
        pairs = [(key, _render_value(value)) for key, value in self.params.items()]
        for parameter, options in self.options.items():
            for option, value in options.items():
                pairs.append((f"options[{parameter}][{option}]", _render_value(value)))
        return pairs

    def build_url(self) -> str:
        """Build the request URL: base URL, then the route, then the parameters.

        Returns:
            The fully qualified URL, without the page size.

        Raises:
            InvalidBaseURL: If the base URL is not an absolute http(s) URL or
                the route is empty.
        """
        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidBaseURL(f"Cannot append a route to base URL {self.base_url!r}")
        if not self.route:
            raise InvalidBaseURL("Route must not be empty")

        path = parts.path if parts.path.endswith("/") else parts.path + "/"
        path += quote(self.route, safe="")

        query = urlencode(self._query_pairs())
        if parts.query:
            query = f"{parts.query}&{query}" if query else parts.query
        return urlunsplit((parts.scheme, parts.netloc, path, query, ""))

    def get(self, limit: int = 2000) -> List[Any]:
        """Fetch up to `limit` entries, paging through CMR as needed.

        Parameters:
            limit: Maximum number of entries to return.

        Returns:
            The entries of the JSON ``feed.entry`` arrays, or one raw text
            value per page for other formats.

        Raises:
            ValueError: If the query does not validate.
            InvalidBaseURL: If the base URL is malformed.
            CMRSearchError: If CMR answers with a non-success status.
            CMRDecodeError: If a JSON response cannot be decoded.
            requests.RequestException: On connection failures.
        """
        self.validate().raise_if_invalid()
        logger.debug("Fetching up to %s %s from %s", limit, self.route, self.system)
        return get_results(self.session, self, limit)

    def hits(self) -> int:
        """Return the number of records CMR holds for this query."""
        self.validate().raise_if_invalid()
        return get_hits(self.session, self)

    def close(self) -> None:
        """Close the HTTP session if this query created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        params_str = "".join(f", {k}={v!r}" for k, v in self.params.items())
        return f"{self.__class__.__name__}(route={self.route!r}{params_str})"
