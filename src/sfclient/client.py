from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, TypeVar
from urllib.parse import quote

from .auth import AuthenticationFlow
from .config import DEFAULT_API_VERSION
from .exceptions import (
    InvalidArgumentError,
    JsonShapeError,
    NotAuthenticatedError,
    SalesforceApiError,
)
from .records import QueryResult, RecordCodec, record_projection
from .transport import RequestsTransport, RestRequest, RestResponse

_logger = logging.getLogger(__name__)

T = TypeVar("T")

HTTP_NO_CONTENT = 204


def _require(name: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value):
        raise InvalidArgumentError(name)


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SalesforceClient:
    """The central point to communicate with the Salesforce REST API.

    Every operation except :meth:`authenticate` requires an authenticated
    session and raises :class:`NotAuthenticatedError` otherwise, before any
    network call is made.
    """

    def __init__(self, transport=None, codec: Optional[RecordCodec] = None) -> None:
        self.transport = transport or RequestsTransport()
        self.codec = codec or RecordCodec()
        self.api_version: str = DEFAULT_API_VERSION
        self._access_token: Optional[str] = None
        self._instance_url: Optional[str] = None
        self._is_authenticated = False

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    @property
    def instance_url(self) -> Optional[str]:
        return self._instance_url

    # --------------------------- Public methods -----------------------

    def authenticate(self, flow: AuthenticationFlow) -> None:
        """Authenticate with the given flow; its errors propagate unchanged."""
        info = flow.authenticate()
        self._access_token, self._instance_url, self._is_authenticated = (
            info.access_token,
            info.instance_url,
            True,
        )
        _logger.info("Authenticated against %s (api %s)", self._instance_url, self.api_version)

    def query(self, soql: str, record_type: Type[T] = dict) -> List[T]:  # type: ignore[assignment]
        """Run a SOQL query and return its records decoded as ``record_type``."""
        _require("soql", soql)
        return self._query_page(self._query_url(soql), record_type).records

    def query_all(self, soql: str, record_type: Type[T] = dict) -> Iterator[T]:  # type: ignore[assignment]
        """Return an iterator over records across pages via nextRecordsUrl.

        The first page is fetched before this returns; later pages are fetched
        as the iterator reaches them.
        """
        _require("soql", soql)
        page = self._query_page(self._query_url(soql), record_type)
        return self._iter_pages(page, record_type)

    def _iter_pages(self, page: QueryResult[T], record_type: Type[T]) -> Iterator[T]:
        yield from page.records
        while not page.done and page.next_records_url:
            page = self._query_page(f"{self._instance_url}{page.next_records_url}", record_type)
            yield from page.records

    def find_by_id(
        self,
        object_name: str,
        record_id: str,
        record_type: Type[T] = dict,  # type: ignore[assignment]
        fields: Optional[Sequence[str]] = None,
    ) -> Optional[T]:
        """Return the record with ``record_id``, or None when there is none.

        The SELECT list is ``fields`` when given, otherwise the declared fields of
        ``record_type`` in declaration order. ``record_id`` is placed in the query
        as-is.
        """
        _require("object_name", object_name)
        _require("record_id", record_id)

        projection = record_projection(record_type, fields)
        records = self.query(
            f"SELECT {projection} FROM {object_name} WHERE Id = '{record_id}'",
            record_type,
        )
        return records[0] if records else None

    def create(self, object_name: str, record: Any) -> str:
        """Create a record and return its new Id."""
        _require("object_name", object_name)
        _require("record", record)

        response = self._request(self._get_url("sobjects"), object_name, record, "POST")
        new_id = self.codec.deserialize_untyped(response.content)["id"].as_str()
        _logger.debug("Created %s %s", object_name, new_id)
        return new_id

    def update(self, object_name: str, record_id: str, record: Any) -> bool:
        """Update a record. True when the API answers 204 No Content."""
        _require("object_name", object_name)
        _require("record_id", record_id)
        _require("record", record)

        response = self._request(
            self._get_url("sobjects"), f"{object_name}/{record_id}", record, "PATCH"
        )
        return response.status_code == HTTP_NO_CONTENT

    def delete(self, object_name: str, record_id: str) -> bool:
        """Delete a record. True when the API answers 204 No Content."""
        _require("object_name", object_name)
        _require("record_id", record_id)

        response = self._request(self._get_url("sobjects"), f"{object_name}/{record_id}", None, "DELETE")
        return response.status_code == HTTP_NO_CONTENT

    def describe(self, object_name: str) -> Dict[str, Any]:
        """Return /sobjects/{name}/describe."""
        _require("object_name", object_name)
        response = self._request(self._get_url("sobjects"), f"{object_name}/describe")
        return self.codec.deserialize_untyped(response.content).as_dict()

    def limits(self) -> Dict[str, Any]:
        """Return API usage limits."""
        response = self._request(self._get_url("limits"))
        return self.codec.deserialize_untyped(response.content).as_dict()

    # --------------------------- Requests -----------------------------

    def _request(
        self,
        base_url: str,
        resource: Optional[str] = None,
        record: Any = None,
        method: str = "GET",
    ) -> RestResponse:
        """Perform a request against the REST API and check it for errors."""
        if not self._is_authenticated:
            raise NotAuthenticatedError()

        request = RestRequest(resource=resource, method=method, request_format="json", base_url=base_url)
        request.add_header("Authorization", f"Bearer {self._access_token}")
        if record is not None:
            request.body = self.codec.serialize(record, for_update=(method == "PATCH"))

        _logger.debug("%s %s %s", method, base_url, resource or "")
        response = self.transport.execute(request)
        self._check_api_exception(response)
        return response

    def _query_page(self, url: str, record_type: Type[T]) -> QueryResult[T]:
        response = self._request(url)
        return self.codec.deserialize_query(response.content, record_type)

    def _check_api_exception(self, response: RestResponse) -> None:
        """Raise if the response carries an API error or a transport failure."""
        status = response.status_code
        if status is not None and status > 299:
            raise self._api_error(response)

        if response.error_exception is not None:
            raise response.error_exception

    def _api_error(self, response: RestResponse) -> SalesforceApiError:
        try:
            data = self.codec.deserialize_untyped(response.content)
            error = data[0] if data.is_array else data
            fields_value = error.get("fields")
            fields = None
            if fields_value is not None and fields_value.is_array:
                fields = [v.to_text() for v in fields_value]
            api_error = SalesforceApiError(
                error["errorCode"].to_text(),
                error["message"].to_text(),
                fields,
                status_code=response.status_code,
            )
        except JsonShapeError as e:
            _logger.debug("Unrecognised error body for HTTP %s: %s", response.status_code, e)
            api_error = SalesforceApiError(
                f"HTTP_{response.status_code}",
                response.content or "No response body",
                status_code=response.status_code,
            )
        _logger.error("HTTP %s error: %s", response.status_code, api_error)
        return api_error

    # --------------------------- Helpers ------------------------------

    def _get_url(self, resource_name: str) -> str:
        return f"{self._instance_url}/services/data/{self.api_version}/{resource_name}"

    def _query_url(self, soql: str) -> str:
        return f"{self._get_url('query')}?q={quote(soql)}"
