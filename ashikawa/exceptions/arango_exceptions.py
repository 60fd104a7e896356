# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ashikawa.exceptions.error_descriptors import ArangoErrorDescriptor

HTTP_NOT_FOUND = 404


class ArangoException(Exception):
    """
    Any exception occurred while talking to the database server and specific
    to it, such as:
      - the server answering a request with an HTTP error status,
      - a document or collection found not to exist,
      - a cursor failing while fetching a batch,
    but not, for instance,
      - a network error (e.g. connection refused) while sending a request.
    """

    pass


@dataclass
class ArangoHttpException(ArangoException, httpx.HTTPStatusError):
    """
    A request to the server resulted in an HTTP 4xx or 5xx response.

    The error body returned by the server, if any, is made available as
    structured information while still raising (a subclass of)
    `httpx.HTTPStatusError`.

    Attributes:
        text: a text message about the exception.
        status_code: the HTTP status of the response, if available.
        error_descriptors: a list of ArangoErrorDescriptor objects
            found in the response (at most one).
    """

    text: str | None
    status_code: int | None
    error_descriptors: list[ArangoErrorDescriptor]

    def __init__(
        self,
        text: str | None,
        *,
        httpx_error: httpx.HTTPStatusError,
        status_code: int | None,
        error_descriptors: list[ArangoErrorDescriptor],
    ) -> None:
        ArangoException.__init__(self, text)
        httpx.HTTPStatusError.__init__(
            self,
            message=str(httpx_error),
            request=httpx_error.request,
            response=httpx_error.response,
        )
        self.text = text
        self.httpx_error = httpx_error
        self.status_code = status_code
        self.error_descriptors = error_descriptors

    def __str__(self) -> str:
        return self.text or str(self.httpx_error)

    @property
    def server_message(self) -> str | None:
        """The server-provided error message, if any."""
        if self.error_descriptors:
            return self.error_descriptors[0].message
        return None

    @classmethod
    def from_httpx_error(
        cls,
        httpx_error: httpx.HTTPStatusError,
        **kwargs: Any,
    ) -> ArangoHttpException:
        """
        Parse a httpx status error into this exception, choosing the
        not-found subclass for 404 responses.
        """

        raw_response: Any
        status_code: int | None
        # extracting the response structure cannot afford failure.
        try:
            raw_response = httpx_error.response.json() or {}
        except Exception:
            raw_response = {}
        try:
            status_code = int(httpx_error.response.status_code)
        except Exception:
            status_code = None
        error_descriptors = ArangoErrorDescriptor.from_response_body(raw_response)
        if error_descriptors:
            text = f"{error_descriptors[0].summary()}. {str(httpx_error)}"
        else:
            text = str(httpx_error)

        exc_class: type[ArangoHttpException] = cls
        if cls is ArangoHttpException and status_code == HTTP_NOT_FOUND:
            exc_class = ResourceNotFoundException
        return exc_class(
            text=text,
            httpx_error=httpx_error,
            status_code=status_code,
            error_descriptors=error_descriptors,
            **kwargs,
        )


class ResourceNotFoundException(ArangoHttpException):
    """
    The server answered with HTTP 404. Methods of the object mapping layer
    translate this into a more specific `NotFoundError` subclass.
    """

    pass


@dataclass
class ArangoTimeoutException(ArangoException):
    """
    A request to the server timed out.

    Attributes:
        text: a textual description of the error.
        timeout_type: the phase of the HTTP request when the event
            occurred ("connect", "read", "write", "pool") or "generic".
        endpoint: the URL that the request was targeting, if known.
        raw_payload: the payload of the request (as a string), if known.
    """

    text: str
    timeout_type: str
    endpoint: str | None
    raw_payload: str | None

    def __init__(
        self,
        text: str,
        *,
        timeout_type: str,
        endpoint: str | None,
        raw_payload: str | None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.timeout_type = timeout_type
        self.endpoint = endpoint
        self.raw_payload = raw_payload


@dataclass
class UnexpectedArangoResponseException(ArangoException):
    """
    The server response is malformed in that it is not valid JSON,
    or it lacks expected field(s), or they are of the wrong type.

    Attributes:
        text: a text message about the exception.
        raw_response: the response returned by the server, as far as available.
    """

    text: str
    raw_response: dict[str, Any] | None

    def __init__(
        self,
        text: str,
        raw_response: dict[str, Any] | None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.raw_response = raw_response
