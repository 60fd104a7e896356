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

import httpx

from ashikawa.exceptions.arango_exceptions import (
    ArangoException,
    ArangoHttpException,
    ArangoTimeoutException,
    ResourceNotFoundException,
    UnexpectedArangoResponseException,
)
from ashikawa.exceptions.domain_exceptions import (
    CollectionError,
    CollectionNotFoundError,
    CursorError,
    DocumentNotFoundError,
    IndexNotFoundError,
    InvalidIndexError,
    NotFoundError,
    QueryError,
    ValidationError,
)
from ashikawa.exceptions.error_descriptors import ArangoErrorDescriptor


@dataclass
class _TimeoutContext:
    """
    Information attached to a timeout value, used to present the user with
    a better error message should the timeout be hit.

    Args:
        request_ms: the number of milliseconds a given HTTP request is allowed
            to last. None or zero mean no timeout.
        label: the name of the timeout setting as known by the user.
    """

    request_ms: int | None
    label: str | None

    def __init__(
        self,
        *,
        request_ms: int | None,
        label: str | None = None,
    ) -> None:
        self.request_ms = request_ms
        self.label = label

    def __bool__(self) -> bool:
        return self.request_ms is not None


def to_arango_timeout_exception(
    httpx_timeout: httpx.TimeoutException,
    timeout_context: _TimeoutContext,
) -> ArangoTimeoutException:
    text: str
    text_0 = str(httpx_timeout) or "timed out"
    timeout_ms = timeout_context.request_ms
    timeout_label = timeout_context.label
    if timeout_ms:
        if timeout_label:
            text = f"{text_0} (timeout honoured: {timeout_label} = {timeout_ms} ms)"
        else:
            text = f"{text_0} (timeout honoured: {timeout_ms} ms)"
    else:
        text = text_0
    if isinstance(httpx_timeout, httpx.ConnectTimeout):
        timeout_type = "connect"
    elif isinstance(httpx_timeout, httpx.ReadTimeout):
        timeout_type = "read"
    elif isinstance(httpx_timeout, httpx.WriteTimeout):
        timeout_type = "write"
    elif isinstance(httpx_timeout, httpx.PoolTimeout):
        timeout_type = "pool"
    else:
        timeout_type = "generic"
    endpoint: str | None
    raw_payload: str | None
    try:
        request = httpx_timeout.request
    except RuntimeError:
        # httpx raises if the exception was built without a request
        request = None
    if request is not None:
        endpoint = str(request.url)
        if isinstance(request.content, bytes):
            raw_payload = request.content.decode()
        else:
            raw_payload = None
    else:
        endpoint = None
        raw_payload = None
    return ArangoTimeoutException(
        text=text,
        timeout_type=timeout_type,
        endpoint=endpoint,
        raw_payload=raw_payload,
    )


__all__ = [
    "ArangoErrorDescriptor",
    "ArangoException",
    "ArangoHttpException",
    "ArangoTimeoutException",
    "CollectionError",
    "CollectionNotFoundError",
    "CursorError",
    "DocumentNotFoundError",
    "IndexNotFoundError",
    "InvalidIndexError",
    "NotFoundError",
    "QueryError",
    "ResourceNotFoundException",
    "UnexpectedArangoResponseException",
    "ValidationError",
]


__pdoc__ = {
    "to_arango_timeout_exception": False,
}
