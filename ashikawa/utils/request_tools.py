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

import json
import logging
from typing import Any

import httpx

from ashikawa.exceptions import _TimeoutContext

logger = logging.getLogger(__name__)


class HttpMethod:
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


def log_arango_request(
    http_method: str,
    full_url: str,
    request_params: dict[str, Any] | None,
    redacted_headers: dict[str, str],
    encoded_payload: str | None,
    timeout_context: _TimeoutContext,
) -> None:
    """
    Log an outgoing request to the ArangoDB REST API, at DEBUG level.

    Args:
        http_method: the HTTP verb, one of the `HttpMethod` values.
        full_url: the URL of the request, e.g. "http://localhost:8529/_api/cursor".
        request_params: query-string parameters of the request, if any.
        redacted_headers: headers already stripped of credentials, as these
            are logged as they are.
        encoded_payload: the JSON body of the request, if any.
        timeout_context: the timeout applying to this request.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(f"Arango request: {http_method} {full_url}")
    if request_params:
        logger.debug(f"Arango request params: {request_params}")
    if redacted_headers:
        logger.debug(f"Arango request headers: {redacted_headers}")
    if encoded_payload is not None:
        logger.debug(f"Arango request body: {encoded_payload}")
    logger.debug(
        f"Arango request timeout: {timeout_context.request_ms or '(unset)'} ms"
    )


def summarize_arango_body(body: Any) -> str:
    """
    A short description of a decoded response body.

    Cursor batches are reduced to their row count, `hasMore` flag and cursor
    id, error bodies to their `errorNum` and `errorMessage`. Anything else is
    rendered in full.
    """
    if isinstance(body, dict):
        if body.get("error") is True:
            return (
                f"error {body.get('code')} "
                f"(errorNum {body.get('errorNum')}): "
                f"{body.get('errorMessage')}"
            )
        if isinstance(body.get("result"), list):
            return (
                f"batch of {len(body['result'])} rows, "
                f"hasMore={bool(body.get('hasMore'))}, "
                f"id={body.get('id')}"
            )
    return json.dumps(body, separators=(",", ":"))


def log_arango_response(response: httpx.Response) -> None:
    """
    Log a response received from the ArangoDB REST API, at DEBUG level.

    Args:
        response: the httpx.Response, already checked for its status code.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(f"Arango response status: {response.status_code}")
    try:
        body = response.json()
    except ValueError:
        logger.debug(f"Arango response (non-JSON): '{response.text}'")
        return
    logger.debug(f"Arango response: {summarize_arango_body(body)}")


def to_httpx_timeout(timeout_context: _TimeoutContext) -> httpx.Timeout | None:
    if not timeout_context.request_ms:
        return None
    return httpx.Timeout(timeout_context.request_ms / 1000)
