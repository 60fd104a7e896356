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
from typing import Any, Iterable, Sequence

import httpx

from ashikawa import __version__
from ashikawa.constants import CallerType
from ashikawa.exceptions import (
    ArangoHttpException,
    ResourceNotFoundException,
    UnexpectedArangoResponseException,
    _TimeoutContext,
    to_arango_timeout_exception,
)
from ashikawa.settings.defaults import (
    DEFAULT_REDACTED_HEADER_NAMES,
    FIXED_SECRET_PLACEHOLDER,
)
from ashikawa.utils.request_tools import (
    HttpMethod,
    log_arango_request,
    log_arango_response,
    to_httpx_timeout,
)

logger = logging.getLogger(__name__)


def compose_user_agent(callers: Sequence[CallerType]) -> str:
    """
    Build the User-Agent header: the named callers, outermost first, each as
    "name/version" (or just "name"), followed by "ashikawa/<version>".
    Callers without a name are skipped.
    """
    caller_pieces = [
        f"{name}/{version}" if version else name
        for name, version in callers
        if name
    ]
    return " ".join(caller_pieces + [f"ashikawa/{__version__}"])


class APICommander:
    """
    The request dispatcher: sends one HTTP request to the REST interface of
    the database server and returns the decoded JSON response, or raises.

    Failures are surfaced as follows:
      - an HTTP 4xx/5xx status raises `ArangoHttpException` (its subclass
        `ResourceNotFoundException` for 404),
      - a timeout raises `ArangoTimeoutException`,
      - a body that is not JSON raises `UnexpectedArangoResponseException`,
      - any other `httpx.HTTPError` (e.g. connection refused) is left untouched.
    """

    client = httpx.Client()

    def __init__(
        self,
        *,
        api_endpoint: str,
        path: str,
        headers: dict[str, str | None] = {},
        callers: Sequence[CallerType] = [],
        redacted_header_names: Iterable[str] | None = None,
        request_timeout_ms: int | None = None,
    ) -> None:
        self.api_endpoint = api_endpoint.rstrip("/")
        self.path = path.lstrip("/")
        self.headers = headers
        self.callers = callers
        self.redacted_header_names = set(redacted_header_names or [])
        self.upper_full_redacted_header_names = {
            header_name.upper()
            for header_name in (
                self.redacted_header_names | DEFAULT_REDACTED_HEADER_NAMES
            )
        }
        self.request_timeout_ms = request_timeout_ms

        self.caller_header: dict[str, str] = {
            "User-Agent": compose_user_agent(self.callers)
        }
        self.full_headers: dict[str, str] = {
            k: v
            for k, v in {
                **{
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                **self.caller_header,
                **self.headers,
            }.items()
            if v is not None
        }
        self._loggable_headers = {
            k: v
            if k.upper() not in self.upper_full_redacted_header_names
            else FIXED_SECRET_PLACEHOLDER
            for k, v in self.full_headers.items()
        }
        self.full_path = ("/".join([self.api_endpoint, self.path])).rstrip("/")

    def __repr__(self) -> str:
        pieces = [
            f"api_endpoint={self.api_endpoint}",
            f"path={self.path}",
            f"callers={self.callers}",
        ]
        inner_desc = ", ".join(pieces)
        return f"{self.__class__.__name__}({inner_desc})"

    def _compose_request_url(self, additional_path: str | None) -> str:
        if additional_path:
            return "/".join([self.full_path.rstrip("/"), additional_path.lstrip("/")])
        else:
            return self.full_path

    def _raw_response_to_json(
        self,
        raw_response: httpx.Response,
        http_method: str,
        request_url: str,
    ) -> Any:
        try:
            return json.loads(raw_response.text)
        except ValueError:
            # json parsing has failed (e.g., empty body)
            raise UnexpectedArangoResponseException(
                text=f"Unparseable response from {http_method} {request_url}.",
                raw_response={
                    "raw_response": raw_response.text,
                },
            )

    @staticmethod
    def _encode_payload(payload: Any | None) -> str | None:
        if payload is not None:
            return json.dumps(
                payload,
                allow_nan=False,
                separators=(",", ":"),
                ensure_ascii=False,
            )
        else:
            return None

    def raw_request(
        self,
        *,
        http_method: str = HttpMethod.GET,
        payload: Any | None = None,
        additional_path: str | None = None,
        request_params: dict[str, Any] = {},
        timeout_context: _TimeoutContext | None = None,
    ) -> httpx.Response:
        request_url = self._compose_request_url(additional_path)
        _timeout_context = timeout_context or _TimeoutContext(
            request_ms=self.request_timeout_ms,
            label="request_timeout_ms",
        )
        encoded_payload = self._encode_payload(payload)
        log_arango_request(
            http_method=http_method,
            full_url=request_url,
            request_params=request_params,
            redacted_headers=self._loggable_headers,
            encoded_payload=encoded_payload,
            timeout_context=_timeout_context,
        )
        httpx_timeout_s = to_httpx_timeout(_timeout_context)

        try:
            raw_response = self.client.request(
                method=http_method,
                url=request_url,
                content=encoded_payload.encode()
                if encoded_payload is not None
                else None,
                params=request_params,
                timeout=httpx_timeout_s,
                headers=self.full_headers,
            )
        except httpx.TimeoutException as timeout_exc:
            raise to_arango_timeout_exception(
                timeout_exc, timeout_context=_timeout_context
            )

        try:
            raw_response.raise_for_status()
        except httpx.HTTPStatusError as http_exc:
            arango_exc = ArangoHttpException.from_httpx_error(http_exc)
            if isinstance(arango_exc, ResourceNotFoundException):
                logger.debug(f"APICommander about to raise from: {arango_exc}")
            else:
                logger.warning(f"APICommander about to raise from: {arango_exc}")
            raise arango_exc
        log_arango_response(raw_response)
        return raw_response

    def request(
        self,
        *,
        http_method: str = HttpMethod.GET,
        payload: Any | None = None,
        additional_path: str | None = None,
        request_params: dict[str, Any] = {},
        timeout_context: _TimeoutContext | None = None,
    ) -> Any:
        raw_response = self.raw_request(
            http_method=http_method,
            payload=payload,
            additional_path=additional_path,
            request_params=request_params,
            timeout_context=timeout_context,
        )
        return self._raw_response_to_json(
            raw_response,
            http_method=http_method,
            request_url=self._compose_request_url(additional_path),
        )
