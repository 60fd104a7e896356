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

import httpx
import pytest
from httpx import HTTPStatusError, Response

from ashikawa.exceptions import (
    ArangoErrorDescriptor,
    ArangoException,
    ArangoHttpException,
    ArangoTimeoutException,
    CollectionError,
    CursorError,
    DocumentNotFoundError,
    NotFoundError,
    QueryError,
    ResourceNotFoundException,
    ValidationError,
    _TimeoutContext,
    to_arango_timeout_exception,
)

SAMPLE_SERVER_MESSAGE = "cannot rename collection: duplicate name"
FULL_RESPONSE_OF_409 = json.dumps(
    {
        "error": True,
        "code": 409,
        "errorNum": 1207,
        "errorMessage": SAMPLE_SERVER_MESSAGE,
    }
)


@pytest.mark.describe("test ArangoHttpException")
def test_arangohttpexception() -> None:
    """Test that regardless of how incorrect the input httpx error, nothing breaks."""
    se0 = HTTPStatusError(message="httpx_message", request="req", response=None)  # type: ignore[arg-type]
    se1 = HTTPStatusError(message="httpx_message", request="req", response="blah")  # type: ignore[arg-type]
    se2 = HTTPStatusError(
        message="httpx_message",
        request="req",  # type: ignore[arg-type]
        response=Response(status_code=500, text="blah"),
    )
    se3 = HTTPStatusError(
        message="httpx_message",
        request="req",  # type: ignore[arg-type]
        response=Response(status_code=500, text='{"blabla": 1}'),
    )
    se4 = HTTPStatusError(
        message="httpx_message",
        request="req",  # type: ignore[arg-type]
        response=Response(status_code=409, text=FULL_RESPONSE_OF_409),
    )

    de0 = ArangoHttpException.from_httpx_error(se0)
    de1 = ArangoHttpException.from_httpx_error(se1)
    de2 = ArangoHttpException.from_httpx_error(se2)
    de3 = ArangoHttpException.from_httpx_error(se3)
    de4 = ArangoHttpException.from_httpx_error(se4)

    for de in [de0, de1, de2, de3]:
        repr(de)
        assert str(de) == "httpx_message"
        assert de.error_descriptors == []
        assert de.server_message is None
    assert de0.status_code is None
    assert de2.status_code == 500

    assert isinstance(de4, HTTPStatusError)
    assert isinstance(de4, ArangoException)
    assert de4.status_code == 409
    assert de4.server_message == SAMPLE_SERVER_MESSAGE
    assert de4.error_descriptors[0].code == 409
    assert de4.error_descriptors[0].error_num == 1207
    assert SAMPLE_SERVER_MESSAGE in str(de4)
    assert "httpx_message" in str(de4)


@pytest.mark.describe("test ResourceNotFoundException selection")
def test_resourcenotfoundexception() -> None:
    se = HTTPStatusError(
        message="httpx_message",
        request="req",  # type: ignore[arg-type]
        response=Response(
            status_code=404,
            text='{"error": true, "code": 404, "errorNum": 1202, '
            '"errorMessage": "document not found"}',
        ),
    )
    de = ArangoHttpException.from_httpx_error(se)
    assert isinstance(de, ResourceNotFoundException)
    assert de.server_message == "document not found"


@pytest.mark.describe("test ArangoErrorDescriptor")
def test_arangoerrordescriptor() -> None:
    full = ArangoErrorDescriptor(
        {
            "error": True,
            "code": 400,
            "errorNum": 1501,
            "errorMessage": "syntax error",
            "extra": 1,
        }
    )
    assert full.summary() == "syntax error (errorNum 1501)"
    assert full.attributes == {"extra": 1}
    assert str(full) == full.summary()
    assert "extra" in repr(full)

    assert ArangoErrorDescriptor({"errorNum": 10}).summary() == "errorNum 10"
    assert ArangoErrorDescriptor({}).summary() == ""
    assert ArangoErrorDescriptor("plain text").message == "plain text"

    assert ArangoErrorDescriptor.from_response_body({"result": []}) == []
    assert ArangoErrorDescriptor.from_response_body("not a dict") == []
    assert len(ArangoErrorDescriptor.from_response_body({"error": True})) == 1


@pytest.mark.describe("test domain exceptions")
def test_domain_exceptions() -> None:
    se = HTTPStatusError(
        message="httpx_message",
        request="req",  # type: ignore[arg-type]
        response=Response(status_code=409, text=FULL_RESPONSE_OF_409),
    )
    http_exc = ArangoHttpException.from_httpx_error(se)
    coll_exc = CollectionError.from_http_exception(http_exc, operation="Renaming")
    assert isinstance(coll_exc, CollectionError)
    assert isinstance(coll_exc, ValidationError)
    assert coll_exc.text == f"Renaming failed: {SAMPLE_SERVER_MESSAGE}"
    assert coll_exc.error_descriptors == http_exc.error_descriptors

    q_exc = QueryError("bad")
    assert q_exc.error_descriptors == []
    assert str(q_exc) == "bad"

    nf_exc = DocumentNotFoundError("no such doc", resource_id="people/1")
    assert isinstance(nf_exc, NotFoundError)
    assert isinstance(nf_exc, ArangoException)
    assert nf_exc.resource_id == "people/1"

    c_exc = CursorError("broken", cursor_state="failed")
    assert c_exc.cursor_state == "failed"
    assert str(c_exc) == "broken"


@pytest.mark.describe("test conversion of timeouts")
def test_timeout_conversion() -> None:
    request = httpx.Request("POST", "http://localhost:8529/_api/cursor", content=b"{}")
    read_timeout = httpx.ReadTimeout("timed out", request=request)
    exc = to_arango_timeout_exception(
        read_timeout,
        timeout_context=_TimeoutContext(request_ms=100, label="request_timeout_ms"),
    )
    assert isinstance(exc, ArangoTimeoutException)
    assert exc.timeout_type == "read"
    assert exc.endpoint == "http://localhost:8529/_api/cursor"
    assert exc.raw_payload == "{}"
    assert "request_timeout_ms = 100 ms" in exc.text

    bare_timeout = httpx.TimeoutException("timed out")
    bare_exc = to_arango_timeout_exception(
        bare_timeout, timeout_context=_TimeoutContext(request_ms=None)
    )
    assert bare_exc.timeout_type == "generic"
    assert bare_exc.endpoint is None
    assert bare_exc.text == "timed out"
