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
from typing import TypeVar

from ashikawa.exceptions.arango_exceptions import (
    ArangoException,
    ArangoHttpException,
)
from ashikawa.exceptions.error_descriptors import ArangoErrorDescriptor

VE = TypeVar("VE", bound="ValidationError")


@dataclass
class NotFoundError(ArangoException):
    """
    The requested resource (document, collection, index) does not exist
    on the server. This is raised in place of the 404 transport error, so that
    existence checks can be told apart from other failures.

    Attributes:
        text: a text message about the exception.
        resource_id: the identifier that was looked up, if known.
    """

    text: str
    resource_id: str | None

    def __init__(
        self,
        text: str,
        *,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.resource_id = resource_id


class DocumentNotFoundError(NotFoundError):
    """A document was looked up by key but the server does not have it."""

    pass


class CollectionNotFoundError(NotFoundError):
    """A collection was looked up by name or id but the server does not have it."""

    pass


class IndexNotFoundError(NotFoundError):
    """An index was looked up by id but the server does not have it."""

    pass


@dataclass
class ValidationError(ArangoException):
    """
    The server rejected a request (bad body, name collision, unsupported
    option and the like). The server message is kept intact in `text`
    and in the error descriptors.

    Attributes:
        text: a text message about the exception.
        error_descriptors: the error descriptors parsed from the server response.
    """

    text: str
    error_descriptors: list[ArangoErrorDescriptor]

    def __init__(
        self,
        text: str,
        *,
        error_descriptors: list[ArangoErrorDescriptor] | None = None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.error_descriptors = error_descriptors or []

    @classmethod
    def from_http_exception(
        cls: type[VE],
        http_exception: ArangoHttpException,
        *,
        operation: str,
    ) -> VE:
        """Build this exception out of the HTTP error raised for `operation`."""
        server_message = http_exception.server_message or str(http_exception)
        return cls(
            f"{operation} failed: {server_message}",
            error_descriptors=http_exception.error_descriptors,
        )


class CollectionError(ValidationError):
    """A collection-level operation (e.g. a rename) was rejected by the server."""

    pass


class InvalidIndexError(ValidationError):
    """The server refused to create an index (e.g. an unsupported index type)."""

    pass


class QueryError(ValidationError):
    """
    A query could not be executed: either the server rejected it, or the
    Query object had already been executed.
    """

    pass


@dataclass
class CursorError(ArangoException):
    """
    Fetching a batch failed, or the server response for a cursor was
    malformed. The cursor cannot be used any further afterwards.

    Attributes:
        text: a text message about the exception.
        cursor_state: a string description of the state of the cursor
            when the error was raised.
    """

    text: str
    cursor_state: str

    def __init__(
        self,
        text: str,
        *,
        cursor_state: str,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.cursor_state = cursor_state
