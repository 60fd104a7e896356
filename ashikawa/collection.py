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

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

import deprecation

from ashikawa import __version__
from ashikawa.constants import RawDocumentType
from ashikawa.cursor import Cursor
from ashikawa.document import Document
from ashikawa.exceptions import (
    ArangoHttpException,
    CollectionError,
    DocumentNotFoundError,
    IndexNotFoundError,
    InvalidIndexError,
    ResourceNotFoundException,
    UnexpectedArangoResponseException,
)
from ashikawa.index import Index, IndexType, build_index_payload
from ashikawa.query import Query
from ashikawa.status import Status
from ashikawa.utils.request_tools import HttpMethod

if TYPE_CHECKING:
    from ashikawa.database import Database


logger = logging.getLogger(__name__)


class Collection:
    """
    A named container of documents on the server.

    Each method maps to exactly one HTTP request, sent through the Database
    the collection was obtained from. Nothing is cached locally: properties
    such as `wait_for_sync` are re-read from the server on each access.

    Args:
        database: the Database the collection belongs to.
        raw_collection: the JSON object describing the collection, as
            returned by the server. Keys "name", "id" and "status" are read;
            the numeric ones are coerced to integers.

    Example:
        >>> raw_collection = {
        ...     "name": "example_1",
        ...     "waitForSync": True,
        ...     "id": 4588,
        ...     "status": 3,
        ...     "error": False,
        ...     "code": 200,
        ... }
        >>> collection = Collection(database, raw_collection)
        >>> collection.name
        'example_1'
        >>> collection.id
        4588
        >>> collection.status.loaded
        True
    """

    def __init__(self, database: Database, raw_collection: RawDocumentType) -> None:
        self.database = database
        self._name: str | None = (
            str(raw_collection["name"]) if "name" in raw_collection else None
        )
        self.id: int | None = (
            int(raw_collection["id"]) if "id" in raw_collection else None
        )
        self.status: Status | None = (
            Status(raw_collection["status"]) if "status" in raw_collection else None
        )

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name="{self._name}", id={self.id})'

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Collection):
            return all(
                [
                    self.id == other.id,
                    self._name == other._name,
                    self.database == other.database,
                ]
            )
        return False

    def _send_request_for_this_collection(
        self,
        path: str = "",
        *,
        http_method: str = HttpMethod.GET,
        payload: Any | None = None,
    ) -> Any:
        return self.database.send_request(
            f"collection/{self.id}{path}",
            http_method=http_method,
            payload=payload,
        )

    @property
    def name(self) -> str | None:
        """The name of the collection, unique within the database."""
        return self._name

    @name.setter
    def name(self, new_name: str) -> None:
        self.rename(new_name)

    def rename(self, new_name: str) -> str:
        """
        Rename the collection on the server. The local name is updated only
        if the server accepts the change.

        Args:
            new_name: the new name for the collection.

        Returns:
            the new name.

        Raises:
            CollectionError: if the server rejects the rename (e.g. the name
                is already taken). The local name is left unchanged.
        """

        logger.info(f"renaming collection '{self._name}' to '{new_name}'")
        try:
            self._send_request_for_this_collection(
                "/rename",
                http_method=HttpMethod.PUT,
                payload={"name": new_name},
            )
        except ArangoHttpException as exc:
            raise CollectionError.from_http_exception(
                exc, operation=f"Renaming collection '{self._name}'"
            ) from exc
        self._name = new_name
        return new_name

    @property
    def wait_for_sync(self) -> bool:
        """
        Whether writes to the collection wait for the data to be synchronised
        to disk. Read from the server at every access.
        """
        response = self._send_request_for_this_collection("/properties")
        return bool(response["waitForSync"])

    @wait_for_sync.setter
    def wait_for_sync(self, new_value: bool) -> None:
        self._send_request_for_this_collection(
            "/properties",
            http_method=HttpMethod.PUT,
            payload={"waitForSync": new_value},
        )

    def count(self) -> int:
        """
        Return the number of documents in the collection, as currently
        reported by the server.
        """
        response = self._send_request_for_this_collection("/count")
        if "count" not in response:
            raise UnexpectedArangoResponseException(
                text="Faulty response from count API (no 'count').",
                raw_response=response,
            )
        return int(response["count"])

    @deprecation.deprecated(  # type: ignore[misc]
        deprecated_in="0.4.0",
        removed_in="1.0.0",
        current_version=__version__,
        details="Use the 'count' method instead.",
    )
    def length(self) -> int:
        """Return the number of documents in the collection. Use `count()`."""
        return self.count()

    def figures(self) -> dict[str, Any]:
        """
        Return the full set of statistics of the collection, grouped by area
        (e.g. {"alive": {"count": 0, "size": 0}, ...}).
        """
        response = self._send_request_for_this_collection("/figures")
        return response["figures"]  # type: ignore[no-any-return]

    def figure(self, figure_name: str) -> Any:
        """
        Return one statistic of the collection.

        Args:
            figure_name: a string in the form "<area>_<figure>", such as
                "datafiles_count", "alive_size", "alive_count", "dead_size",
                "dead_count".

        Returns:
            the requested figure.

        Raises:
            KeyError: if the server does not report the requested figure.
        """
        figure_area, _, figure_key = figure_name.partition("_")
        figures = self.figures()
        try:
            return figures[figure_area][figure_key]
        except (KeyError, TypeError):
            raise KeyError(f"Unknown figure '{figure_name}'.")

    def delete(self) -> dict[str, Any]:
        """
        Delete the collection from the server. The local object is stale afterwards.

        Returns:
            the acknowledgement from the server.
        """
        logger.info(f"deleting collection '{self._name}'")
        return self._send_request_for_this_collection(  # type: ignore[no-any-return]
            http_method=HttpMethod.DELETE,
        )

    def load(self) -> dict[str, Any]:
        """Load the collection into memory on the server."""
        return self._send_request_for_this_collection(  # type: ignore[no-any-return]
            "/load",
            http_method=HttpMethod.PUT,
            payload={},
        )

    def unload(self) -> dict[str, Any]:
        """Unload the collection from memory on the server."""
        return self._send_request_for_this_collection(  # type: ignore[no-any-return]
            "/unload",
            http_method=HttpMethod.PUT,
            payload={},
        )

    def truncate(self) -> dict[str, Any]:
        """Delete all documents in the collection."""
        logger.info(f"truncating collection '{self._name}'")
        return self._send_request_for_this_collection(  # type: ignore[no-any-return]
            "/truncate",
            http_method=HttpMethod.PUT,
            payload={},
        )

    @deprecation.deprecated(  # type: ignore[misc]
        deprecated_in="0.4.0",
        removed_in="1.0.0",
        current_version=__version__,
        details="Use the 'truncate' method instead.",
    )
    def truncate_all(self) -> dict[str, Any]:
        """Delete all documents in the collection. Use `truncate()`."""
        return self.truncate()

    def _document_path(self, document_key: str | int) -> str:
        # accepts both a key and a full "<collection>/<key>" handle
        _key = str(document_key).split("/")[-1]
        return f"document/{self.id}/{_key}"

    def fetch_document(self, document_key: str | int) -> Document:
        """
        Fetch a document by its key.

        Args:
            document_key: the key of the document within this collection, or its full
                "<collection>/<key>" handle.

        Returns:
            the Document.

        Raises:
            DocumentNotFoundError: if there is no such document.
        """
        try:
            raw_document = self.database.send_request(self._document_path(document_key))
        except ResourceNotFoundException as exc:
            raise DocumentNotFoundError(
                f"Document '{document_key}' not found in collection '{self._name}'.",
                resource_id=str(document_key),
            ) from exc
        return Document(self.database, raw_document)

    def replace_document(
        self,
        document_key: str | int,
        raw_document: Mapping[str, Any],
    ) -> dict[str, Any]:
        """
        Replace the contents of a document.

        Args:
            document_key: the key of the document within this collection.
            raw_document: the new contents.

        Returns:
            the acknowledgement from the server (with the new revision).

        Raises:
            DocumentNotFoundError: if there is no such document.
        """
        try:
            return self.database.send_request(  # type: ignore[no-any-return]
                self._document_path(document_key),
                http_method=HttpMethod.PUT,
                payload=dict(raw_document),
            )
        except ResourceNotFoundException as exc:
            raise DocumentNotFoundError(
                f"Document '{document_key}' not found in collection '{self._name}'.",
                resource_id=str(document_key),
            ) from exc

    def create_document(self, raw_document: Mapping[str, Any]) -> Document:
        """
        Store a new document in the collection.

        Args:
            raw_document: the contents of the document.

        Returns:
            a Document with the contents and the id, key and revision
            assigned by the server.
        """
        response = self.database.send_request(
            "document",
            http_method=HttpMethod.POST,
            payload=dict(raw_document),
            request_params={"collection": self.id},
        )
        metadata = {
            k: v for k, v in response.items() if k in ("_id", "_key", "_rev")
        }
        return Document(self.database, {**raw_document, **metadata})

    def delete_document(self, document_key: str | int) -> dict[str, Any]:
        """
        Delete a document by its key.

        Raises:
            DocumentNotFoundError: if there is no such document.
        """
        try:
            return self.database.send_request(  # type: ignore[no-any-return]
                self._document_path(document_key),
                http_method=HttpMethod.DELETE,
            )
        except ResourceNotFoundException as exc:
            raise DocumentNotFoundError(
                f"Document '{document_key}' not found in collection '{self._name}'.",
                resource_id=str(document_key),
            ) from exc

    def add_index(
        self,
        index_type: str | IndexType,
        fields: Iterable[str],
        *,
        unique: bool | None = None,
        geo_json: bool | None = None,
        size: int | None = None,
        min_length: int | None = None,
    ) -> Index:
        """
        Create an index on the collection.

        Args:
            index_type: the type of the index, e.g. "hash" or `IndexType.SKIPLIST`.
            fields: the names of the fields to index.
            unique: whether the index should enforce uniqueness.
            geo_json: for geo indexes, whether coordinates are in GeoJSON order.
            size: for cap constraints, the maximum number of documents.
            min_length: for fulltext indexes, the minimum word length to index.

        Returns:
            the Index as created by the server.

        Raises:
            InvalidIndexError: if the server refuses to create the index.

        Example:
            >>> people.add_index("hash", ["name", "profession"])
        """
        payload = build_index_payload(
            index_type,
            fields,
            unique=unique,
            geo_json=geo_json,
            size=size,
            min_length=min_length,
        )
        logger.info(f"adding {payload['type']} index to collection '{self._name}'")
        try:
            response = self.database.send_request(
                "index",
                http_method=HttpMethod.POST,
                payload=payload,
                request_params={"collection": self.id},
            )
        except ArangoHttpException as exc:
            raise InvalidIndexError.from_http_exception(
                exc, operation=f"Creating a {payload['type']} index"
            ) from exc
        return Index(self, response)

    def fetch_index(self, index_id: str | int) -> Index:
        """
        Fetch an index by id.

        Args:
            index_id: either the index number or the full "<collection>/<n>" id.

        Raises:
            IndexNotFoundError: if there is no such index.
        """
        index_key = str(index_id).split("/")[-1]
        try:
            response = self.database.send_request(f"index/{self.id}/{index_key}")
        except ResourceNotFoundException as exc:
            raise IndexNotFoundError(
                f"Index '{index_id}' not found in collection '{self._name}'.",
                resource_id=str(index_id),
            ) from exc
        return Index(self, response)

    def all_indices(self) -> list[Index]:
        """Return all the indexes of the collection."""
        response = self.database.send_request(
            "index",
            request_params={"collection": self.id},
        )
        if "indexes" not in response:
            raise UnexpectedArangoResponseException(
                text="Faulty response from index API (no 'indexes').",
                raw_response=response,
            )
        return [Index(self, raw_index) for raw_index in response["indexes"]]

    def query(self) -> Query:
        """Return a new Query scoped to this collection."""
        return Query(self.database, collection=self)

    def all(
        self,
        *,
        limit: int | None = None,
        skip: int | None = None,
        batch_size: int | None = None,
    ) -> Cursor:
        """Run a query returning all documents of the collection."""
        query = self.query().limit(limit).skip(skip)
        if batch_size is not None:
            query.batch_size(batch_size)
        return query.execute()

    def by_example(
        self,
        example: Mapping[str, Any],
        *,
        limit: int | None = None,
        skip: int | None = None,
        batch_size: int | None = None,
    ) -> Cursor:
        """
        Run a query returning the documents whose fields equal those
        given in `example`.
        """
        query = self.query().by_example(example).limit(limit).skip(skip)
        if batch_size is not None:
            query.batch_size(batch_size)
        return query.execute()
