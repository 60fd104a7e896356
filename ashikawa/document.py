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
from typing import TYPE_CHECKING, Any, Iterator

from ashikawa.constants import RawDocumentType
from ashikawa.exceptions import DocumentNotFoundError, ResourceNotFoundException
from ashikawa.utils.request_tools import HttpMethod

if TYPE_CHECKING:
    from ashikawa.database import Database


logger = logging.getLogger(__name__)

DOCUMENT_METADATA_FIELDS = ("_id", "_key", "_rev")


class Document:
    """
    One record stored in a collection, together with its metadata
    (`id`, `key`, `revision`).

    A Document is a snapshot of the server state at fetch time: changes made
    locally through item assignment are only staged, and become durable with
    an explicit call to `save()`. No caching or consistency guarantee is made.

    Args:
        database: the Database the document was fetched through. It is used to
            send the requests issued by `refresh`, `save` and `delete`.
        raw_document: the JSON object returned by the server.

    Example:
        >>> doc = people.fetch_document("1234")
        >>> doc["name"]
        'Ada'
        >>> doc["name"] = "Ada Lovelace"
        >>> doc.save()
    """

    def __init__(self, database: Database, raw_document: RawDocumentType) -> None:
        self.database = database
        self._id: str | None = raw_document.get("_id")
        _key = raw_document.get("_key")
        if _key is None and self._id is not None and "/" in self._id:
            _key = self._id.split("/", 1)[1]
        self._key: str | None = str(_key) if _key is not None else None
        _rev = raw_document.get("_rev")
        self._revision: str | None = str(_rev) if _rev is not None else None
        self._content: dict[str, Any] = {
            k: v for k, v in raw_document.items() if k not in DOCUMENT_METADATA_FIELDS
        }

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}("{self._id}", rev="{self._revision}")'

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Document):
            return self._id == other._id and self._content == other._content
        return False

    def __getitem__(self, field_name: str) -> Any:
        return self._content[field_name]

    def __setitem__(self, field_name: str, value: Any) -> None:
        self._content[field_name] = value

    def __delitem__(self, field_name: str) -> None:
        del self._content[field_name]

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._content

    def __iter__(self) -> Iterator[str]:
        return iter(self._content)

    def get(self, field_name: str, default: Any = None) -> Any:
        return self._content.get(field_name, default)

    @property
    def id(self) -> str | None:
        """The document handle, in the form "<collection>/<key>"."""
        return self._id

    @property
    def key(self) -> str | None:
        """The key of the document, unique within its collection."""
        return self._key

    @property
    def revision(self) -> str | None:
        """The revision of the document at the time it was (last) read or written."""
        return self._revision

    def to_dict(self) -> dict[str, Any]:
        """Return a copy of the user fields, without metadata."""
        return dict(self._content)

    def _ensure_persisted(self) -> str:
        if self._id is None:
            raise ValueError("Document has no id: it was never stored on the server.")
        return self._id

    def refresh(self) -> Document:
        """
        Re-read the document from the server, discarding local changes.

        Returns:
            the Document itself, updated in place.

        Raises:
            DocumentNotFoundError: if the document no longer exists.
        """

        document_id = self._ensure_persisted()
        try:
            raw_document = self.database.send_request(f"document/{document_id}")
        except ResourceNotFoundException as exc:
            raise DocumentNotFoundError(
                f"Document '{document_id}' not found.",
                resource_id=document_id,
            ) from exc
        if raw_document.get("_rev") is not None:
            self._revision = str(raw_document["_rev"])
        self._content = {
            k: v for k, v in raw_document.items() if k not in DOCUMENT_METADATA_FIELDS
        }
        return self

    def save(self) -> dict[str, Any]:
        """
        Write the current (local) fields of the document to the server,
        replacing the stored version.

        Returns:
            the acknowledgement from the server. The `revision` of the
            Document is updated from it.
        """

        document_id = self._ensure_persisted()
        logger.info(f"saving document '{document_id}'")
        try:
            response = self.database.send_request(
                f"document/{document_id}",
                http_method=HttpMethod.PUT,
                payload=self.to_dict(),
            )
        except ResourceNotFoundException as exc:
            raise DocumentNotFoundError(
                f"Document '{document_id}' not found.",
                resource_id=document_id,
            ) from exc
        if response.get("_rev") is not None:
            self._revision = str(response["_rev"])
        return response  # type: ignore[no-any-return]

    def delete(self) -> dict[str, Any]:
        """
        Delete the document from the server. The local object is stale afterwards.

        Returns:
            the acknowledgement from the server.
        """

        document_id = self._ensure_persisted()
        logger.info(f"deleting document '{document_id}'")
        try:
            return self.database.send_request(  # type: ignore[no-any-return]
                f"document/{document_id}",
                http_method=HttpMethod.DELETE,
            )
        except ResourceNotFoundException as exc:
            raise DocumentNotFoundError(
                f"Document '{document_id}' not found.",
                resource_id=document_id,
            ) from exc
