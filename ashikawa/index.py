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
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable

from ashikawa.exceptions import IndexNotFoundError, ResourceNotFoundException
from ashikawa.utils.request_tools import HttpMethod

if TYPE_CHECKING:
    from ashikawa.collection import Collection


logger = logging.getLogger(__name__)


class IndexType(Enum):
    """
    The index types known to the server. Type names are matched
    case-insensitively.
    """

    PRIMARY = "primary"
    HASH = "hash"
    SKIPLIST = "skiplist"
    GEO = "geo"
    GEO1 = "geo1"
    GEO2 = "geo2"
    CAP = "cap"
    FULLTEXT = "fulltext"
    EDGE = "edge"

    @classmethod
    def lookup(cls, type_name: str | IndexType) -> IndexType | None:
        """Return the member for a type name, or None for unknown types."""
        if isinstance(type_name, IndexType):
            return type_name
        return _INDEX_TYPES_BY_NAME.get(str(type_name).lower())

    @classmethod
    def coerce(cls, type_name: str | IndexType) -> IndexType:
        """
        Return the member for a type name.

        Raises:
            ValueError: if the type is not known to this client.
        """
        index_type = cls.lookup(type_name)
        if index_type is None:
            raise ValueError(
                f"Invalid index type '{type_name}'. "
                f"Allowed values are: {[e.value for e in cls]}"
            )
        return index_type


_INDEX_TYPES_BY_NAME = {index_type.value: index_type for index_type in IndexType}


def build_index_payload(
    index_type: str | IndexType,
    fields: Iterable[str],
    *,
    unique: bool | None = None,
    geo_json: bool | None = None,
    size: int | None = None,
    min_length: int | None = None,
) -> dict[str, Any]:
    """
    Map the arguments of an index creation to the body the server expects.
    Options left to None are not sent.
    """
    known_type = IndexType.lookup(index_type)
    _type = known_type.value if known_type is not None else str(index_type)
    return {
        k: v
        for k, v in {
            "type": _type,
            "fields": [str(field) for field in fields],
            "unique": unique,
            "geoJson": geo_json,
            "size": size,
            "minLength": min_length,
        }.items()
        if v is not None
    }


class Index:
    """
    A server-managed index over one or more fields of a collection.

    Args:
        collection: the Collection the index belongs to.
        raw_index: the JSON object describing the index, as returned by the server.

    Attributes:
        id: the full index handle, "<collection id>/<index number>".
        type: the `IndexType`, or None if the server reports a type
            this client does not know (see `type_name` for the raw string).
        fields: the set of indexed field names.
        field_list: the indexed field names, in server order.
        unique: whether the index enforces uniqueness.
        geo_json: for geo indexes, whether coordinates are in GeoJSON order.
        size: for cap constraints, the maximum number of documents.
        min_length: for fulltext indexes, the minimum indexed word length.
    """

    def __init__(self, collection: Collection, raw_index: dict[str, Any]) -> None:
        self.collection = collection
        self.id: str = str(raw_index["id"])
        self.type_name: str | None = raw_index.get("type")
        self.type: IndexType | None = (
            IndexType.lookup(self.type_name) if self.type_name is not None else None
        )
        self.field_list: list[str] = [
            str(field) for field in raw_index.get("fields") or []
        ]
        self.fields: frozenset[str] = frozenset(self.field_list)
        self.unique: bool = bool(raw_index.get("unique", False))
        self.geo_json: bool | None = (
            bool(raw_index["geoJson"]) if "geoJson" in raw_index else None
        )
        self.size: int | None = int(raw_index["size"]) if "size" in raw_index else None
        self.min_length: int | None = (
            int(raw_index["minLength"]) if "minLength" in raw_index else None
        )

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}("{self.id}", type={self.type_name}, '
            f"fields={self.field_list})"
        )

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Index):
            return all(
                [
                    self.id == other.id,
                    self.type_name == other.type_name,
                    self.field_list == other.field_list,
                    self.unique == other.unique,
                ]
            )
        return False

    @property
    def key(self) -> str:
        """The index number, i.e. the part of the id after the slash."""
        return self.id.split("/", 1)[-1]

    def delete(self) -> dict[str, Any]:
        """
        Drop the index on the server.

        Returns:
            the acknowledgement from the server.

        Raises:
            IndexNotFoundError: if the index does not exist (anymore).
        """

        logger.info(f"deleting index '{self.id}'")
        try:
            return self.collection.database.send_request(  # type: ignore[no-any-return]
                f"index/{self.id}",
                http_method=HttpMethod.DELETE,
            )
        except ResourceNotFoundException as exc:
            raise IndexNotFoundError(
                f"Index '{self.id}' not found.",
                resource_id=self.id,
            ) from exc
