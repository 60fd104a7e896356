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

from enum import Enum
from typing import Any

from ashikawa.settings.defaults import (
    COLLECTION_STATUS_BEING_UNLOADED,
    COLLECTION_STATUS_DELETED,
    COLLECTION_STATUS_LOADED,
    COLLECTION_STATUS_NEW_BORN,
    COLLECTION_STATUS_UNLOADED,
)


class CollectionStatus(Enum):
    """
    The lifecycle states a collection can be in, as reported by the server.

    Values:
        NEW_BORN: the collection has just been created.
        UNLOADED: the collection is on disk only.
        LOADED: the collection is loaded in memory.
        BEING_UNLOADED: the collection is in the process of being unloaded.
        DELETED: the collection has been deleted.
        CORRUPTED: any status code the client does not recognize.
    """

    NEW_BORN = "new_born"
    UNLOADED = "unloaded"
    LOADED = "loaded"
    BEING_UNLOADED = "being_unloaded"
    DELETED = "deleted"
    CORRUPTED = "corrupted"


_STATUS_CODE_MAP = {
    COLLECTION_STATUS_NEW_BORN: CollectionStatus.NEW_BORN,
    COLLECTION_STATUS_UNLOADED: CollectionStatus.UNLOADED,
    COLLECTION_STATUS_LOADED: CollectionStatus.LOADED,
    COLLECTION_STATUS_BEING_UNLOADED: CollectionStatus.BEING_UNLOADED,
    COLLECTION_STATUS_DELETED: CollectionStatus.DELETED,
}


class Status:
    """
    A wrapper around the integer status code of a collection.

    The code is classified once, at construction time, into a
    `CollectionStatus`; exactly one of the predicates (`new_born`,
    `unloaded`, `loaded`, `being_unloaded`, `deleted`, `corrupted`)
    is true. Unknown codes are classified as corrupted.

    Args:
        code: the status code as found in the server response. Anything
            that `int()` accepts is coerced.

    Example:
        >>> from ashikawa.status import Status
        >>> status = Status(3)
        >>> status.loaded
        True
        >>> status.new_born
        False
        >>> Status(42).corrupted
        True
    """

    __slots__ = ("_code", "_kind")

    _code: int
    _kind: CollectionStatus

    def __init__(self, code: Any) -> None:
        self._code = int(code)
        self._kind = _STATUS_CODE_MAP.get(self._code, CollectionStatus.CORRUPTED)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._code}, {self._kind.value})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Status):
            return self._code == other._code
        return False

    def __hash__(self) -> int:
        return hash(self._code)

    @property
    def code(self) -> int:
        """The raw integer status code."""
        return self._code

    @property
    def kind(self) -> CollectionStatus:
        """The classification of the status code."""
        return self._kind

    @property
    def new_born(self) -> bool:
        return self._kind == CollectionStatus.NEW_BORN

    @property
    def unloaded(self) -> bool:
        return self._kind == CollectionStatus.UNLOADED

    @property
    def loaded(self) -> bool:
        return self._kind == CollectionStatus.LOADED

    @property
    def being_unloaded(self) -> bool:
        return self._kind == CollectionStatus.BEING_UNLOADED

    @property
    def deleted(self) -> bool:
        return self._kind == CollectionStatus.DELETED

    @property
    def corrupted(self) -> bool:
        return self._kind == CollectionStatus.CORRUPTED
