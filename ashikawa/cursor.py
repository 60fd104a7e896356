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
from collections import deque
from enum import Enum
from types import TracebackType
from typing import TYPE_CHECKING, Any, Iterator

import httpx

from ashikawa.exceptions import (
    ArangoException,
    CursorError,
    ResourceNotFoundException,
)
from ashikawa.utils.request_tools import HttpMethod

if TYPE_CHECKING:
    from ashikawa.database import Database


logger = logging.getLogger(__name__)


class CursorState(Enum):
    """
    This enum expresses the possible states for a `Cursor`.

    Values:
        EXECUTED: the query ran, only the first batch has been received.
        STREAMING: at least one further batch has been fetched.
        EXHAUSTED: all rows have been yielded. Won't return more rows.
        FAILED: a batch fetch failed. The cursor cannot be used anymore.
        CLOSED: the caller stopped the cursor before exhaustion.
    """

    EXECUTED = "executed"
    STREAMING = "streaming"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CLOSED = "closed"


def _parse_batch_response(
    response: Any,
    *,
    cursor_state: CursorState,
) -> tuple[list[Any], bool, str | None, int | None]:
    """Validate a cursor response and return (rows, has more, cursor id, count)."""
    if not isinstance(response, dict) or not isinstance(response.get("result"), list):
        raise CursorError(
            text="Faulty response from cursor API (no 'result' list).",
            cursor_state=cursor_state.value,
        )
    has_more = bool(response.get("hasMore", False))
    _id = response.get("id")
    cursor_id = str(_id) if _id is not None else None
    _count = response.get("count")
    try:
        count = int(_count) if _count is not None else None
    except (TypeError, ValueError):
        raise CursorError(
            text=f"Faulty response from cursor API (invalid 'count': {_count!r}).",
            cursor_state=cursor_state.value,
        )
    return response["result"], has_more, cursor_id, count


class Cursor:
    """
    A lazy, single-pass iterator over the results of a query.

    The server returns results in batches: the cursor keeps one batch in a
    local buffer and, once the buffer is emptied and the server announced more
    results, it transparently fetches the next batch. Each row is yielded
    exactly once, in server order; a cursor cannot be rewound.

    Cursors are not meant to be instantiated directly: they are obtained by
    executing a `Query`. Stopping early should be followed by `close()` (or
    using the cursor as a context manager), so that the server can release
    the resources held for the outstanding results.

    Example:
        >>> with people.query().filter("FOR p IN people RETURN p").execute() as cursor:
        ...     for row in cursor:
        ...         print(row["name"])
    """

    _state: CursorState
    _buffer: deque[Any]
    _has_more: bool
    _cursor_id: str | None
    _count: int | None
    _consumed: int
    _batches_fetched: int

    def __init__(
        self,
        database: Database,
        *,
        result: list[Any],
        has_more: bool,
        cursor_id: str | None,
        count: int | None = None,
    ) -> None:
        if has_more and cursor_id is None:
            raise CursorError(
                text="Faulty response from cursor API (more results, but no 'id').",
                cursor_state=CursorState.EXECUTED.value,
            )
        self.database = database
        self._state = CursorState.EXECUTED
        self._buffer = deque(result)
        self._has_more = has_more
        self._cursor_id = cursor_id
        self._count = count
        self._consumed = 0
        self._batches_fetched = 1

    @classmethod
    def from_response(cls, database: Database, response: Any) -> Cursor:
        """
        Create a cursor out of the response to a create-cursor request.

        Args:
            database: the Database the query was sent through.
            response: the decoded JSON response of the server.

        Returns:
            a Cursor in the EXECUTED state, holding the first batch.

        Raises:
            CursorError: if the response is malformed.
        """

        result, has_more, cursor_id, count = _parse_batch_response(
            response,
            cursor_state=CursorState.EXECUTED,
        )
        return cls(
            database,
            result=result,
            has_more=has_more,
            cursor_id=cursor_id,
            count=count,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self.id}, {self._state.value}, "
            f"consumed: {self._consumed}, buffered: {len(self._buffer)})"
        )

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        if self._state == CursorState.FAILED:
            raise CursorError(
                text="Cursor failed while fetching a batch and cannot be reused.",
                cursor_state=self._state.value,
            )
        if self._state in (CursorState.EXHAUSTED, CursorState.CLOSED):
            raise StopIteration
        while not self._buffer:
            if not self._has_more:
                self._set_exhausted()
                raise StopIteration
            self._fetch_next_batch()
        self._consumed += 1
        return self._buffer.popleft()

    def __enter__(self) -> Cursor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        self.close()

    @property
    def state(self) -> CursorState:
        """The current state of this cursor, a value in `CursorState`."""
        return self._state

    @property
    def id(self) -> str | None:
        """
        The identifier of the server-side cursor, available only as long as
        the server holds further batches for it.
        """
        if self._has_more:
            return self._cursor_id
        return None

    @property
    def has_more(self) -> bool:
        """Whether the server announced further batches."""
        return self._has_more

    @property
    def count(self) -> int | None:
        """
        The total number of results, if the query was executed requesting it.
        """
        return self._count

    @property
    def consumed(self) -> int:
        """The number of rows yielded so far."""
        return self._consumed

    @property
    def batches_fetched(self) -> int:
        """The number of batches received, including the first one."""
        return self._batches_fetched

    @property
    def buffered_count(self) -> int:
        """
        The number of rows currently held in the local buffer. Reading this
        property never triggers requests to the server.
        """
        return len(self._buffer)

    def _fetch_next_batch(self) -> None:
        cursor_id = self._cursor_id
        logger.info(f"cursor fetching a batch: '{cursor_id}'")
        try:
            response = self.database.send_request(
                f"cursor/{cursor_id}",
                http_method=HttpMethod.PUT,
            )
            result, has_more, next_id, count = _parse_batch_response(
                response,
                cursor_state=self._state,
            )
        except CursorError:
            self._set_failed()
            raise
        except (ArangoException, httpx.HTTPError) as exc:
            self._set_failed()
            raise CursorError(
                text=f"Fetching a batch for cursor '{cursor_id}' failed: {exc}",
                cursor_state=CursorState.FAILED.value,
            ) from exc
        logger.info(f"cursor finished fetching a batch: '{cursor_id}'")
        self._batches_fetched += 1
        self._state = CursorState.STREAMING
        self._buffer = deque(result)
        self._has_more = has_more
        if next_id is not None:
            self._cursor_id = next_id
        if count is not None:
            self._count = count
        if has_more and self._cursor_id is None:
            self._set_failed()
            raise CursorError(
                text="Faulty response from cursor API (more results, but no 'id').",
                cursor_state=self._state.value,
            )

    def _dispose(self) -> None:
        """Ask the server to delete the server-side cursor, as best effort."""
        cursor_id = self._cursor_id
        if cursor_id is None:
            return
        self._cursor_id = None
        logger.info(f"disposing of cursor '{cursor_id}'")
        try:
            self.database.send_request(
                f"cursor/{cursor_id}",
                http_method=HttpMethod.DELETE,
            )
        except ResourceNotFoundException:
            logger.debug(f"cursor '{cursor_id}' already released by the server")
        except (ArangoException, httpx.HTTPError) as exc:
            logger.warning(f"could not dispose of cursor '{cursor_id}': {exc}")

    def _set_exhausted(self) -> None:
        self._state = CursorState.EXHAUSTED
        self._dispose()

    def _set_failed(self) -> None:
        self._state = CursorState.FAILED
        self._buffer = deque()
        self._has_more = False

    def close(self) -> None:
        """
        Close the cursor, regardless of its state, discarding the rows that
        have not been consumed yet. If the server still holds batches for
        this cursor, it is asked to release them.

        This is an in-place modification of the cursor. Closing an exhausted,
        failed or already closed cursor does nothing.
        """

        if self._state in (CursorState.EXECUTED, CursorState.STREAMING):
            self._state = CursorState.CLOSED
            self._buffer = deque()
            self._has_more = False
            self._dispose()

    def to_list(self) -> list[Any]:
        """
        Consume the rest of the cursor and return the rows in a list.

        Note that this holds the whole remaining result set in memory.
        """
        return list(self)

    def first(self) -> Any | None:
        """
        Return the next row, or None if there is none, then close the cursor.
        """
        try:
            return next(self, None)
        finally:
            self.close()
