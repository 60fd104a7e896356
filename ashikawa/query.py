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
from typing import TYPE_CHECKING, Any, Iterator, Mapping, TypeVar

from ashikawa.constants import BindVarsType
from ashikawa.cursor import Cursor
from ashikawa.exceptions import ArangoHttpException, QueryError
from ashikawa.settings.defaults import COLLECTION_BIND_PARAMETER
from ashikawa.utils.request_tools import HttpMethod

if TYPE_CHECKING:
    from ashikawa.collection import Collection
    from ashikawa.database import Database


logger = logging.getLogger(__name__)

Q = TypeVar("Q", bound="Query")


class Query:
    """
    A builder for a query against a collection (or, for raw query strings,
    against the database as a whole).

    Settings are accumulated through chainable methods; nothing is sent to the
    server until the query is executed, either explicitly with `execute()` or
    implicitly by iterating over it. A Query can be executed only once.

    Args:
        database: the Database to send the query through.
        collection: the Collection the query is scoped to, if any.
        query_string: an optional query string. If not provided (and no
            `filter` is set later), a query returning all documents of the
            collection is synthesised.

    Example:
        >>> cursor = (
        ...     people.query()
        ...     .filter("FOR p IN people FILTER p.age > @min RETURN p")
        ...     .bind(min=30)
        ...     .batch_size(100)
        ...     .execute()
        ... )
    """

    def __init__(
        self,
        database: Database,
        *,
        collection: Collection | None = None,
        query_string: str | None = None,
    ) -> None:
        self.database = database
        self.collection = collection
        self._query_string = query_string
        self._bind_vars: BindVarsType = {}
        self._batch_size: int | None = None
        self._limit: int | None = None
        self._skip: int | None = None
        self._full_count = False
        self._example_conditions: list[str] = []
        self._example_bind_keys: list[str] = []
        self._executed = False

    def __repr__(self) -> str:
        target = f'"{self.collection.name}"' if self.collection else "(database)"
        state = "executed" if self._executed else "building"
        return f"{self.__class__.__name__}({target}, {state})"

    def __iter__(self) -> Iterator[Any]:
        return iter(self.execute())

    def _ensure_building(self) -> None:
        if self._executed:
            raise QueryError("Query has already been executed.")

    def filter(self: Q, query_string: str) -> Q:
        """Set the query string to run."""
        self._ensure_building()
        self._clear_example()
        self._query_string = query_string
        return self

    def bind(self: Q, **bind_vars: Any) -> Q:
        """Add bind variables, passed as keyword arguments."""
        return self.bind_vars(bind_vars)

    def bind_vars(self: Q, bind_vars: Mapping[str, Any]) -> Q:
        """Add bind variables, passed as a mapping."""
        self._ensure_building()
        self._bind_vars.update(bind_vars)
        return self

    def batch_size(self: Q, batch_size: int) -> Q:
        """Set the number of rows the server returns per batch."""
        self._ensure_building()
        if batch_size <= 0:
            raise ValueError("The batch size must be a positive integer.")
        self._batch_size = batch_size
        return self

    def limit(self: Q, limit: int | None) -> Q:
        """
        Limit the number of results. Only applies to the query synthesised
        when no query string is set.
        """
        self._ensure_building()
        self._limit = limit if limit != 0 else None
        return self

    def skip(self: Q, skip: int | None) -> Q:
        """
        Skip the first results. Only applies to the query synthesised
        when no query string is set.
        """
        self._ensure_building()
        self._skip = skip
        return self

    def full_count(self: Q, full_count: bool = True) -> Q:
        """Ask the server to report the total number of results on the cursor."""
        self._ensure_building()
        self._full_count = full_count
        return self

    def by_example(self: Q, example: Mapping[str, Any]) -> Q:
        """
        Set the query string so as to match the documents having all the
        fields of `example` equal to the given values. Values are sent as
        bind variables.
        """
        self._ensure_building()
        self._clear_example()
        for field_index, (field_name, value) in enumerate(example.items()):
            field_key, value_key = f"field{field_index}", f"value{field_index}"
            self._example_conditions.append(f"doc.@{field_key} == @{value_key}")
            self._bind_vars[field_key] = field_name
            self._bind_vars[value_key] = value
            self._example_bind_keys.extend([field_key, value_key])
        self._query_string = None
        return self

    def _clear_example(self) -> None:
        for bind_key in self._example_bind_keys:
            self._bind_vars.pop(bind_key, None)
        self._example_bind_keys = []
        self._example_conditions = []

    def _synthesise_query_string(self) -> str:
        if self.collection is None:
            raise QueryError("A query string is required for database-level queries.")
        pieces = [f"FOR doc IN @{COLLECTION_BIND_PARAMETER}"]
        if self._example_conditions:
            pieces.append(f"FILTER {' && '.join(self._example_conditions)}")
        if self._limit is not None or self._skip is not None:
            _limit = self._limit if self._limit is not None else 2**53
            pieces.append(f"LIMIT {self._skip or 0}, {_limit}")
        pieces.append("RETURN doc")
        return " ".join(pieces)

    def build_payload(self) -> dict[str, Any]:
        """
        Compose the body of the create-cursor request.

        Returns:
            a dictionary with keys "query", "bindVars", "batchSize", "count".
        """
        bind_vars = dict(self._bind_vars)
        if self._query_string is not None:
            query_string = self._query_string
        else:
            query_string = self._synthesise_query_string()
            if self.collection is not None:
                bind_vars[COLLECTION_BIND_PARAMETER] = self.collection.name
        return {
            "query": query_string,
            "bindVars": bind_vars,
            "batchSize": (
                self._batch_size
                if self._batch_size is not None
                else self.database.api_options.default_batch_size
            ),
            "count": self._full_count,
        }

    def execute(self) -> Cursor:
        """
        Send the query to the server and return a cursor over its results.

        Returns:
            a Cursor holding the first batch of results.

        Raises:
            QueryError: if the query was executed already, or the server
                rejected it.
        """

        self._ensure_building()
        payload = self.build_payload()
        self._executed = True
        logger.info(f"executing query: {payload['query']}")
        try:
            response = self.database.send_request(
                "cursor",
                http_method=HttpMethod.POST,
                payload=payload,
            )
        except ArangoHttpException as exc:
            raise QueryError.from_http_exception(exc, operation="Query") from exc
        logger.info(f"finished executing query: {payload['query']}")
        return Cursor.from_response(self.database, response)
