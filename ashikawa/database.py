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
from typing import Any

from ashikawa.authentication import CredentialsProvider, coerce_credentials_provider
from ashikawa.collection import Collection
from ashikawa.exceptions import (
    ArangoHttpException,
    CollectionError,
    CollectionNotFoundError,
    ResourceNotFoundException,
    UnexpectedArangoResponseException,
)
from ashikawa.query import Query
from ashikawa.utils.api_commander import APICommander
from ashikawa.utils.api_options import APIOptions, FullAPIOptions, default_api_options
from ashikawa.utils.request_tools import HttpMethod

logger = logging.getLogger(__name__)


class Database:
    """
    A handle to an ArangoDB database, the entry point to all the other objects.

    The Database holds the connection settings and dispatches every request
    issued by the collections, documents, indexes and cursors obtained from it.
    Creating a Database does not contact the server.

    Args:
        api_endpoint: the base URL of the server, e.g. "http://localhost:8529".
        username: the user name for HTTP basic authentication. A
            `CredentialsProvider` can be passed instead, in which case the
            password is ignored. If omitted, requests are not authenticated.
        password: the password for HTTP basic authentication.
        api_options: an `APIOptions` object; the values it sets override the
            defaults (such as the request timeout or the API path).

    Example:
        >>> db = Database("http://localhost:8529", username="root", password="")
        >>> people = db["people"]
        >>> people.count()
        3
    """

    def __init__(
        self,
        api_endpoint: str,
        *,
        username: str | CredentialsProvider | None = None,
        password: str | None = None,
        api_options: APIOptions | None = None,
    ) -> None:
        self.api_endpoint = api_endpoint.rstrip("/")
        self.credentials_provider = coerce_credentials_provider(username, password)
        self.api_options: FullAPIOptions = default_api_options().with_override(
            api_options
        )
        self._api_commander = self._get_api_commander()

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}(api_endpoint="{self.api_endpoint}", '
            f"credentials_provider={self.credentials_provider})"
        )

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Database):
            return all(
                [
                    self.api_endpoint == other.api_endpoint,
                    self.credentials_provider == other.credentials_provider,
                    self.api_options == other.api_options,
                ]
            )
        return False

    def __getitem__(self, name_or_id: str | int) -> Collection:
        return self.collection(name_or_id)

    def _get_api_commander(self) -> APICommander:
        return APICommander(
            api_endpoint=self.api_endpoint,
            path=self.api_options.api_path,
            headers={**self.credentials_provider.get_headers()},
            callers=self.api_options.callers,
            redacted_header_names=self.api_options.redacted_header_names,
            request_timeout_ms=self.api_options.request_timeout_ms,
        )

    def with_options(self, *, api_options: APIOptions | None = None) -> Database:
        """
        Create a clone of this database with some changed settings.

        Args:
            api_options: the options to override on top of the current ones.

        Returns:
            a new Database, sharing the credentials of this one.
        """
        return Database(
            self.api_endpoint,
            username=self.credentials_provider,
            api_options=self.api_options.with_override(api_options),
        )

    def send_request(
        self,
        path: str,
        *,
        http_method: str = HttpMethod.GET,
        payload: Any | None = None,
        request_params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send a request to the server and return the decoded JSON response.

        Args:
            path: the path of the resource, relative to the API path
                (e.g. "collection/4588/count").
            http_method: the HTTP verb to use.
            payload: a JSON-serializable body, if any.
            request_params: query-string parameters, if any.

        Returns:
            the decoded JSON response.

        Raises:
            ArangoHttpException: for responses with an error status code
                (`ResourceNotFoundException` for a 404).
            ArangoTimeoutException: if the request times out.
            UnexpectedArangoResponseException: if the response is not JSON.
        """
        return self._api_commander.request(
            http_method=http_method,
            payload=payload,
            additional_path=path,
            request_params=request_params or {},
        )

    def collection(self, name_or_id: str | int) -> Collection:
        """
        Fetch a collection by name (or numeric id).

        Raises:
            CollectionNotFoundError: if there is no such collection.
        """
        try:
            raw_collection = self.send_request(f"collection/{name_or_id}")
        except ResourceNotFoundException as exc:
            raise CollectionNotFoundError(
                f"Collection '{name_or_id}' not found.",
                resource_id=str(name_or_id),
            ) from exc
        return Collection(self, raw_collection)

    def create_collection(
        self,
        name: str,
        *,
        wait_for_sync: bool | None = None,
    ) -> Collection:
        """
        Create a new collection.

        Args:
            name: the name of the collection.
            wait_for_sync: whether writes should wait for synchronisation to
                disk. If not given, the server default applies.

        Returns:
            the new Collection.

        Raises:
            CollectionError: if the server refuses to create the collection,
                e.g. because the name is taken.
        """
        payload: dict[str, Any] = {"name": name}
        if wait_for_sync is not None:
            payload["waitForSync"] = wait_for_sync
        logger.info(f"creating collection '{name}'")
        try:
            raw_collection = self.send_request(
                "collection",
                http_method=HttpMethod.POST,
                payload=payload,
            )
        except ArangoHttpException as exc:
            raise CollectionError.from_http_exception(
                exc, operation=f"Creating collection '{name}'"
            ) from exc
        logger.info(f"finished creating collection '{name}'")
        return Collection(self, raw_collection)

    def get_or_create_collection(self, name: str) -> Collection:
        """Fetch a collection by name, creating it if it does not exist."""
        try:
            return self.collection(name)
        except CollectionNotFoundError:
            return self.create_collection(name)

    def collections(self) -> list[Collection]:
        """Return all the collections in the database."""
        response = self.send_request("collection")
        if "collections" not in response:
            raise UnexpectedArangoResponseException(
                text="Faulty response from collection API (no 'collections').",
                raw_response=response,
            )
        return [
            Collection(self, raw_collection)
            for raw_collection in response["collections"]
        ]

    def query(self, query_string: str) -> Query:
        """
        Return a new Query, not bound to a collection, running `query_string`.

        Example:
            >>> cursor = db.query("FOR p IN people RETURN p.name").execute()
        """
        return Query(self, query_string=query_string)
