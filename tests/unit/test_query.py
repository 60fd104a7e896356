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

import pytest
from pytest_httpserver import HTTPServer

from ashikawa import (
    APIOptions,
    Collection,
    Cursor,
    CursorState,
    Database,
    Query,
    QueryError,
)
from ashikawa.utils.request_tools import HttpMethod

RAW_QUERY = "FOR p IN people FILTER p.age > @min RETURN p"


class TestQueryBuilding:
    @pytest.mark.describe("test of Query payload with a query string")
    def test_query_payload_filter(self, people: Collection) -> None:
        query = (
            people.query()
            .filter(RAW_QUERY)
            .bind(min=30)
            .bind_vars({"unused": [1, 2]})
            .batch_size(2)
            .full_count()
        )
        assert query.build_payload() == {
            "query": RAW_QUERY,
            "bindVars": {"min": 30, "unused": [1, 2]},
            "batchSize": 2,
            "count": True,
        }

    @pytest.mark.describe("test of Query payload synthesised for a collection")
    def test_query_payload_synthesised(self, people: Collection) -> None:
        assert people.query().build_payload() == {
            "query": "FOR doc IN @@collection RETURN doc",
            "bindVars": {"@collection": "people"},
            "batchSize": 1000,
            "count": False,
        }
        assert people.query().limit(10).skip(5).build_payload()["query"] == (
            "FOR doc IN @@collection LIMIT 5, 10 RETURN doc"
        )
        assert people.query().limit(10).build_payload()["query"] == (
            "FOR doc IN @@collection LIMIT 0, 10 RETURN doc"
        )
        assert people.query().limit(0).build_payload()["query"] == (
            "FOR doc IN @@collection RETURN doc"
        )

    @pytest.mark.describe("test of Query by example")
    def test_query_by_example(self, people: Collection) -> None:
        payload = people.query().by_example({"name": "Ada", "age": 36}).build_payload()
        assert payload["query"] == (
            "FOR doc IN @@collection "
            "FILTER doc.@field0 == @value0 && doc.@field1 == @value1 RETURN doc"
        )
        assert payload["bindVars"] == {
            "@collection": "people",
            "field0": "name",
            "value0": "Ada",
            "field1": "age",
            "value1": 36,
        }

    @pytest.mark.describe("test of Query by example, set again or replaced")
    def test_query_by_example_replaced(self, people: Collection) -> None:
        repeated = (
            people.query()
            .bind(kept=True)
            .by_example({"a": 1, "b": 2})
            .by_example({"c": 3})
            .build_payload()
        )
        assert repeated["query"] == (
            "FOR doc IN @@collection FILTER doc.@field0 == @value0 RETURN doc"
        )
        assert repeated["bindVars"] == {
            "@collection": "people",
            "kept": True,
            "field0": "c",
            "value0": 3,
        }

        filtered = (
            people.query()
            .by_example({"a": 1})
            .filter("FOR p IN people RETURN p")
            .build_payload()
        )
        assert filtered["query"] == "FOR p IN people RETURN p"
        assert filtered["bindVars"] == {}

    @pytest.mark.describe("test of Query default batch size from the options")
    def test_query_default_batch_size(self, httpserver: HTTPServer) -> None:
        db = Database(
            httpserver.url_for("/"),
            api_options=APIOptions(default_batch_size=7),
        )
        assert db.query("RETURN 1").build_payload()["batchSize"] == 7

    @pytest.mark.describe("test of Query validation")
    def test_query_validation(self, db: Database, people: Collection) -> None:
        with pytest.raises(ValueError):
            people.query().batch_size(0)
        with pytest.raises(QueryError):
            Query(db).build_payload()
        assert repr(people.query()) == 'Query("people", building)'


class TestQueryExecution:
    @pytest.mark.describe("test of Query execution, only once")
    def test_query_execute(
        self, people: Collection, httpserver: HTTPServer
    ) -> None:
        httpserver.expect_oneshot_request(
            "/_api/cursor",
            method=HttpMethod.POST,
            json={
                "query": RAW_QUERY,
                "bindVars": {"min": 30},
                "batchSize": 1000,
                "count": False,
            },
        ).respond_with_json(
            {"result": [{"name": "Ada"}], "hasMore": False, "error": False},
            status=201,
        )
        query = people.query().filter(RAW_QUERY).bind(min=30)
        cursor = query.execute()
        assert isinstance(cursor, Cursor)
        assert cursor.to_list() == [{"name": "Ada"}]

        with pytest.raises(QueryError):
            query.execute()
        with pytest.raises(QueryError):
            query.bind(min=40)
        assert len(httpserver.log) == 1

    @pytest.mark.describe("test of Query iteration")
    def test_query_iteration(self, db: Database, httpserver: HTTPServer) -> None:
        httpserver.expect_oneshot_request(
            "/_api/cursor", method=HttpMethod.POST
        ).respond_with_json({"result": [1, 2, 3], "hasMore": False}, status=201)
        assert [row for row in db.query("FOR i IN 1..3 RETURN i")] == [1, 2, 3]

    @pytest.mark.describe("test of Query rejected by the server")
    def test_query_rejected(self, db: Database, httpserver: HTTPServer) -> None:
        httpserver.expect_oneshot_request(
            "/_api/cursor", method=HttpMethod.POST
        ).respond_with_json(
            {
                "error": True,
                "code": 400,
                "errorNum": 1501,
                "errorMessage": "syntax error, unexpected FOR declaration",
            },
            status=400,
        )
        with pytest.raises(QueryError) as exc:
            db.query("FOR FOR").execute()
        assert "syntax error, unexpected FOR declaration" in exc.value.text
        assert exc.value.error_descriptors[0].error_num == 1501

    @pytest.mark.describe("test of Query against people, in batches of two")
    def test_query_batches_of_two(
        self, people: Collection, httpserver: HTTPServer
    ) -> None:
        rows = [{"name": f"person_{i}"} for i in range(5)]
        httpserver.expect_oneshot_request(
            "/_api/cursor",
            method=HttpMethod.POST,
            json={
                "query": "FOR doc IN @@collection RETURN doc",
                "bindVars": {"@collection": "people"},
                "batchSize": 2,
                "count": True,
            },
        ).respond_with_json(
            {"result": rows[0:2], "hasMore": True, "id": "77", "count": 5},
            status=201,
        )
        httpserver.expect_oneshot_request(
            "/_api/cursor/77", method=HttpMethod.PUT
        ).respond_with_json(
            {"result": rows[2:4], "hasMore": True, "id": "77", "count": 5}
        )
        httpserver.expect_oneshot_request(
            "/_api/cursor/77", method=HttpMethod.PUT
        ).respond_with_json({"result": rows[4:5], "hasMore": False, "count": 5})
        httpserver.expect_oneshot_request(
            "/_api/cursor/77", method=HttpMethod.DELETE
        ).respond_with_json(
            {
                "error": True,
                "code": 404,
                "errorNum": 1600,
                "errorMessage": "cursor not found",
            },
            status=404,
        )

        cursor = people.query().batch_size(2).full_count().execute()
        assert cursor.count == 5
        assert cursor.to_list() == rows
        assert cursor.state == CursorState.EXHAUSTED
        assert cursor.batches_fetched == 3
        methods = [request.method for request, _ in httpserver.log]
        assert methods == ["POST", "PUT", "PUT", "DELETE"]
