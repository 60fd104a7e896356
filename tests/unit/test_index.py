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

from ashikawa import Collection, Index, IndexNotFoundError, IndexType
from ashikawa.index import build_index_payload
from ashikawa.utils.request_tools import HttpMethod

RAW_HASH_INDEX = {
    "id": "4588/2",
    "type": "hash",
    "unique": True,
    "fields": ["name", "profession"],
}


class TestIndex:
    @pytest.mark.describe("test of Index construction from a raw index")
    def test_index_construction(self, people: Collection) -> None:
        index = Index(people, RAW_HASH_INDEX)
        assert index.id == "4588/2"
        assert index.key == "2"
        assert index.type == IndexType.HASH
        assert index.type_name == "hash"
        assert index.unique is True
        assert index.fields == {"name", "profession"}
        assert index.field_list == ["name", "profession"]
        assert index.geo_json is None
        assert index.size is None
        assert index.min_length is None
        assert index == Index(people, dict(RAW_HASH_INDEX))

        geo = Index(
            people,
            {"id": "4588/3", "type": "geo1", "fields": ["loc"], "geoJson": True},
        )
        assert geo.type == IndexType.GEO1
        assert geo.geo_json is True
        assert geo.unique is False

        cap = Index(people, {"id": "4588/4", "type": "cap", "size": "10"})
        assert cap.size == 10
        assert cap.fields == frozenset()

        fulltext = Index(
            people,
            {"id": "4588/5", "type": "fulltext", "fields": ["bio"], "minLength": 3},
        )
        assert fulltext.min_length == 3

        future = Index(people, {"id": "4588/6", "type": "ttl", "fields": ["t"]})
        assert future.type is None
        assert future.type_name == "ttl"

    @pytest.mark.describe("test of index payload composition")
    def test_build_index_payload(self) -> None:
        assert build_index_payload("hash", ["name"], unique=True) == {
            "type": "hash",
            "fields": ["name"],
            "unique": True,
        }
        assert build_index_payload(IndexType.GEO, ("lat", "lon"), geo_json=False) == {
            "type": "geo",
            "fields": ["lat", "lon"],
            "geoJson": False,
        }
        assert build_index_payload("CAP", [], size=100) == {
            "type": "cap",
            "fields": [],
            "size": 100,
        }
        assert build_index_payload("fulltext", ["bio"], min_length=2) == {
            "type": "fulltext",
            "fields": ["bio"],
            "minLength": 2,
        }
        assert build_index_payload("ttl", ["t"]) == {"type": "ttl", "fields": ["t"]}

    @pytest.mark.describe("test of Index delete")
    def test_index_delete(self, people: Collection, httpserver: HTTPServer) -> None:
        index = Index(people, RAW_HASH_INDEX)
        httpserver.expect_oneshot_request(
            "/_api/index/4588/2",
            method=HttpMethod.DELETE,
        ).respond_with_json({"id": "4588/2", "error": False, "code": 200})
        assert index.delete()["id"] == "4588/2"

        httpserver.expect_oneshot_request(
            "/_api/index/4588/2",
            method=HttpMethod.DELETE,
        ).respond_with_json(
            {
                "error": True,
                "code": 404,
                "errorNum": 1212,
                "errorMessage": "index not found",
            },
            status=404,
        )
        with pytest.raises(IndexNotFoundError):
            index.delete()
