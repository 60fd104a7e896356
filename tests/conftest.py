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

"""
Main conftest for shared fixtures.

All tests run against a local fake server (pytest-httpserver): the fixtures
below provide a Database pointed at it and a Collection handle built
without network traffic.
"""

from __future__ import annotations

from typing import Any

import pytest
from pytest_httpserver import HTTPServer

from ashikawa import Collection, Database

PEOPLE_COLLECTION_ID = 4588
PEOPLE_COLLECTION_JSON: dict[str, Any] = {
    "name": "people",
    "waitForSync": False,
    "id": PEOPLE_COLLECTION_ID,
    "status": 3,
    "error": False,
    "code": 200,
}


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "describe(text): description of the test")


@pytest.fixture
def db(httpserver: HTTPServer) -> Database:
    return Database(httpserver.url_for("/"))


@pytest.fixture
def people(db: Database) -> Collection:
    return Collection(db, PEOPLE_COLLECTION_JSON)
