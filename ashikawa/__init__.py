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

import importlib.metadata
import os
import re


def get_version() -> str:
    try:
        return importlib.metadata.version(__package__)

    # If the package is not installed, read the version from setup.py
    except importlib.metadata.PackageNotFoundError:
        dir_path = os.path.dirname(os.path.realpath(__file__))
        setup_path = os.path.join(dir_path, "..", "setup.py")
        try:
            with open(setup_path, encoding="utf-8") as setup_file:
                match = re.search(r'version="([^"]+)"', setup_file.read())
                if match:
                    return match.group(1)
        except FileNotFoundError:
            pass
        # must stay parseable as a version, see the `deprecation` decorators
        return "0.0.0"


__version__: str = get_version()


from ashikawa.authentication import (  # noqa: E402
    BasicAuthProvider,
    CredentialsProvider,
    NoCredentialsProvider,
)
from ashikawa.collection import Collection  # noqa: E402
from ashikawa.cursor import Cursor, CursorState  # noqa: E402
from ashikawa.database import Database  # noqa: E402
from ashikawa.document import Document  # noqa: E402
from ashikawa.exceptions import (  # noqa: E402
    ArangoException,
    ArangoHttpException,
    ArangoTimeoutException,
    CollectionError,
    CollectionNotFoundError,
    CursorError,
    DocumentNotFoundError,
    IndexNotFoundError,
    InvalidIndexError,
    NotFoundError,
    QueryError,
    ResourceNotFoundException,
    UnexpectedArangoResponseException,
    ValidationError,
)
from ashikawa.index import Index, IndexType  # noqa: E402
from ashikawa.query import Query  # noqa: E402
from ashikawa.status import CollectionStatus, Status  # noqa: E402
from ashikawa.utils.api_options import APIOptions  # noqa: E402

__all__ = [
    "APIOptions",
    "ArangoException",
    "ArangoHttpException",
    "ArangoTimeoutException",
    "BasicAuthProvider",
    "Collection",
    "CollectionError",
    "CollectionNotFoundError",
    "CollectionStatus",
    "CredentialsProvider",
    "Cursor",
    "CursorError",
    "CursorState",
    "Database",
    "Document",
    "DocumentNotFoundError",
    "Index",
    "IndexNotFoundError",
    "IndexType",
    "InvalidIndexError",
    "NoCredentialsProvider",
    "NotFoundError",
    "Query",
    "QueryError",
    "ResourceNotFoundException",
    "Status",
    "UnexpectedArangoResponseException",
    "ValidationError",
    "__version__",
]
