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

from dataclasses import dataclass, field
from typing import Sequence

from ashikawa.constants import CallerType
from ashikawa.settings.defaults import (
    DEFAULT_API_PATH,
    DEFAULT_BATCH_SIZE,
    DEFAULT_REQUEST_TIMEOUT_MS,
)


@dataclass
class APIOptions:
    """
    The group of settings governing how a `Database` (and every Collection,
    Query and Cursor spawned from it) talks to the server.

    Values left to None are "unset": they keep the value inherited from the
    defaults (see `FullAPIOptions.with_override`).

    Attributes:
        request_timeout_ms: the timeout, in milliseconds, for each HTTP request.
            Zero means no timeout.
        api_path: the path, relative to the API endpoint, under which the REST
            interface is exposed (e.g. "_api").
        default_batch_size: the batch size used by queries that do not set one.
        callers: a list of (name, version) pairs identifying the calling code,
            which end up in the User-Agent header.
        redacted_header_names: names of headers whose value must never be
            logged, in addition to the authentication header.
    """

    request_timeout_ms: int | None = None
    api_path: str | None = None
    default_batch_size: int | None = None
    callers: Sequence[CallerType] | None = None
    redacted_header_names: Sequence[str] | None = None


@dataclass
class FullAPIOptions(APIOptions):
    """
    A fully-specified set of API options, each attribute having a value.
    See `APIOptions` for the meaning of the attributes.
    """

    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    api_path: str = DEFAULT_API_PATH
    default_batch_size: int = DEFAULT_BATCH_SIZE
    callers: Sequence[CallerType] = field(default_factory=list)
    redacted_header_names: Sequence[str] = field(default_factory=list)

    def with_override(self, other: APIOptions | None) -> FullAPIOptions:
        """
        Given an "overriding" set of options, possibly not defined in all its
        attributes, apply the override logic and return a new full options object.

        Args:
            other: a not-necessarily-fully-specified options object. All its defined
                settings take precedence.
        """

        if other is None:
            return self
        return FullAPIOptions(
            request_timeout_ms=(
                other.request_timeout_ms
                if other.request_timeout_ms is not None
                else self.request_timeout_ms
            ),
            api_path=other.api_path if other.api_path is not None else self.api_path,
            default_batch_size=(
                other.default_batch_size
                if other.default_batch_size is not None
                else self.default_batch_size
            ),
            callers=other.callers if other.callers is not None else self.callers,
            redacted_header_names=(
                other.redacted_header_names
                if other.redacted_header_names is not None
                else self.redacted_header_names
            ),
        )


def default_api_options() -> FullAPIOptions:
    return FullAPIOptions()
