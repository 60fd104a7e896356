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

from dataclasses import dataclass
from typing import Any


@dataclass
class ArangoErrorDescriptor:
    """
    An object representing a single error, as found in the body of an error
    response from the database server, such as:
        {"error": true, "code": 404, "errorNum": 1202, "errorMessage": "..."}

    Attributes:
        code: the HTTP status code repeated in the response body ("code").
        error_num: the server-specific error number ("errorNum").
        message: the text found in the "errorMessage" field.
        attributes: a dict with any further key-value pairs in the body.
    """

    code: int | None
    error_num: int | None
    message: str | None
    attributes: dict[str, Any]

    _known_dict_fields = {
        "error",
        "code",
        "errorNum",
        "errorMessage",
    }

    def __init__(self, error_dict: dict[str, Any] | str) -> None:
        if isinstance(error_dict, str):
            self.code = None
            self.error_num = None
            self.message = error_dict
            self.attributes = {}
        else:
            self.code = error_dict.get("code")
            self.error_num = error_dict.get("errorNum")
            self.message = error_dict.get("errorMessage")
            self.attributes = {
                k: v for k, v in error_dict.items() if k not in self._known_dict_fields
            }

    def __repr__(self) -> str:
        pieces = [
            f"code={self.code!r}" if self.code is not None else None,
            f"error_num={self.error_num!r}" if self.error_num is not None else None,
            f"message={self.message!r}" if self.message else None,
            f"attributes={self.attributes!r}" if self.attributes else None,
        ]
        return f"{self.__class__.__name__}({', '.join(pc for pc in pieces if pc)})"

    def __str__(self) -> str:
        return self.summary()

    def summary(self) -> str:
        """
        Determine a succinct string description of this descriptor.

        The precise format of this summary is determined by which fields are set.
        """
        if self.message:
            if self.error_num is not None:
                return f"{self.message} (errorNum {self.error_num})"
            return self.message
        if self.error_num is not None:
            return f"errorNum {self.error_num}"
        return ""

    @staticmethod
    def from_response_body(raw_body: Any) -> list[ArangoErrorDescriptor]:
        """Extract the (zero or one) error descriptors from a response body."""
        if isinstance(raw_body, dict) and (
            raw_body.get("error") or "errorMessage" in raw_body
        ):
            return [ArangoErrorDescriptor(raw_body)]
        return []
