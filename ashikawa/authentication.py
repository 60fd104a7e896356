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

import base64
from abc import ABC, abstractmethod
from typing import Any

from typing_extensions import override

from ashikawa.settings.defaults import (
    DEFAULT_AUTH_HEADER,
    SECRETS_REDACT_CHAR,
    SECRETS_REDACT_ENDING,
    SECRETS_REDACT_ENDING_LENGTH,
)


def coerce_credentials_provider(
    username: str | CredentialsProvider | None,
    password: str | None = None,
) -> CredentialsProvider:
    if isinstance(username, CredentialsProvider):
        return username
    elif username is None:
        return NoCredentialsProvider()
    else:
        return BasicAuthProvider(username, password or "")


def _redact_secret(secret: str, max_length: int, hide_if_short: bool = True) -> str:
    """
    Return a shortened-if-necessary version of a 'secret' string (with ellipsis).

    Args:
        secret: a secret string to redact
        max_length: if the secret and the fixed ending exceed this size,
            shortening takes place.
        hide_if_short: if True, short secrets are returned fully masked;
            if False, they are returned as-is.
    """
    secret_len = len(secret)
    if secret_len + SECRETS_REDACT_ENDING_LENGTH > max_length:
        return (
            secret[: max_length - SECRETS_REDACT_ENDING_LENGTH] + SECRETS_REDACT_ENDING
        )
    else:
        if hide_if_short:
            return SECRETS_REDACT_CHAR * len(secret)
        else:
            return secret


class CredentialsProvider(ABC):
    """
    Abstract base class for the authentication of requests.
    The relevant method in this interface returns the headers to attach to
    every request sent to the server.

    The __str__ / __repr__ methods never expose secrets.
    """

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, CredentialsProvider):
            return self.get_headers() == other.get_headers()
        return False

    @abstractmethod
    def __repr__(self) -> str: ...

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """
        Produce the authentication headers for a request.

        Returns:
            a dictionary of header names to values, possibly empty.
        """
        ...


class NoCredentialsProvider(CredentialsProvider):
    """A credentials provider for servers running without authentication."""

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    @override
    def get_headers(self) -> dict[str, str]:
        return {}


class BasicAuthProvider(CredentialsProvider):
    """
    A credentials provider sending a username and a password with
    HTTP basic authentication.

    Args:
        username: the username for the database server.
        password: the corresponding password.

    Example:
        >>> from ashikawa.authentication import BasicAuthProvider
        >>> BasicAuthProvider("root", "s3cr3t")
        BasicAuthProvider(root, ******)
    """

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.username}, {_redact_secret(self.password, 12)})"

    @override
    def get_headers(self) -> dict[str, str]:
        credentials = f"{self.username}:{self.password}".encode()
        return {DEFAULT_AUTH_HEADER: f"Basic {base64.b64encode(credentials).decode()}"}
