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

# Defaults/settings for requests to the database REST interface
DEFAULT_API_PATH = "_api"
DEFAULT_REQUEST_TIMEOUT_MS = 10000
DEFAULT_BATCH_SIZE = 1000
DEFAULT_AUTH_HEADER = "Authorization"

# Collection status codes as reported by the server
COLLECTION_STATUS_NEW_BORN = 1
COLLECTION_STATUS_UNLOADED = 2
COLLECTION_STATUS_LOADED = 3
COLLECTION_STATUS_BEING_UNLOADED = 4
COLLECTION_STATUS_DELETED = 5

# Name of the bind parameter carrying the collection in synthesised queries
COLLECTION_BIND_PARAMETER = "@collection"

# Settings for redacting secrets in string representations and logging
SECRETS_REDACT_ENDING = "..."
SECRETS_REDACT_CHAR = "*"
SECRETS_REDACT_ENDING_LENGTH = 3
FIXED_SECRET_PLACEHOLDER = "***"
DEFAULT_REDACTED_HEADER_NAMES = {
    DEFAULT_AUTH_HEADER,
}
