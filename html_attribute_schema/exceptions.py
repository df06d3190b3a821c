# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Custom exceptions for html_attribute_schema.

These are raised while the schema table or the validator configuration is
being built. Validation itself never raises; it reports diagnostics.
"""


class SchemaError(Exception):
    """Base exception for schema related errors."""
    pass


class SchemaDefinitionError(SchemaError):
    """Exception raised when the schema table data is malformed."""
    pass


class FormatVersionError(SchemaDefinitionError):
    """Exception raised when a schema data file's format version is incompatible."""
    pass


class ConfigurationError(SchemaError):
    """Exception raised for invalid validator configuration."""
    pass
