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

"""Attribute-level schema validation for HTML elements.

Typical use::

    table = load_schema_table()
    validator = Validator(table)
    diagnostics = validator.validate("link", {"rel": "stylesheet", "href": "/a.css"})
"""

# Format version of the packaged schema data this tool understands.
SCHEMA_FORMAT_VERSION = "0.1.0"

from .exceptions import (  # noqa: E402
    SchemaError,
    SchemaDefinitionError,
    FormatVersionError,
    ConfigurationError,
)
from .config import ValidatorConfig, load_config  # noqa: E402
from .models.schema_table import SchemaTable  # noqa: E402
from .models.schema_loader import load_schema_table  # noqa: E402
from .resolvers.schema_resolver import SchemaResolver, ResolvedSchema  # noqa: E402
from .evaluation.constraint_evaluator import evaluate  # noqa: E402
from .linter.report import Diagnostic, DiagnosticCode, Severity  # noqa: E402
from .linter.validator import Validator  # noqa: E402

__all__ = [
    "SCHEMA_FORMAT_VERSION",
    "SchemaError",
    "SchemaDefinitionError",
    "FormatVersionError",
    "ConfigurationError",
    "ValidatorConfig",
    "load_config",
    "SchemaTable",
    "load_schema_table",
    "SchemaResolver",
    "ResolvedSchema",
    "evaluate",
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    "Validator",
]
