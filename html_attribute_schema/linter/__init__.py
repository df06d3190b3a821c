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

"""Linter package: validate pre-extracted (tag, attributes) requests."""

from pathlib import Path
from typing import List

from ..exceptions import ConfigurationError
from .report import Diagnostic, DiagnosticCode, LintResult, Severity
from .request_parser import attribute_path, load_requests, lookup_source
from .validator import Validator

__all__ = ['lint_files', 'LintResult', 'Diagnostic', 'DiagnosticCode', 'Severity', 'Validator']


def lint_files(file_paths: List[Path], validator: Validator) -> List[LintResult]:
    """Lint a list of request files.

    Args:
        file_paths: List of file paths to lint
        validator: Validator bound to the schema table to check against

    Returns:
        List of LintResult objects, one per file
    """
    results = []

    for file_path in file_paths:
        result = LintResult(file_path)

        try:
            requests, source_map = load_requests(file_path)
        except (ConfigurationError, OSError, ValueError) as e:
            result.add_error(f"Failed to load request file: {str(e)}")
            results.append(result)
            continue

        for request in requests:
            for diagnostic in validator.validate(request.tag, request.attributes):
                if diagnostic.attribute:
                    yaml_path = attribute_path(request, diagnostic.attribute)
                else:
                    yaml_path = f"{request.yaml_path}/tag"
                loc = lookup_source(source_map, yaml_path)
                result.add_diagnostic(diagnostic, line=loc.line, column=loc.column, yaml_path=loc.yaml_path)

        results.append(result)

    return results
