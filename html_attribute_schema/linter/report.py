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

"""Diagnostics produced by validation, and per-file lint results."""

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class DiagnosticCode(str, enum.Enum):
    UNKNOWN_ELEMENT = "UnknownElement"
    DEPRECATED_ELEMENT = "DeprecatedElement"
    UNKNOWN_ATTRIBUTE = "UnknownAttribute"
    INVALID_VALUE = "InvalidValue"
    DEPRECATED_ATTRIBUTE = "DeprecatedAttribute"
    EXPERIMENTAL_ATTRIBUTE = "ExperimentalAttribute"
    REL_TYPE_HOST_MISMATCH = "RelTypeHostMismatch"
    UNKNOWN_LINK_TYPE = "UnknownLinkType"

    @classmethod
    def get_all_codes(cls) -> List[str]:
        return [code.value for code in cls]


class Severity(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"


_SEVERITIES = {
    DiagnosticCode.UNKNOWN_ELEMENT: Severity.INFO,
    DiagnosticCode.DEPRECATED_ELEMENT: Severity.INFO,
    DiagnosticCode.DEPRECATED_ATTRIBUTE: Severity.INFO,
    DiagnosticCode.EXPERIMENTAL_ATTRIBUTE: Severity.INFO,
    DiagnosticCode.UNKNOWN_ATTRIBUTE: Severity.WARNING,
    DiagnosticCode.INVALID_VALUE: Severity.WARNING,
    DiagnosticCode.REL_TYPE_HOST_MISMATCH: Severity.WARNING,
    DiagnosticCode.UNKNOWN_LINK_TYPE: Severity.WARNING,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single finding for one attribute (or for the element itself)."""
    code: DiagnosticCode
    attribute: str
    tag: str
    message: str
    allowed_values: Optional[Tuple[str, ...]] = None
    token: Optional[str] = None

    @property
    def severity(self) -> Severity:
        return _SEVERITIES[self.code]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'code': self.code.value,
            'severity': self.severity.value,
            'tag': self.tag,
            'attribute': self.attribute,
            'message': self.message,
        }
        if self.allowed_values is not None:
            data['allowed_values'] = list(self.allowed_values)
        if self.token is not None:
            data['token'] = self.token
        return data


class LintResult:
    """Container for linting results for a single request file."""

    def __init__(self, file_path: Path):
        """Initialize lint result.

        Args:
            file_path: Path to the file being linted
        """
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []
        self.infos: List[Dict[str, Any]] = []

    @staticmethod
    def _entry(message: str, line: Optional[int], column: Optional[int], yaml_path: Optional[str]) -> Dict[str, Any]:
        entry: Dict[str, Any] = {'message': message}
        if line is not None:
            entry['line'] = line
        if column is not None:
            entry['column'] = column
        if yaml_path is not None:
            entry['yaml_path'] = yaml_path
        return entry

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        """Add an error that prevented (part of) the file from being validated."""
        self.errors.append(self._entry(message, line, column, yaml_path))

    def add_diagnostic(
        self,
        diagnostic: Diagnostic,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        """File a diagnostic under warnings or infos according to its severity."""
        entry = self._entry(diagnostic.message, line, column, yaml_path)
        entry['code'] = diagnostic.code.value
        entry['tag'] = diagnostic.tag
        entry['attribute'] = diagnostic.attribute
        if diagnostic.allowed_values is not None:
            entry['allowed_values'] = list(diagnostic.allowed_values)
        if diagnostic.token is not None:
            entry['token'] = diagnostic.token
        if diagnostic.severity == Severity.WARNING:
            self.warnings.append(entry)
        else:
            self.infos.append(entry)
