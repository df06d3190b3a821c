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

"""Validate the attribute bag of one element against the schema table."""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ..config import ValidatorConfig
from ..evaluation.constraint_evaluator import (
    HOST_MISMATCH,
    UNKNOWN_TOKEN,
    EvaluationContext,
    evaluate,
)
from ..exceptions import ConfigurationError
from ..models.constraints import ClosedTokenSet, Constraint, FreeString, is_boolean_constraint
from ..models.schema_table import LINK_TYPES_VOCABULARY, AttributeSpec, SchemaTable, normalize_name
from ..resolvers.schema_resolver import ResolvedSchema, SchemaResolver
from ..utils.value_types import split_tokens
from .report import Diagnostic, DiagnosticCode

logger = logging.getLogger(__name__)

AttributeBag = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]

_PASSTHROUGH_CONSTRAINT = FreeString()


def normalize_presence(constraint: Constraint, value: Any) -> Any:
    """Normalize presence-only (``None``) and empty values before evaluation.

    ``None`` and ``""`` become ``True`` for boolean attributes; ``None``
    becomes ``""`` for every other constraint kind.
    """
    if is_boolean_constraint(constraint):
        if value is None or (isinstance(value, str) and value == ""):
            return True
        return value
    if value is None:
        return ""
    return value


class Validator:
    """Check (tag, attributes) requests and return ordered diagnostics.

    ``validate`` is stateless apart from the resolver's memo and never raises.
    """

    def __init__(
        self,
        table: SchemaTable,
        config: Optional[ValidatorConfig] = None,
        resolver: Optional[SchemaResolver] = None,
    ):
        self.table = table
        self.config = config or ValidatorConfig()
        self.resolver = resolver or SchemaResolver(table)

        valid_codes = DiagnosticCode.get_all_codes()
        unknown = [code for code in self.config.disabled_codes if code not in valid_codes]
        if unknown:
            raise ConfigurationError(
                f"Unknown diagnostic codes in disabled_codes: {unknown}. Valid codes: {valid_codes}"
            )
        self._disabled = frozenset(DiagnosticCode(code) for code in self.config.disabled_codes)

    def is_passthrough(self, name: str) -> bool:
        """data-* / aria-* style names are always permitted."""
        return any(
            name.startswith(prefix) and len(name) > len(prefix)
            for prefix in self.config.passthrough_prefixes
        )

    @staticmethod
    def _iter_attributes(attributes: AttributeBag) -> List[Tuple[str, Any]]:
        if attributes is None:
            return []
        if isinstance(attributes, Mapping):
            return [(str(name), value) for name, value in attributes.items()]
        if isinstance(attributes, str):
            return [(attributes, None)]
        try:
            items = list(attributes)
        except TypeError:
            return []
        pairs = []
        for item in items:
            if isinstance(item, (tuple, list)) and len(item) == 2:
                pairs.append((str(item[0]), item[1]))
            else:
                # A bare name is a presence-only attribute.
                pairs.append((str(item), None))
        return pairs

    def validate(self, tag: Any, attributes: AttributeBag = None) -> List[Diagnostic]:
        tag_name = normalize_name(tag) if tag is not None else ""
        resolved = self.resolver.resolve(tag_name)
        diagnostics: List[Diagnostic] = []

        if not resolved.known:
            if self.config.report_unknown_elements:
                diagnostics.append(Diagnostic(
                    code=DiagnosticCode.UNKNOWN_ELEMENT,
                    attribute="",
                    tag=tag_name,
                    message=f"Unknown element <{tag_name}>; only global attributes apply",
                ))
        elif resolved.element.deprecated:
            diagnostics.append(Diagnostic(
                code=DiagnosticCode.DEPRECATED_ELEMENT,
                attribute="",
                tag=tag_name,
                message=f"Element <{tag_name}> is deprecated",
            ))

        for name, value in self._iter_attributes(attributes):
            diagnostics.extend(self._check_attribute(resolved, name, value))

        if self._disabled:
            diagnostics = [d for d in diagnostics if d.code not in self._disabled]
        return diagnostics

    def _check_attribute(self, resolved: ResolvedSchema, name: str, value: Any) -> List[Diagnostic]:
        tag = resolved.tag
        key = normalize_name(name)
        spec = resolved.lookup(key)

        if spec is None:
            if self.is_passthrough(key):
                return self._evaluate(tag, name, _PASSTHROUGH_CONSTRAINT, value)
            return [Diagnostic(
                code=DiagnosticCode.UNKNOWN_ATTRIBUTE,
                attribute=name,
                tag=tag,
                message=f"Unknown attribute '{name}' on <{tag}>",
            )]

        diagnostics = self._evaluate(tag, name, spec.constraint, value)

        if spec.deprecated:
            diagnostics.append(Diagnostic(
                code=DiagnosticCode.DEPRECATED_ATTRIBUTE,
                attribute=name,
                tag=tag,
                message=f"Attribute '{name}' on <{tag}> is deprecated",
            ))
        if spec.experimental:
            diagnostics.append(Diagnostic(
                code=DiagnosticCode.EXPERIMENTAL_ATTRIBUTE,
                attribute=name,
                tag=tag,
                message=f"Attribute '{name}' on <{tag}> is experimental or non-standard",
            ))

        diagnostics.extend(self._token_advisories(tag, name, spec, value))
        return diagnostics

    def _evaluate(self, tag: str, name: str, constraint: Constraint, value: Any) -> List[Diagnostic]:
        context = EvaluationContext(
            table=self.table,
            host_tag=tag,
            case_sensitive_tokens=self.config.rel_case_sensitive,
        )
        result = evaluate(constraint, normalize_presence(constraint, value), context)

        link_types = isinstance(constraint, ClosedTokenSet) and constraint.name == LINK_TYPES_VOCABULARY
        diagnostics: List[Diagnostic] = []
        for violation in result.violations:
            if violation.kind == HOST_MISMATCH:
                code = DiagnosticCode.REL_TYPE_HOST_MISMATCH
            elif violation.kind == UNKNOWN_TOKEN and link_types:
                code = DiagnosticCode.UNKNOWN_LINK_TYPE
            else:
                code = DiagnosticCode.INVALID_VALUE
            diagnostics.append(Diagnostic(
                code=code,
                attribute=name,
                tag=tag,
                message=f"Attribute '{name}' on <{tag}>: {violation.reason}",
                allowed_values=violation.allowed_values,
                token=violation.token,
            ))
        return diagnostics

    def _token_advisories(self, tag: str, name: str, spec: AttributeSpec, value: Any) -> List[Diagnostic]:
        """Deprecated/experimental flags carried by individual vocabulary tokens."""
        if not isinstance(spec.constraint, ClosedTokenSet) or not isinstance(value, str):
            return []
        vocabulary = self.table.lookup_vocabulary(spec.constraint.name)
        if vocabulary is None:
            return []

        diagnostics: List[Diagnostic] = []
        seen = set()
        for token in split_tokens(value):
            entry = vocabulary.lookup(token, case_sensitive=self.config.rel_case_sensitive)
            if entry is None or entry.token in seen:
                continue
            seen.add(entry.token)
            if entry.deprecated:
                diagnostics.append(Diagnostic(
                    code=DiagnosticCode.DEPRECATED_ATTRIBUTE,
                    attribute=name,
                    tag=tag,
                    message=f"Token '{token}' in '{name}' on <{tag}> is deprecated",
                    token=token,
                ))
            if entry.experimental:
                diagnostics.append(Diagnostic(
                    code=DiagnosticCode.EXPERIMENTAL_ATTRIBUTE,
                    attribute=name,
                    tag=tag,
                    message=f"Token '{token}' in '{name}' on <{tag}> is experimental",
                    token=token,
                ))
        return diagnostics
